import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user, get_app_settings, issue_token
from ..config import Settings
from ..database import get_db
from ..errors import NotFoundError
from .. import crud, schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=schemas.AuthOut, status_code=status.HTTP_201_CREATED)
def register(
        data: Optional[schemas.RegisterIn] = None,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_app_settings),
):
    data = data or schemas.RegisterIn()
    user = crud.register_user(db, data.username, data.email, data.password, rounds=settings.bcrypt_rounds)
    return {
        "message": "User created successfully",
        "token": issue_token(settings, user.id, user.username),
        "user": user,
    }


@router.post("/login", response_model=schemas.AuthOut)
def login(
        data: Optional[schemas.LoginIn] = None,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_app_settings),
):
    data = data or schemas.LoginIn()
    user = crud.authenticate(db, data.email, data.password)
    logger.info(f"User id={user.id} logged in")
    return {
        "message": "Login successful",
        "token": issue_token(settings, user.id, user.username),
        "user": user,
    }


@router.get("/profile", response_model=schemas.ProfileOut)
def profile(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    user = crud.get_user(db, current_user.id)
    if not user:
        raise NotFoundError("User not found")
    return user
