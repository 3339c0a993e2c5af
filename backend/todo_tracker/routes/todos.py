from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import CurrentUser, get_current_user
from ..database import get_db
from .. import crud, schemas

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("", response_model=list[schemas.TodoOut])
def list_all(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return crud.list_todos(db, current_user.id)


@router.get("/{todo_id}", response_model=schemas.TodoOut)
def get_one(todo_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return crud.get_todo(db, todo_id, current_user.id)


@router.post("", response_model=schemas.TodoOut, status_code=status.HTTP_201_CREATED)
def create(
        data: Optional[schemas.TodoCreate] = None,
        db: Session = Depends(get_db),
        current_user: CurrentUser = Depends(get_current_user),
):
    data = data or schemas.TodoCreate()
    return crud.create_todo(db, current_user.id, data.title, data.description)


@router.put("/{todo_id}", response_model=schemas.TodoOut)
def update(
        todo_id: int,
        data: Optional[schemas.TodoUpdate] = None,
        db: Session = Depends(get_db),
        current_user: CurrentUser = Depends(get_current_user),
):
    data = data or schemas.TodoUpdate()
    return crud.update_todo(db, todo_id, current_user.id, data.title, data.description, data.completed)


@router.delete("/{todo_id}", response_model=schemas.MessageOut)
def delete(todo_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    crud.delete_todo(db, todo_id, current_user.id)
    return {"message": "Todo deleted successfully"}


@router.patch("/{todo_id}/toggle", response_model=schemas.TodoOut)
def toggle(todo_id: int, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return crud.toggle_todo(db, todo_id, current_user.id)
