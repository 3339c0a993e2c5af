import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import AuthError, ConflictError, NotFoundError, ValidationError
from .models import Todo, User, utcnow
from .security import BCRYPT_MAX_BYTES, hash_password, verify_password

logger = logging.getLogger(__name__)


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


# ids are signed 64-bit integers in the store
MAX_ID = 2 ** 63 - 1


def _valid_id(todo_id: int) -> bool:
    return -MAX_ID - 1 <= todo_id <= MAX_ID


# -----------------------------
# Users
# -----------------------------

def register_user(db: Session, username: str, email: str, password: str, rounds: int = 12) -> User:
    if _blank(username) or _blank(email) or _blank(password):
        raise ValidationError("All fields are required")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

    obj = User(
        username=username,
        email=email,
        password_hash=hash_password(password, rounds=rounds),
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username or email already exists")
    db.refresh(obj)
    logger.info(f"Registered user id={obj.id} username={obj.username}")
    return obj


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def authenticate(db: Session, email: str, password: str) -> User:
    if _blank(email) or _blank(password):
        raise ValidationError("Email and password are required")

    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise AuthError("Invalid credentials")
    return user


# -----------------------------
# Todos, always scoped by owner
# -----------------------------

def list_todos(db: Session, user_id: int) -> List[Todo]:
    return (
        db.query(Todo)
        .filter(Todo.user_id == user_id)
        .order_by(Todo.created_at.desc(), Todo.id.desc())
        .all()
    )


def get_todo(db: Session, todo_id: int, user_id: int) -> Todo:
    if not _valid_id(todo_id):
        raise NotFoundError("Todo not found")
    obj = db.query(Todo).filter(Todo.id == todo_id, Todo.user_id == user_id).first()
    if not obj:
        raise NotFoundError("Todo not found")
    return obj


def create_todo(db: Session, user_id: int, title: str, description: Optional[str] = None) -> Todo:
    if _blank(title):
        raise ValidationError("Title is required")

    obj = Todo(
        user_id=user_id,
        title=title,
        description=description or "",
        completed=False,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info(f"Created todo id={obj.id} for user id={user_id}")
    return obj


def update_todo(
        db: Session,
        todo_id: int,
        user_id: int,
        title: str,
        description: Optional[str],
        completed: Optional[bool],
) -> Todo:
    """
    Overwrite title, description and completed with exactly what the caller sent.
    A missing description becomes null and a missing completed flag becomes false.
    """
    if _blank(title):
        raise ValidationError("Title is required")

    obj = get_todo(db, todo_id, user_id)
    obj.title = title
    obj.description = description
    obj.completed = bool(completed)
    obj.updated_at = utcnow()
    db.commit()
    db.refresh(obj)
    logger.info(f"Updated todo id={todo_id} for user id={user_id}")
    return obj


def delete_todo(db: Session, todo_id: int, user_id: int) -> None:
    if not _valid_id(todo_id):
        raise NotFoundError("Todo not found")
    deleted = (
        db.query(Todo)
        .filter(Todo.id == todo_id, Todo.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFoundError("Todo not found")
    db.commit()
    logger.info(f"Deleted todo id={todo_id} for user id={user_id}")


def toggle_todo(db: Session, todo_id: int, user_id: int) -> Todo:
    obj = get_todo(db, todo_id, user_id)
    obj.completed = not obj.completed
    obj.updated_at = utcnow()
    db.commit()
    db.refresh(obj)
    logger.info(f"Toggled todo id={todo_id} to completed={int(obj.completed)}")
    return obj
