import logging
from typing import Any, Dict, List, Optional

from .api import ApiClient
from .storage import StateStorage

logger = logging.getLogger(__name__)


class TodoSession:
    """
    Client-side application state: who is logged in, their token, and their todo list.

    The auth part ({isAuthenticated, user, token}) survives restarts through a
    StateStorage. The todo list only ever holds what the server returned.
    """

    def __init__(self, api: ApiClient, storage: StateStorage):
        self.api = api
        self.storage = storage
        self.is_authenticated = False
        self.user: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None
        self.todos: List[Dict[str, Any]] = []
        self._restore()

    def _restore(self) -> None:
        state = self.storage.load() or {}
        token = state.get("token")
        user = state.get("user")
        if token and user:
            self.is_authenticated = True
            self.user = user
            self.token = token
            self.api.token = token

    @property
    def state(self) -> Dict[str, Any]:
        return {"isAuthenticated": self.is_authenticated, "user": self.user, "token": self.token}

    def _start(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.token = payload["token"]
        self.user = payload["user"]
        self.is_authenticated = True
        self.api.token = self.token
        self.storage.save(self.state)
        logger.info(f"Signed in as {self.user.get('username')}")
        return self.user

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        return self._start(self.api.register(username, email, password))

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._start(self.api.login(email, password))

    def logout(self) -> None:
        self.is_authenticated = False
        self.user = None
        self.token = None
        self.todos = []
        self.api.token = None
        self.storage.clear()

    def profile(self) -> Dict[str, Any]:
        return self.api.profile()

    # todos

    def refresh(self) -> List[Dict[str, Any]]:
        self.todos = self.api.list_todos()
        return self.todos

    def add(self, title: str, description: str = "") -> Dict[str, Any]:
        title = (title or "").strip()
        if not title:
            raise ValueError("Title is required")
        todo = self.api.create_todo(title, (description or "").strip())
        self.todos = [todo] + self.todos
        return todo

    def update(self, todo_id: int, **fields) -> Dict[str, Any]:
        title = (fields.get("title") or "").strip()
        if not title:
            raise ValueError("Title is required")
        fields["title"] = title
        if isinstance(fields.get("description"), str):
            fields["description"] = fields["description"].strip()
        todo = self.api.update_todo(todo_id, **fields)
        self._replace(todo)
        return todo

    def toggle(self, todo_id: int) -> Dict[str, Any]:
        todo = self.api.toggle_todo(todo_id)
        self._replace(todo)
        return todo

    def delete(self, todo_id: int) -> None:
        self.api.delete_todo(todo_id)
        self.todos = [t for t in self.todos if t["id"] != todo_id]

    def _replace(self, todo: Dict[str, Any]) -> None:
        self.todos = [todo if t["id"] == todo["id"] else t for t in self.todos]

    def summary(self) -> str:
        done = sum(1 for t in self.todos if t.get("completed"))
        return f"{done} of {len(self.todos)} completed"
