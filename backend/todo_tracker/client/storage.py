import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

STATE_FILE = os.getenv("TODO_STATE_FILE", os.path.join(os.path.expanduser("~"), ".todo-tracker", "session.json"))


class StateStorage(ABC):
    """Where the client keeps its session between runs."""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def save(self, state: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class MemoryStateStorage(StateStorage):
    def __init__(self, state: Optional[Dict[str, Any]] = None):
        self._state = dict(state) if state else None

    def load(self) -> Optional[Dict[str, Any]]:
        return dict(self._state) if self._state else None

    def save(self, state: Dict[str, Any]) -> None:
        self._state = dict(state)

    def clear(self) -> None:
        self._state = None


class FileStateStorage(StateStorage):
    def __init__(self, path: str = STATE_FILE):
        self.path = path

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except ValueError:
            # unreadable file counts as logged out
            return None
        return data if isinstance(data, dict) else None

    def save(self, state: Dict[str, Any]) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        # owner-only from creation, the file holds a bearer token
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(state, f)
        # an older file keeps its mode through O_CREAT, tighten it too
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.warning(f"Could not restrict permissions on {self.path}")

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
