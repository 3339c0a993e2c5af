import os
from typing import Any, Dict, List, Optional

import requests

API_BASE_URL = os.getenv("TODO_API_URL", "http://localhost:5000")


class ApiError(Exception):
    """An error response from the API, carrying the server's message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class ApiClient:
    """
    Thin wrapper over the REST API, one method per endpoint.

    `http` may be any object with a requests-style ``request(method, url, json=, headers=)``,
    which lets tests pass FastAPI's TestClient.
    """

    def __init__(self, base_url: str = API_BASE_URL, token: Optional[str] = None, http=None, timeout: Optional[float] = 10):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None, auth: bool = True):
        headers = {}
        if auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        kwargs = {"json": body, "headers": headers}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        response = self.http.request(method, f"{self.base_url}{path}", **kwargs)

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise ApiError(response.status_code, message or f"Request failed with status {response.status_code}")
        return data

    # auth

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/register",
                             {"username": username, "email": email, "password": password}, auth=False)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/login", {"email": email, "password": password}, auth=False)

    def profile(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/profile")

    # todos

    def list_todos(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/todos")

    def create_todo(self, title: str, description: str = "") -> Dict[str, Any]:
        return self._request("POST", "/api/todos", {"title": title, "description": description})

    def update_todo(self, todo_id: int, **fields) -> Dict[str, Any]:
        return self._request("PUT", f"/api/todos/{todo_id}", fields)

    def delete_todo(self, todo_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/todos/{todo_id}")

    def toggle_todo(self, todo_id: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/todos/{todo_id}/toggle")
