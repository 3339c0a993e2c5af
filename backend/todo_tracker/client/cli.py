"""
Todo Tracker CLI: a terminal front end for the Todo Tracker API.

Usage:
    todo register alice alice@example.com secret1
    todo login alice@example.com secret1
    todo add "Buy milk" --description "2 litres"
    todo list
    todo toggle 3
    todo edit 3 "Buy oat milk" --description "" --completed
    todo rm 3
    todo logout

The API address comes from --url or TODO_API_URL; the session file from
TODO_STATE_FILE (default ~/.todo-tracker/session.json).
"""

import argparse
import getpass
import sys
from typing import Dict, List, Optional

import requests

from .api import API_BASE_URL, ApiClient, ApiError
from .session import TodoSession
from .storage import FileStateStorage


def format_todo(todo: Dict) -> str:
    mark = "x" if todo.get("completed") else " "
    line = f"[{mark}] {todo['id']:>4}  {todo['title']}"
    if todo.get("description"):
        line += f"\n        {todo['description']}"
    return line


def _password(args) -> str:
    return args.password or getpass.getpass("Password: ")


def cmd_register(session: TodoSession, args) -> None:
    user = session.register(args.username, args.email, _password(args))
    print(f"Registered and logged in as {user['username']}")


def cmd_login(session: TodoSession, args) -> None:
    user = session.login(args.email, _password(args))
    print(f"Logged in as {user['username']}")


def cmd_logout(session: TodoSession, args) -> None:
    session.logout()
    print("Logged out")


def cmd_whoami(session: TodoSession, args) -> None:
    user = session.profile()
    print(f"{user['username']} <{user['email']}> (since {user['created_at']})")


def cmd_list(session: TodoSession, args) -> None:
    todos = session.refresh()
    if not todos:
        print("No todos yet. Create your first todo!")
        return
    for todo in todos:
        print(format_todo(todo))
    print(session.summary())


def cmd_add(session: TodoSession, args) -> None:
    todo = session.add(args.title, args.description)
    print(format_todo(todo))


def cmd_edit(session: TodoSession, args) -> None:
    fields = {"title": args.title, "completed": args.completed}
    if args.description is not None:
        fields["description"] = args.description
    print(format_todo(session.update(args.id, **fields)))


def cmd_toggle(session: TodoSession, args) -> None:
    print(format_todo(session.toggle(args.id)))


def cmd_rm(session: TodoSession, args) -> None:
    session.delete(args.id)
    print(f"Deleted todo {args.id}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todo", description="Manage your todos from the terminal.")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="Create an account and log in")
    p.add_argument("username")
    p.add_argument("email")
    p.add_argument("password", nargs="?")
    p.set_defaults(func=cmd_register)

    p = sub.add_parser("login", help="Log in with email and password")
    p.add_argument("email")
    p.add_argument("password", nargs="?")
    p.set_defaults(func=cmd_login)

    p = sub.add_parser("logout", help="Forget the stored session")
    p.set_defaults(func=cmd_logout)

    p = sub.add_parser("whoami", help="Show the logged-in profile")
    p.set_defaults(func=cmd_whoami)

    p = sub.add_parser("list", help="List your todos, newest first")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("add", help="Create a todo")
    p.add_argument("title")
    p.add_argument("--description", "-d", default="")
    p.set_defaults(func=cmd_add)

    # PUT replaces the whole todo: omitted description is cleared, completed defaults to false
    p = sub.add_parser("edit", help="Replace a todo's title, description and status")
    p.add_argument("id", type=int)
    p.add_argument("title")
    p.add_argument("--description", "-d", default=None)
    p.add_argument("--completed", action="store_true")
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("toggle", help="Flip a todo between done and not done")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_toggle)

    p = sub.add_parser("rm", help="Delete a todo")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_rm)

    return parser


AUTH_COMMANDS = {"whoami", "list", "add", "edit", "toggle", "rm"}


def main(argv: Optional[List[str]] = None, session: Optional[TodoSession] = None) -> int:
    args = build_parser().parse_args(argv)
    if session is None:
        session = TodoSession(ApiClient(args.url), FileStateStorage())

    if args.command in AUTH_COMMANDS and not session.is_authenticated:
        print("Not logged in. Run `todo login <email>` first.", file=sys.stderr)
        return 1

    try:
        args.func(session, args)
    except ApiError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except requests.RequestException as e:
        print(f"Error: cannot reach {args.url} ({e})", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
