"""Configuration and todo file path resolution for todo-cli."""

import os
from pathlib import Path

import typer

APP_NAME = "todo"
ENV_VAR = "TODO_PATH"
TODO_SUFFIX = ".todo"
DEFAULT_FILENAME = "todo.todo"


def get_default_todo_path() -> Path:
    """Get the default todo file path inside the OS application directory."""
    return Path(typer.get_app_dir(APP_NAME)) / DEFAULT_FILENAME


def fix_todo_path(path: Path) -> Path:
    """Coerce a user supplied path into a todo file path.

    Directories become ``<dir>/todo.todo``; any other path gets its suffix
    replaced with ``.todo`` (or appended when it has none).
    """
    if path.is_dir():
        return path / DEFAULT_FILENAME
    if path.suffix != TODO_SUFFIX:
        return path.with_suffix(TODO_SUFFIX)
    return path


def get_todo_path(override: str | None = None) -> Path:
    """Resolve the todo file path.

    Priority:
    1. --path PATH explicit override (highest)
    2. TODO_PATH env var
    3. fallback → <app dir>/todo.todo

    Args:
        override: Explicit path passed via --path flag

    Returns:
        Path to the todo file, always ending in ``.todo``
    """
    if override:
        return fix_todo_path(Path(override).expanduser().resolve())

    env_path = os.environ.get(ENV_VAR)
    if env_path:
        return fix_todo_path(Path(env_path).expanduser().resolve())

    return get_default_todo_path()


def ensure_todo_dir(todo_path: Path) -> None:
    """Ensure the parent directory for the todo file exists."""
    todo_path.parent.mkdir(parents=True, exist_ok=True)
