"""Test fixtures for todo-cli."""

import os
from pathlib import Path

import pytest


@pytest.fixture
def temp_env_path(tmp_path: Path) -> Path:
    """Point TODO_PATH at a temporary todo file."""
    todo_path = tmp_path / "env.todo"
    os.environ["TODO_PATH"] = str(todo_path)
    yield todo_path
    # Cleanup
    if "TODO_PATH" in os.environ:
        del os.environ["TODO_PATH"]


@pytest.fixture
def todo_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Return just the path string for --path flag testing."""
    monkeypatch.delenv("TODO_PATH", raising=False)
    return str(tmp_path / "test.todo")


@pytest.fixture
def keys(monkeypatch: pytest.MonkeyPatch):
    """Script the key presses read by the drop-down."""

    def script(*pressed: str) -> None:
        remaining = iter(pressed)
        monkeypatch.setattr("todo_cli.selector.read_key", lambda: next(remaining))

    return script
