"""Tests for todo file path resolution."""

from pathlib import Path

import pytest

from todo_cli.config import ensure_todo_dir, fix_todo_path, get_default_todo_path, get_todo_path


class TestFixTodoPath:
    """Tests for .todo coercion."""

    def test_todo_suffix_is_kept(self, tmp_path: Path) -> None:
        assert fix_todo_path(tmp_path / "a.todo") == tmp_path / "a.todo"

    def test_other_suffix_is_replaced(self, tmp_path: Path) -> None:
        assert fix_todo_path(tmp_path / "a.json") == tmp_path / "a.todo"

    def test_missing_suffix_is_added(self, tmp_path: Path) -> None:
        assert fix_todo_path(tmp_path / "list") == tmp_path / "list.todo"

    def test_directory_gets_default_filename(self, tmp_path: Path) -> None:
        assert fix_todo_path(tmp_path) == tmp_path / "todo.todo"


class TestGetTodoPath:
    """Tests for resolution priority."""

    def test_override_wins_over_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TODO_PATH", str(tmp_path / "env.todo"))
        assert get_todo_path(str(tmp_path / "flag.todo")) == tmp_path / "flag.todo"

    def test_env_used_without_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TODO_PATH", str(tmp_path / "env.txt"))
        assert get_todo_path() == tmp_path / "env.todo"

    def test_default_without_override_or_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TODO_PATH", raising=False)
        path = get_todo_path()
        assert path == get_default_todo_path()
        assert path.name == "todo.todo"


def test_ensure_todo_dir_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "todo.todo"
    ensure_todo_dir(target)
    assert target.parent.is_dir()
    assert not target.exists()
