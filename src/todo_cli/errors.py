"""Exceptions raised by todo-cli."""


class TodoError(Exception):
    """Base class for todo-cli errors."""


class IoError(TodoError):
    """The todo file could not be opened, read, written or truncated."""


class FormatError(TodoError):
    """The todo file content is not a valid JSON list of items."""


class InputError(TodoError):
    """The terminal could not be used for interactive input."""
