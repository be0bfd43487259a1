"""todo-cli: a file-backed todo list for the terminal."""

__version__ = "0.1.0"
