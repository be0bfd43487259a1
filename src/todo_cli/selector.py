"""Interactive drop-down list for picking one item in the terminal.

Each candidate is a ``Choice``. A choice may carry an action that runs when
the user confirms it; choices without an action simply hand their value back
to the caller.

Keys:
  Up / k       Move the cursor up (wraps to the bottom)
  Down / j     Move the cursor down (wraps to the top)
  Enter        Confirm the highlighted choice
  Esc / q      Cancel
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence

import click
from rich.console import Console, Group
from rich.live import Live
from rich.text import Text

from .errors import InputError

try:
    import termios

    _TERMINAL_ERRORS: tuple[type[BaseException], ...] = (OSError, termios.error)
except ImportError:  # Windows
    _TERMINAL_ERRORS = (OSError,)

logger = logging.getLogger(__name__)

UP_KEYS = frozenset({"\x1b[A", "\x1bOA", "\xe0H", "\x00H", "k"})
DOWN_KEYS = frozenset({"\x1b[B", "\x1bOB", "\xe0P", "\x00P", "j"})
CONFIRM_KEYS = frozenset({"\r", "\n"})
CANCEL_KEYS = frozenset({"\x1b", "q"})


class Key(Enum):
    UP = "up"
    DOWN = "down"
    CONFIRM = "confirm"
    CANCEL = "cancel"


class SelectorState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Choice:
    """A candidate in the drop-down, optionally bound to an action."""

    label: str
    value: Any
    action: Optional[Callable[[], None]] = None


def decode_key(raw: str) -> Optional[Key]:
    """Map a raw key sequence to a ``Key``, or None for unbound keys."""
    if raw in UP_KEYS:
        return Key.UP
    if raw in DOWN_KEYS:
        return Key.DOWN
    if raw in CONFIRM_KEYS:
        return Key.CONFIRM
    if raw in CANCEL_KEYS:
        return Key.CANCEL
    return None


def read_key() -> str:
    """Read one key press from the terminal in raw mode.

    Raises:
        InputError: The terminal cannot enter raw mode or input was closed.
    """
    try:
        return click.getchar()
    except EOFError as e:
        raise InputError("Input stream closed") from e
    except _TERMINAL_ERRORS as e:
        raise InputError(f"Cannot read from terminal: {e}") from e


class DropDown:
    """Navigable pick list. One ``wait()`` per instance."""

    def __init__(
        self,
        choices: Sequence[Choice],
        max_rows: int = 10,
        console: Optional[Console] = None,
        key_reader: Optional[Callable[[], str]] = None,
    ) -> None:
        if not choices:
            raise ValueError("DropDown needs at least one choice")
        self.choices = list(choices)
        self.max_rows = max(1, max_rows)
        self.console = console or Console()
        self._key_reader = key_reader
        self.state = SelectorState.IDLE
        self.cursor = 0
        self._offset = 0

    def move(self, step: int) -> None:
        """Move the cursor, wrapping around both ends of the list."""
        self.cursor = (self.cursor + step) % len(self.choices)
        if self.cursor < self._offset:
            self._offset = self.cursor
        elif self.cursor >= self._offset + self.max_rows:
            self._offset = self.cursor - self.max_rows + 1

    def render(self) -> Group:
        lines = []
        window = self.choices[self._offset:self._offset + self.max_rows]
        for index, choice in enumerate(window, start=self._offset):
            if index == self.cursor:
                lines.append(Text(f"> {choice.label}", style="bold reverse"))
            else:
                lines.append(Text(f"  {choice.label}"))
        hidden = len(self.choices) - len(window)
        if hidden:
            lines.append(Text(f"  ({self.cursor + 1}/{len(self.choices)})", style="dim"))
        return Group(*lines)

    def wait(self) -> Any:
        """Block until the user confirms or cancels.

        Returns:
            The confirmed choice's value (after running its action, if any),
            or None when the user cancels.

        Raises:
            InputError: Keys could not be read from the terminal.
            RuntimeError: This drop-down has already been used.
        """
        if self.state is not SelectorState.IDLE:
            raise RuntimeError(f"DropDown already {self.state.value}")
        self.state = SelectorState.ACTIVE
        reader = self._key_reader or read_key

        with Live(self.render(), console=self.console, auto_refresh=False, transient=True) as live:
            while self.state is SelectorState.ACTIVE:
                try:
                    key = decode_key(reader())
                except InputError:
                    self.state = SelectorState.CANCELLED
                    raise
                if key is Key.UP:
                    self.move(-1)
                elif key is Key.DOWN:
                    self.move(1)
                elif key is Key.CONFIRM:
                    self.state = SelectorState.CONFIRMED
                elif key is Key.CANCEL:
                    self.state = SelectorState.CANCELLED
                live.update(self.render(), refresh=True)

        if self.state is SelectorState.CANCELLED:
            logger.debug("Selection cancelled")
            return None

        choice = self.choices[self.cursor]
        logger.debug("Selected %r at position %d", choice.label, self.cursor)
        if choice.action is not None:
            choice.action()
        return choice.value
