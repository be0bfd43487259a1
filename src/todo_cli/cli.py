"""CLI for todo-cli.

A todo list kept in a single JSON file. Add, view, find, clear and delete
items; view and delete let you pick an item interactively.
"""

import json
import logging
from functools import partial
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import ensure_todo_dir, get_todo_path
from .errors import InputError, IoError, TodoError
from .models import PRIORITY_MAX, PRIORITY_MIN, TodoItem
from .selector import Choice, DropDown
from .store import TodoList

# Main help text - shown with `todo --help`
MAIN_HELP = """
A todo list for the terminal, stored in one JSON file.

QUICK START:
  todo add "Buy milk"                            Add an item
  todo add "Ship release" -n work -p 5           Named item with priority
  todo view                                      Pick an item to view/delete
  todo find milk                                 Search by name
  todo delete work                               Pick a match and delete it
  todo clear                                     Remove everything

COMMANDS:
  add      Add a new item
  view     Browse items by priority
  find     Search items by name
  clear    Delete all items
  delete   Delete an item by name

FILE:
  Default location: <app dir>/todo.todo
  Override with: --path PATH or TODO_PATH env var
  Paths are coerced to end in .todo; directories get todo.todo inside.

Use 'todo COMMAND --help' for command-specific help.
"""

app = typer.Typer(
    name="todo",
    help=MAIN_HELP,
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

console = Console()

SEPARATOR = "-" * 20
MAX_VISIBLE_ROWS = 10

PathOption = Annotated[
    Optional[str],
    typer.Option(
        "--path",
        help="Todo file path. Overrides the default location.",
        envvar="TODO_PATH",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option(
        "--json", "-j",
        help="Output as JSON array. Use this for programmatic access.",
    ),
]
YesOption = Annotated[
    bool,
    typer.Option(
        "--yes", "-y",
        help="Skip the confirmation prompt.",
    ),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug details to stderr."),
    ] = False,
) -> None:
    _configure_logging(verbose)


def _configure_logging(verbose: bool) -> None:
    """Route the package loggers to stderr through rich."""
    package_logger = logging.getLogger("todo_cli")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
        )


def _open_todo_list(path: Optional[str]) -> TodoList:
    """Resolve the todo file and open it, exiting on failure."""
    todo_path = get_todo_path(path)
    try:
        ensure_todo_dir(todo_path)
    except OSError as e:
        typer.echo(f"Error: Cannot create directory for {todo_path}: {e}", err=True)
        raise typer.Exit(1)

    try:
        return TodoList.open(todo_path)
    except TodoError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _confirmed() -> bool:
    answer = typer.prompt("Are you sure?(y/N)", default="", show_default=False, prompt_suffix=" ")
    return answer.strip().lower() == "y"


def _framed(item: TodoItem) -> str:
    return f"{SEPARATOR}\n{item}\n{SEPARATOR}"


def _label(item: TodoItem) -> str:
    content = item.content[:37] + "..." if len(item.content) > 40 else item.content
    content = content.replace("\n", " ")
    return f"[{item.priority}] {item.name}: {content}"


def _output_items(items: list[TodoItem]) -> None:
    typer.echo(json.dumps([item.to_dict() for item in items], indent=2, ensure_ascii=False))


def _delete_and_report(todos: TodoList, name: str) -> None:
    if todos.delete_by_name(name):
        typer.echo(f"Successfully deleted item: {name}")


ADD_HELP = """
Add a new todo item.

EXAMPLES:
  todo add "Buy milk"
  todo add "2% fat" --name "Buy milk" --priority 1
  todo add "Fix login bug" -n bug -p 10 --path ./project

FIELDS:
  content    Free text (required)
  name       Short title, used by find/delete (default: Untitled)
  priority   Integer, higher is more urgent (default: 0)

An item identical in all three fields to a stored one is not added twice.
"""


@app.command(help=ADD_HELP)
def add(
    content: Annotated[
        str,
        typer.Argument(help="Text of the todo item."),
    ],
    name: Annotated[
        str,
        typer.Option(
            "--name", "-n",
            help="Name of the item. Searchable via find.",
        ),
    ] = "Untitled",
    priority: Annotated[
        int,
        typer.Option(
            "--priority", "-p",
            help="Priority, higher is more urgent.",
            min=PRIORITY_MIN,
            max=PRIORITY_MAX,
        ),
    ] = 0,
    path: PathOption = None,
    output_json: JsonOption = False,
) -> None:
    """Add a todo item."""
    item = TodoItem(name=name, content=content, priority=priority)

    with _open_todo_list(path) as todos:
        if not todos.add(item):
            typer.echo("There is another todo that is equal to this todo")
            return

    if output_json:
        typer.echo(json.dumps(item.to_dict(), ensure_ascii=False))
    else:
        typer.echo(f"Added '{item.name}' (priority {item.priority})")


VIEW_HELP = """
Browse all items, most urgent first.

Pick an item with Up/Down and Enter (Esc cancels), then choose to view it
in full or delete it.

EXAMPLES:
  todo view
  todo view --json     Sorted list as JSON, no interaction
"""


@app.command(help=VIEW_HELP)
def view(
    path: PathOption = None,
    output_json: JsonOption = False,
) -> None:
    """Browse items and act on one of them."""
    with _open_todo_list(path) as todos:
        items = todos.sorted_by_priority()

        if output_json:
            _output_items(items)
            return

        if not items:
            typer.echo("No item in history.")
            return

        dropdown = DropDown(
            [Choice(_label(item), item) for item in items],
            max_rows=MAX_VISIBLE_ROWS,
            console=console,
        )
        try:
            selected = dropdown.wait()
        except InputError as e:
            typer.echo(f"Error during selection: {e}", err=True)
            raise typer.Exit(1)

        if selected is None:
            typer.echo("Canceled selection.")
            return

        action = typer.prompt(
            "What do you want? (1: View  2: Delete  other: Cancel)",
            default="",
            show_default=False,
        )
        action = action.strip()

        if action == "1":
            typer.echo(_framed(selected))
        elif action == "2":
            if not _confirmed():
                typer.echo("Canceled.")
                return
            todos.delete_by_name(selected.name)
            typer.echo("Done.")
        else:
            typer.echo("Canceled.")


FIND_HELP = """
Find items whose name contains NAME (case-insensitive).

EXAMPLES:
  todo find milk
  todo find WORK --json

Exits with status 1 when nothing matches.
"""


@app.command(help=FIND_HELP)
def find(
    name: Annotated[
        str,
        typer.Argument(help="Text to look for in item names."),
    ],
    path: PathOption = None,
    output_json: JsonOption = False,
) -> None:
    """Search items by name."""
    with _open_todo_list(path) as todos:
        found = todos.find_by_name(name)

    if output_json:
        _output_items(found)
        if not found:
            raise typer.Exit(1)
        return

    if not found:
        typer.echo("No item with that name found.")
        raise typer.Exit(1)

    for item in found:
        typer.echo(_framed(item))


CLEAR_HELP = """
Delete every item in the todo file.

EXAMPLES:
  todo clear         Asks for confirmation
  todo clear -y      No confirmation
"""


@app.command(help=CLEAR_HELP)
def clear(
    path: PathOption = None,
    yes: YesOption = False,
) -> None:
    """Delete all items."""
    if not yes and not _confirmed():
        typer.echo("Canceled.")
        return

    with _open_todo_list(path) as todos:
        try:
            todos.clear()
            todos.save()
        except IoError as e:
            typer.echo(f"There is something wrong. {e}", err=True)
            raise typer.Exit(1)

    typer.echo("Done.")


DELETE_HELP = """
Delete an item whose name contains NAME (case-insensitive).

With a single match you are asked to confirm. With several matches pick
one with Up/Down, Enter deletes it, Esc cancels.

EXAMPLES:
  todo delete milk
  todo delete milk -y      Single match: no confirmation

Exits with status 1 when nothing matches.
"""


@app.command(help=DELETE_HELP)
def delete(
    name: Annotated[
        str,
        typer.Argument(help="Text to look for in item names."),
    ],
    path: PathOption = None,
    yes: YesOption = False,
) -> None:
    """Delete an item by name."""
    with _open_todo_list(path) as todos:
        found = todos.find_by_name(name)

        if not found:
            typer.echo("No item with that name found.")
            raise typer.Exit(1)

        if len(found) == 1:
            target = todos.find_first_by_name(name)
            typer.echo(_framed(target))
            if not yes and not _confirmed():
                typer.echo("Canceled.")
                return
            _delete_and_report(todos, target.name)
            return

        typer.echo(
            f"Found {len(found)} matching items. "
            "Use Up/Down to select, Enter to delete, Esc to cancel."
        )
        dropdown = DropDown(
            [
                Choice(_label(item), item, action=partial(_delete_and_report, todos, item.name))
                for item in found
            ],
            max_rows=min(len(found), MAX_VISIBLE_ROWS),
            console=console,
        )
        try:
            selected = dropdown.wait()
        except InputError as e:
            typer.echo(f"Error during selection: {e}", err=True)
            raise typer.Exit(1)

        if selected is None:
            typer.echo("Canceled selection.")
