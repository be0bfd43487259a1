"""Todo item model for todo-cli."""

from pydantic import BaseModel, ConfigDict, Field

PRIORITY_MIN = -32768
PRIORITY_MAX = 32767


class TodoItem(BaseModel):
    """A single todo entry. Immutable, compared by value.

    Every field is required and strictly typed, so a stored record with a
    missing key or a coercible value ("5", 5.0) is rejected on load.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    name: str
    content: str
    # Higher is more urgent
    priority: int = Field(ge=PRIORITY_MIN, le=PRIORITY_MAX)

    def to_dict(self) -> dict:
        return self.model_dump()

    def __str__(self) -> str:
        return f"Item: {self.name}\nContent: {self.content}\n(Priority: {self.priority})"
