from __future__ import annotations

from typing import Optional, TypedDict

from sqlalchemy import Boolean, Column, Integer, MetaData, Table, Text, func, text

# SQLite renders this as an ISO-8601 UTC timestamp with millisecond precision.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%fZ"

metadata = MetaData()

# PUBLIC_INTERFACE
todolist_table = Table(
    "todolist",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("is_done", Boolean, nullable=False, server_default=text("0")),
    Column("created_at", Text, server_default=text(f"(strftime('{TIMESTAMP_FORMAT}', 'now'))")),
    Column("updated_at", Text, server_default=text(f"(strftime('{TIMESTAMP_FORMAT}', 'now'))")),
    sqlite_autoincrement=True,
)


def now_expression():
    """SQL expression the backend evaluates to the current timestamp."""
    return func.strftime(TIMESTAMP_FORMAT, "now")


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A persisted todo row as read back from storage.

    Fields:
    - id: Integer identifier assigned by the backend (AUTOINCREMENT)
    - title: Non-empty title
    - description: Non-empty description
    - is_done: Completion flag
    - created_at: Insert timestamp assigned by the backend (ISO-8601 text)
    - updated_at: Last mutation timestamp assigned by the backend (ISO-8601 text)
    """

    id: int
    title: str
    description: str
    is_done: bool
    created_at: Optional[str]
    updated_at: Optional[str]
