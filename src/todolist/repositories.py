from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import Connection, Row, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from .db import StoragePool
from .errors import NotFoundError, PersistenceError, StorageConnectionError
from .models import TodoEntity, now_expression, todolist_table
from .schemas import TodoCreate, TodoUpdate, TodoView

_T = todolist_table


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def create(self, data: TodoCreate) -> TodoView:
        """Insert a new todo and return it as stored."""

    @abstractmethod
    def update(self, todo_id: int, data: TodoUpdate) -> TodoView:
        """Patch the provided fields of a todo and return it. NotFoundError if missing."""

    @abstractmethod
    def get_by_id(self, todo_id: int) -> TodoView:
        """Return a todo by id. NotFoundError if missing."""

    @abstractmethod
    def list_all(self) -> List[TodoView]:
        """Return every todo in storage order."""

    @abstractmethod
    def delete(self, todo_id: int) -> None:
        """Delete a todo by id. NotFoundError if missing."""

    @abstractmethod
    def count_all(self) -> int:
        """Number of todos."""

    @abstractmethod
    def count_done(self) -> int:
        """Number of todos marked as done."""

    @abstractmethod
    def count_undone(self) -> int:
        """Number of todos not marked as done."""


class SQLRepository(Repository):
    """
    Repository backed by the pooled SQLite store.

    Every operation borrows exactly one connection for its whole duration and
    re-reads rows from storage; nothing is cached between calls.
    """

    def __init__(self, pool: StoragePool) -> None:
        self._pool = pool

    @contextmanager
    def _connection(self, operation: str, failure: str, todo_id: Optional[int] = None) -> Iterator[Connection]:
        try:
            with self._pool.connect() as conn:
                yield conn
        except StorageConnectionError as exc:
            raise StorageConnectionError(exc.message, operation, todo_id) from exc
        except (SQLAlchemyError, OverflowError) as exc:
            # sqlite3 raises OverflowError itself for ints outside the INTEGER range
            raise PersistenceError(failure, operation, todo_id) from exc

    @staticmethod
    def _row_to_entity(row: Row) -> TodoEntity:
        m = row._mapping
        return {
            "id": int(m["id"]),
            "title": str(m["title"]),
            "description": str(m["description"]),
            "is_done": bool(m["is_done"]),
            "created_at": m["created_at"],
            "updated_at": m["updated_at"],
        }

    @classmethod
    def _to_view(cls, row: Row) -> TodoView:
        entity = cls._row_to_entity(row)
        return TodoView(
            id=entity["id"],
            title=entity["title"],
            description=entity["description"],
            is_done=entity["is_done"],
            created_at=entity["created_at"] or "",
            updated_at=entity["updated_at"] or "",
        )

    @staticmethod
    def _select_one(conn: Connection, todo_id: int) -> Optional[Row]:
        return conn.execute(select(_T).where(_T.c.id == todo_id)).first()

    def create(self, data: TodoCreate) -> TodoView:
        with self._connection("create", "Failed to insert new todo into database") as conn:
            result = conn.execute(
                insert(_T).values(title=data.title, description=data.description, is_done=data.is_done)
            )
            new_id = result.inserted_primary_key[0]
            row = self._select_one(conn, new_id)
            if row is None:
                raise PersistenceError("Inserted todo could not be read back", "create", new_id)
            return self._to_view(row)

    def update(self, todo_id: int, data: TodoUpdate) -> TodoView:
        # updated_at is refreshed even for an empty patch so the row count
        # still tells whether the id exists.
        values = {**data.changes(), "updated_at": now_expression()}
        with self._connection("update", "Failed to update todo item", todo_id) as conn:
            result = conn.execute(update(_T).where(_T.c.id == todo_id).values(**values))
            if result.rowcount == 0:
                raise NotFoundError(f"No todo item found with id {todo_id}", "update", todo_id)
            row = self._select_one(conn, todo_id)
            if row is None:
                raise NotFoundError(f"Todo with id {todo_id} not found", "update", todo_id)
            return self._to_view(row)

    def get_by_id(self, todo_id: int) -> TodoView:
        with self._connection("get_by_id", "Failed to load todo item", todo_id) as conn:
            row = self._select_one(conn, todo_id)
            if row is None:
                raise NotFoundError(f"Todo with id {todo_id} not found", "get_by_id", todo_id)
            return self._to_view(row)

    def list_all(self) -> List[TodoView]:
        with self._connection("list_all", "Failed to load todo items from the database") as conn:
            rows = conn.execute(select(_T)).fetchall()
            return [self._to_view(r) for r in rows]

    def delete(self, todo_id: int) -> None:
        with self._connection("delete", "Failed to delete todo item", todo_id) as conn:
            result = conn.execute(delete(_T).where(_T.c.id == todo_id))
            if result.rowcount == 0:
                raise NotFoundError(f"No todo item found with id {todo_id}", "delete", todo_id)

    def _count(self, operation: str, failure: str, *criteria) -> int:
        stmt = select(func.count()).select_from(_T)
        if criteria:
            stmt = stmt.where(*criteria)
        with self._connection(operation, failure) as conn:
            return int(conn.execute(stmt).scalar_one())

    def count_all(self) -> int:
        return self._count("count_all", "Failed to count all todo items in the database")

    def count_done(self) -> int:
        return self._count("count_done", "Failed to count done todo items in the database", _T.c.is_done.is_(True))

    def count_undone(self) -> int:
        return self._count(
            "count_undone", "Failed to count undone todo items in the database", _T.c.is_done.is_(False)
        )
