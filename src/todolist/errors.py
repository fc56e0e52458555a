from __future__ import annotations

from typing import Optional


class TodoListError(Exception):
    """Base class for every error raised by the todolist core."""


# PUBLIC_INTERFACE
class RepositoryError(TodoListError):
    """
    A storage-side failure, tagged with the repository operation that raised it
    and the todo id involved (if any).
    """

    def __init__(self, message: str, operation: Optional[str] = None, todo_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.todo_id = todo_id

    def __str__(self) -> str:
        context = []
        if self.operation:
            context.append(f"operation={self.operation}")
        if self.todo_id is not None:
            context.append(f"id={self.todo_id}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


# PUBLIC_INTERFACE
class StorageConnectionError(RepositoryError):
    """The backend is unreachable or the pool stayed exhausted past its timeout."""


# PUBLIC_INTERFACE
class NotFoundError(RepositoryError):
    """No row matches the requested todo id."""


# PUBLIC_INTERFACE
class PersistenceError(RepositoryError):
    """Any other backend failure while inserting, updating or querying."""


# PUBLIC_INTERFACE
class UseCaseError(TodoListError):
    """
    Coarse, per-operation failure handed to the protocol adapters.

    The message is the only thing adapters show to callers. The original
    repository error stays reachable through ``__cause__`` (see ``cause``).
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.operation = operation
        self.message = message

    @property
    def cause(self) -> Optional[BaseException]:
        """The exception this error was raised from."""
        return self.__cause__

    @property
    def is_not_found(self) -> bool:
        return isinstance(self.__cause__, NotFoundError)
