from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, TypeVar

from .errors import RepositoryError, UseCaseError
from .repositories import Repository
from .schemas import TodoCreate, TodoUpdate, TodoView

log = logging.getLogger(__name__)

T = TypeVar("T")


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class TodoUseCase:
    """
    Single entry point for todo business operations, shared by every transport.

    Each method runs the blocking repository call in a worker thread and turns
    any failure into one UseCaseError per operation. The repository error is
    kept as the exception's cause.
    """

    repository: Repository

    async def _run(self, operation: str, message: str, fn: Callable[..., T], *args) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except RepositoryError as exc:
            log.warning("%s failed: %s", operation, exc)
            raise UseCaseError(operation, message) from exc
        except Exception as exc:
            log.exception("%s failed unexpectedly", operation)
            raise UseCaseError(operation, message) from exc

    async def create_task(self, dto: TodoCreate) -> TodoView:
        return await self._run("create_task", "Failed to create task please try again", self.repository.create, dto)

    async def update_task(self, todo_id: int, dto: TodoUpdate) -> TodoView:
        return await self._run("update_task", "Failed to update the task", self.repository.update, todo_id, dto)

    async def get_by_id(self, todo_id: int) -> TodoView:
        return await self._run("get_by_id", f"Failed to get todo by id: {todo_id}", self.repository.get_by_id, todo_id)

    async def get_all(self) -> List[TodoView]:
        return await self._run("get_all", "Failed to get all todo", self.repository.list_all)

    async def delete_task(self, todo_id: int) -> None:
        await self._run("delete_task", f"Failed to delete task id: {todo_id}", self.repository.delete, todo_id)

    async def count_all_task(self) -> int:
        return await self._run("count_all_task", "Failed to get all count", self.repository.count_all)

    async def count_done_task(self) -> int:
        return await self._run("count_done_task", "Failed to count done task", self.repository.count_done)

    async def count_undone_task(self) -> int:
        return await self._run("count_undone_task", "Failed to count undone task", self.repository.count_undone)
