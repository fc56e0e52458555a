import asyncio
from dataclasses import FrozenInstanceError
from typing import List

import pytest

from todolist.errors import NotFoundError, PersistenceError, StorageConnectionError, UseCaseError
from todolist.repositories import Repository
from todolist.schemas import TodoCreate, TodoUpdate, TodoView
from todolist.usecase import TodoUseCase


class FailingRepository(Repository):
    """Raises the configured error from every operation."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def create(self, data: TodoCreate) -> TodoView:
        raise self.error

    def update(self, todo_id: int, data: TodoUpdate) -> TodoView:
        raise self.error

    def get_by_id(self, todo_id: int) -> TodoView:
        raise self.error

    def list_all(self) -> List[TodoView]:
        raise self.error

    def delete(self, todo_id: int) -> None:
        raise self.error

    def count_all(self) -> int:
        raise self.error

    def count_done(self) -> int:
        raise self.error

    def count_undone(self) -> int:
        raise self.error


def run(coro):
    return asyncio.run(coro)


@pytest.mark.parametrize(
    "call, message",
    [
        (lambda uc: uc.create_task(TodoCreate(title="t", description="d")), "Failed to create task please try again"),
        (lambda uc: uc.update_task(3, TodoUpdate(id=3, is_done=True)), "Failed to update the task"),
        (lambda uc: uc.get_by_id(7), "Failed to get todo by id: 7"),
        (lambda uc: uc.get_all(), "Failed to get all todo"),
        (lambda uc: uc.delete_task(9), "Failed to delete task id: 9"),
        (lambda uc: uc.count_all_task(), "Failed to get all count"),
        (lambda uc: uc.count_done_task(), "Failed to count done task"),
        (lambda uc: uc.count_undone_task(), "Failed to count undone task"),
    ],
)
def test_each_operation_has_one_coarse_message(call, message):
    use_case = TodoUseCase(FailingRepository(PersistenceError("disk I/O error", "op")))
    with pytest.raises(UseCaseError) as info:
        run(call(use_case))
    assert info.value.message == message
    assert str(info.value) == message


def test_cause_chain_is_kept():
    error = NotFoundError("Todo with id 7 not found", "get_by_id", 7)
    use_case = TodoUseCase(FailingRepository(error))
    with pytest.raises(UseCaseError) as info:
        run(use_case.get_by_id(7))
    assert info.value.operation == "get_by_id"
    assert info.value.cause is error
    assert info.value.is_not_found


def test_connection_errors_are_not_not_found():
    use_case = TodoUseCase(FailingRepository(StorageConnectionError("Connection pool exhausted")))
    with pytest.raises(UseCaseError) as info:
        run(use_case.count_all_task())
    assert not info.value.is_not_found
    assert isinstance(info.value.cause, StorageConnectionError)


def test_unexpected_errors_are_normalized():
    use_case = TodoUseCase(FailingRepository(RuntimeError("boom")))
    with pytest.raises(UseCaseError) as info:
        run(use_case.get_all())
    assert info.value.message == "Failed to get all todo"
    assert isinstance(info.value.cause, RuntimeError)


def test_use_case_is_immutable(use_case):
    with pytest.raises(FrozenInstanceError):
        use_case.repository = None


def test_scenario_against_storage(use_case):
    async def scenario():
        done_before = await use_case.count_done_task()
        undone_before = await use_case.count_undone_task()
        created = await use_case.create_task(
            TodoCreate(title="Buy groceries", description="Milk, eggs, and bread", is_done=False)
        )
        updated = await use_case.update_task(created.id, TodoUpdate(id=created.id, is_done=True))
        return done_before, undone_before, created, updated

    done_before, undone_before, created, updated = run(scenario())
    assert updated.is_done is True
    assert updated.title == created.title
    assert run(use_case.count_done_task()) == done_before + 1
    assert run(use_case.count_undone_task()) == undone_before
