from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Request
from pydantic import BaseModel, Field

from ..schemas import MAX_TODO_ID, TodoCreate, TodoUpdate, TodoView
from ..usecase import TodoUseCase
from ..utils import success_envelope

router = APIRouter(
    prefix="/v1",
    tags=["todos"],
)

_ERROR_RESPONSE = {400: {"description": "The use case failed or the request was invalid"}}


class TodoEnvelope(BaseModel):
    """
    Envelope for responses carrying a single todo.
    """
    message: str = Field(..., description="Human-readable result")
    data: TodoView = Field(..., description="The todo item")


class TodoListEnvelope(BaseModel):
    """
    Envelope for the list response.
    """
    message: str = Field(..., description="Human-readable result")
    data: List[TodoView] = Field(..., description="Every todo item")
    total: int = Field(..., description="Number of items returned")


class CountEnvelope(BaseModel):
    message: str = Field(..., description="Human-readable result")
    count: int = Field(..., description="Number of matching todo items")


class MessageEnvelope(BaseModel):
    message: str = Field(..., description="Human-readable result")
    data: Optional[dict] = Field(default=None, description="Always null")


def _get_use_case(request: Request) -> TodoUseCase:
    """
    Resolve the shared use case the application was built with.
    """
    return request.app.state.use_case


# PUBLIC_INTERFACE
@router.post(
    "/todo",
    response_model=TodoEnvelope,
    summary="Create Todo",
    description="Create a new todo item and return the created resource.",
    responses=_ERROR_RESPONSE,
)
async def create_todo(payload: TodoCreate, use_case: TodoUseCase = Depends(_get_use_case)) -> TodoEnvelope:
    """
    Create a new todo.
    """
    created = await use_case.create_task(payload)
    return TodoEnvelope(**success_envelope("Task created successfully", data=created))


# PUBLIC_INTERFACE
@router.put(
    "/todo",
    response_model=TodoEnvelope,
    summary="Update Todo",
    description=(
        "Update an existing todo item. The id is carried in the body; only the other "
        "fields that are provided are changed."
    ),
    responses=_ERROR_RESPONSE,
)
async def update_todo(payload: TodoUpdate, use_case: TodoUseCase = Depends(_get_use_case)) -> TodoEnvelope:
    """
    Partial update of a todo item keyed by the id in the body.
    """
    updated = await use_case.update_task(payload.id, payload)
    return TodoEnvelope(**success_envelope("Task updated successfully", data=updated))


# Count routes must be registered before /todo/{todo_id}.

# PUBLIC_INTERFACE
@router.get(
    "/todo/all",
    response_model=CountEnvelope,
    summary="Count Todos",
    description="Return the total number of todo items.",
    responses=_ERROR_RESPONSE,
)
async def count_all_task(use_case: TodoUseCase = Depends(_get_use_case)) -> CountEnvelope:
    items = await use_case.count_all_task()
    return CountEnvelope(**success_envelope(f"all todo have {items} items", count=items))


# PUBLIC_INTERFACE
@router.get(
    "/todo/done",
    response_model=CountEnvelope,
    summary="Count Done Todos",
    description="Return the number of todo items marked as done.",
    responses=_ERROR_RESPONSE,
)
async def count_done_task(use_case: TodoUseCase = Depends(_get_use_case)) -> CountEnvelope:
    items = await use_case.count_done_task()
    return CountEnvelope(**success_envelope(f"all todo have {items} task that mark as done", count=items))


# PUBLIC_INTERFACE
@router.get(
    "/todo/undone",
    response_model=CountEnvelope,
    summary="Count Undone Todos",
    description="Return the number of todo items not marked as done.",
    responses=_ERROR_RESPONSE,
)
async def count_undone_task(use_case: TodoUseCase = Depends(_get_use_case)) -> CountEnvelope:
    items = await use_case.count_undone_task()
    return CountEnvelope(**success_envelope(f"all todo have {items} task that mark as undone", count=items))


# PUBLIC_INTERFACE
@router.get(
    "/todo/{todo_id}",
    response_model=TodoEnvelope,
    summary="Get Todo",
    description="Get a single todo item by ID. A non-numeric ID is rejected with 400.",
    responses=_ERROR_RESPONSE,
)
async def get_by_id(
    todo_id: int = Path(..., description="Unique identifier of the todo task", le=MAX_TODO_ID),
    use_case: TodoUseCase = Depends(_get_use_case),
) -> TodoEnvelope:
    """
    Retrieve a single todo item by its ID.
    """
    item = await use_case.get_by_id(todo_id)
    return TodoEnvelope(**success_envelope("Task retrieved successfully", data=item))


# PUBLIC_INTERFACE
@router.get(
    "/todo",
    response_model=TodoListEnvelope,
    summary="List Todos",
    description="Return every todo item in storage order.",
    responses=_ERROR_RESPONSE,
)
async def get_all(use_case: TodoUseCase = Depends(_get_use_case)) -> TodoListEnvelope:
    items = await use_case.get_all()
    return TodoListEnvelope(**success_envelope("Tasks retrieved successfully", data=items, total=len(items)))


# PUBLIC_INTERFACE
@router.delete(
    "/todo/{todo_id}",
    response_model=MessageEnvelope,
    summary="Delete Todo",
    description="Delete a todo item by ID.",
    responses=_ERROR_RESPONSE,
)
async def delete_todo(
    todo_id: int = Path(..., description="Unique identifier of the todo task to delete", le=MAX_TODO_ID),
    use_case: TodoUseCase = Depends(_get_use_case),
) -> MessageEnvelope:
    """
    Delete a todo. Returns 200 on success, 400 if it could not be deleted.
    """
    await use_case.delete_task(todo_id)
    return MessageEnvelope(**success_envelope(f"Task id: {todo_id} has been deleted", data=None))
