"""MCP tool surface for the todo list.

Every tool is a thin wrapper that builds the request DTO, makes exactly one
use-case call and shapes the result. A failed use-case call raises ToolError
so the client gets an error result for that call and the session stays open.
"""

from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from .errors import UseCaseError
from .schemas import TodoCreate, TodoId, TodoUpdate
from .usecase import TodoUseCase

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Personal todo list. Use the tools to create, read, update, delete and count tasks. "
    "Tasks have an integer id, a title, a description and an is_done flag."
)

SCHEMA_DDL = """
-- todolist: one row per task
CREATE TABLE todolist (
    id INTEGER PRIMARY KEY AUTOINCREMENT,  -- assigned on insert
    title TEXT NOT NULL,                   -- non-empty
    description TEXT NOT NULL,             -- non-empty
    is_done BOOLEAN NOT NULL DEFAULT 0,    -- completion flag
    created_at TEXT,                       -- ISO timestamp, set on insert
    updated_at TEXT                        -- ISO timestamp, refreshed on update
);
"""


def create_mcp_server(use_case: TodoUseCase) -> FastMCP:
    """Build the MCP server around the shared use case.

    Args:
        use_case: The use case every tool calls into.

    Returns:
        A FastMCP server; run it with ``await server.run_stdio_async()``.
    """
    mcp = FastMCP("todolist", instructions=INSTRUCTIONS)

    async def _call(operation, *args):
        try:
            return await operation(*args)
        except UseCaseError as exc:
            logger.info("Tool call failed: %s", exc.message)
            raise ToolError(exc.message) from exc

    @mcp.tool()
    async def create_task(title: str, description: str, is_done: bool = False) -> dict:
        """Create a new task.

        Example: {"title": "Buy groceries", "description": "Milk, eggs, and bread", "is_done": false}

        Args:
            title: Title of the task (non-empty).
            description: Task description (non-empty).
            is_done: Whether the task is already completed.

        Returns:
            The created task, including its id and timestamps.
        """
        dto = TodoCreate(title=title, description=description, is_done=is_done)
        view = await _call(use_case.create_task, dto)
        return view.model_dump()

    @mcp.tool()
    async def get_task(id: int) -> dict:
        """Get the details of a task by its ID.

        Args:
            id: ID of the task to retrieve.

        Returns:
            The task with id, title, description, is_done, created_at and updated_at.
        """
        dto = TodoId(id=id)
        view = await _call(use_case.get_by_id, dto.id)
        return view.model_dump()

    @mcp.tool()
    async def list_tasks() -> dict:
        """List every task in the system.

        Returns:
            {"tasks": [...], "count": N}
        """
        views = await _call(use_case.get_all)
        return {"tasks": [v.model_dump() for v in views], "count": len(views)}

    @mcp.tool()
    async def update_task(
        id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        is_done: Optional[bool] = None,
    ) -> dict:
        """Update an existing task. Only the provided fields are changed.

        Example: {"id": 1, "is_done": true}

        Args:
            id: ID of the task to update (required).
            title: New title (optional).
            description: New description (optional).
            is_done: New completion status (optional).

        Returns:
            The task as stored after the update.
        """
        dto = TodoUpdate(id=id, title=title, description=description, is_done=is_done)
        view = await _call(use_case.update_task, dto.id, dto)
        return view.model_dump()

    @mcp.tool()
    async def delete_task(id: int) -> str:
        """Delete a task by its ID. Returns a status message; fails if the task does not exist.

        Args:
            id: ID of the task to delete.
        """
        dto = TodoId(id=id)
        await _call(use_case.delete_task, dto.id)
        return "Task delete successful!!!"

    @mcp.tool()
    async def count_all_tasks() -> str:
        """Count the total number of tasks."""
        count = await _call(use_case.count_all_task)
        return f"Task have: {count} items"

    @mcp.tool()
    async def count_done_tasks() -> str:
        """Count the tasks marked as done."""
        count = await _call(use_case.count_done_task)
        return f"You have {count} tasks, mark as done"

    @mcp.tool()
    async def count_undone_tasks() -> str:
        """Count the tasks not yet marked as done."""
        count = await _call(use_case.count_undone_task)
        return f"You have {count} tasks, mark as undone"

    @mcp.resource("schema://todolist")
    def get_schema() -> str:
        """The SQLite schema of the todolist table."""
        return SCHEMA_DDL

    @mcp.prompt()
    def review_tasks() -> str:
        """Review the todo list and suggest what to do next."""
        return (
            "Review my todo list.\n\n"
            "1. Call list_tasks to get every task.\n"
            "2. Call count_done_tasks and count_undone_tasks for the totals.\n\n"
            "Then summarize what is still open and suggest which task to do next."
        )

    return mcp
