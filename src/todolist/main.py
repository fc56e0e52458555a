from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import StoragePool
from .errors import UseCaseError
from .routers import todos as todos_router
from .usecase import TodoUseCase
from .utils import error_envelope

log = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "Create, read, update, delete and count todo items."},
]


# PUBLIC_INTERFACE
def create_app(
    use_case: TodoUseCase,
    cors_allow_origins: Optional[List[str]] = None,
    pool: Optional[StoragePool] = None,
) -> FastAPI:
    """
    Build the HTTP application around an already constructed use case.

    Args:
        use_case: The shared use case; every route calls into it.
        cors_allow_origins: Allowed origins; '*' (the default) allows all.
        pool: Storage pool, only used to report status on the health check.
    """
    app = FastAPI(
        title="Todolist Management API",
        description="Todo list service exposed over HTTP and MCP against one shared store.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.use_case = use_case
    app.state.pool = pool

    origins = cors_allow_origins or ["*"]
    allow_all = origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Reject malformed bodies and path parameters with 400.

        Response format:
            {
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": [... pydantic/fastapi error details ...]
            }
        """
        return JSONResponse(
            status_code=400,
            content=error_envelope("ValidationError", "Request validation failed", _jsonable_errors(exc)),
        )

    @app.exception_handler(UseCaseError)
    async def use_case_exception_handler(request: Request, exc: UseCaseError) -> JSONResponse:
        """
        Every use-case failure is a 400 carrying the coarse message only.
        """
        log.info("%s %s -> 400 (%s)", request.method, request.url.path, exc.operation)
        return JSONResponse(status_code=400, content=error_envelope("UseCaseError", exc.message))

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and pool status.
        """
        pool_status = pool.status() if pool is not None else None
        return {"message": "Healthy", "backend": "sqlite", "pool": pool_status}

    app.include_router(todos_router.router)
    return app


def _jsonable_errors(exc: RequestValidationError) -> list:
    """
    Validation errors with their context reduced to strings so they serialize.
    """
    errors = []
    for err in exc.errors():
        item = dict(err)
        if "ctx" in item:
            item["ctx"] = {k: str(v) for k, v in item["ctx"].items()}
        errors.append(item)
    return errors
