"""Runs the HTTP and MCP transports side by side against one use case.

The supervisor starts both transports and a shutdown waiter as asyncio tasks
and stops at the first of the three to finish. The others are cancelled and
abandoned; in-flight requests on the other transport are not drained.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import uvicorn

from .db import StoragePool
from .main import create_app
from .mcp_server import create_mcp_server
from .repositories import SQLRepository
from .settings import Settings
from .usecase import TodoUseCase

log = logging.getLogger(__name__)

ServeFn = Callable[[], Awaitable[Any]]


class SupervisorState(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class Trigger(str, Enum):
    """What ended the run."""

    HTTP = "http"
    MCP = "mcp"
    SHUTDOWN = "shutdown"


_EXIT_MESSAGES = {
    Trigger.HTTP: "HTTP server exited",
    Trigger.MCP: "MCP service exited",
    Trigger.SHUTDOWN: "Shutdown signal received",
}


class _HttpServer(uvicorn.Server):
    """uvicorn server that leaves SIGINT/SIGTERM to the supervisor."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


# PUBLIC_INTERFACE
class Supervisor:
    """
    Race the HTTP transport, the MCP transport and a shutdown request.

    Args:
        serve_http: Coroutine function running the HTTP server until it stops.
        serve_mcp: Coroutine function running the MCP server until it stops.
        pool: Storage pool to dispose once the run ends.
    """

    def __init__(self, serve_http: ServeFn, serve_mcp: ServeFn, pool: Optional[StoragePool] = None) -> None:
        self._serve_http = serve_http
        self._serve_mcp = serve_mcp
        self._pool = pool
        self._shutdown = asyncio.Event()
        self.state = SupervisorState.STARTING
        self.failure: Optional[BaseException] = None

    def request_shutdown(self, signame: Optional[str] = None) -> None:
        if signame:
            log.info("%s received. Shutting down...", signame)
        self._shutdown.set()

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> Callable[[], None]:
        """Install SIGINT/SIGTERM handlers and return a function that removes them."""
        on_loop = []
        previous = {}
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig.name)
                on_loop.append(sig)
            except NotImplementedError:
                previous[sig] = signal.signal(
                    sig, lambda signum, frame: loop.call_soon_threadsafe(self.request_shutdown, "Signal")
                )

        def restore() -> None:
            for sig in on_loop:
                loop.remove_signal_handler(sig)
            for sig, handler in previous.items():
                signal.signal(sig, handler if handler is not None else signal.SIG_DFL)

        return restore

    async def run(self, install_signal_handlers: bool = True) -> Trigger:
        """
        Serve until the first of HTTP, MCP or shutdown finishes and return which one it was.
        """
        loop = asyncio.get_running_loop()
        restore_signals = self._install_signal_handlers(loop) if install_signal_handlers else None

        tasks: Dict[asyncio.Task, Trigger] = {
            asyncio.create_task(self._serve_http(), name="http"): Trigger.HTTP,
            asyncio.create_task(self._serve_mcp(), name="mcp"): Trigger.MCP,
            asyncio.create_task(self._shutdown.wait(), name="shutdown"): Trigger.SHUTDOWN,
        }
        self.state = SupervisorState.RUNNING
        log.info("Supervisor running: HTTP and MCP transports started")

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if restore_signals is not None:
                restore_signals()

        self.state = SupervisorState.DRAINING
        # Several tasks can finish in the same loop iteration; take them in declaration order.
        finished = next(t for t in tasks if t in done)
        trigger = tasks[finished]
        error = None if finished.cancelled() else finished.exception()
        if error is not None:
            self.failure = error
            log.error("%s failed", _EXIT_MESSAGES[trigger], exc_info=error)
        else:
            log.info(_EXIT_MESSAGES[trigger])

        for task in pending:
            task.cancel()
        if self._pool is not None:
            self._pool.dispose()
        self.state = SupervisorState.STOPPED
        return trigger


async def _serve_http(server: uvicorn.Server) -> None:
    try:
        await server.serve()
    except SystemExit as exc:
        # uvicorn exits the interpreter when it cannot bind; keep that inside the task.
        raise RuntimeError(f"HTTP server could not start (exit code {exc.code})") from exc


# PUBLIC_INTERFACE
def build_supervisor(settings: Settings) -> Supervisor:
    """
    Construct pool, repository, use case and both transports, in that order.

    Raises StorageConnectionError if the store cannot be reached; nothing has
    been started at that point.
    """
    pool = StoragePool(settings.database_url, pool_size=settings.pool_size, timeout=settings.pool_timeout)
    try:
        pool.initialize()
    except Exception:
        pool.dispose()
        raise

    use_case = TodoUseCase(SQLRepository(pool))

    app = create_app(use_case, settings.cors_allow_origins, pool)
    mcp = create_mcp_server(use_case)

    server = _HttpServer(
        uvicorn.Config(
            app,
            host=settings.http_host,
            port=settings.http_port,
            log_config=None,
            log_level=settings.log_level.lower(),
        )
    )
    log.info("HTTP API on http://%s:%d/v1, MCP on stdio", settings.http_host, settings.http_port)
    return Supervisor(lambda: _serve_http(server), mcp.run_stdio_async, pool)
