"""
Todo list service exposed over HTTP (FastAPI) and MCP (stdio) against one shared SQLite store.

Run it with ``python -m todolist [DATABASE_URL]``.
"""

__version__ = "0.1.0"
