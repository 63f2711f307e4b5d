"""Web interface module.

Provides:
- FastAPI control API (status, snapshot, displays, refresh)
"""

from .app import create_app

__all__ = [
    "create_app",
]
