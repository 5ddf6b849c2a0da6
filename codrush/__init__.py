"""codrush package initializer.

Expose the FastAPI application as ``app`` lazily so code that only needs
the Judge0 client or the editor state can import without pulling FastAPI."""

from __future__ import annotations

__all__ = ["app"]


def __getattr__(name: str):
    if name == "app":
        from .main import app as fastapi_app
        return fastapi_app
    raise AttributeError(f"module {__name__} has no attribute {name!r}")
