"""Capstone workflow backend.

Expose the FastAPI application as ``app`` lazily so alembic and scripts
that only need models or settings do not build the whole router tree."""

from __future__ import annotations

__all__ = ["app"]


def __getattr__(name: str):
    if name == "app":
        from .main import app as fastapi_app
        return fastapi_app
    raise AttributeError(f"module {__name__} has no attribute {name!r}")
