"""Integração HTTP (FastAPI)."""

from docsession.api.dependencies import SessionDependency, get_session_store

__all__ = [
    "SessionDependency",
    "get_session_store",
]
