"""Sessões: modelos, identificadores, registry por requisição e store."""

from docsession.sessions.identifiers import (
    ensure_valid_record_id,
    is_valid_record_id,
    new_record_id,
)
from docsession.sessions.models import Session, SessionOptions, SessionRecord
from docsession.sessions.registry import SessionRegistry, save_sessions
from docsession.sessions.store import SessionStore

__all__ = [
    "Session",
    "SessionOptions",
    "SessionRecord",
    "SessionRegistry",
    "SessionStore",
    "ensure_valid_record_id",
    "is_valid_record_id",
    "new_record_id",
    "save_sessions",
]
