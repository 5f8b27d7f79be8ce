"""Agregador de settings do docsession.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from docsession.config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from docsession.config.settings.database import (
    DEFAULT_AUTH_MECHANISM,
    DatabaseBackend,
    DatabaseSettings,
    get_database_settings,
)
from docsession.config.settings.session import (
    DEFAULT_MAX_AGE,
    SameSite,
    SessionSettings,
    TokenTransportKind,
    get_session_settings,
)

__all__ = [
    "DEFAULT_AUTH_MECHANISM",
    "DEFAULT_MAX_AGE",
    "BaseSettings",
    "DatabaseBackend",
    "DatabaseSettings",
    "Environment",
    "SameSite",
    "SessionSettings",
    "TokenTransportKind",
    "get_base_settings",
    "get_database_settings",
    "get_session_settings",
]
