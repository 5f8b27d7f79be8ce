"""Exceções compartilhadas do docsession."""

from .exceptions import (
    ConfigurationError,
    FirestoreUnavailableError,
    InfrastructureError,
    InvalidIdentifierError,
    InvalidModifiedValueError,
    RecordNotFoundError,
    RedisConnectionError,
    SessionIdImmutableError,
    SessionStoreError,
    StorageError,
)

__all__ = [
    "ConfigurationError",
    "FirestoreUnavailableError",
    "InfrastructureError",
    "InvalidIdentifierError",
    "InvalidModifiedValueError",
    "RecordNotFoundError",
    "RedisConnectionError",
    "SessionIdImmutableError",
    "SessionStoreError",
    "StorageError",
]
