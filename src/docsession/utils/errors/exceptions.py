"""Exceções de domínio do session store.

Taxonomia:
    - InvalidIdentifierError: id vazio ou fora do formato, checado antes de qualquer query
    - RecordNotFoundError: registro ausente (possivelmente expirado por TTL)
    - StorageError: falha do banco (rede, auth, servidor)
    - ConfigurationError: falha de setup (ex: criação do índice TTL), fatal
"""

from __future__ import annotations


class SessionStoreError(Exception):
    """Base para erros do session store."""


class InvalidIdentifierError(SessionStoreError):
    """Id de sessão vazio ou com formato inválido."""

    def __init__(self, record_id: object) -> None:
        super().__init__(f"docsession: invalid session id: {record_id!r}")
        self.record_id = record_id


class RecordNotFoundError(SessionStoreError):
    """Registro de sessão não encontrado no store."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"docsession: session record not found: {record_id}")
        self.record_id = record_id


class InvalidModifiedValueError(SessionStoreError):
    """Valor `modified` presente na sessão mas com tipo incorreto."""


class SessionIdImmutableError(SessionStoreError):
    """Tentativa de trocar o id de uma sessão que já possui id."""


class ConfigurationError(SessionStoreError):
    """Falha de configuração/setup; o store não deve ser considerado utilizável."""


class InfrastructureError(SessionStoreError):
    """Base para falhas de infraestrutura transitórias."""


# Nome usado pelo orquestrador; mesma classe.
StorageError = InfrastructureError


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""
