"""Protocolo do record store consumido pelo orquestrador de sessões."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docsession.sessions.models import SessionRecord


class RecordStoreProtocol(ABC):
    """Persistência de SessionRecord por id.

    Todo método valida o formato do id antes de acessar o banco
    (InvalidIdentifierError).
    """

    @abstractmethod
    def create_expiry_index(self, max_age: int) -> None:
        """Solicita expiração automática de registros após `max_age` segundos.

        Raises:
            ConfigurationError: Se o índice não puder ser criado
        """

    @abstractmethod
    def find(self, record_id: str) -> SessionRecord:
        """Carrega registro.

        Raises:
            InvalidIdentifierError: Id vazio ou inválido
            RecordNotFoundError: Registro ausente
            StorageError: Falha do banco
        """

    @abstractmethod
    def upsert(self, record: SessionRecord) -> None:
        """Insere ou substitui o registro (last-write-wins)."""

    @abstractmethod
    def remove(self, record_id: str) -> None:
        """Remove o registro; ausência não é erro."""
