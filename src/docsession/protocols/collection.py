"""Protocolo da collection de documentos usada pelo record store.

Contrato mínimo por id: find, upsert, remove e criação de índices.
Pool de conexões, execução de queries e engine de índices ficam com a
implementação concreta.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class IndexSpec:
    """Especificação de índice.

    Attributes:
        field: Campo indexado
        expire_after_seconds: Remove o documento quando `field` ficar mais
            velho que isso (índice TTL); None = sem expiração
        sparse: Ignora documentos sem o campo
        unique: Valores do campo devem ser únicos
    """

    field: str
    expire_after_seconds: int | None = None
    sparse: bool = False
    unique: bool = False


class CollectionProtocol(ABC):
    """Collection de documentos indexada por `_id`.

    Implementações devem ser seguras para uso concorrente e traduzir
    falhas do banco para StorageError.
    """

    @abstractmethod
    def find_one(self, record_id: str) -> dict[str, Any] | None:
        """Retorna o documento (com `_id`) ou None se ausente/expirado."""

    @abstractmethod
    def upsert(self, record_id: str, document: dict[str, Any]) -> None:
        """Insere ou substitui o documento inteiro."""

    @abstractmethod
    def remove(self, record_id: str) -> None:
        """Remove o documento; ausência não é erro."""

    @abstractmethod
    def create_indexes(self, specs: Sequence[IndexSpec]) -> None:
        """Cria os índices; idempotente se já existirem."""
