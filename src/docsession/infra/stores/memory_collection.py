"""Collection em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.

Honra índices TTL com relógio injetável: documento expirado some do
`find_one` (remoção preguiçosa) ou em `purge_expired`, que faz o papel do
monitor de TTL do banco.
"""

from __future__ import annotations

import copy
import threading
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from docsession.protocols.collection import CollectionProtocol, IndexSpec
from docsession.utils.errors import StorageError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class MemoryCollection(CollectionProtocol):
    """Collection em memória: apenas para dev/test.

    Índices são registrados como pedidos; só a expiração é aplicada.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._indexes: dict[str, IndexSpec] = {}
        self._clock = clock or _utc_now
        self._lock = threading.Lock()

    @property
    def indexes(self) -> tuple[IndexSpec, ...]:
        """Índices criados (apenas para testes)."""
        return tuple(self._indexes.values())

    def __len__(self) -> int:
        return len(self._documents)

    def _is_expired(self, document: dict[str, Any], now: datetime) -> bool:
        for spec in self._indexes.values():
            if spec.expire_after_seconds is None:
                continue
            value = document.get(spec.field)
            # Campo ausente ou não-datetime nunca expira
            if not isinstance(value, datetime):
                continue
            if _as_aware(value) + timedelta(seconds=spec.expire_after_seconds) < now:
                return True
        return False

    def find_one(self, record_id: str) -> dict[str, Any] | None:
        with self._lock:
            document = self._documents.get(record_id)
            if document is None:
                return None
            if self._is_expired(document, _as_aware(self._clock())):
                del self._documents[record_id]
                return None
            return copy.deepcopy(document)

    def upsert(self, record_id: str, document: dict[str, Any]) -> None:
        stored = copy.deepcopy(document)
        stored["_id"] = record_id
        with self._lock:
            self._documents[record_id] = stored

    def remove(self, record_id: str) -> None:
        with self._lock:
            self._documents.pop(record_id, None)

    def create_indexes(self, specs: Sequence[IndexSpec]) -> None:
        with self._lock:
            for spec in specs:
                existing = self._indexes.get(spec.field)
                if existing is not None and existing != spec:
                    msg = f"index options conflict on field {spec.field!r}"
                    raise StorageError(msg)
                self._indexes[spec.field] = spec

    def purge_expired(self) -> int:
        """Remove documentos expirados. Retorna quantos foram removidos."""
        with self._lock:
            now = _as_aware(self._clock())
            expired = [
                record_id
                for record_id, document in self._documents.items()
                if self._is_expired(document, now)
            ]
            for record_id in expired:
                del self._documents[record_id]
        return len(expired)
