"""Redis Collection: documentos de sessão como JSON por chave.

Redis não tem índices secundários: o índice TTL vira `SET ... EX`
calculado a partir do campo indexado (`modified + expire_after`).
Upsert substitui o documento inteiro (last-write-wins).
"""

from __future__ import annotations

import json
import logging
import math
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from docsession.protocols.collection import CollectionProtocol, IndexSpec
from docsession.utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from redis import Redis

logger = logging.getLogger(__name__)

# Prefixo para namespace de sessões
SESSION_PREFIX = "session:"

_DATE_TAG = "$date"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _encode_document(document: dict[str, Any]) -> str:
    encoded = {
        key: {_DATE_TAG: value.isoformat()} if isinstance(value, datetime) else value
        for key, value in document.items()
        if key != "_id"
    }
    return json.dumps(encoded, separators=(",", ":"))


def _decode_document(raw: bytes | str) -> dict[str, Any]:
    document = json.loads(raw)
    if not isinstance(document, dict):
        raise ValueError("session document must be a JSON object")
    for key, value in document.items():
        if isinstance(value, dict) and set(value) == {_DATE_TAG}:
            document[key] = datetime.fromisoformat(value[_DATE_TAG])
    return document


class RedisCollection(CollectionProtocol):
    """Collection de sessões usando Redis.

    Args:
        redis_client: Cliente Redis síncrono
        namespace: Prefixo das chaves
        clock: Fonte de tempo para cálculo do TTL
    """

    def __init__(
        self,
        redis_client: Redis[bytes],
        namespace: str = SESSION_PREFIX,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._redis = redis_client
        self._namespace = namespace
        self._clock = clock or _utc_now
        self._ttl_field: str | None = None
        self._expire_after: int | None = None

    def _key(self, record_id: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{self._namespace}{record_id}"

    def _ttl_seconds(self, document: dict[str, Any]) -> int | None:
        if self._ttl_field is None or self._expire_after is None:
            return None
        value = document.get(self._ttl_field)
        if not isinstance(value, datetime):
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        remaining = value + timedelta(seconds=self._expire_after) - self._clock()
        return math.ceil(remaining.total_seconds())

    def find_one(self, record_id: str) -> dict[str, Any] | None:
        key = self._key(record_id)
        try:
            raw = self._redis.get(key)
        except RedisError as e:
            logger.error("session_record_get_error", extra={"error_type": type(e).__name__})
            raise RedisConnectionError(f"Erro ao carregar sessão: {e}") from e

        if raw is None:
            return None
        try:
            document = _decode_document(raw)
        except (ValueError, TypeError) as e:
            logger.warning("session_record_decode_error", extra={"key": key, "error": str(e)})
            return None
        document["_id"] = record_id
        return document

    def upsert(self, record_id: str, document: dict[str, Any]) -> None:
        key = self._key(record_id)
        ttl = self._ttl_seconds(document)
        try:
            if ttl is not None and ttl <= 0:
                # Já expirado: equivale ao monitor de TTL ter removido
                self._redis.delete(key)
                return
            self._redis.set(key, _encode_document(document), ex=ttl)
        except RedisError as e:
            logger.error("session_record_set_error", extra={"error_type": type(e).__name__})
            raise RedisConnectionError(f"Erro ao persistir sessão: {e}") from e
        logger.debug("session_record_saved", extra={"key": key, "ttl": ttl})

    def remove(self, record_id: str) -> None:
        try:
            self._redis.delete(self._key(record_id))
        except RedisError as e:
            logger.error("session_record_delete_error", extra={"error_type": type(e).__name__})
            raise RedisConnectionError(f"Erro ao remover sessão: {e}") from e

    def create_indexes(self, specs: Sequence[IndexSpec]) -> None:
        for spec in specs:
            if spec.expire_after_seconds is None:
                logger.debug("redis_index_ignored", extra={"field": spec.field})
                continue
            self._ttl_field = spec.field
            self._expire_after = spec.expire_after_seconds
            logger.info(
                "redis_ttl_enabled",
                extra={"field": spec.field, "expire_after": spec.expire_after_seconds},
            )
