"""Firestore Collection: um documento por sessão.

Estrutura no Firestore:
    {collection}/{record_id} -> {"data": str, "modified": timestamp, "expires_at": timestamp}

Características:
    - Upsert via `set` sem merge (substitui o documento inteiro)
    - Índice TTL vira TTL policy do Firestore no campo `expires_at`
      (`modified + expire_after`); a remoção pelo Firestore pode atrasar,
      então documentos vencidos também são filtrados na leitura
    - Sem admin client, a TTL policy deve ser configurada no console
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from docsession.protocols.collection import CollectionProtocol, IndexSpec
from docsession.utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore_admin_v1 import FirestoreAdminClient

logger = logging.getLogger(__name__)

TTL_FIELD = "expires_at"
DEFAULT_DATABASE = "(default)"
TTL_POLICY_TIMEOUT_SECONDS = 120.0


def _utc_now() -> datetime:
    return datetime.now(UTC)


class FirestoreCollection(CollectionProtocol):
    """Collection de sessões usando Firestore.

    Args:
        firestore_client: Cliente Firestore
        collection_name: Collection dos documentos de sessão
        admin_client: Cliente admin para configurar a TTL policy (opcional)
        project_id: Projeto GCP (padrão: projeto do cliente)
        database: Database do Firestore
        clock: Fonte de tempo para filtrar documentos vencidos
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = "sessions",
        *,
        admin_client: FirestoreAdminClient | None = None,
        project_id: str | None = None,
        database: str = DEFAULT_DATABASE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._db = firestore_client
        self._collection_name = collection_name
        self._admin = admin_client
        self._project_id = project_id or getattr(firestore_client, "project", "")
        self._database = database
        self._clock = clock or _utc_now
        self._ttl_source: str | None = None
        self._expire_after: int | None = None

    def _document(self, record_id: str) -> Any:
        return self._db.collection(self._collection_name).document(record_id)

    def find_one(self, record_id: str) -> dict[str, Any] | None:
        try:
            snapshot = self._document(record_id).get()
        except Exception as e:
            logger.error(
                "session_record_get_error",
                extra={"error": str(e), "collection": self._collection_name},
            )
            raise FirestoreUnavailableError(f"Erro ao carregar sessão: {e}") from e

        if not snapshot.exists:
            return None

        data = snapshot.to_dict() or {}
        expires_at = data.pop(TTL_FIELD, None)
        if isinstance(expires_at, datetime) and expires_at <= self._clock():
            return None
        data["_id"] = snapshot.id
        return data

    def upsert(self, record_id: str, document: dict[str, Any]) -> None:
        doc_data = {key: value for key, value in document.items() if key != "_id"}
        if self._ttl_source is not None and self._expire_after is not None:
            source = doc_data.get(self._ttl_source)
            if isinstance(source, datetime):
                doc_data[TTL_FIELD] = source + timedelta(seconds=self._expire_after)

        try:
            self._document(record_id).set(doc_data)
        except Exception as e:
            logger.error(
                "session_record_set_error",
                extra={"error": str(e), "collection": self._collection_name},
            )
            raise FirestoreUnavailableError(f"Erro ao persistir sessão: {e}") from e
        logger.debug("session_record_saved", extra={"collection": self._collection_name})

    def remove(self, record_id: str) -> None:
        # delete de documento inexistente não falha no Firestore
        try:
            self._document(record_id).delete()
        except Exception as e:
            logger.error(
                "session_record_delete_error",
                extra={"error": str(e), "collection": self._collection_name},
            )
            raise FirestoreUnavailableError(f"Erro ao remover sessão: {e}") from e

    def _ttl_field_path(self) -> str:
        return (
            f"projects/{self._project_id}/databases/{self._database}"
            f"/collectionGroups/{self._collection_name}/fields/{TTL_FIELD}"
        )

    def create_indexes(self, specs: Sequence[IndexSpec]) -> None:
        for spec in specs:
            if spec.expire_after_seconds is None:
                # Firestore indexa campos simples automaticamente; unique não existe
                logger.debug("firestore_index_ignored", extra={"field": spec.field})
                continue

            self._ttl_source = spec.field
            self._expire_after = spec.expire_after_seconds

            if self._admin is None:
                logger.warning(
                    "firestore_ttl_policy_not_managed",
                    extra={"collection": self._collection_name, "field": TTL_FIELD},
                )
                continue

            try:
                operation = self._admin.update_field(
                    request={"field": {"name": self._ttl_field_path(), "ttl_config": {}}}
                )
                operation.result(timeout=TTL_POLICY_TIMEOUT_SECONDS)
            except Exception as e:
                logger.error(
                    "firestore_ttl_policy_error",
                    extra={"error": str(e), "collection": self._collection_name},
                )
                raise FirestoreUnavailableError(f"Erro ao configurar TTL: {e}") from e

            logger.info(
                "firestore_ttl_policy_enabled",
                extra={"collection": self._collection_name, "field": TTL_FIELD},
            )
