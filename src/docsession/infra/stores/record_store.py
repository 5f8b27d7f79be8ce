"""Record store sobre uma collection de documentos.

Valida o id antes de qualquer query e traduz ausência em
RecordNotFoundError. Falhas do banco chegam como StorageError vindas
da collection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docsession.protocols.collection import IndexSpec
from docsession.protocols.record_store import RecordStoreProtocol
from docsession.sessions.identifiers import ensure_valid_record_id
from docsession.sessions.models import SessionRecord
from docsession.utils.errors import ConfigurationError, RecordNotFoundError

if TYPE_CHECKING:
    from docsession.protocols.collection import CollectionProtocol

logger = logging.getLogger(__name__)

MODIFIED_FIELD = "modified"


class DocumentRecordStore(RecordStoreProtocol):
    """Record store que delega persistência a uma CollectionProtocol.

    Args:
        collection: Collection de documentos (memória, Redis, Firestore...)
    """

    def __init__(self, collection: CollectionProtocol) -> None:
        self._collection = collection

    @property
    def collection(self) -> CollectionProtocol:
        return self._collection

    def create_expiry_index(self, max_age: int) -> None:
        spec = IndexSpec(
            field=MODIFIED_FIELD,
            expire_after_seconds=max_age,
            sparse=True,
            unique=True,
        )
        try:
            self._collection.create_indexes([spec])
        except Exception as e:
            logger.error("expiry_index_error", extra={"error": str(e), "max_age": max_age})
            raise ConfigurationError(f"docsession: expiry index creation failed: {e}") from e
        logger.info("expiry_index_ensured", extra={"max_age": max_age})

    def find(self, record_id: str) -> SessionRecord:
        record_id = ensure_valid_record_id(record_id)
        document = self._collection.find_one(record_id)
        if document is None:
            raise RecordNotFoundError(record_id)
        return SessionRecord.from_document(document)

    def upsert(self, record: SessionRecord) -> None:
        record_id = ensure_valid_record_id(record.id)
        document = record.to_document()
        document["_id"] = record_id
        self._collection.upsert(record_id, document)

    def remove(self, record_id: str) -> None:
        record_id = ensure_valid_record_id(record_id)
        self._collection.remove(record_id)
