"""Protocolos (contratos) consumidos pelo session store."""

from docsession.protocols.collection import CollectionProtocol, IndexSpec
from docsession.protocols.record_store import RecordStoreProtocol
from docsession.protocols.token_transport import TokenTransportProtocol

__all__ = [
    "CollectionProtocol",
    "IndexSpec",
    "RecordStoreProtocol",
    "TokenTransportProtocol",
]
