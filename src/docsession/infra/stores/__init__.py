"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - record_store: Record store sobre qualquer collection
    - memory_collection: Collection em memória para desenvolvimento/testes
    - redis_collection: Collection usando Redis
    - firestore_collection: Collection usando Firestore
"""

from __future__ import annotations

from docsession.infra.stores.firestore_collection import FirestoreCollection
from docsession.infra.stores.memory_collection import MemoryCollection
from docsession.infra.stores.record_store import DocumentRecordStore
from docsession.infra.stores.redis_collection import RedisCollection

__all__ = [
    "DocumentRecordStore",
    "FirestoreCollection",
    "MemoryCollection",
    "RedisCollection",
]
