"""Factories do session store baseadas em configuração de ambiente."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docsession.bootstrap.clients import (
    create_firestore_admin_client,
    create_firestore_client,
    create_redis_client,
)
from docsession.config.settings import (
    get_base_settings,
    get_database_settings,
    get_session_settings,
)
from docsession.infra.crypto import parse_key_pairs
from docsession.infra.stores import (
    DocumentRecordStore,
    FirestoreCollection,
    MemoryCollection,
    RedisCollection,
)
from docsession.infra.stores.firestore_collection import DEFAULT_DATABASE
from docsession.infra.transport import CookieTokenTransport, HeaderTokenTransport
from docsession.sessions import SessionOptions, SessionStore

if TYPE_CHECKING:
    from docsession.config.settings import DatabaseSettings, SessionSettings
    from docsession.protocols import CollectionProtocol, TokenTransportProtocol

logger = logging.getLogger(__name__)


def create_collection(
    settings: DatabaseSettings | None = None,
    *,
    manage_ttl: bool = False,
) -> CollectionProtocol:
    """Cria a collection de sessões conforme SESSION_DB_BACKEND.

    Args:
        settings: DatabaseSettings (padrão: do ambiente)
        manage_ttl: Cria admin client para configurar TTL no Firestore
    """
    settings = settings or get_database_settings()
    backend = settings.backend

    if backend == "redis":
        collection = RedisCollection(create_redis_client(), namespace=f"{settings.collection}:")
        logger.info("session_collection_created", extra={"backend": "redis"})
        return collection

    if backend == "firestore":
        admin_client = create_firestore_admin_client() if manage_ttl else None
        collection = FirestoreCollection(
            create_firestore_client(),
            settings.collection,
            admin_client=admin_client,
            project_id=settings.project_id or None,
            database=settings.source or DEFAULT_DATABASE,
        )
        logger.info("session_collection_created", extra={"backend": "firestore"})
        return collection

    if backend == "memory":
        if not get_base_settings().is_development:
            logger.warning("memory_collection_in_non_dev", extra={"backend": "memory"})
        logger.info("session_collection_created", extra={"backend": "memory"})
        return MemoryCollection()

    msg = f"SESSION_DB_BACKEND inválido: {backend}"
    raise ValueError(msg)


def create_token_transport(settings: SessionSettings | None = None) -> TokenTransportProtocol:
    """Cria o transporte do token conforme SESSION_TRANSPORT."""
    settings = settings or get_session_settings()
    if settings.transport == "header":
        return HeaderTokenTransport()
    if settings.transport == "cookie":
        return CookieTokenTransport()
    msg = f"SESSION_TRANSPORT inválido: {settings.transport}"
    raise ValueError(msg)


def create_session_store(
    session_settings: SessionSettings | None = None,
    database_settings: DatabaseSettings | None = None,
    *,
    collection: CollectionProtocol | None = None,
) -> SessionStore:
    """Cria o SessionStore completo a partir da configuração.

    Raises:
        ConfigurationError: Chaves inválidas ou falha ao criar índice TTL
    """
    session_settings = session_settings or get_session_settings()
    database_settings = database_settings or get_database_settings()

    key_pairs = parse_key_pairs(session_settings.key_pairs)
    if collection is None:
        collection = create_collection(database_settings, manage_ttl=session_settings.ensure_ttl)

    options = SessionOptions(
        path=session_settings.path,
        domain=session_settings.domain,
        max_age=session_settings.max_age,
        secure=session_settings.secure,
        http_only=session_settings.http_only,
        same_site=session_settings.same_site,
    )
    store = SessionStore(
        DocumentRecordStore(collection),
        key_pairs,
        max_age=session_settings.max_age,
        ensure_ttl=session_settings.ensure_ttl,
        transport=create_token_transport(session_settings),
        options=options,
    )
    logger.info(
        "session_store_created",
        extra={
            "backend": database_settings.backend,
            "transport": session_settings.transport,
            "key_pairs": len(key_pairs),
            "ensure_ttl": session_settings.ensure_ttl,
        },
    )
    return store
