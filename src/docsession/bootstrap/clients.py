"""Factories de clientes externos: Redis e Firestore."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from docsession.config.settings import get_database_settings

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore_admin_v1 import FirestoreAdminClient
    from redis import Redis

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Redis Client Factory
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_redis_client() -> Redis[bytes]:
    """Cria cliente Redis síncrono (singleton, pool compartilhado).

    Usa SESSION_DB_HOST/PORT/SOURCE e credenciais quando SESSION_DB_AUTH.
    """
    import redis

    settings = get_database_settings()
    client: Redis[bytes] = redis.from_url(
        settings.redis_url(),
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    logger.info("redis_client_created", extra={"host": settings.host, "port": settings.port})
    return client


# ──────────────────────────────────────────────────────────────────────────────
# Firestore Client Factories
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_firestore_client() -> FirestoreClient:
    """Cria cliente Firestore (singleton)."""
    from google.cloud import firestore

    settings = get_database_settings()
    database = settings.source or None
    client = firestore.Client(project=settings.project_id or None, database=database)
    logger.info("firestore_client_created", extra={"project": settings.project_id})
    return client


@lru_cache(maxsize=1)
def create_firestore_admin_client() -> FirestoreAdminClient:
    """Cria cliente admin do Firestore (TTL policies)."""
    from google.cloud.firestore_admin_v1 import FirestoreAdminClient

    client = FirestoreAdminClient()
    logger.info("firestore_admin_client_created")
    return client
