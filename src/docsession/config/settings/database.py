"""Settings do banco de sessões.

Parâmetros de conexão do store de documentos. Apenas dados: a criação
dos clientes fica em docsession.bootstrap.clients.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal
from urllib.parse import quote

if TYPE_CHECKING:
    from docsession.config.settings.base import BaseSettings

DatabaseBackend = Literal["memory", "redis", "firestore"]

DEFAULT_AUTH_MECHANISM = "SCRAM-SHA-1"


@dataclass(frozen=True)
class DatabaseSettings:
    """Configurações de conexão com o banco de sessões.

    Attributes:
        backend: Engine de persistência (memory|redis|firestore)
        host: Host do banco
        port: Porta do banco
        source: Nome do banco (índice do DB no Redis, database no Firestore)
        collection: Collection/namespace dos registros de sessão
        auth_mechanism: Mecanismo de autenticação
        username: Usuário
        password: Senha
        auth_source: Banco de autenticação
        auth: Se credenciais devem ser enviadas
        project_id: Projeto GCP (Firestore)
    """

    backend: DatabaseBackend = "memory"
    host: str = "localhost"
    port: int = 6379
    source: str = ""
    collection: str = "sessions"
    auth_mechanism: str = DEFAULT_AUTH_MECHANISM
    username: str = ""
    password: str = ""
    auth_source: str = ""
    auth: bool = False
    project_id: str = ""

    def redis_url(self) -> str:
        """Monta a URL de conexão Redis a partir dos campos."""
        credentials = ""
        if self.auth:
            credentials = f"{quote(self.username, safe='')}:{quote(self.password, safe='')}@"
        db_index = self.source if self.source.isdigit() else "0"
        return f"redis://{credentials}{self.host}:{self.port}/{db_index}"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do banco.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "redis", "firestore"):
            errors.append(f"SESSION_DB_BACKEND inválido: {self.backend}")

        if not self.collection:
            errors.append("SESSION_DB_COLLECTION não pode ser vazio")

        if self.backend == "redis":
            if not self.host:
                errors.append("SESSION_DB_HOST deve estar configurado")
            if not 0 < self.port < 65536:
                errors.append(f"SESSION_DB_PORT inválida: {self.port}")

        if self.backend == "firestore" and not self.project_id:
            errors.append("SESSION_DB_PROJECT_ID ou GCP_PROJECT deve estar configurado")

        if self.auth and not (self.username and self.password):
            errors.append("SESSION_DB_AUTH exige SESSION_DB_USERNAME e SESSION_DB_PASSWORD")

        if self.backend == "memory" and not base.is_development:
            errors.append("SESSION_DB_BACKEND=memory proibido em staging/production")

        return errors


def _load_database_from_env() -> DatabaseSettings:
    backend_str = os.getenv("SESSION_DB_BACKEND", "memory").lower()
    backend: DatabaseBackend = (
        backend_str if backend_str in ("memory", "redis", "firestore") else "memory"
    )
    return DatabaseSettings(
        backend=backend,
        host=os.getenv("SESSION_DB_HOST", "localhost"),
        port=int(os.getenv("SESSION_DB_PORT", "6379")),
        source=os.getenv("SESSION_DB_SOURCE", ""),
        collection=os.getenv("SESSION_DB_COLLECTION", "sessions"),
        auth_mechanism=os.getenv("SESSION_DB_AUTH_MECHANISM", DEFAULT_AUTH_MECHANISM),
        username=os.getenv("SESSION_DB_USERNAME", ""),
        password=os.getenv("SESSION_DB_PASSWORD", ""),
        auth_source=os.getenv("SESSION_DB_AUTH_SOURCE", ""),
        auth=os.getenv("SESSION_DB_AUTH", "false").lower() in ("true", "1", "yes"),
        project_id=os.getenv("SESSION_DB_PROJECT_ID", os.getenv("GCP_PROJECT", "")),
    )


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    """Retorna instância cacheada de DatabaseSettings."""
    return _load_database_from_env()
