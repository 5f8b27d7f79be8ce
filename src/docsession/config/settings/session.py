"""Settings de sessão: max-age, TTL, chaves do token e opções do cookie."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from docsession.config.settings.base import BaseSettings

TokenTransportKind = Literal["cookie", "header"]
SameSite = Literal["lax", "strict", "none"]

DEFAULT_MAX_AGE = 86400 * 30


@dataclass(frozen=True)
class SessionSettings:
    """Configurações de sessão.

    Attributes:
        name: Nome padrão da sessão (nome do cookie/header)
        max_age: Max-age em segundos, aplicado ao token e ao índice TTL
        ensure_ttl: Solicita índice de expiração automática na construção
        key_pairs: Pares de chaves em hex, separados por vírgula
            (`hash_key[:block_key]`); o primeiro par assina novos tokens
        path: Atributo Path do cookie
        domain: Atributo Domain do cookie
        secure: Atributo Secure do cookie
        http_only: Atributo HttpOnly do cookie
        same_site: Atributo SameSite do cookie
        transport: Transporte do token (cookie|header)
    """

    name: str = "session"
    max_age: int = DEFAULT_MAX_AGE
    ensure_ttl: bool = False
    key_pairs: str = ""
    path: str = "/"
    domain: str = ""
    secure: bool = False
    http_only: bool = True
    same_site: SameSite = "lax"
    transport: TokenTransportKind = "cookie"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sessão.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.name:
            errors.append("SESSION_NAME não pode ser vazio")

        if self.max_age < 0:
            errors.append("SESSION_MAX_AGE deve ser >= 0")

        if self.ensure_ttl and self.max_age <= 0:
            errors.append("SESSION_ENSURE_TTL exige SESSION_MAX_AGE > 0")

        if not self.key_pairs:
            errors.append("SESSION_KEY_PAIRS deve estar configurado")

        if self.transport not in ("cookie", "header"):
            errors.append(f"SESSION_TRANSPORT inválido: {self.transport}")

        if self.same_site not in ("lax", "strict", "none"):
            errors.append(f"SESSION_SAME_SITE inválido: {self.same_site}")

        if base.is_production and not self.secure:
            errors.append("SESSION_SECURE=false proibido em production")

        return errors


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _load_session_from_env() -> SessionSettings:
    transport_str = os.getenv("SESSION_TRANSPORT", "cookie").lower()
    transport: TokenTransportKind = "header" if transport_str == "header" else "cookie"
    same_site_str = os.getenv("SESSION_SAME_SITE", "lax").lower()
    same_site: SameSite = (
        same_site_str if same_site_str in ("lax", "strict", "none") else "lax"
    )
    return SessionSettings(
        name=os.getenv("SESSION_NAME", "session"),
        max_age=int(os.getenv("SESSION_MAX_AGE", str(DEFAULT_MAX_AGE))),
        ensure_ttl=_env_flag("SESSION_ENSURE_TTL", "false"),
        key_pairs=os.getenv("SESSION_KEY_PAIRS", ""),
        path=os.getenv("SESSION_COOKIE_PATH", "/"),
        domain=os.getenv("SESSION_COOKIE_DOMAIN", ""),
        secure=_env_flag("SESSION_SECURE", "false"),
        http_only=_env_flag("SESSION_HTTP_ONLY", "true"),
        same_site=same_site,
        transport=transport,
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
