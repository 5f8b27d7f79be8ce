"""Bootstrap: inicialização e wiring do session store.

Uso:
    from docsession.bootstrap import initialize_app, validate_runtime_settings
    from docsession.bootstrap.dependencies import create_session_store

    initialize_app()
    validate_runtime_settings()
    store = create_session_store()
"""

from __future__ import annotations

import logging

from docsession.config.logging import configure_logging
from docsession.config.settings import (
    get_base_settings,
    get_database_settings,
    get_session_settings,
)
from docsession.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging estruturado JSON. Chamar uma vez no startup."""
    base = get_base_settings()
    configure_logging(level=base.log_level, service_name=base.service_name)


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Fora de `development` falha rápido para impedir boot inválido.

    Raises:
        ConfigurationError: Settings inválidas em staging/production
    """
    base = get_base_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"session: {error}" for error in get_session_settings().validate(base))
    errors.extend(f"database: {error}" for error in get_database_settings().validate(base))

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if not base.is_development:
        details = "\n".join(f"- {error}" for error in errors)
        raise ConfigurationError(f"Configuração inválida para {base.environment}:\n{details}")


__all__ = [
    "initialize_app",
    "validate_runtime_settings",
]
