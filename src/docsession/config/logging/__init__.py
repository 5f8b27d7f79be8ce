"""Configuração de logging estruturado.

Uso:
    from docsession.config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="docsession")
    logger = get_logger(__name__)
"""

from docsession.config.logging.config import configure_logging, get_logger
from docsession.config.logging.filters import CorrelationIdFilter
from docsession.config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
