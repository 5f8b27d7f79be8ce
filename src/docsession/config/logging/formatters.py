"""Formatter JSON para logs do session store.

Campos obrigatórios em todo log:
- correlation_id
- service
- asctime
- level
- logger
- message

Tokens e valores de sessão nunca entram nos logs.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com os campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-19 10:30:00,123",
            "level": "INFO",
            "logger": "docsession.sessions.store",
            "message": "session_saved",
            "correlation_id": "abc-123",
            "service": "docsession",
            "session_name": "auth"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
