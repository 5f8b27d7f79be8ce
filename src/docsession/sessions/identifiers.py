"""Identificadores de registro de sessão (12 bytes, 24 caracteres hex).

Layout: timestamp unix (4 bytes, big-endian) + valor aleatório do
processo (5 bytes) + contador (3 bytes). Ids gerados no mesmo processo
são únicos e aproximadamente ordenados por criação.
"""

from __future__ import annotations

import itertools
import os
import secrets
import threading
import time

from docsession.utils.errors import InvalidIdentifierError

RECORD_ID_BYTES = 12
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_process_random = secrets.token_bytes(5)
_process_pid = os.getpid()
_counter = itertools.count(secrets.randbelow(0xFFFFFF))
_lock = threading.Lock()


def new_record_id() -> str:
    """Gera novo id de registro em hex minúsculo."""
    global _process_random, _process_pid

    with _lock:
        # Após fork, o valor aleatório precisa mudar para não colidir com o pai
        if os.getpid() != _process_pid:
            _process_pid = os.getpid()
            _process_random = secrets.token_bytes(5)
        count = next(_counter) & 0xFFFFFF
        random_part = _process_random

    timestamp = int(time.time()) & 0xFFFFFFFF
    raw = timestamp.to_bytes(4, "big") + random_part + count.to_bytes(3, "big")
    return raw.hex()


def is_valid_record_id(value: object) -> bool:
    """True se o valor for string de 24 caracteres hex."""
    return (
        isinstance(value, str)
        and len(value) == RECORD_ID_BYTES * 2
        and all(char in _HEX_DIGITS for char in value)
    )


def ensure_valid_record_id(value: object) -> str:
    """Valida o id antes de qualquer acesso ao banco.

    Raises:
        InvalidIdentifierError: Se o id for vazio ou fora do formato
    """
    if not is_valid_record_id(value):
        raise InvalidIdentifierError(value)
    return value.lower()  # type: ignore[union-attr]
