"""Serialização JSON dos valores carregados no token.

JSON puro, com marcação para tipos que o JSON não representa
(datetime e bytes), para que `values["modified"]` volte como datetime.

Marcas são dicts de uma chave (`{"__datetime__": iso}`). Um dict do
usuário com uma única chave igual a uma marca é escapado como
`{"__dict__": {chave + "__": valor}}`, então nunca é confundido com uma
marca na leitura.
"""

from __future__ import annotations

import base64
import json
from datetime import datetime
from typing import Any

from docsession.infra.crypto.errors import MalformedTokenError, TokenEncodeError

_DATETIME_TAG = "__datetime__"
_BYTES_TAG = "__bytes__"
_DICT_TAG = "__dict__"
_TAGS = frozenset({_DATETIME_TAG, _BYTES_TAG, _DICT_TAG})
_ESCAPE_SUFFIX = "__"


def _tag(value: Any) -> Any:
    if isinstance(value, dict):
        tagged = {key: _tag(item) for key, item in value.items()}
        if len(tagged) == 1:
            ((key, item),) = tagged.items()
            if key in _TAGS:
                return {_DICT_TAG: {key + _ESCAPE_SUFFIX: item}}
        return tagged
    if isinstance(value, (list, tuple)):
        return [_tag(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [_tag(item) for item in sorted(value)]
    if isinstance(value, datetime):
        return {_DATETIME_TAG: value.isoformat()}
    if isinstance(value, (bytes, bytearray)):
        return {_BYTES_TAG: base64.b64encode(bytes(value)).decode("ascii")}
    return value


def _default(value: Any) -> Any:
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def _object_hook(obj: dict[str, Any]) -> Any:
    if len(obj) != 1:
        return obj
    ((key, item),) = obj.items()
    if key == _DATETIME_TAG:
        return datetime.fromisoformat(item)
    if key == _BYTES_TAG:
        return base64.b64decode(item)
    if key == _DICT_TAG and isinstance(item, dict) and len(item) == 1:
        ((escaped, inner),) = item.items()
        return {escaped.removesuffix(_ESCAPE_SUFFIX): inner}
    return obj


def dumps(value: Any) -> bytes:
    """Serializa valor para bytes JSON compactos.

    Raises:
        TokenEncodeError: Se o valor tiver tipo não suportado
    """
    try:
        return json.dumps(
            _tag(value),
            default=_default,
            ensure_ascii=False,
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise TokenEncodeError(f"value is not serializable: {exc}") from exc


def loads(raw: bytes) -> Any:
    """Desserializa bytes JSON produzidos por `dumps`.

    Raises:
        MalformedTokenError: Se o conteúdo não for JSON válido
    """
    try:
        return json.loads(raw.decode("utf-8"), object_hook=_object_hook)
    except (UnicodeDecodeError, ValueError, TypeError) as exc:
        raise MalformedTokenError(f"payload is not valid JSON: {exc}") from exc
