"""Codec do token de sessão: assinatura HMAC, cifra AES-GCM e rotação de chaves.

O token carrega apenas o id do registro; os valores da sessão ficam no
banco, também codificados por este módulo.
"""

from .constants import AES_KEY_SIZES_ALLOWED, DEFAULT_TOKEN_MAX_AGE, DEFAULT_TOKEN_MAX_LENGTH
from .errors import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    MultiTokenDecodeError,
    TokenCodecError,
    TokenDecodeError,
    TokenEncodeError,
    TokenTooLargeError,
)
from .keys import KeyPair, parse_key_pairs
from .secure_token import SecureTokenCodec, codecs_from_pairs, decode_multi, encode_multi

__all__ = [
    "AES_KEY_SIZES_ALLOWED",
    "DEFAULT_TOKEN_MAX_AGE",
    "DEFAULT_TOKEN_MAX_LENGTH",
    "ExpiredTokenError",
    "InvalidSignatureError",
    "KeyPair",
    "MalformedTokenError",
    "MultiTokenDecodeError",
    "SecureTokenCodec",
    "TokenCodecError",
    "TokenDecodeError",
    "TokenEncodeError",
    "TokenTooLargeError",
    "codecs_from_pairs",
    "decode_multi",
    "encode_multi",
    "parse_key_pairs",
]
