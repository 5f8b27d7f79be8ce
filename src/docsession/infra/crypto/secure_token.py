"""Codec de token assinado (HMAC-SHA256) e opcionalmente cifrado (AES-GCM).

Formato (antes do base64url externo, sem padding):
    timestamp|base64url(nonce + ciphertext)|mac

- mac = HMAC-SHA256(hash_key, name|timestamp|value)
- O nome da sessão entra no MAC e como associated data do AES-GCM, então um
  token emitido para um nome não é aceito para outro.
- Rotação: `encode_multi` usa sempre o primeiro codec; `decode_multi` tenta
  cada codec em ordem até um validar.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import os
import time
from typing import TYPE_CHECKING, Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from docsession.infra.crypto import serialization
from docsession.infra.crypto.constants import (
    DEFAULT_TOKEN_MAX_AGE,
    DEFAULT_TOKEN_MAX_LENGTH,
    MAC_SIZE,
    NONCE_SIZE,
    PART_SEPARATOR,
)
from docsession.infra.crypto.errors import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    MultiTokenDecodeError,
    TokenCodecError,
    TokenDecodeError,
    TokenTooLargeError,
)
from docsession.infra.crypto.keys import KeyPair

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(value: str | bytes) -> bytes:
    """Decodifica base64url sem padding, recusando formas não canônicas."""
    if isinstance(value, str):
        try:
            value = value.encode("ascii")
        except UnicodeEncodeError as exc:
            raise MalformedTokenError("token contains non-ascii characters") from exc

    padded = value + b"=" * (-len(value) % 4)
    try:
        decoded = base64.b64decode(padded, altchars=b"-_", validate=True)
    except (ValueError, binascii.Error) as exc:
        raise MalformedTokenError(f"invalid base64: {exc}") from exc

    # Bits de sobra no último caractere geram o mesmo decode; só a forma canônica vale.
    if _b64encode(decoded) != value:
        raise MalformedTokenError("invalid base64: non-canonical encoding")
    return decoded


class SecureTokenCodec:
    """Codec de um par de chaves.

    Instâncias são imutáveis: para trocar o max-age use `with_max_age`.

    Args:
        hash_key: Chave HMAC
        block_key: Chave AES-GCM (16/24/32 bytes) ou None para só assinar
        max_age: Idade máxima em segundos; 0 desativa a checagem
        min_age: Idade mínima em segundos; 0 desativa a checagem
        max_length: Tamanho máximo do token; 0 desativa o limite
        clock: Fonte de tempo em segundos unix
    """

    __slots__ = ("_aead", "_block_key", "_clock", "_hash_key", "_max_age", "_max_length", "_min_age")

    def __init__(
        self,
        hash_key: bytes,
        block_key: bytes | None = None,
        *,
        max_age: int = DEFAULT_TOKEN_MAX_AGE,
        min_age: int = 0,
        max_length: int = DEFAULT_TOKEN_MAX_LENGTH,
        clock: Callable[[], float] = time.time,
    ) -> None:
        # Valida tamanho das chaves
        KeyPair(hash_key=hash_key, block_key=block_key)
        self._hash_key = hash_key
        self._block_key = block_key
        self._aead = AESGCM(block_key) if block_key is not None else None
        self._max_age = max_age
        self._min_age = min_age
        self._max_length = max_length
        self._clock = clock

    @classmethod
    def from_key_pair(cls, pair: KeyPair, **kwargs: Any) -> SecureTokenCodec:
        """Cria codec a partir de um KeyPair."""
        return cls(pair.hash_key, pair.block_key, **kwargs)

    @property
    def max_age(self) -> int:
        return self._max_age

    @property
    def encrypted(self) -> bool:
        return self._aead is not None

    def with_max_age(self, max_age: int) -> SecureTokenCodec:
        """Retorna cópia do codec com outro max-age."""
        return SecureTokenCodec(
            self._hash_key,
            self._block_key,
            max_age=max_age,
            min_age=self._min_age,
            max_length=self._max_length,
            clock=self._clock,
        )

    def _mac(self, name: str, body: bytes) -> bytes:
        message = name.encode("utf-8") + PART_SEPARATOR + body
        return hmac.new(self._hash_key, message, hashlib.sha256).digest()

    def encode(self, name: str, value: Any) -> str:
        """Serializa, cifra (se houver block key), assina e codifica o valor.

        Raises:
            TokenEncodeError: Se o valor não for serializável
            TokenTooLargeError: Se o token exceder max_length
        """
        payload = serialization.dumps(value)
        if self._aead is not None:
            nonce = os.urandom(NONCE_SIZE)
            payload = nonce + self._aead.encrypt(nonce, payload, name.encode("utf-8"))

        timestamp = str(int(self._clock())).encode("ascii")
        body = timestamp + PART_SEPARATOR + _b64encode(payload)
        token = _b64encode(body + PART_SEPARATOR + self._mac(name, body)).decode("ascii")

        if self._max_length and len(token) > self._max_length:
            msg = f"token length {len(token)} exceeds {self._max_length}"
            raise TokenTooLargeError(msg)
        return token

    def decode(self, name: str, token: str) -> Any:
        """Valida e decodifica um token produzido por `encode`.

        Raises:
            TokenTooLargeError: Token maior que max_length
            MalformedTokenError: Estrutura ou base64 inválidos
            InvalidSignatureError: MAC ou tag AES-GCM não conferem
            ExpiredTokenError: Timestamp fora da janela [min_age, max_age]
        """
        if self._max_length and len(token) > self._max_length:
            msg = f"token length {len(token)} exceeds {self._max_length}"
            raise TokenTooLargeError(msg)

        parts = _b64decode(token).split(PART_SEPARATOR, 2)
        if len(parts) != 3:
            raise MalformedTokenError("token must have 3 parts")
        timestamp_raw, encoded_value, mac = parts
        if len(mac) != MAC_SIZE:
            raise MalformedTokenError("token MAC has invalid length")

        body = timestamp_raw + PART_SEPARATOR + encoded_value
        if not hmac.compare_digest(mac, self._mac(name, body)):
            raise InvalidSignatureError("token MAC is invalid")

        try:
            timestamp = int(timestamp_raw.decode("ascii"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise MalformedTokenError("token timestamp is invalid") from exc

        now = int(self._clock())
        if self._min_age and timestamp > now - self._min_age:
            raise ExpiredTokenError("token timestamp is too new")
        if self._max_age and timestamp < now - self._max_age:
            raise ExpiredTokenError("token expired")

        payload = _b64decode(encoded_value)
        if self._aead is not None:
            if len(payload) <= NONCE_SIZE:
                raise MalformedTokenError("encrypted payload too short")
            try:
                payload = self._aead.decrypt(
                    payload[:NONCE_SIZE], payload[NONCE_SIZE:], name.encode("utf-8")
                )
            except InvalidTag as exc:
                raise InvalidSignatureError("token decryption failed") from exc

        return serialization.loads(payload)


def codecs_from_pairs(
    key_pairs: Sequence[KeyPair],
    *,
    max_age: int = DEFAULT_TOKEN_MAX_AGE,
    max_length: int = DEFAULT_TOKEN_MAX_LENGTH,
    clock: Callable[[], float] = time.time,
) -> tuple[SecureTokenCodec, ...]:
    """Cria a tupla ordenada de codecs, um por par de chaves.

    `max_length=0` remove o limite de tamanho (payload gravado no banco).
    """
    return tuple(
        SecureTokenCodec.from_key_pair(pair, max_age=max_age, max_length=max_length, clock=clock)
        for pair in key_pairs
    )


def encode_multi(name: str, value: Any, codecs: Sequence[SecureTokenCodec]) -> str:
    """Codifica com o primeiro codec (par de chaves ativo).

    Raises:
        TokenCodecError: Se nenhum codec estiver configurado
    """
    if not codecs:
        raise TokenCodecError("no codecs configured")
    return codecs[0].encode(name, value)


def decode_multi(name: str, token: str, codecs: Sequence[SecureTokenCodec]) -> Any:
    """Decodifica tentando cada codec em ordem.

    Raises:
        TokenCodecError: Se nenhum codec estiver configurado
        MultiTokenDecodeError: Se todos os codecs recusarem o token
    """
    if not codecs:
        raise TokenCodecError("no codecs configured")

    errors: list[TokenDecodeError] = []
    for codec in codecs:
        try:
            return codec.decode(name, token)
        except TokenDecodeError as exc:
            errors.append(exc)
    raise MultiTokenDecodeError(errors)
