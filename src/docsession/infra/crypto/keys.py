"""Pares de chaves do token e parsing a partir de configuração."""

from __future__ import annotations

import binascii
from dataclasses import dataclass

from docsession.infra.crypto.constants import AES_KEY_SIZES_ALLOWED
from docsession.utils.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class KeyPair:
    """Chave de assinatura (HMAC) + chave de cifra opcional (AES-GCM).

    Attributes:
        hash_key: Chave HMAC-SHA256, obrigatória
        block_key: Chave AES de 16, 24 ou 32 bytes; None desativa a cifra
    """

    hash_key: bytes
    block_key: bytes | None = None

    def __post_init__(self) -> None:
        if not self.hash_key:
            raise ConfigurationError("hash key must not be empty")
        if self.block_key is not None and len(self.block_key) not in AES_KEY_SIZES_ALLOWED:
            msg = f"invalid block key size: {len(self.block_key)}"
            raise ConfigurationError(msg)

    def __repr__(self) -> str:
        return f"KeyPair(hash_key=<{len(self.hash_key)} bytes>, encrypted={self.block_key is not None})"


def parse_key_pairs(raw: str) -> tuple[KeyPair, ...]:
    """Converte `hash_hex[:block_hex],hash_hex[:block_hex]` em KeyPairs.

    A ordem é preservada: o primeiro par assina novos tokens e os demais
    apenas validam tokens antigos (rotação).

    Raises:
        ConfigurationError: Se algum par for vazio ou não for hex válido
    """
    pairs: list[KeyPair] = []
    for index, entry in enumerate(raw.split(",")):
        entry = entry.strip()
        if not entry:
            continue
        hash_hex, _, block_hex = entry.partition(":")
        try:
            hash_key = bytes.fromhex(hash_hex)
            block_key = bytes.fromhex(block_hex) if block_hex else None
        except (ValueError, binascii.Error) as exc:
            raise ConfigurationError(f"key pair #{index} is not valid hex") from exc
        pairs.append(KeyPair(hash_key=hash_key, block_key=block_key))

    if not pairs:
        raise ConfigurationError("at least one key pair is required")
    return tuple(pairs)
