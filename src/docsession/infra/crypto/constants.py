"""Constantes criptográficas do token de sessão."""

AES_KEY_SIZES_ALLOWED = (16, 24, 32)  # 128/192/256 bits
NONCE_SIZE = 12  # 96 bits (recomendado para GCM)
MAC_SIZE = 32  # HMAC-SHA256

DEFAULT_TOKEN_MAX_AGE = 86400 * 30
DEFAULT_TOKEN_MAX_LENGTH = 4096  # limite prático de um cookie

PART_SEPARATOR = b"|"
