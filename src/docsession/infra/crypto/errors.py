"""Erros do codec de token.

Na leitura de sessão, qualquer TokenDecodeError equivale a "sem sessão".
Na gravação, erros de encode são propagados.
"""

from __future__ import annotations

from collections.abc import Sequence


class TokenCodecError(Exception):
    """Erro em operação do codec de token."""


class TokenEncodeError(TokenCodecError):
    """Valor não serializável ou falha ao cifrar."""


class TokenDecodeError(TokenCodecError):
    """Token recusado na leitura."""


class MalformedTokenError(TokenDecodeError):
    """Token com estrutura ou base64 inválidos."""


class InvalidSignatureError(TokenDecodeError):
    """MAC (ou tag AES-GCM) não confere."""


class ExpiredTokenError(TokenDecodeError):
    """Timestamp do token fora da janela de idade aceita."""


class TokenTooLargeError(TokenDecodeError, TokenEncodeError):
    """Token maior que o limite configurado.

    Também levantado no encode, por isso herda de TokenEncodeError.
    """


class MultiTokenDecodeError(TokenDecodeError):
    """Nenhum codec da lista conseguiu decodificar o token."""

    def __init__(self, errors: Sequence[TokenDecodeError]) -> None:
        reasons = ", ".join(type(error).__name__ for error in errors) or "no codecs"
        super().__init__(f"token rejected by all codecs: {reasons}")
        self.errors = tuple(errors)

    def any_expired(self) -> bool:
        """True se algum codec validou a assinatura mas o token expirou."""
        return any(isinstance(error, ExpiredTokenError) for error in self.errors)
