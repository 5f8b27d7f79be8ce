"""Protocolo de transporte do token entre cliente e servidor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from docsession.sessions.models import SessionOptions


class TokenTransportProtocol(ABC):
    """Lê o token da requisição e escreve/limpa o token na resposta."""

    @abstractmethod
    def get_token(self, request: Request, name: str) -> str | None:
        """Retorna o token associado ao nome da sessão ou None se ausente."""

    @abstractmethod
    def set_token(
        self,
        response: Response,
        name: str,
        token: str,
        options: SessionOptions,
    ) -> None:
        """Escreve o token aplicando as opções.

        Token vazio com `options.max_age <= 0` limpa o token no cliente.
        """
