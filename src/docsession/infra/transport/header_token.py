"""Transporte do token via header customizado (clientes sem cookie)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docsession.protocols.token_transport import TokenTransportProtocol

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from docsession.sessions.models import SessionOptions

HEADER_PREFIX = "X-Session-"
MAX_AGE_SUFFIX = "-Max-Age"


class HeaderTokenTransport(TokenTransportProtocol):
    """Lê e escreve o token em um header.

    O max-age vai no header companheiro `<header>-Max-Age`; path, domain,
    secure e http-only não se aplicam a headers.

    Args:
        header_name: Header fixo; None usa `X-Session-<nome da sessão>`
    """

    def __init__(self, header_name: str | None = None) -> None:
        self._header_name = header_name

    def header_for(self, name: str) -> str:
        return self._header_name or f"{HEADER_PREFIX}{name}"

    def get_token(self, request: Request, name: str) -> str | None:
        return request.headers.get(self.header_for(name)) or None

    def set_token(
        self,
        response: Response,
        name: str,
        token: str,
        options: SessionOptions,
    ) -> None:
        header = self.header_for(name)
        if options.max_age < 0 or (not token and options.max_age <= 0):
            response.headers[header] = ""
            response.headers[header + MAX_AGE_SUFFIX] = "0"
            return

        response.headers[header] = token
        response.headers[header + MAX_AGE_SUFFIX] = str(options.max_age)
