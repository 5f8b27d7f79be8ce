"""Transporte do token via cookie (padrão)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docsession.protocols.token_transport import TokenTransportProtocol

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from docsession.sessions.models import SessionOptions


class CookieTokenTransport(TokenTransportProtocol):
    """Lê e escreve o token em um cookie com o nome da sessão.

    - `max_age > 0`: cookie persistente (Max-Age + Expires)
    - `max_age == 0`: cookie de sessão do browser
    - `max_age < 0` ou token vazio com `max_age <= 0`: cookie é apagado
    """

    def get_token(self, request: Request, name: str) -> str | None:
        return request.cookies.get(name) or None

    def set_token(
        self,
        response: Response,
        name: str,
        token: str,
        options: SessionOptions,
    ) -> None:
        domain = options.domain or None
        if options.max_age < 0 or (not token and options.max_age <= 0):
            response.delete_cookie(
                name,
                path=options.path,
                domain=domain,
                secure=options.secure,
                httponly=options.http_only,
                samesite=options.same_site,
            )
            return

        max_age = options.max_age if options.max_age > 0 else None
        response.set_cookie(
            name,
            token,
            max_age=max_age,
            expires=max_age,
            path=options.path,
            domain=domain,
            secure=options.secure,
            httponly=options.http_only,
            samesite=options.same_site,
        )
