"""Transportes do token de sessão (cookie e header)."""

from docsession.infra.transport.cookie_token import CookieTokenTransport
from docsession.infra.transport.header_token import HeaderTokenTransport

__all__ = [
    "CookieTokenTransport",
    "HeaderTokenTransport",
]
