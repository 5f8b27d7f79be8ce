"""Registry de sessões por requisição.

Garante no máximo uma instância de Session por nome em cada requisição.
O estado fica em `request.state` (escopo da requisição), nunca em um
mapa global do processo.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docsession.sessions.models import Session
    from docsession.sessions.store import SessionStore

REGISTRY_STATE_KEY = "docsession_registry"


class SessionRegistry:
    """Sessões registradas em uma requisição, por nome."""

    def __init__(self, request: Any) -> None:
        self._request = request
        self._sessions: dict[str, Session] = {}

    @classmethod
    def for_request(cls, request: Any) -> SessionRegistry:
        """Retorna o registry da requisição, criando-o na primeira chamada."""
        state = request.state
        registry = getattr(state, REGISTRY_STATE_KEY, None)
        if registry is None:
            registry = cls(request)
            setattr(state, REGISTRY_STATE_KEY, registry)
        return registry

    def get(self, store: SessionStore, name: str) -> Session:
        """Retorna a sessão registrada para o nome ou cria via `store.new`."""
        session = self._sessions.get(name)
        if session is None:
            session = store.new(self._request, name)
            self._sessions[name] = session
        return session

    @property
    def sessions(self) -> tuple[Session, ...]:
        return tuple(self._sessions.values())

    def save(self, response: Any) -> None:
        """Salva todas as sessões registradas, na ordem de registro."""
        for session in self.sessions:
            session.store.save(self._request, response, session)


def save_sessions(request: Any, response: Any) -> None:
    """Salva todas as sessões registradas na requisição."""
    SessionRegistry.for_request(request).save(response)
