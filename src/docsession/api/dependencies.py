"""Dependencies FastAPI para acesso ao session store.

Uso:
    app.state.session_store = create_session_store()

    @app.post("/login")
    async def login(
        request: Request,
        response: Response,
        session: Session = Depends(SessionDependency("auth")),
    ) -> dict[str, str]:
        session.values["user"] = "alice"
        await session.store.save_async(request, response, session)
        return {"status": "ok"}
"""

# Sem `from __future__ import annotations`: o FastAPI resolve `Request` pela assinatura.
from typing import TYPE_CHECKING

from fastapi import Request

from docsession.config.settings import get_session_settings

if TYPE_CHECKING:
    from docsession.sessions import Session, SessionStore

SESSION_STORE_STATE_KEY = "session_store"


def get_session_store(request: Request) -> "SessionStore":
    """Retorna o SessionStore configurado em `app.state`.

    Raises:
        RuntimeError: Se o store não foi configurado no startup
    """
    store = getattr(request.app.state, SESSION_STORE_STATE_KEY, None)
    if store is None:
        msg = "SessionStore não configurado em app.state"
        raise RuntimeError(msg)
    return store


class SessionDependency:
    """Resolve a sessão registrada na requisição para um nome.

    Args:
        name: Nome da sessão; None usa SESSION_NAME
    """

    def __init__(self, name: str | None = None) -> None:
        self._name = name

    async def __call__(self, request: Request) -> "Session":
        store = get_session_store(request)
        name = self._name or get_session_settings().name
        return await store.get_async(request, name)
