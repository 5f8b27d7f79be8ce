"""Modelos de sessão: opções do token, sessão em memória e registro persistido."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from docsession.utils.errors import SessionIdImmutableError

if TYPE_CHECKING:
    from docsession.sessions.store import SessionStore


@dataclass(slots=True)
class SessionOptions:
    """Atributos aplicados ao token no transporte.

    Attributes:
        path: Path do cookie
        domain: Domain do cookie (vazio = host atual)
        max_age: Segundos de validade; 0 = cookie de sessão do browser,
            < 0 = apagar a sessão no próximo save
        secure: Envia só em HTTPS
        http_only: Oculta o cookie do JavaScript
        same_site: Política SameSite
    """

    path: str = "/"
    domain: str = ""
    max_age: int = 0
    secure: bool = False
    http_only: bool = False
    same_site: Literal["lax", "strict", "none"] = "lax"

    def copy(self) -> SessionOptions:
        return replace(self)


class Session:
    """Sessão de uma requisição.

    Criada por `SessionStore.new`/`SessionStore.get`, alterada livremente
    pelo chamador e persistida por `save`. O id é vazio até o primeiro
    save e não muda depois de atribuído.
    """

    __slots__ = ("_id", "is_new", "name", "options", "store", "values")

    def __init__(
        self,
        store: SessionStore,
        name: str,
        *,
        options: SessionOptions | None = None,
    ) -> None:
        self.store = store
        self.name = name
        self.options = options or SessionOptions()
        self.values: dict[str, Any] = {}
        self.is_new = True
        self._id = ""

    @property
    def id(self) -> str:
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        if self._id and value != self._id:
            msg = f"session {self.name!r} already has an id"
            raise SessionIdImmutableError(msg)
        self._id = value

    def save(self, request: Any, response: Any) -> None:
        """Atalho para `store.save(request, response, self)`."""
        self.store.save(request, response, self)

    def __repr__(self) -> str:
        return f"Session(name={self.name!r}, id={self._id!r}, is_new={self.is_new})"


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """Documento persistido de uma sessão.

    Layout no banco: {"_id": id, "data": payload codificado, "modified": datetime}.
    """

    id: str
    data: str
    modified: datetime

    def to_document(self) -> dict[str, Any]:
        """Serializa para o documento do banco."""
        return {"_id": self.id, "data": self.data, "modified": self.modified}

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> SessionRecord:
        """Desserializa documento do banco."""
        return cls(
            id=str(document["_id"]),
            data=document.get("data", ""),
            modified=document["modified"],
        )
