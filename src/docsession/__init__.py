"""docsession: sessões HTTP com valores no servidor e token assinado no cliente.

O cliente recebe apenas um token assinado (e opcionalmente cifrado) com o
id do registro; os valores da sessão ficam em um store de documentos
(memória, Redis ou Firestore).

Uso:
    from docsession import DocumentRecordStore, KeyPair, MemoryCollection, SessionStore

    store = SessionStore(
        DocumentRecordStore(MemoryCollection()),
        [KeyPair(hash_key=b"...", block_key=b"...")],
        max_age=3600,
    )
    session = store.get(request, "auth")
    session.values["user"] = "alice"
    store.save(request, response, session)
"""

from docsession.infra.crypto import KeyPair, SecureTokenCodec
from docsession.infra.stores import (
    DocumentRecordStore,
    FirestoreCollection,
    MemoryCollection,
    RedisCollection,
)
from docsession.infra.transport import CookieTokenTransport, HeaderTokenTransport
from docsession.sessions import (
    Session,
    SessionOptions,
    SessionRecord,
    SessionStore,
    save_sessions,
)

__all__ = [
    "CookieTokenTransport",
    "DocumentRecordStore",
    "FirestoreCollection",
    "HeaderTokenTransport",
    "KeyPair",
    "MemoryCollection",
    "RedisCollection",
    "SecureTokenCodec",
    "Session",
    "SessionOptions",
    "SessionRecord",
    "SessionStore",
    "save_sessions",
]
