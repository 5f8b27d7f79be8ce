"""Session store: orquestra transporte, codec de token e record store.

Ciclo de vida por nome de sessão em uma requisição:
    ausente -> nova -> carregada -> (alterada) -> salva | removida

Política de erros:
    - Leitura (`new`/`get`) perdoa: token ausente, forjado ou expirado,
      registro inexistente, id inválido ou falha do banco viram sessão nova
      vazia. O cliente nunca vê qual falha ocorreu.
    - Gravação (`save`) não perdoa: qualquer falha é propagada, para que um
      save com problema nunca seja reportado como sucesso.

Saves concorrentes para o mesmo id são last-write-wins (substituição do
documento inteiro); serializar é responsabilidade de camadas acima.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, NamedTuple

from docsession.config.settings.session import DEFAULT_MAX_AGE
from docsession.infra.crypto import (
    MalformedTokenError,
    MultiTokenDecodeError,
    TokenDecodeError,
    codecs_from_pairs,
    decode_multi,
    encode_multi,
)
from docsession.infra.transport import CookieTokenTransport
from docsession.sessions.identifiers import new_record_id
from docsession.sessions.models import Session, SessionOptions, SessionRecord
from docsession.sessions.registry import SessionRegistry
from docsession.utils.errors import (
    ConfigurationError,
    InvalidModifiedValueError,
    SessionStoreError,
    StorageError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from docsession.infra.crypto import KeyPair, SecureTokenCodec
    from docsession.protocols.record_store import RecordStoreProtocol
    from docsession.protocols.token_transport import TokenTransportProtocol

logger = logging.getLogger(__name__)

MODIFIED_KEY = "modified"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class _CodecSet(NamedTuple):
    """Codecs do token (limitado pelo transporte) e do payload gravado no banco."""

    token: tuple[SecureTokenCodec, ...]
    payload: tuple[SecureTokenCodec, ...]


def _rejection_reason(error: TokenDecodeError) -> str:
    if isinstance(error, MultiTokenDecodeError):
        return ",".join(type(inner).__name__ for inner in error.errors)
    return type(error).__name__


class SessionStore:
    """Store de sessões com valores no servidor e token assinado no cliente.

    Args:
        record_store: Persistência dos registros de sessão
        key_pairs: Pares de chaves em ordem; o primeiro assina, os demais
            só validam tokens antigos (rotação)
        max_age: Max-age padrão em segundos (token, cookie e TTL)
        ensure_ttl: Solicita índice de expiração automática no banco
        transport: Transporte do token (padrão: cookie)
        options: Opções padrão copiadas para cada sessão nova
        clock: Fonte de tempo (UTC)

    Raises:
        ConfigurationError: Sem pares de chaves ou falha ao criar o índice TTL
    """

    def __init__(
        self,
        record_store: RecordStoreProtocol,
        key_pairs: Sequence[KeyPair],
        *,
        max_age: int = DEFAULT_MAX_AGE,
        ensure_ttl: bool = False,
        transport: TokenTransportProtocol | None = None,
        options: SessionOptions | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not key_pairs:
            raise ConfigurationError("docsession: at least one key pair is required")

        self._record_store = record_store
        self._clock = clock or _utc_now
        self._codec_set = _CodecSet(
            token=codecs_from_pairs(key_pairs, max_age=max_age, clock=self._timestamp),
            # Payload não trafega no cliente: sem limite de tamanho
            payload=codecs_from_pairs(
                key_pairs, max_age=max_age, max_length=0, clock=self._timestamp
            ),
        )
        self.transport: TokenTransportProtocol = transport or CookieTokenTransport()
        self.options = options.copy() if options else SessionOptions(path="/")
        self.set_max_age(max_age)

        if ensure_ttl:
            if max_age <= 0:
                raise ConfigurationError("docsession: ensure_ttl requires max_age > 0")
            self._record_store.create_expiry_index(max_age)

    def _timestamp(self) -> float:
        return self._clock().timestamp()

    @property
    def codecs(self) -> tuple[SecureTokenCodec, ...]:
        """Codecs do token de id enviado ao cliente."""
        return self._codec_set.token

    @property
    def payload_codecs(self) -> tuple[SecureTokenCodec, ...]:
        """Codecs dos valores gravados no registro."""
        return self._codec_set.payload

    @property
    def record_store(self) -> RecordStoreProtocol:
        return self._record_store

    def set_max_age(self, age: int) -> None:
        """Atualiza o max-age padrão e o max-age de todos os codecs.

        Os codecs de token e de payload são trocados em uma única atribuição: um save
        concorrente usa a tupla antiga ou a nova, nunca uma mistura.
        Sessões individuais são removidas com `options.max_age = -1`.
        """
        self.options.max_age = age
        current = self._codec_set
        self._codec_set = _CodecSet(
            token=tuple(codec.with_max_age(age) for codec in current.token),
            payload=tuple(codec.with_max_age(age) for codec in current.payload),
        )

    # ──────────────────────────────────────────────────────────────
    # Lookup
    # ──────────────────────────────────────────────────────────────

    def get(self, request: Any, name: str) -> Session:
        """Retorna a sessão registrada na requisição para o nome.

        Chamadas repetidas na mesma requisição retornam o mesmo objeto;
        a primeira delega para `new`.
        """
        return SessionRegistry.for_request(request).get(self, name)

    def new(self, request: Any, name: str) -> Session:
        """Retorna sessão para o nome sem registrá-la na requisição.

        Carrega valores quando a requisição traz token válido para um
        registro existente; caso contrário a sessão volta nova e vazia.
        """
        session = Session(self, name, options=self.options.copy())

        token = self.transport.get_token(request, name)
        if token is None:
            return session

        codec_set = self._codec_set
        try:
            record_id = decode_multi(name, token, codec_set.token)
        except TokenDecodeError as e:
            logger.info(
                "session_token_rejected",
                extra={"session_name": name, "reason": _rejection_reason(e)},
            )
            return session

        try:
            values = self._load(name, record_id, codec_set.payload)
        except StorageError as e:
            logger.warning(
                "session_load_storage_error",
                extra={"session_name": name, "error_type": type(e).__name__},
            )
            return session
        except (SessionStoreError, TokenDecodeError) as e:
            logger.info(
                "session_load_failed",
                extra={"session_name": name, "reason": type(e).__name__},
            )
            return session

        session.id = record_id
        session.values = values
        session.is_new = False
        return session

    def _load(
        self,
        name: str,
        record_id: Any,
        codecs: tuple[SecureTokenCodec, ...],
    ) -> dict[str, Any]:
        record = self._record_store.find(record_id)
        values = decode_multi(name, record.data, codecs)
        if not isinstance(values, dict):
            raise MalformedTokenError("session payload must be a mapping")
        return values

    # ──────────────────────────────────────────────────────────────
    # Save
    # ──────────────────────────────────────────────────────────────

    def save(self, request: Any, response: Any, session: Session) -> None:
        """Persiste a sessão e escreve o token na resposta.

        Com `session.options.max_age < 0` remove o registro e limpa o token.

        Raises:
            InvalidIdentifierError: Id da sessão fora do formato
            InvalidModifiedValueError: `values["modified"]` não é datetime
            StorageError: Falha do banco
            TokenCodecError: Falha ao codificar valores ou id
        """
        codec_set = self._codec_set

        if session.options.max_age < 0:
            if session.id:
                self._record_store.remove(session.id)
            self.transport.set_token(response, session.name, "", session.options)
            logger.info("session_deleted", extra={"session_name": session.name})
            return

        if not session.id:
            session.id = new_record_id()

        self._upsert(session, codec_set.payload)

        token = encode_multi(session.name, session.id, codec_set.token)
        self.transport.set_token(response, session.name, token, session.options)
        logger.debug("session_saved", extra={"session_name": session.name})

    def _upsert(self, session: Session, codecs: tuple[SecureTokenCodec, ...]) -> None:
        if MODIFIED_KEY in session.values:
            modified = session.values[MODIFIED_KEY]
            if not isinstance(modified, datetime):
                msg = f"docsession: invalid modified value of type {type(modified).__name__}"
                raise InvalidModifiedValueError(msg)
        else:
            modified = self._clock()

        data = encode_multi(session.name, session.values, codecs)
        self._record_store.upsert(SessionRecord(id=session.id, data=data, modified=modified))

    # ──────────────────────────────────────────────────────────────
    # Async API
    # ──────────────────────────────────────────────────────────────

    async def get_async(self, request: Any, name: str) -> Session:
        """`get` em thread, para handlers async."""
        return await asyncio.to_thread(self.get, request, name)

    async def new_async(self, request: Any, name: str) -> Session:
        """`new` em thread, para handlers async."""
        return await asyncio.to_thread(self.new, request, name)

    async def save_async(self, request: Any, response: Any, session: Session) -> None:
        """`save` em thread, para handlers async."""
        await asyncio.to_thread(self.save, request, response, session)
