"""Testes do SessionStore: lookup, save, remoção e rotação de chaves."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from docsession.infra.crypto import KeyPair, decode_multi, encode_multi
from docsession.infra.stores import DocumentRecordStore, MemoryCollection
from docsession.infra.transport import HeaderTokenTransport
from docsession.sessions import SessionOptions, SessionStore, is_valid_record_id
from docsession.sessions.models import SessionRecord
from docsession.utils.errors import (
    ConfigurationError,
    InvalidModifiedValueError,
    RecordNotFoundError,
    StorageError,
)
from tests.fakes.clock import FakeClock
from tests.fakes.http_helpers import (
    build_request,
    build_response,
    response_cookie,
    response_token,
)

KEYS = [KeyPair(hash_key=b"h" * 32, block_key=b"b" * 32)]
OLD_KEYS = [KeyPair(hash_key=b"o" * 32, block_key=b"p" * 16)]
NAME = "auth"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def record_store(clock: FakeClock) -> DocumentRecordStore:
    return DocumentRecordStore(MemoryCollection(clock=clock.now))


@pytest.fixture
def store(record_store: DocumentRecordStore, clock: FakeClock) -> SessionStore:
    return SessionStore(record_store, KEYS, max_age=60, clock=clock.now)


def _save_new(store: SessionStore, values: dict) -> tuple[str, str]:
    """Salva sessão nova e retorna (id, token)."""
    session = store.new(build_request(), NAME)
    session.values.update(values)
    response = build_response()
    store.save(build_request(), response, session)
    token = response_token(response, NAME)
    assert token
    return session.id, token


class TestConstruction:
    def test_requires_key_pairs(self, record_store: DocumentRecordStore) -> None:
        with pytest.raises(ConfigurationError, match="key pair"):
            SessionStore(record_store, [])

    def test_default_options(self, record_store: DocumentRecordStore) -> None:
        store = SessionStore(record_store, KEYS, max_age=3600)
        assert store.options.path == "/"
        assert store.options.max_age == 3600
        assert all(codec.max_age == 3600 for codec in store.codecs)

    def test_options_are_copied(self, record_store: DocumentRecordStore) -> None:
        options = SessionOptions(path="/app", secure=True)
        store = SessionStore(record_store, KEYS, max_age=120, options=options)

        assert store.options.path == "/app"
        assert store.options.max_age == 120
        assert options.max_age == 0

    def test_ensure_ttl_creates_expiry_index(self) -> None:
        record_store = MagicMock()
        SessionStore(record_store, KEYS, max_age=600, ensure_ttl=True)
        record_store.create_expiry_index.assert_called_once_with(600)

    def test_ensure_ttl_requires_positive_max_age(self) -> None:
        record_store = MagicMock()
        with pytest.raises(ConfigurationError, match="max_age"):
            SessionStore(record_store, KEYS, max_age=0, ensure_ttl=True)
        record_store.create_expiry_index.assert_not_called()

    def test_ensure_ttl_failure_is_fatal(self) -> None:
        collection = MagicMock()
        collection.create_indexes.side_effect = StorageError("no permission")

        with pytest.raises(ConfigurationError):
            SessionStore(DocumentRecordStore(collection), KEYS, max_age=60, ensure_ttl=True)

    def test_without_ensure_ttl_no_index(self) -> None:
        record_store = MagicMock()
        SessionStore(record_store, KEYS, max_age=600)
        record_store.create_expiry_index.assert_not_called()


class TestLookup:
    """Cenários de leitura de sessão."""

    def test_fresh_request_returns_new_empty_session(self, store: SessionStore) -> None:
        session = store.new(build_request(), NAME)

        assert session.is_new is True
        assert session.values == {}
        assert session.id == ""
        assert session.name == NAME

    def test_saved_session_is_loaded_from_token(self, store: SessionStore) -> None:
        record_id, token = _save_new(store, {"user": "alice"})

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is False
        assert session.id == record_id
        assert session.values == {"user": "alice"}

    def test_session_options_are_independent_copies(self, store: SessionStore) -> None:
        session = store.new(build_request(), NAME)
        session.options.max_age = -1

        assert store.options.max_age == 60

    def test_token_for_other_name_is_ignored(self, store: SessionStore) -> None:
        _, token = _save_new(store, {"user": "alice"})

        session = store.new(build_request(cookies={"other": token}), "other")

        assert session.is_new is True
        assert session.values == {}

    def test_tampered_token_gives_new_session(
        self, store: SessionStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        _, token = _save_new(store, {"user": "alice"})
        tampered = token[:-2] + ("AA" if token[-2:] != "AA" else "BB")

        with caplog.at_level(logging.INFO, logger="docsession.sessions.store"):
            session = store.new(build_request(cookies={NAME: tampered}), NAME)

        assert session.is_new is True
        assert session.id == ""
        assert any(record.getMessage() == "session_token_rejected" for record in caplog.records)

    def test_expired_token_gives_new_session(self, store: SessionStore, clock: FakeClock) -> None:
        _, token = _save_new(store, {"user": "alice"})
        clock.advance(61)

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True
        assert session.values == {}

    def test_missing_record_gives_new_session(
        self, store: SessionStore, record_store: DocumentRecordStore
    ) -> None:
        record_id, token = _save_new(store, {"user": "alice"})
        record_store.remove(record_id)

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True
        assert session.id == ""

    def test_invalid_id_in_token_gives_new_session(self, clock: FakeClock) -> None:
        """Token autêntico com id fora do formato não chega ao banco."""
        collection = MagicMock()
        store = SessionStore(
            DocumentRecordStore(collection), KEYS, max_age=60, clock=clock.now
        )
        token = encode_multi(NAME, "../../etc/passwd", store.codecs)

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True
        collection.find_one.assert_not_called()

    def test_storage_error_gives_new_session(
        self, clock: FakeClock, caplog: pytest.LogCaptureFixture
    ) -> None:
        record_store = MagicMock()
        record_store.find.side_effect = StorageError("connection refused")
        store = SessionStore(record_store, KEYS, max_age=60, clock=clock.now)
        token = encode_multi(NAME, "65f1c0ffee0123456789abcd", store.codecs)

        with caplog.at_level(logging.WARNING, logger="docsession.sessions.store"):
            session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True
        assert any(record.getMessage() == "session_load_storage_error" for record in caplog.records)

    def test_corrupted_record_data_gives_new_session(
        self, store: SessionStore, record_store: DocumentRecordStore, clock: FakeClock
    ) -> None:
        record_id, token = _save_new(store, {"user": "alice"})
        record_store.upsert(SessionRecord(id=record_id, data="garbage", modified=clock.now()))

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True
        assert session.values == {}

    def test_non_mapping_record_data_gives_new_session(
        self, store: SessionStore, record_store: DocumentRecordStore, clock: FakeClock
    ) -> None:
        record_id, token = _save_new(store, {"user": "alice"})
        data = encode_multi(NAME, ["not", "a", "dict"], store.payload_codecs)
        record_store.upsert(SessionRecord(id=record_id, data=data, modified=clock.now()))

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True

    def test_new_is_not_memoized(self, store: SessionStore) -> None:
        request = build_request()
        assert store.new(request, NAME) is not store.new(request, NAME)


class TestSave:
    def test_save_persists_record_and_sets_cookie(
        self, store: SessionStore, record_store: DocumentRecordStore, clock: FakeClock
    ) -> None:
        session = store.new(build_request(), NAME)
        session.values["user"] = "alice"
        response = build_response()

        store.save(build_request(), response, session)

        assert is_valid_record_id(session.id)
        record = record_store.find(session.id)
        assert record.modified == clock.now()
        assert decode_multi(NAME, record.data, store.payload_codecs) == {"user": "alice"}

        cookie = response_cookie(response, NAME)
        assert cookie is not None
        assert cookie[NAME]["max-age"] == "60"
        assert decode_multi(NAME, cookie[NAME].value, store.codecs) == session.id

    def test_id_is_stable_across_saves(self, store: SessionStore) -> None:
        session = store.new(build_request(), NAME)
        store.save(build_request(), build_response(), session)
        first_id = session.id

        store.save(build_request(), build_response(), session)

        assert session.id == first_id

    def test_last_write_wins(
        self, store: SessionStore, record_store: DocumentRecordStore
    ) -> None:
        """Segundo save substitui o registro inteiro, sem merge."""
        session = store.new(build_request(), NAME)
        session.values = {"a": 1}
        store.save(build_request(), build_response(), session)

        session.values = {"b": 2}
        store.save(build_request(), build_response(), session)

        record = record_store.find(session.id)
        assert decode_multi(NAME, record.data, store.payload_codecs) == {"b": 2}

    def test_modified_value_is_used_when_datetime(
        self, store: SessionStore, record_store: DocumentRecordStore
    ) -> None:
        modified = datetime(2025, 12, 31, 23, 0, tzinfo=UTC)
        session = store.new(build_request(), NAME)
        session.values["modified"] = modified

        store.save(build_request(), build_response(), session)

        assert record_store.find(session.id).modified == modified

    def test_invalid_modified_value_fails(self, store: SessionStore) -> None:
        session = store.new(build_request(), NAME)
        session.values["modified"] = "yesterday"
        response = build_response()

        with pytest.raises(InvalidModifiedValueError):
            store.save(build_request(), response, session)
        assert response_cookie(response, NAME) is None

    def test_storage_failure_propagates(self, clock: FakeClock) -> None:
        """Save com falha nunca escreve token."""
        record_store = MagicMock()
        record_store.upsert.side_effect = StorageError("timeout")
        store = SessionStore(record_store, KEYS, max_age=60, clock=clock.now)
        session = store.new(build_request(), NAME)
        response = build_response()

        with pytest.raises(StorageError):
            store.save(build_request(), response, session)
        assert response_cookie(response, NAME) is None

    def test_session_save_shortcut(self, store: SessionStore) -> None:
        session = store.new(build_request(), NAME)
        response = build_response()

        session.save(build_request(), response)

        assert response_token(response, NAME)

    def test_large_values_roundtrip(
        self, store: SessionStore, record_store: DocumentRecordStore
    ) -> None:
        """Valores grandes vão para o registro; só o token tem limite de tamanho."""
        values = {"user": "alice", "blob": "x" * 10_000}

        record_id, token = _save_new(store, values)

        assert len(token) <= 4096
        assert len(record_store.find(record_id).data) > 10_000
        session = store.new(build_request(cookies={NAME: token}), NAME)
        assert session.is_new is False
        assert session.values == values

    @pytest.mark.parametrize(
        "value",
        [
            {"__datetime__": "not-a-date"},
            {"__bytes__": "YWJj"},
            {"__dict__": {"__datetime__": "x"}},
        ],
    )
    def test_values_shaped_like_tags_roundtrip(self, store: SessionStore, value: dict) -> None:
        _, token = _save_new(store, {"k": value})

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is False
        assert session.values == {"k": value}


class TestDelete:
    def test_negative_max_age_removes_record_and_clears_cookie(
        self, store: SessionStore, record_store: DocumentRecordStore
    ) -> None:
        record_id, token = _save_new(store, {"user": "alice"})
        session = store.new(build_request(cookies={NAME: token}), NAME)
        session.options.max_age = -1
        response = build_response()

        store.save(build_request(), response, session)

        with pytest.raises(RecordNotFoundError):
            record_store.find(record_id)
        assert response_token(response, NAME) == ""
        assert response_cookie(response, NAME)[NAME]["max-age"] == "0"

    def test_delete_without_id_skips_store(self, clock: FakeClock) -> None:
        record_store = MagicMock()
        store = SessionStore(record_store, KEYS, max_age=60, clock=clock.now)
        session = store.new(build_request(), NAME)
        session.options.max_age = -1
        response = build_response()

        store.save(build_request(), response, session)

        record_store.remove.assert_not_called()
        record_store.upsert.assert_not_called()
        assert response_token(response, NAME) == ""

    def test_remove_failure_propagates(self, clock: FakeClock) -> None:
        record_store = MagicMock()
        record_store.remove.side_effect = StorageError("down")
        store = SessionStore(record_store, KEYS, max_age=60, clock=clock.now)
        session = store.new(build_request(), NAME)
        session.id = "65f1c0ffee0123456789abcd"
        session.options.max_age = -1

        with pytest.raises(StorageError):
            store.save(build_request(), build_response(), session)


class TestExpiryAndMaxAge:
    def test_record_expires_with_ttl_index(self, clock: FakeClock) -> None:
        record_store = DocumentRecordStore(MemoryCollection(clock=clock.now))
        store = SessionStore(record_store, KEYS, max_age=60, ensure_ttl=True, clock=clock.now)
        record_id, _ = _save_new(store, {"user": "alice"})

        clock.advance(61)

        with pytest.raises(RecordNotFoundError):
            record_store.find(record_id)

    def test_set_max_age_updates_codecs_and_options(self, store: SessionStore) -> None:
        store.set_max_age(10)

        assert store.options.max_age == 10
        assert all(codec.max_age == 10 for codec in store.codecs)
        assert all(codec.max_age == 10 for codec in store.payload_codecs)

    def test_set_max_age_applies_to_existing_tokens(
        self, store: SessionStore, clock: FakeClock
    ) -> None:
        _, token = _save_new(store, {"user": "alice"})
        store.set_max_age(10)
        clock.advance(11)

        session = store.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True

    def test_set_max_age_does_not_change_existing_sessions(self, store: SessionStore) -> None:
        session = store.new(build_request(), NAME)
        store.set_max_age(10)
        assert session.options.max_age == 60


class TestKeyRotation:
    def test_old_token_loads_after_rotation(
        self, record_store: DocumentRecordStore, clock: FakeClock
    ) -> None:
        old_store = SessionStore(record_store, OLD_KEYS, max_age=60, clock=clock.now)
        record_id, token = _save_new(old_store, {"user": "alice"})

        rotated = SessionStore(record_store, KEYS + OLD_KEYS, max_age=60, clock=clock.now)
        session = rotated.new(build_request(cookies={NAME: token}), NAME)

        assert session.id == record_id
        assert session.values == {"user": "alice"}

        response = build_response()
        rotated.save(build_request(), response, session)
        new_token = response_token(response, NAME)
        assert decode_multi(NAME, new_token, rotated.codecs[:1]) == record_id

    def test_removed_key_invalidates_tokens(
        self, record_store: DocumentRecordStore, clock: FakeClock
    ) -> None:
        old_store = SessionStore(record_store, OLD_KEYS, max_age=60, clock=clock.now)
        _, token = _save_new(old_store, {"user": "alice"})

        current = SessionStore(record_store, KEYS, max_age=60, clock=clock.now)
        session = current.new(build_request(cookies={NAME: token}), NAME)

        assert session.is_new is True


class TestHeaderTransport:
    def test_roundtrip_via_header(self, record_store: DocumentRecordStore, clock: FakeClock) -> None:
        store = SessionStore(
            record_store, KEYS, max_age=60, transport=HeaderTokenTransport(), clock=clock.now
        )
        session = store.new(build_request(), NAME)
        session.values["user"] = "bob"
        response = build_response()
        store.save(build_request(), response, session)

        token = response.headers["x-session-auth"]
        loaded = store.new(build_request(headers={"X-Session-auth": token}), NAME)

        assert loaded.values == {"user": "bob"}
        assert response_cookie(response, NAME) is None


class TestAsyncApi:
    @pytest.mark.asyncio
    async def test_get_and_save_async(self, store: SessionStore) -> None:
        request = build_request()
        session = await store.get_async(request, NAME)
        session.values["user"] = "carol"
        response = build_response()

        await store.save_async(request, response, session)

        token = response_token(response, NAME)
        loaded = await store.new_async(build_request(cookies={NAME: token}), NAME)
        assert loaded.values == {"user": "carol"}
        assert await store.get_async(request, NAME) is session
