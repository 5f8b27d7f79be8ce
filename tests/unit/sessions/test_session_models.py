"""Testes dos modelos de sessão."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from docsession.sessions import Session, SessionOptions, SessionRecord
from docsession.utils.errors import SessionIdImmutableError


class TestSessionOptions:
    def test_defaults(self) -> None:
        options = SessionOptions()
        assert options.path == "/"
        assert options.domain == ""
        assert options.max_age == 0
        assert options.same_site == "lax"

    def test_copy_is_independent(self) -> None:
        options = SessionOptions(max_age=60)
        copied = options.copy()
        copied.max_age = -1

        assert options.max_age == 60
        assert copied == SessionOptions(max_age=-1)


class TestSession:
    def test_new_session_state(self) -> None:
        session = Session(MagicMock(), "auth")

        assert session.is_new is True
        assert session.values == {}
        assert session.id == ""

    def test_id_can_be_set_once(self) -> None:
        session = Session(MagicMock(), "auth")
        session.id = "65f1c0ffee0123456789abcd"

        # Mesmo valor é aceito
        session.id = "65f1c0ffee0123456789abcd"

        with pytest.raises(SessionIdImmutableError):
            session.id = "65f1c0ffee0123456789abce"

    def test_save_delegates_to_store(self) -> None:
        store = MagicMock()
        session = Session(store, "auth")
        request, response = object(), object()

        session.save(request, response)

        store.save.assert_called_once_with(request, response, session)

    def test_repr_hides_values(self) -> None:
        session = Session(MagicMock(), "auth")
        session.values["password"] = "hunter2"
        assert "hunter2" not in repr(session)


class TestSessionRecord:
    def test_document_roundtrip(self) -> None:
        modified = datetime(2026, 1, 1, tzinfo=UTC)
        record = SessionRecord(id="65f1c0ffee0123456789abcd", data="payload", modified=modified)

        document = record.to_document()

        assert document == {"_id": record.id, "data": "payload", "modified": modified}
        assert SessionRecord.from_document(document) == record

    def test_missing_data_defaults_to_empty(self) -> None:
        modified = datetime(2026, 1, 1, tzinfo=UTC)
        record = SessionRecord.from_document({"_id": "abc", "modified": modified})
        assert record.data == ""
