"""Connection codecs registered on every pooled connection."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest

from core import db


class RecordingConnection:
    def __init__(self) -> None:
        self.codecs: dict[str, dict] = {}

    async def set_type_codec(self, typename: str, **kwargs) -> None:
        self.codecs[typename] = kwargs


@pytest.fixture
async def codecs() -> dict[str, dict]:
    conn = RecordingConnection()
    await db._init_connection(conn)
    return conn.codecs


class TestRegistration:
    async def test_temporal_and_json_types_use_text_codecs(self, codecs: dict[str, dict]) -> None:
        assert set(codecs) == {"timestamp", "timestamptz", "date", "json", "jsonb"}
        assert all(c["format"] == "text" for c in codecs.values())
        assert all(c["schema"] == "pg_catalog" for c in codecs.values())

    async def test_iso_string_from_a_request_is_sent_unchanged(self, codecs: dict[str, dict]) -> None:
        encode = codecs["timestamptz"]["encoder"]
        assert encode("2024-05-01T00:00:00Z") == "2024-05-01T00:00:00Z"

    async def test_jsonb_reads_back_as_objects(self, codecs: dict[str, dict]) -> None:
        decode = codecs["jsonb"]["decoder"]
        assert decode('{"tags": ["a", "b"]}') == {"tags": ["a", "b"]}


class TestTemporal:
    def test_server_stamp_is_encoded_as_iso_text(self) -> None:
        stamp = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        assert db.encode_temporal(stamp) == "2024-05-01T12:30:00+00:00"
        assert db.encode_temporal(date(2024, 5, 1)) == "2024-05-01"

    def test_decode_timestamp(self) -> None:
        value = db.decode_timestamp("2024-05-01 12:30:00+00:00")
        assert value == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("text", ["infinity", "-infinity"])
    def test_unparseable_timestamps_stay_text(self, text: str) -> None:
        assert db.decode_timestamp(text) == text
        assert db.decode_date(text) == text

    def test_decode_date(self) -> None:
        assert db.decode_date("2024-05-01") == date(2024, 5, 1)


class TestJson:
    def test_serialized_text_is_not_encoded_twice(self) -> None:
        text = json.dumps({"tags": ["a"]})
        assert db.encode_json(text) == text

    def test_lists_and_numbers_are_serialized(self) -> None:
        assert json.loads(db.encode_json([{"a": 1}, 2])) == [{"a": 1}, 2]
        assert db.encode_json(3) == "3"
