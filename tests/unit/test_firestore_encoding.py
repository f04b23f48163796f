"""Firestore REST value codec."""

from datetime import UTC, datetime

import pytest

from briefsnap.infrastructure.firebase._rest_encoding import (
    Reference,
    decode_document,
    decode_value,
    encode_document,
    encode_value,
)


def test_bool_is_not_encoded_as_integer() -> None:
    assert encode_value(True) == {"booleanValue": True}
    assert encode_value(3) == {"integerValue": "3"}


def test_article_document_encoding() -> None:
    published = datetime(2025, 3, 5, 12, 0, tzinfo=UTC)
    encoded = encode_document(
        {"slug": "abc", "views": 7, "tags": ["a", "b"], "timestamp": published}
    )["fields"]

    assert encoded["slug"] == {"stringValue": "abc"}
    assert encoded["views"] == {"integerValue": "7"}
    assert encoded["tags"] == {
        "arrayValue": {"values": [{"stringValue": "a"}, {"stringValue": "b"}]}
    }
    assert encoded["timestamp"] == {"timestampValue": "2025-03-05T12:00:00.000000Z"}


def test_nanosecond_timestamp_is_truncated() -> None:
    value = decode_value({"timestampValue": "2025-03-05T12:00:00.123456789Z"})
    assert value == datetime(2025, 3, 5, 12, 0, 0, 123456, tzinfo=UTC)


def test_nested_map_and_reference_decode() -> None:
    doc = decode_document(
        {
            "token": {"mapValue": {"fields": {"access_token": {"stringValue": "t"}}}},
            "ref": {"referenceValue": "projects/p/databases/(default)/documents/a/1"},
            "empty": {"arrayValue": {}},
            "unknown": {"someFutureValue": 1},
        }
    )

    assert doc["token"] == {"access_token": "t"}
    assert doc["ref"] == Reference("projects/p/databases/(default)/documents/a/1")
    assert doc["empty"] == []
    assert doc["unknown"] is None


def test_missing_fields_decode_to_empty_dict() -> None:
    assert decode_document(None) == {}


def test_unsupported_type_raises() -> None:
    with pytest.raises(TypeError):
        encode_value(object())
