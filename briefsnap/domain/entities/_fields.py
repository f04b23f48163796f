"""Field readers for the parse/validate step at the document boundary.

Each reader raises DecodeError naming the record kind, document id and
offending field, so malformed documents never leak undefined fields.
"""

from datetime import datetime
from typing import Any

from briefsnap.domain.exceptions import DecodeError
from briefsnap.shared.utils.datetime import ensure_utc, parse_iso_utc


def require_str(kind: str, doc_id: str | None, data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise DecodeError(kind, doc_id, f"missing or empty '{field}'")
    return value


def optional_str(
    kind: str, doc_id: str | None, data: dict[str, Any], field: str, default: str = ""
) -> str:
    value = data.get(field)
    if value is None:
        return default
    if not isinstance(value, str):
        raise DecodeError(kind, doc_id, f"'{field}' must be a string")
    return value


def optional_int(
    kind: str, doc_id: str | None, data: dict[str, Any], field: str, default: int = 0
) -> int:
    value = data.get(field)
    if value is None:
        return default
    # bool is an int subclass; a boolean count is malformed
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(kind, doc_id, f"'{field}' must be a number")
    return int(value)


def optional_bool(
    kind: str, doc_id: str | None, data: dict[str, Any], field: str, default: bool
) -> bool:
    value = data.get(field)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise DecodeError(kind, doc_id, f"'{field}' must be a boolean")
    return value


def optional_str_list(
    kind: str, doc_id: str | None, data: dict[str, Any], field: str
) -> list[str]:
    value = data.get(field)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DecodeError(kind, doc_id, f"'{field}' must be a list of strings")
    return list(value)


def optional_timestamp(
    kind: str, doc_id: str | None, data: dict[str, Any], field: str
) -> datetime | None:
    """Accept a datetime (Firestore timestampValue) or an ISO-8601 string."""
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        try:
            return parse_iso_utc(value)
        except ValueError as e:
            raise DecodeError(kind, doc_id, f"'{field}' is not an ISO-8601 timestamp") from e
    raise DecodeError(kind, doc_id, f"'{field}' must be a timestamp")

