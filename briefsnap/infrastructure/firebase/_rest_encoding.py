"""Firestore REST value codec.

Documents travel as {"fields": {name: Value}} where each Value is a
one-key object naming its type (stringValue, integerValue, ...). Articles
carry timestamps, view counts, string arrays and the occasional nested map
(calendar tokens), so the full value set is supported.
"""

import base64
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from briefsnap.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class Reference:
    """Full document resource name, sent as a referenceValue.

    Query cursors use it for the `__name__` tie-breaker.
    """

    name: str


# Firestore returns up to nanosecond precision; datetime holds microseconds.
_FRACTION = re.compile(r"\.(\d{6})\d+")


def parse_timestamp(raw: str) -> datetime:
    return ensure_utc(datetime.fromisoformat(_FRACTION.sub(r".\1", raw).replace("Z", "+00:00")))


def format_timestamp(value: datetime) -> str:
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def encode_value(value: Any) -> dict:
    """Wrap one Python value in its Firestore Value object."""
    # bool before int: bool is an int subclass.
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, Reference):
        return {"referenceValue": value.name}
    if isinstance(value, bytes):
        return {"bytesValue": base64.standard_b64encode(value).decode("ascii")}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    if isinstance(value, dict):
        return {"mapValue": encode_document(value)}
    raise TypeError(f"Cannot store {type(value).__name__} in Firestore")


def encode_document(data: dict[str, Any]) -> dict:
    return {"fields": {name: encode_value(value) for name, value in data.items()}}


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "nullValue": lambda _: None,
    "booleanValue": bool,
    "integerValue": int,
    "doubleValue": float,
    "stringValue": str,
    "timestampValue": parse_timestamp,
    "referenceValue": Reference,
    "bytesValue": base64.standard_b64decode,
    "arrayValue": lambda raw: [decode_value(item) for item in raw.get("values") or []],
    "mapValue": lambda raw: decode_document(raw.get("fields")),
    # Only appear in data written by other clients; kept as plain dicts.
    "geoPointValue": dict,
}


def decode_value(obj: dict) -> Any:
    """Unwrap a Firestore Value object. Unknown types decode to None."""
    for kind, raw in obj.items():
        decoder = _DECODERS.get(kind)
        if decoder is not None:
            return decoder(raw)
    return None


def decode_document(fields: dict | None) -> dict:
    """Turn a Document.fields map into a plain dict ({} for a missing map)."""
    return {name: decode_value(value) for name, value in (fields or {}).items()}
