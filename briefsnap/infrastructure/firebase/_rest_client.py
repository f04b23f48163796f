"""Firestore REST v1 client over httpx.

Covers what the BriefSnap repositories need: point reads, merge writes,
field deletes, atomic increments, server-ID inserts and structured queries
with AND filters, multi-field ordering and start_after cursors. Service
account tokens come from google-auth and are refreshed off the event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import httpx

from briefsnap.infrastructure.firebase._rest_encoding import (
    Reference,
    decode_document,
    encode_document,
    encode_value,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"


def _get_credentials(key_dict: dict):
    """Service-account credentials scoped to Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _refresh_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _doc_id(name: str) -> str:
    return name.rsplit("/", 1)[-1] if name else ""


def _snapshot(document: dict) -> DocumentSnapshot:
    name = document.get("name", "")
    return DocumentSnapshot(_doc_id(name), decode_document(document.get("fields")), name)


class DocumentSnapshot:
    """A read document: id, decoded fields and full resource name."""

    def __init__(self, id_: str, data: dict, name: str = "") -> None:
        self.id = id_
        self.name = name
        self._data = data

    def to_dict(self) -> dict:
        return self._data


class DocumentReference:
    def __init__(self, client: FirestoreRESTClient, path: str) -> None:
        self._client = client
        self.path = path

    @property
    def id(self) -> str:
        return _doc_id(self.path)

    async def get(self) -> DocumentSnapshot | None:
        """The document, or None if it does not exist."""
        out = await self._client.call("GET", self.path)
        return _snapshot(out) if out else None

    async def set(self, data: dict[str, Any], *, merge: bool = False) -> None:
        """Write the document.

        merge=True writes only the given top-level fields and keeps the rest.
        """
        mask = [("updateMask.fieldPaths", field) for field in data] if merge else None
        await self._client.call("PATCH", self.path, body=encode_document(data), params=mask)

    async def delete_fields(self, *fields: str) -> None:
        # Masked fields missing from the body are removed.
        mask = [("updateMask.fieldPaths", field) for field in fields]
        await self._client.call("PATCH", self.path, body={"fields": {}}, params=mask)

    async def increment(self, field: str, amount: int = 1) -> None:
        """Atomically add amount to a numeric field; a missing field starts at amount."""
        transform = {
            "document": self.path,
            "fieldTransforms": [{"fieldPath": field, "increment": encode_value(amount)}],
        }
        await self._client.call(
            "POST", f"{self._client.prefix}:commit", body={"writes": [{"transform": transform}]}
        )


_OPERATORS: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "array-contains": "ARRAY_CONTAINS",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}


class _Query:
    """Immutable structured query on one collection; filters are ANDed."""

    def __init__(
        self,
        client: FirestoreRESTClient,
        parent: str,
        collection_id: str,
        filters: tuple[dict, ...] = (),
        orders: tuple[tuple[str, str], ...] = (),
        cursor: tuple[Any, ...] | None = None,
        limit: int = 100,
    ) -> None:
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters = filters
        self._orders = orders
        self._cursor = cursor
        self._limit = limit

    def _with(self, **changes: Any) -> _Query:
        state = {
            "filters": self._filters,
            "orders": self._orders,
            "cursor": self._cursor,
            "limit": self._limit,
            **changes,
        }
        return _Query(self._client, self._parent, self._collection_id, **state)

    def where(self, field: str, op: str, value: Any) -> _Query:
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {op!r}")
        condition = {
            "fieldFilter": {
                "field": {"fieldPath": field},
                "op": _OPERATORS[op],
                "value": encode_value(value),
            }
        }
        return self._with(filters=(*self._filters, condition))

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        direction = direction.upper()
        if direction not in ("ASCENDING", "DESCENDING"):
            raise ValueError(f"Unsupported order direction: {direction!r}")
        return self._with(orders=(*self._orders, (field, direction)))

    def start_after(self, *values: Any) -> _Query:
        """Resume after the row whose order_by values equal `values`."""
        if not self._orders or len(values) > len(self._orders):
            raise ValueError("start_after needs one order_by per cursor value")
        return self._with(cursor=values)

    def limit(self, n: int) -> _Query:
        return self._with(limit=n)

    def to_structured_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {"from": [{"collectionId": self._collection_id}]}
        if len(self._filters) == 1:
            query["where"] = self._filters[0]
        elif self._filters:
            query["where"] = {"compositeFilter": {"op": "AND", "filters": list(self._filters)}}
        if self._orders:
            query["orderBy"] = [
                {"field": {"fieldPath": field}, "direction": direction}
                for field, direction in self._orders
            ]
        if self._cursor is not None:
            query["startAt"] = {"values": [encode_value(v) for v in self._cursor], "before": False}
        if self._limit:
            query["limit"] = self._limit
        return query

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        rows = await self._client.call(
            "POST",
            f"{self._parent}:runQuery",
            body={"structuredQuery": self.to_structured_query()},
        )
        # runQuery answers with a list; rows without "document" only carry read times.
        for row in rows if isinstance(rows, list) else []:
            if "document" in row:
                yield _snapshot(row["document"])


class CollectionReference:
    def __init__(self, client: FirestoreRESTClient, path: str) -> None:
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    def reference(self, document_id: str) -> Reference:
        """Reference value for a document here, used as a cursor tie-breaker."""
        return Reference(f"{self._path}/{document_id}")

    async def add(self, data: dict[str, Any]) -> DocumentReference:
        """Insert with a server-assigned ID."""
        out = await self._client.call("POST", self._path, body=encode_document(data))
        name = (out or {}).get("name", "")
        if not name:
            raise ValueError("createDocument response carried no document name")
        return DocumentReference(self._client, name)

    def _query(self) -> _Query:
        parent, collection_id = self._path.rsplit("/", 1)
        return _Query(self._client, parent, collection_id)

    def where(self, field: str, op: str, value: Any) -> _Query:
        return self._query().where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        return self._query().order_by(field, direction)


class FirestoreRESTClient:
    """Entry point: collection() references plus the authenticated call().

    credentials=None sends unauthenticated requests (emulator and tests).
    """

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = _BASE,
    ) -> None:
        self.project_id = project_id
        self.prefix = f"projects/{project_id}/databases/(default)/documents"
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    def url(self, resource: str) -> str:
        return f"{self._base_url}/{resource}"

    async def get_token(self) -> str | None:
        if self._credentials is None:
            return None
        return await asyncio.to_thread(_refresh_token, self._credentials)

    async def call(
        self,
        method: str,
        resource: str,
        *,
        body: dict | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> Any:
        """Send one REST call. 404 gives None; other errors raise httpx.HTTPStatusError."""
        headers = {"Content-Type": "application/json"}
        token = await self.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        response = await self._http.request(
            method, self.url(resource), headers=headers, json=body, params=params
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json() if response.content else {}

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self.prefix}/{collection_id}")
