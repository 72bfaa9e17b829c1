"""Airtable connection and query helpers for the entry-fee tables.

One GET per call, no retries, no pagination: whatever page Airtable returns
is handed back as-is. Error payloads look like ``{"error": {"type", "message"}}``
(occasionally just ``{"error": "NOT_FOUND"}``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping
from urllib.parse import quote

import requests

from trail_costs.config import (
    AIRTABLE_API_URL,
    AIRTABLE_BASE_ID,
    AIRTABLE_TIMEOUT,
    AIRTABLE_TOKEN,
)

logger = logging.getLogger(__name__)

ParamValue = str | int | float | bool | None

_MAX_MESSAGE_LEN = 500


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class AirtableError(Exception):
    """Base class for every failure raised by this module."""


class RemoteApiError(AirtableError):
    """Airtable reported a failure, or the transport did."""

    def __init__(self, status: int | None, error_type: str, message: str):
        self.status = status
        self.error_type = error_type
        self.message = message
        if status is None:
            super().__init__(f"Airtable API error: {error_type}: {message}")
        else:
            super().__init__(f"Airtable API error ({status}) {error_type}: {message}")


class MalformedResponseError(AirtableError):
    """The response body does not have the shape Airtable documents."""


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Record:
    """One Airtable row. Absent fields were never set."""
    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    created_time: str = ""

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


def _to_record(raw: Any) -> Record:
    if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
        raise MalformedResponseError("Airtable record missing string id")
    fields = raw.get("fields") or {}
    if not isinstance(fields, dict):
        raise MalformedResponseError(f"Airtable record {raw['id']} has non-object fields")
    return Record(id=raw["id"], fields=dict(fields), created_time=raw.get("createdTime", ""))


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

def table_url(table: str) -> str:
    """Return the list-records endpoint for a table."""
    return f"{AIRTABLE_API_URL.rstrip('/')}/{AIRTABLE_BASE_ID}/{quote(table, safe='')}"


def encode_params(params: Mapping[str, ParamValue] | None) -> dict[str, str]:
    """Stringify query parameters, dropping None entries."""
    encoded = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded


def query_params(view: str | None = None, filter_by_formula: str | None = None,
                 sort: Iterable[tuple[str, str]] = (), page_size: int | None = None,
                 offset: str | None = None) -> dict[str, ParamValue]:
    """Build a list-records parameter mapping.

    ``sort`` is a sequence of ``(field, direction)`` pairs, expanded to
    Airtable's ``sort[i][field]`` / ``sort[i][direction]`` keys.
    """
    params: dict[str, ParamValue] = {
        "view": view,
        "filterByFormula": filter_by_formula,
    }
    for i, (field_name, direction) in enumerate(sort):
        if direction not in ("asc", "desc"):
            raise ValueError(f"Sort direction must be 'asc' or 'desc', got {direction!r}")
        params[f"sort[{i}][field]"] = field_name
        params[f"sort[{i}][direction]"] = direction
    params["pageSize"] = page_size
    params["offset"] = offset
    return params


def _get(table: str, params: Mapping[str, ParamValue] | None) -> requests.Response:
    return requests.get(
        table_url(table),
        params=encode_params(params),
        headers={
            "Authorization": f"Bearer {AIRTABLE_TOKEN}",
            "Cache-Control": "no-cache",
        },
        timeout=AIRTABLE_TIMEOUT,
    )


def _parse_body(resp: requests.Response) -> Any:
    """Decode the JSON body, substituting {} when it is not JSON."""
    try:
        return resp.json()
    except ValueError:
        return {}


def _error_parts(error: Any, default_type: str) -> tuple[str, str | None]:
    """Pull (type, message) out of an Airtable error member."""
    if isinstance(error, dict):
        return str(error.get("type") or default_type), error.get("message")
    if isinstance(error, str) and error:
        return error, error
    return default_type, None


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def fetch_records(table: str, params: Mapping[str, ParamValue] | None = None) -> list[Record]:
    """Fetch a single page of records from a table.

    Raises:
        RemoteApiError: non-2xx status, an embedded error payload, or a
            transport failure (``status`` is None for the latter).
        MalformedResponseError: the body has no ``records`` list.
    """
    logger.debug("Airtable fetch %s params=%s", table, encode_params(params))
    try:
        resp = _get(table, params)
    except requests.RequestException as e:
        logger.warning("Airtable request for %s failed: %s", table, e)
        raise RemoteApiError(None, "NETWORK_ERROR", str(e)) from e

    data = _parse_body(resp)

    if not resp.ok:
        error_type, message = _error_parts(
            data.get("error") if isinstance(data, dict) else None, "HTTP_ERROR",
        )
        if message is None:
            message = resp.text.strip()[:_MAX_MESSAGE_LEN] or json.dumps(data)
        logger.warning("Airtable %s returned %s %s", table, resp.status_code, error_type)
        raise RemoteApiError(resp.status_code, error_type, message)

    embedded = data.get("error") if isinstance(data, dict) else None
    # an empty error object still fails the call
    if isinstance(embedded, (dict, list)) or embedded:
        error_type, message = _error_parts(embedded, "UNKNOWN_ERROR")
        logger.warning("Airtable %s embedded error %s", table, error_type)
        raise RemoteApiError(resp.status_code, error_type, message or "")

    records = data.get("records") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise MalformedResponseError("Airtable response missing records array")

    return [_to_record(r) for r in records]


def debug_query(table: str, params: Mapping[str, ParamValue] | None = None) -> tuple[int, str, Any]:
    """Issue a request and return (status, url, parsed body) without judging it."""
    resp = _get(table, params)
    return resp.status_code, resp.url, _parse_body(resp)
