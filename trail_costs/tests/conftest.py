"""Shared fixtures for Trail Costs tests.

Provides:
- fake_response: builds a requests.Response stand-in for the Airtable client
- make_record: Record factory
- app / client: the FastAPI app with Airtable credentials faked
"""

import json
import os
from unittest.mock import MagicMock

import pytest

# Set env vars before any trail_costs imports
os.environ.setdefault("AIRTABLE_TOKEN", "patTESTTOKEN")
os.environ.setdefault("AIRTABLE_BASE_ID", "appTESTBASE")


def fake_response(status=200, body=None, text=None, url="https://api.airtable.com/v0/appTESTBASE/Entry%20Fees"):
    """Mimics the parts of requests.Response the client reads."""
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.url = url
    if text is None:
        text = json.dumps(body) if body is not None else ""
    resp.text = text
    if body is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = body
    return resp


def make_record(record_id="rec0001", **fields):
    from trail_costs.airtable_client import Record
    return Record(id=record_id, fields=fields)


@pytest.fixture
def app():
    from trail_costs.app import create_app
    return create_app()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c


@pytest.fixture
def lenient_client(app):
    """Client that turns unhandled exceptions into 500 responses."""
    from fastapi.testclient import TestClient

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
