"""Shared pytest fixtures for trail-costs."""

import json
import pytest
from pathlib import Path


BASE_DIR = Path(__file__).parent
FIXTURES_DIR = BASE_DIR / "trail_costs" / "tests" / "fixtures"


@pytest.fixture
def entry_fees_payload():
    """A list-records response from the Entry Fees table (three rows, one page)."""
    with open(FIXTURES_DIR / "entry_fees.json", encoding="utf-8") as f:
        return json.load(f)
