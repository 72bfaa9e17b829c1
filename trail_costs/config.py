"""Trail Costs configuration — Airtable names plus environment settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(REPO_ROOT / ".env")

# Jinja2 templates, static assets and lookup tables for the web UI
WEB_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"
DATA_DIR = Path(__file__).resolve().parent / "data"

# Airtable
AIRTABLE_TOKEN = os.environ.get("AIRTABLE_TOKEN", "")
AIRTABLE_BASE_ID = os.environ.get("AIRTABLE_BASE_ID", "")
AIRTABLE_API_URL = os.environ.get("AIRTABLE_API_URL", "https://api.airtable.com/v0")
AIRTABLE_TIMEOUT = float(os.environ.get("AIRTABLE_TIMEOUT", "30"))

# Tables
ENTRY_FEES_TABLE = "Entry Fees"
RACE_EVENTS_TABLE = "Race Events"

# Views
ENTRY_FEES_PUBLIC_VIEW = "entry_fees_public"
RACE_EVENTS_PUBLIC_VIEW = "race_events_public"
HOMEPAGE_FEATURED_VIEW = "homepage_featured"
DEBUG_ENTRY_FEES_VIEW = "🌍 Entry Fees – Public"

# Explore paths: URL key → view name
EXPLORE_VIEWS = {
    "1-1.5": "explore_value_1_1p5",
    "1.5-2": "explore_value_1p5_2",
    "2-2.5": "explore_value_2_2p5",
    "2.5-3": "explore_value_2p5_3",
    "3-up": "explore_value_3_up",
}

# Queries
COST_SORT_FIELD = "AUTO €/km"
COST_INDEX_PAGE_SIZE = int(os.environ.get("COST_INDEX_PAGE_SIZE", "100"))
RACE_DETAIL_PAGE_SIZE = 50
DEBUG_PAGE_SIZE = 3

# Flags are served straight from the CDN by the browser
FLAG_URL_TEMPLATE = "https://flagcdn.com/w320/{code}.png"

SITE_NAME = "Discover Trail Races"

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "info").lower()


def require_airtable_credentials() -> None:
    """Raise RuntimeError unless both Airtable credentials are set."""
    missing = [
        name for name, value in (
            ("AIRTABLE_TOKEN", AIRTABLE_TOKEN),
            ("AIRTABLE_BASE_ID", AIRTABLE_BASE_ID),
        )
        if not value
    ]
    if missing:
        raise RuntimeError(f"{' and '.join(missing)} must be set")
