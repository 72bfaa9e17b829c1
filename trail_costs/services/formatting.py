"""Display helpers — turn raw Airtable field values into page-ready strings.

All functions are pure. Missing or non-positive numbers are "unknown" and
render as an em dash, never as zero.
"""

from __future__ import annotations

import json
import math
import re
from datetime import datetime
from functools import lru_cache
from typing import Any

from trail_costs.config import DATA_DIR, FLAG_URL_TEMPLATE

PLACEHOLDER = "—"

COUNTRY_CODES_PATH = DATA_DIR / "country_codes.json"

# Price-band rules, checked top to bottom; the first hit wins.
# Each rule: (range, substrings, substrings that veto the rule)
BAND_RULES = (
    ("0–1", ("less than 1", "under 1", "0-1", "< 1", "<1"), ()),
    ("1–2", ("1-2", "1 to 2"), ()),
    ("1–2", ("mid",), ("3",)),
    ("2–3", ("2-3", "2 to 3"), ()),
    ("3+", ("3+", "3 to", "more than 3", "> 3", ">3", "expensive", "premium", "high"), ()),
    ("0–1", ("cheap", "low", "budget"), ()),
    ("1–2", ("mid", "average"), ()),
)
BAND_SYMBOLS = {"$": "0–1", "$$": "1–2", "$$$": "3+"}
BAND_BUCKETS = {
    "0–1": "cheap",
    "1–2": "mid",
    "2–3": "expensive",
    "3+": "expensive",
}

_NAME_DISTANCE_SEP = re.compile(r"\s[–—-]\s")


def as_text(value: Any) -> str:
    """Collapse a string or list of strings into one comma-separated string."""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value if v)
    if value is None:
        return ""
    return str(value)


def join_location(*parts: str) -> str:
    """Join non-empty location parts with a middle dot."""
    return " · ".join(p for p in parts if p)


# ---------------------------------------------------------------------------
# Countries
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def country_codes() -> dict[str, str]:
    """Country name (lowercase) → ISO 3166 alpha-2 code, from data/country_codes.json."""
    return json.loads(COUNTRY_CODES_PATH.read_text(encoding="utf-8"))


def country_to_code(country: str | None) -> str | None:
    """Case-insensitive country lookup. Unknown countries have no code."""
    if not country:
        return None
    return country_codes().get(country.strip().lower())


def flag_url(code: str | None) -> str | None:
    if not code:
        return None
    return FLAG_URL_TEMPLATE.format(code=code)


# ---------------------------------------------------------------------------
# Price bands
# ---------------------------------------------------------------------------

def band_range(band: Any) -> str | None:
    """Normalized €/km range for a band label, or None when no rule matches."""
    if not band:
        return None
    label = str(band).strip().lower()
    if label in BAND_SYMBOLS:
        return BAND_SYMBOLS[label]
    for range_label, needles, vetoes in BAND_RULES:
        if any(n in label for n in needles) and not any(v in label for v in vetoes):
            return range_label
    return None


def format_band(band: Any) -> str:
    """Band label as a range string; unmatched labels pass through unchanged."""
    if not band:
        return PLACEHOLDER
    return band_range(band) or str(band)


def band_bucket(band: Any) -> str:
    """One of cheap, mid, expensive, unknown."""
    return BAND_BUCKETS.get(band_range(band), "unknown")


def band_css_class(band: Any) -> str:
    return f"band-{band_bucket(band)}"


# ---------------------------------------------------------------------------
# Numbers and dates
# ---------------------------------------------------------------------------

def positive_number(value: Any) -> float | None:
    """Return value if it is a finite number above zero, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def format_money(amount: float | None, currency: str | None = None) -> str:
    """Whole-unit amount with thousands separators, e.g. '1,250 EUR'."""
    if amount is None or not math.isfinite(amount):
        return PLACEHOLDER
    rounded = math.floor(amount + 0.5)
    return f"{rounded:,} {currency or ''}".strip()


def format_eur_per_km(rate: float | None) -> str:
    if rate is None or not math.isfinite(rate):
        return PLACEHOLDER
    return f"€{rate:.2f}"


def _parse_iso_date(iso: Any):
    if not iso or not isinstance(iso, str):
        return None
    try:
        return datetime.fromisoformat(iso.strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date_long(iso: Any) -> str:
    """'2026-06-12' → 'June 12, 2026'. Unparseable input gives ''."""
    d = _parse_iso_date(iso)
    if d is None:
        return ""
    return f"{d:%B} {d.day}, {d.year}"


def format_date_short(iso: Any) -> str:
    """'2026-06-12' → 'June 12'."""
    d = _parse_iso_date(iso)
    if d is None:
        return ""
    return f"{d:%B} {d.day}"


# ---------------------------------------------------------------------------
# Names and attachments
# ---------------------------------------------------------------------------

def extract_name_and_distance(text: str) -> tuple[str, str]:
    """Split 'Beara Way Ultra (IMRA) – 161 km' into name and distance.

    The last dash-separated part is the distance. Without a spaced dash the
    whole string is the name.
    """
    parts = _NAME_DISTANCE_SEP.split(text)
    if len(parts) > 1:
        return " – ".join(parts[:-1]), parts[-1]
    return text, ""


def pick_first_url(attachments: Any) -> str | None:
    """URL of the first attachment, if it has one."""
    if not isinstance(attachments, list) or not attachments:
        return None
    first = attachments[0]
    url = first.get("url") if isinstance(first, dict) else None
    return url if isinstance(url, str) and url else None
