"""Entry-fee queries and their page projections.

Each page render fetches fresh rows and projects them into frozen
dataclasses holding display-ready strings. Nothing is cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from trail_costs import airtable_client as airtable
from trail_costs.airtable_client import Record
from trail_costs.config import (
    COST_INDEX_PAGE_SIZE,
    COST_SORT_FIELD,
    ENTRY_FEES_PUBLIC_VIEW,
    ENTRY_FEES_TABLE,
    RACE_DETAIL_PAGE_SIZE,
    SITE_NAME,
)
from trail_costs.services.formatting import (
    PLACEHOLDER,
    as_text,
    band_css_class,
    country_to_code,
    extract_name_and_distance,
    flag_url,
    format_band,
    format_date_long,
    format_date_short,
    format_eur_per_km,
    format_money,
    join_location,
    pick_first_url,
    positive_number,
)

logger = logging.getLogger(__name__)

# Entry Fees columns
F_ID = "ID"
F_RACE_EVENT = "Race Event"
F_COUNTRY = "Country (from Race)"
F_REGION = "Region (from Race)"
F_DISTANCE_KM = "Distance (km)"
F_CURRENCY = "Currency"
F_FEE = "AUTO Fee used"
F_EUR_PER_KM = "AUTO €/km"
F_PRICE_BAND = "AUTO Price Bands"
F_LAST_CHECKED = "Last Checked"
F_FEATURED_IMAGE = "Featured Image"
F_FEATURED_BLURB = "Featured Blurb"
F_RACE_SLUG = "Race Slug"
F_START_DATE = "Distance Start Date"
F_IS_PRIMARY = "Is Primary Distance (from Distance)"

# Lookup (LKP_*) columns used by the race page
F_LKP_COUNTRY = "LKP_country"
F_LKP_REGION = "LKP_region"
F_LKP_IMAGE = "LKP_featured_image"
F_TEMP_IMAGE = "temporary_image"
F_FINAL_BLURB = "FINAL_blurb"
F_TERRAIN = "LKP_terrain"
F_ELEVATION = "LKP_elevation"
F_PCT_INCREASE = "LKP_%increase"
F_UTMB = "LKP_utmb"
F_LOGISTICS = "LKP_logistics"
F_AIRPORT = "LKP_primaryairport"
F_AIRPORT_CODE = "LKP_airportcode"


@dataclass(frozen=True)
class CostEntry:
    """One row of the cost index."""
    record_id: str
    name: str
    href: str | None
    location: str
    flag_url: str | None
    blurb: str
    thumb_url: str | None
    distance_km: str
    fee: str | None
    eur_per_km: str
    band: str
    band_class: str
    start_date: str


@dataclass(frozen=True)
class RaceDetail:
    """Everything the race page shows for its chosen row."""
    slug: str
    name: str
    distance: str
    location: str
    flag_url: str | None
    date: str
    fee: str
    eur_per_km: str
    band: str
    band_class: str
    series: str
    blurb: str
    image_url: str | None
    terrain: str
    elevation: str
    pct_increase: str
    logistics: str
    airport: str
    last_checked: str

    @property
    def title(self) -> str:
        return f"{self.name} | {SITE_NAME}"

    @property
    def description(self) -> str:
        return f"Key details for {self.name}: date, distance, entry fee, and cost per km."

    @property
    def has_logistics(self) -> bool:
        return bool(self.logistics or self.airport != PLACEHOLDER)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def first_slug(record: Record) -> str:
    """The row's race slug; the column is a lookup so it arrives as a list."""
    value = record.get(F_RACE_SLUG)
    if isinstance(value, list):
        return str(value[0]) if value and value[0] else ""
    return str(value) if value else ""


def display_name(record: Record) -> str:
    return as_text(record.get(F_ID)) or as_text(record.get(F_RACE_EVENT))


def is_checked(value: Any) -> bool:
    """Checkbox value; lookups of checkboxes come back as [true] / [false]."""
    if isinstance(value, list):
        return any(v is True for v in value)
    return value is True


def is_primary(record: Record) -> bool:
    return is_checked(record.get(F_IS_PRIMARY))


def _plain(value: Any) -> str:
    """Text of a scalar lookup; a numeric zero reads as unset."""
    if isinstance(value, list) and len(value) == 1:
        value = value[0]
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return as_text(value)


# ---------------------------------------------------------------------------
# Cost index
# ---------------------------------------------------------------------------

def to_cost_entry(record: Record) -> CostEntry:
    """Project an Entry Fees row into an index card."""
    slug = first_slug(record)
    fee = positive_number(record.get(F_FEE))
    country = as_text(record.get(F_COUNTRY))
    band = record.get(F_PRICE_BAND)
    return CostEntry(
        record_id=record.id,
        name=display_name(record),
        href=f"/races/{quote(slug)}" if slug else None,
        location=join_location(country, as_text(record.get(F_REGION))),
        flag_url=flag_url(country_to_code(country)),
        blurb=as_text(record.get(F_FEATURED_BLURB)),
        thumb_url=pick_first_url(record.get(F_FEATURED_IMAGE)),
        distance_km=as_text(record.get(F_DISTANCE_KM)),
        fee=format_money(fee, record.get(F_CURRENCY)) if fee is not None else None,
        eur_per_km=format_eur_per_km(positive_number(record.get(F_EUR_PER_KM))),
        band=format_band(band),
        band_class=band_css_class(band),
        start_date=format_date_short(record.get(F_START_DATE)),
    )


def list_cost_entries(view: str = ENTRY_FEES_PUBLIC_VIEW,
                      page_size: int = COST_INDEX_PAGE_SIZE) -> list[CostEntry]:
    """Fetch a view sorted by €/km ascending and project every row."""
    records = airtable.fetch_records(ENTRY_FEES_TABLE, airtable.query_params(
        view=view,
        sort=[(COST_SORT_FIELD, "asc")],
        page_size=page_size,
    ))
    logger.debug("Fetched %d entry-fee rows from %s", len(records), view)
    return [to_cost_entry(r) for r in records]


# ---------------------------------------------------------------------------
# Race page
# ---------------------------------------------------------------------------

def slug_formula(slug: str) -> str:
    """Formula matching rows whose Race Slug list holds exactly this slug."""
    literal = slug.replace("\\", "\\\\").replace('"', '\\"')
    return f'FIND(",{literal},", "," & ARRAYJOIN({{{F_RACE_SLUG}}}, ",") & ",")'


def fetch_rows_for_slug(slug: str) -> list[Record]:
    return airtable.fetch_records(ENTRY_FEES_TABLE, airtable.query_params(
        view=ENTRY_FEES_PUBLIC_VIEW,
        filter_by_formula=slug_formula(slug),
        page_size=RACE_DETAIL_PAGE_SIZE,
    ))


def select_primary(rows: list[Record]) -> Record | None:
    """The primary-distance row if one is flagged, else the first row."""
    if not rows:
        return None
    return next((r for r in rows if is_primary(r)), rows[0])


def to_race_detail(slug: str, record: Record) -> RaceDetail:
    """Project the chosen Entry Fees row into the race page."""
    name, distance = extract_name_and_distance(display_name(record))
    country = as_text(record.get(F_LKP_COUNTRY))
    band = record.get(F_PRICE_BAND)
    fee = positive_number(record.get(F_FEE))

    elevation = _plain(record.get(F_ELEVATION))
    pct_increase = _plain(record.get(F_PCT_INCREASE))
    elevation_label = join_location(
        f"{elevation} m" if elevation else "",
        pct_increase,
    ) or PLACEHOLDER

    airport = as_text(record.get(F_AIRPORT))
    airport_code = as_text(record.get(F_AIRPORT_CODE))
    airport_label = " ".join(
        p for p in (airport, f"({airport_code})" if airport_code else "") if p
    ) or PLACEHOLDER

    return RaceDetail(
        slug=slug,
        name=name,
        distance=distance,
        location=join_location(country, as_text(record.get(F_LKP_REGION))),
        flag_url=flag_url(country_to_code(country)),
        date=format_date_long(record.get(F_START_DATE)),
        fee=format_money(fee, record.get(F_CURRENCY)),
        eur_per_km=format_eur_per_km(positive_number(record.get(F_EUR_PER_KM))),
        band=format_band(band),
        band_class=band_css_class(band),
        series="UTMB" if is_checked(record.get(F_UTMB)) else "",
        blurb=as_text(record.get(F_FINAL_BLURB)) or as_text(record.get(F_FEATURED_BLURB)),
        image_url=pick_first_url(record.get(F_LKP_IMAGE)) or pick_first_url(record.get(F_TEMP_IMAGE)),
        terrain=as_text(record.get(F_TERRAIN)),
        elevation=elevation_label,
        pct_increase=pct_increase,
        logistics=as_text(record.get(F_LOGISTICS)),
        airport=airport_label,
        last_checked=as_text(record.get(F_LAST_CHECKED)),
    )


def get_race_detail(slug: str) -> RaceDetail | None:
    """Fetch and project the race page for a slug. None when no row matches.

    Fetch errors propagate.
    """
    row = select_primary(fetch_rows_for_slug(slug))
    if row is None:
        return None
    return to_race_detail(slug, row)
