"""Cost index — GET /, GET /cost and GET /cost/explore/{band}"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse

from trail_costs.airtable_client import AirtableError
from trail_costs.config import ENTRY_FEES_PUBLIC_VIEW, EXPLORE_VIEWS, SITE_NAME
from trail_costs.services.entry_fees import list_cost_entries
from trail_costs.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter()

INDEX_TITLE = f"Cost Per KM | {SITE_NAME}"
INDEX_DESCRIPTION = (
    "Cost Per KM is our internal tool comparing prices across trail races per km run. "
    "Applied to Europe's top independent trail races."
)
LOAD_ERROR = "We couldn't load the cost index right now. Please try again shortly."


def _render_index(request: Request, view: str, heading: str, band_key: str | None = None):
    entries = []
    error = None
    try:
        entries = list_cost_entries(view=view)
    except AirtableError as e:
        logger.warning("Cost index fetch failed for view %s: %s", view, e)
        error = LOAD_ERROR

    return templates.TemplateResponse(request, "cost.html", {
        "title": INDEX_TITLE,
        "description": INDEX_DESCRIPTION,
        "heading": heading,
        "entries": entries,
        "error": error,
        "explore_bands": list(EXPLORE_VIEWS),
        "active_band": band_key,
    })


@router.get("/", include_in_schema=False)
def home():
    return RedirectResponse("/cost")


@router.get("/cost")
def cost_index(request: Request):
    return _render_index(request, ENTRY_FEES_PUBLIC_VIEW, "Cost Transparency")


@router.get("/cost/explore/{band}")
def explore_band(request: Request, band: str):
    view = EXPLORE_VIEWS.get(band)
    if view is None:
        raise HTTPException(status_code=404, detail=f"Unknown price band '{band}'")
    heading = "€3+ per km" if band == "3-up" else f"€{band.replace('-', '–')} per km"
    return _render_index(request, view, heading, band_key=band)
