"""Operator diagnostics — raw Airtable response for a fixed entry-fees query."""

from fastapi import APIRouter

from trail_costs import airtable_client as airtable
from trail_costs.config import (
    COST_SORT_FIELD,
    DEBUG_ENTRY_FEES_VIEW,
    DEBUG_PAGE_SIZE,
    ENTRY_FEES_TABLE,
)

router = APIRouter(prefix="/api")


@router.get("/debug-entry-fees", include_in_schema=False)
def debug_entry_fees():
    status, url, data = airtable.debug_query(ENTRY_FEES_TABLE, airtable.query_params(
        view=DEBUG_ENTRY_FEES_VIEW,
        sort=[(COST_SORT_FIELD, "asc")],
        page_size=DEBUG_PAGE_SIZE,
    ))
    return {
        "ok": 200 <= status < 300,
        "status": status,
        "url": url,
        "data": data,
    }
