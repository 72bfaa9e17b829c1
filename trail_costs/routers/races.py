"""Race detail — GET /races/{slug}

Fetch errors are not caught here; they surface as a 500.
"""

from fastapi import APIRouter, HTTPException, Request

from trail_costs.services.entry_fees import get_race_detail
from trail_costs.templating import templates

router = APIRouter(prefix="/races")


@router.get("/{slug}")
def race_page(request: Request, slug: str):
    race = get_race_detail(slug)
    if race is None:
        raise HTTPException(status_code=404, detail=f"Race '{slug}' not found")

    return templates.TemplateResponse(request, "race.html", {
        "title": race.title,
        "description": race.description,
        "race": race,
    })
