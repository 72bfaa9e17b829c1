"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from trail_costs.config import SITE_NAME, STATIC_DIR, require_airtable_credentials
from trail_costs.routers import cost_index, debug, races
from trail_costs.templating import templates

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    # Fail at startup, not on the first page view
    require_airtable_credentials()

    app = FastAPI(
        title=f"{SITE_NAME} — Cost Per KM",
        description="Trail-race entry fees compared per kilometre, sourced from Airtable.",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
    )

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    @app.exception_handler(StarletteHTTPException)
    async def not_found_page(request: Request, exc: StarletteHTTPException):
        """Render 404s as the site's not-found page; other errors keep the default."""
        if exc.status_code != 404 or request.url.path.startswith("/api/"):
            return await http_exception_handler(request, exc)
        return templates.TemplateResponse(request, "not_found.html", {
            "title": f"Not found | {SITE_NAME}",
            "description": "",
        }, status_code=404)

    for r in [cost_index, races, debug]:
        app.include_router(r.router)

    logger.info("Trail Costs app created")
    return app
