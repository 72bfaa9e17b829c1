"""Shared Jinja2 environment for every HTML route."""

from fastapi.templating import Jinja2Templates

from trail_costs.config import SITE_NAME, WEB_TEMPLATES_DIR

templates = Jinja2Templates(directory=str(WEB_TEMPLATES_DIR))
templates.env.globals["site_name"] = SITE_NAME
