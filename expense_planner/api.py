"""HTTP lookup service for cost of living budgets.

Run with ``uvicorn expense_planner.api:app``. The single lookup endpoint
waits for a short artificial delay (``LOOKUP_DELAY_SECONDS``) before
answering to mimic a remote data provider.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import config
from .cost_of_living import CostOfLivingCatalog

logger = logging.getLogger(__name__)

LOOKUP_PATH = "/api/cost-of-living"
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]
SUGGESTION_COUNT = 3


# ---------- Models ----------

class CostOfLivingResponse(BaseModel):
    city: str
    state: str
    country: str
    currency: str
    budget: Dict[str, float]


class LocationsResponse(BaseModel):
    locations: List[str]


# ---------- App ----------

def create_app(catalog: Optional[CostOfLivingCatalog] = None,
               lookup_delay: Optional[float] = None) -> FastAPI:
    """Build the API application.

    Args:
        catalog: Catalog to serve. Defaults to the built-in table.
        lookup_delay: Seconds to wait before answering a lookup. Defaults to
                      LOOKUP_DELAY_SECONDS from config.
    """
    if catalog is None:
        catalog = CostOfLivingCatalog()
    delay = config.LOOKUP_DELAY_SECONDS if lookup_delay is None else lookup_delay

    app = FastAPI(title="Expense Planner API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.api_route(LOOKUP_PATH, methods=ALL_METHODS, response_model=CostOfLivingResponse)
    async def cost_of_living(request: Request, location: Optional[str] = Query(None)):
        if request.method != "GET":
            return JSONResponse(
                status_code=405,
                content={"error": "Method not allowed"},
                headers={"Allow": "GET"},
            )

        if not location or not location.strip():
            return JSONResponse(
                status_code=400,
                content={"error": "Location parameter is required"},
            )

        if delay > 0:
            await asyncio.sleep(delay)

        template = catalog.lookup(location)
        if template is None:
            logger.info("No cost of living data for %r", location)
            suggestions = catalog.list_known_locations()[:SUGGESTION_COUNT]
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Location not found",
                    "message": (
                        "We don't have cost of living data for this location yet. "
                        f"Try: {' • '.join(suggestions)}"
                    ),
                    "suggestions": suggestions,
                },
            )

        return CostOfLivingResponse(**template.to_dict())

    @app.get("/api/locations", response_model=LocationsResponse)
    def locations():
        return LocationsResponse(locations=catalog.list_known_locations())

    return app


app = create_app()
