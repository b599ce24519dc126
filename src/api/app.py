"""
FastAPI application factory.

* Registers routes for quotes, locations and admin.
* Builds the shared HTTP client and the geocoding / routing services in the
  lifespan and closes the client on shutdown.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, locations, quotes
from src.config import settings
from src.domain.entities import Coordinate, HubLocation, InvalidCoordinate
from src.infrastructure.http_client import build_http_client
from src.infrastructure.routing import OsrmRouter
from src.services.fee_config import FeeConfigCache
from src.services.geocoder import build_geocoder, build_providers
from src.services.quotes import DeliveryQuoter
from src.services.road_distance import RoadDistanceEstimator

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


def hub_location() -> HubLocation:
    return HubLocation(
        coordinate=Coordinate(settings.hub_lat, settings.hub_lng),
        label=settings.hub_label,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire the provider clients on startup; close them on shutdown."""
    async with build_http_client() as client:
        providers, nominatim = build_providers(client, settings)
        geocoder = build_geocoder(providers, settings)
        estimator = RoadDistanceEstimator(
            OsrmRouter(client, settings.osrm_base_url),
            indirection_factor=settings.road_indirection_factor,
        )
        app.state.geocoder = geocoder
        app.state.nominatim = nominatim
        app.state.quoter = DeliveryQuoter(geocoder, estimator, hub_location())
        app.state.fee_cache = FeeConfigCache()
        app.state.address_debounce_seconds = settings.address_debounce_seconds
        logger.info(
            "Geocoding providers: %s", ", ".join(p.name for p in providers)
        )
        yield


async def _invalid_coordinate_handler(request: Request, exc: InvalidCoordinate):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="E-Run Delivery Fee API",
        description=(
            "Geocodes pickup and drop-off addresses, estimates road distance "
            "with a straight-line fallback, applies per-service stepped "
            "delivery fees and gates checkout on the delivery radius."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter + domain errors
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(InvalidCoordinate, _invalid_coordinate_handler)

    # Routers
    app.include_router(quotes.router, prefix="/api/v1")
    app.include_router(locations.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
