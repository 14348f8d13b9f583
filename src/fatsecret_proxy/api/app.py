"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fatsecret_proxy.api.food_models import FoodResponse, StatusResponse
from fatsecret_proxy.app_logging import configure_logging
from fatsecret_proxy.config import parse_allowed_origins
from fatsecret_proxy.containers import AppContainer
from fatsecret_proxy.errors import ProxyError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="FatSecret Proxy", lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
        """Render proxy errors as JSON error bodies."""
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc.message
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "details": exc.details},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Render unexpected failures as a generic 500."""
        logger.exception("Unhandled error for %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500, content={"error": "Internal server error"}
        )

    @app.get("/api/status")
    async def status() -> StatusResponse:
        """Simple liveness endpoint."""
        return StatusResponse(
            status="OK", timestamp=datetime.now(tz=UTC).isoformat()
        )

    @app.get("/api/food/search", response_model=list[FoodResponse])
    async def search_foods(
        request: Request, query: str | None = None
    ) -> list[FoodResponse]:
        """Search foods by free text."""
        state_container: AppContainer = request.app.state.container
        logger.info("Searching for: %s", query)
        foods = await state_container.food_service.search(query or "")
        return [FoodResponse.from_domain(food) for food in foods]

    @app.get("/api/food/barcode/{barcode}", response_model=FoodResponse)
    async def food_by_barcode(barcode: str, request: Request) -> FoodResponse:
        """Look up a food by barcode."""
        state_container: AppContainer = request.app.state.container
        food = await state_container.food_service.lookup_barcode(barcode)
        return FoodResponse.from_domain(food)

    @app.get("/api/food/{food_id}", response_model=FoodResponse)
    async def food_detail(food_id: str, request: Request) -> FoodResponse:
        """Return a food with serving-scaled nutrients."""
        state_container: AppContainer = request.app.state.container
        food = await state_container.food_service.get_food(food_id)
        return FoodResponse.from_domain(food)

    return app
