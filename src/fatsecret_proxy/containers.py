"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fatsecret_proxy.adapters.fatsecret_client import (
    HttpxFatSecretClient,
    HttpxTokenClient,
)
from fatsecret_proxy.config import Settings
from fatsecret_proxy.services.cache import InMemoryCache
from fatsecret_proxy.services.foods import FoodService
from fatsecret_proxy.services.tokens import TokenManager


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: InMemoryCache
    token_manager: TokenManager
    food_service: FoodService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    cache = InMemoryCache()
    fatsecret_client = HttpxFatSecretClient.create(
        api_url=resolved_settings.fatsecret_api_url,
        timeout=resolved_settings.fatsecret_timeout_seconds,
    )
    token_client = HttpxTokenClient(
        client_id=resolved_settings.fatsecret_client_id,
        client_secret=resolved_settings.fatsecret_client_secret,
        token_url=resolved_settings.fatsecret_token_url,
        http_client=fatsecret_client.http_client,
        timeout=resolved_settings.fatsecret_timeout_seconds,
    )
    token_manager = TokenManager(
        token_client=token_client,
        cache=cache,
        safety_margin_seconds=resolved_settings.token_safety_margin_seconds,
    )
    food_service = FoodService(
        client=fatsecret_client,
        token_manager=token_manager,
        cache=cache,
        search_ttl_seconds=resolved_settings.search_ttl_seconds,
        food_ttl_seconds=resolved_settings.food_ttl_seconds,
        search_max_results=resolved_settings.search_max_results,
        search_include_servings=resolved_settings.search_include_servings,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        await fatsecret_client.close()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        token_manager=token_manager,
        food_service=food_service,
        close_resources=close_resources,
    )
