"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from fatsecret_proxy.adapters.fatsecret_client import FatSecretClient, TokenClient
from fatsecret_proxy.config import Settings
from fatsecret_proxy.containers import AppContainer
from fatsecret_proxy.services.cache import InMemoryCache
from fatsecret_proxy.services.foods import FoodService
from fatsecret_proxy.services.tokens import TokenManager

BROCCOLI_SEARCH_ITEM = {
    "food_id": "36470",
    "food_name": "Broccoli",
    "food_type": "Generic",
    "food_description": (
        "Per 100g - Calories: 34kcal | Fat: 0.37g | Carbs: 6.64g | Protein: 2.82g"
    ),
}

OREO_SEARCH_ITEM = {
    "food_id": "4881224",
    "food_name": "Oreo Cookies",
    "brand_name": "Nabisco",
    "food_type": "Brand",
    "food_description": (
        "Per 3 cookies - Calories: 160kcal | Fat: 7.00g | Carbs: 25.00g | "
        "Protein: 1.00g"
    ),
}

CHICKEN_DETAIL = {
    "food": {
        "food_id": "1641",
        "food_name": "Chicken Breast",
        "food_type": "Generic",
        "servings": {
            "serving": [
                {
                    "serving_id": "4590",
                    "serving_description": "1/2 small (yield after cooking)",
                    "metric_serving_amount": "50.000",
                    "metric_serving_unit": "g",
                    "calories": "200",
                    "protein": "15.50",
                    "carbohydrate": "0",
                    "fat": "1.79",
                },
                {
                    "serving_id": "4591",
                    "serving_description": "1 oz, boneless, cooked",
                    "metric_serving_amount": "1.000",
                    "metric_serving_unit": "oz",
                    "calories": "47",
                    "protein": "8.78",
                    "carbohydrate": "0",
                    "fat": "1.01",
                },
            ]
        },
    }
}


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class FakeTokenClient(TokenClient):
    """Token client returning numbered tokens."""

    expires_in: int = 86400
    calls: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def request_token(self, scope: str) -> dict[str, object]:
        self.calls.append(scope)
        if self.error is not None:
            raise self.error
        return {
            "access_token": f"token-{len(self.calls)}",
            "expires_in": self.expires_in,
            "token_type": "Bearer",
        }


@dataclass
class FakeFatSecretClient(FatSecretClient):
    """FatSecret client serving canned payloads and recording calls."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": {
                "food": [BROCCOLI_SEARCH_ITEM, OREO_SEARCH_ITEM],
                "max_results": "25",
                "page_number": "0",
                "total_results": "2",
            }
        }
    )
    foods: dict[str, dict[str, object]] = field(
        default_factory=lambda: {"1641": CHICKEN_DETAIL}
    )
    barcodes: dict[str, dict[str, object]] = field(default_factory=dict)
    calls: list[tuple[str, str, str]] = field(default_factory=list)

    async def search_foods(
        self, token: str, query: str, max_results: int = 25
    ) -> dict[str, object]:
        self.calls.append(("foods.search", token, query))
        return self.search_payload

    async def get_food(self, token: str, food_id: str) -> dict[str, object]:
        self.calls.append(("food.get.v2", token, food_id))
        return self.foods.get(
            food_id,
            {"error": {"code": 106, "message": f"Invalid ID: food_id '{food_id}'"}},
        )

    async def find_id_for_barcode(self, token: str, barcode: str) -> dict[str, object]:
        self.calls.append(("food.find_id_for_barcode", token, barcode))
        return self.barcodes.get(barcode, {"food_id": {"value": "0"}})

    def methods(self) -> list[str]:
        return [method for method, _, _ in self.calls]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fatsecret_client_id="client-id",
        fatsecret_client_secret="client-secret",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryCache:
    return InMemoryCache(clock=clock)


@pytest.fixture
def token_client() -> FakeTokenClient:
    return FakeTokenClient()


@pytest.fixture
def fatsecret_client() -> FakeFatSecretClient:
    return FakeFatSecretClient()


@pytest.fixture
def token_manager(
    token_client: FakeTokenClient, cache: InMemoryCache, clock: FakeClock
) -> TokenManager:
    return TokenManager(token_client=token_client, cache=cache, clock=clock)


@pytest.fixture
def food_service(
    fatsecret_client: FakeFatSecretClient,
    token_manager: TokenManager,
    cache: InMemoryCache,
) -> FoodService:
    return FoodService(
        client=fatsecret_client, token_manager=token_manager, cache=cache
    )


@pytest.fixture
def container(
    settings: Settings,
    cache: InMemoryCache,
    token_manager: TokenManager,
    food_service: FoodService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cache=cache,
        token_manager=token_manager,
        food_service=food_service,
        close_resources=close_resources,
    )
