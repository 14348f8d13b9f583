"""Food lookups against FatSecret with token handling and caching."""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import TypeVar

import httpx

from fatsecret_proxy.adapters.fatsecret_client import FatSecretClient
from fatsecret_proxy.domain.foods import NormalizedFood
from fatsecret_proxy.errors import (
    NotFound,
    ProxyError,
    UpstreamError,
    UpstreamUnavailable,
    ValidationError,
)
from fatsecret_proxy.services.cache import Cache
from fatsecret_proxy.services.tokens import BARCODE_SCOPE, BASIC_SCOPE, TokenManager
from fatsecret_proxy.services.transform import (
    food_id_from_barcode,
    raise_for_vendor_error,
    transform_food_detail,
    transform_search_results,
)

_NON_DIGITS = re.compile(r"\D")
_GTIN13_LENGTH = 13

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FoodService:
    """Search, detail and barcode lookups returning normalized foods."""

    client: FatSecretClient
    token_manager: TokenManager
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    search_max_results: int = 25
    search_include_servings: bool = False
    debug: bool = False
    _inflight: dict[str, "asyncio.Future[object]"] = field(
        default_factory=dict, init=False
    )

    async def search(self, query: str) -> list[NormalizedFood]:
        """Search foods by free text, cached per normalized query."""
        normalized = (query or "").strip()
        if not normalized:
            raise ValidationError("Query parameter is required")
        cache_key = f"search:{normalized.lower()}:{self.search_max_results}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached
        return await self._single_flight(
            cache_key, lambda: self._search_uncached(normalized, cache_key)
        )

    async def get_food(self, food_id: str) -> NormalizedFood:
        """Return a food by FatSecret id."""
        normalized = str(food_id).strip()
        if not normalized:
            raise ValidationError("Food id is required")
        payload = await self._food_payload(normalized, scope=BASIC_SCOPE)
        return transform_food_detail(payload)

    async def lookup_barcode(self, barcode: str) -> NormalizedFood:
        """Resolve a barcode to a food and return its details."""
        digits = normalize_barcode(barcode)
        if not digits:
            raise ValidationError("Barcode must contain digits")
        cache_key = f"barcode:{digits}"
        food_id = self.cache.get(cache_key)
        if not isinstance(food_id, str):
            food_id = await self._single_flight(
                cache_key, lambda: self._resolve_barcode(digits, cache_key)
            )
        try:
            payload = await self._food_payload(food_id, scope=BARCODE_SCOPE)
        except NotFound as exc:
            raise NotFound(
                "Food details not found", details={"food_id": food_id}
            ) from exc
        return transform_food_detail(payload)

    async def _search_uncached(
        self, query: str, cache_key: str
    ) -> list[NormalizedFood]:
        token = await self.token_manager.get_access_token(BASIC_SCOPE)
        payload = await self._call_vendor(
            lambda: self.client.search_foods(
                token, query, max_results=self.search_max_results
            ),
            action="Food search",
            scope=BASIC_SCOPE,
        )
        foods = transform_search_results(payload)
        if self.search_include_servings and foods:
            foods = list(await asyncio.gather(*(self._with_servings(f) for f in foods)))
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Food search: query=%s results=%s", query, len(foods))
        return foods

    async def _with_servings(self, food: NormalizedFood) -> NormalizedFood:
        try:
            payload = await self._food_payload(food.id, scope=BASIC_SCOPE)
            detail = transform_food_detail(payload)
        except ProxyError as exc:
            _logger.warning("Serving lookup failed: food_id=%s error=%s", food.id, exc)
            return food
        return replace(food, servings=detail.servings)

    async def _food_payload(self, food_id: str, *, scope: str) -> dict[str, object]:
        cache_key = f"food:{food_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, dict):
            return cached
        return await self._single_flight(
            cache_key, lambda: self._fetch_food(food_id, cache_key, scope)
        )

    async def _fetch_food(
        self, food_id: str, cache_key: str, scope: str
    ) -> dict[str, object]:
        token = await self.token_manager.get_access_token(scope)
        payload = await self._call_vendor(
            lambda: self.client.get_food(token, food_id),
            action="Food details lookup",
            scope=scope,
        )
        food = payload.get("food")
        if not isinstance(food, dict):
            _logger.info("Food not found: food_id=%s", food_id)
            raise NotFound("Food not found", details={"food_id": food_id})
        self.cache.set(cache_key, food, ttl_seconds=self.food_ttl_seconds)
        if self.debug:
            _logger.info("Food details: food_id=%s", food_id)
        return food

    async def _resolve_barcode(self, digits: str, cache_key: str) -> str:
        token = await self.token_manager.get_access_token(BARCODE_SCOPE)
        try:
            payload = await self._call_vendor(
                lambda: self.client.find_id_for_barcode(token, digits),
                action="Barcode lookup",
                scope=BARCODE_SCOPE,
            )
        except NotFound as exc:
            raise NotFound(
                "Barcode not found", details={"barcode": digits}
            ) from exc
        food_id = food_id_from_barcode(payload)
        if food_id is None:
            _logger.info("No food found for barcode: %s", digits)
            raise NotFound("Barcode not found", details={"barcode": digits})
        self.cache.set(cache_key, food_id, ttl_seconds=self.food_ttl_seconds)
        if self.debug:
            _logger.info("Barcode resolved: barcode=%s food_id=%s", digits, food_id)
        return food_id

    async def _call_vendor(
        self,
        func: Callable[[], Awaitable[dict[str, object]]],
        *,
        action: str,
        scope: str,
    ) -> dict[str, object]:
        """Call the data endpoint and map failures onto proxy errors."""
        try:
            payload = await func()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == httpx.codes.UNAUTHORIZED:
                self.token_manager.invalidate(scope)
            _logger.warning("%s failed: status=%s", action, status_code)
            raise UpstreamError(
                f"{action} failed",
                vendor_status=status_code,
                details=_response_details(exc.response),
            ) from exc
        except httpx.TransportError as exc:
            _logger.warning("%s failed: FatSecret unreachable: %s", action, exc)
            raise UpstreamUnavailable(
                "FatSecret is unreachable", details=str(exc)
            ) from exc
        except ValueError as exc:
            raise UpstreamError(f"{action} returned invalid JSON") from exc
        raise_for_vendor_error(payload)
        return payload

    async def _single_flight(self, key: str, func: Callable[[], Awaitable[T]]) -> T:
        """Share one in-flight call between concurrent callers for a key."""
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._inflight[key] = task

            def _forget(done: "asyncio.Future[object]") -> None:
                if self._inflight.get(key) is done:
                    del self._inflight[key]

            task.add_done_callback(_forget)
        return await asyncio.shield(task)


def normalize_barcode(barcode: str) -> str:
    """Strip non-digits and zero-pad UPC-A and EAN-8 codes to GTIN-13."""
    digits = _NON_DIGITS.sub("", barcode or "")
    if digits and len(digits) < _GTIN13_LENGTH:
        return digits.zfill(_GTIN13_LENGTH)
    return digits


def _response_details(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return response.text[:500]
