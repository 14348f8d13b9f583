"""FatSecret Platform API clients."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DEFAULT_TOKEN_URL = "https://oauth.fatsecret.com/connect/token"
DEFAULT_API_URL = "https://platform.fatsecret.com/rest/server.api"


class TokenClient(Protocol):
    """Interface for the OAuth2 client-credentials token endpoint."""

    async def request_token(self, scope: str) -> dict[str, object]:
        """Perform a client-credentials grant and return the raw token data."""


class FatSecretClient(Protocol):
    """Interface for FatSecret data endpoint interactions."""

    async def search_foods(
        self, token: str, query: str, max_results: int = 25
    ) -> dict[str, object]:
        """Search foods by expression and return raw API data."""

    async def get_food(self, token: str, food_id: str) -> dict[str, object]:
        """Fetch a food with its servings and return raw API data."""

    async def find_id_for_barcode(self, token: str, barcode: str) -> dict[str, object]:
        """Resolve a GTIN-13 barcode to a food id and return raw API data."""


@dataclass
class HttpxTokenClient(TokenClient):
    """HTTPX-backed client-credentials token client."""

    client_id: str
    client_secret: str
    token_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    async def request_token(self, scope: str) -> dict[str, object]:
        """Request an access token for the given scope."""
        response = await self.http_client.post(
            self.token_url,
            data={
                "grant_type": "client_credentials",
                "scope": scope,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


@dataclass
class HttpxFatSecretClient(FatSecretClient):
    """HTTPX-backed FatSecret data client."""

    api_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, api_url: str = DEFAULT_API_URL, timeout: float = 15
    ) -> "HttpxFatSecretClient":
        """Create a FatSecret client with a managed httpx session."""
        return cls(api_url=api_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def search_foods(
        self, token: str, query: str, max_results: int = 25
    ) -> dict[str, object]:
        """Search foods using the foods.search method."""
        return await self._call(
            token,
            "foods.search",
            {"search_expression": query, "max_results": str(max_results)},
        )

    async def get_food(self, token: str, food_id: str) -> dict[str, object]:
        """Fetch a food using the food.get.v2 method."""
        return await self._call(token, "food.get.v2", {"food_id": food_id})

    async def find_id_for_barcode(self, token: str, barcode: str) -> dict[str, object]:
        """Resolve a barcode using the food.find_id_for_barcode method."""
        return await self._call(token, "food.find_id_for_barcode", {"barcode": barcode})

    async def _call(
        self, token: str, method: str, params: dict[str, str]
    ) -> dict[str, object]:
        response = await self.http_client.post(
            self.api_url,
            headers={"Authorization": f"Bearer {token}"},
            data={"method": method, "format": "json", **params},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
