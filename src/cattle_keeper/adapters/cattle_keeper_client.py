"""HTTP client for the Cattle Keeper API."""

from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from cattle_keeper.errors import (
    CattleKeeperError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)

JsonObject = dict[str, object]

_STATUS_ERRORS: dict[int, type[CattleKeeperError]] = {
    400: ValidationError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}


class CattleKeeperApi(Protocol):
    """Interface for the record store HTTP surface."""

    async def list_cattle(
        self, search: str | None = None, sex: str | None = None
    ) -> list[JsonObject]:
        """Return cattle records, optionally searched and filtered by sex."""

    async def get_cattle(self, cattle_id: str) -> JsonObject:
        """Return one cattle record."""

    async def create_cattle(self, payload: JsonObject) -> JsonObject:
        """Create a cattle record."""

    async def edit_breeding_info(
        self, cattle_id: str, payload: JsonObject
    ) -> JsonObject:
        """Replace the breeding values of a cattle record."""

    async def delete_cattle(self, cattle_id: str, keep_image: bool = False) -> None:
        """Delete a cattle record."""

    async def list_milk(
        self, cow_name: str | None = None, on_date: str | None = None
    ) -> list[JsonObject]:
        """Return milk records, optionally filtered."""

    async def create_milk(self, payload: JsonObject) -> JsonObject:
        """Create a milk record."""

    async def delete_milk(self, record_id: str) -> None:
        """Delete a milk record."""

    async def list_activities(self) -> list[JsonObject]:
        """Return activity entries, newest first."""

    async def upload_image(
        self, filename: str, content: bytes, content_type: str
    ) -> JsonObject:
        """Upload an image and return its metadata including the URL."""


@dataclass
class HttpxCattleKeeperClient(CattleKeeperApi):
    """HTTPX-backed API client that sends the shared API key."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    user: str | None = None

    @classmethod
    def create(
        cls, base_url: str, api_key: str, user: str | None = None
    ) -> "HttpxCattleKeeperClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            user=user,
        )

    async def list_cattle(
        self, search: str | None = None, sex: str | None = None
    ) -> list[JsonObject]:
        """Return cattle records, optionally searched and filtered by sex."""
        params = {}
        if search:
            params["search"] = search
        if sex:
            params["sex"] = sex
        return await self._request("GET", "/cattle", params=params or None)

    async def get_cattle(self, cattle_id: str) -> JsonObject:
        """Return one cattle record."""
        return await self._request("GET", f"/cattle/{cattle_id}")

    async def create_cattle(self, payload: JsonObject) -> JsonObject:
        """Create a cattle record."""
        return await self._request("POST", "/cattle", json=payload)

    async def edit_breeding_info(
        self, cattle_id: str, payload: JsonObject
    ) -> JsonObject:
        """Replace the breeding values of a cattle record."""
        return await self._request(
            "PUT", f"/cattle/{cattle_id}/breeding", json=payload
        )

    async def delete_cattle(self, cattle_id: str, keep_image: bool = False) -> None:
        """Delete a cattle record."""
        params = {"keepImage": "true"} if keep_image else None
        await self._request("DELETE", f"/cattle/{cattle_id}", params=params)

    async def list_milk(
        self, cow_name: str | None = None, on_date: str | None = None
    ) -> list[JsonObject]:
        """Return milk records, optionally filtered."""
        params = {}
        if cow_name:
            params["cow"] = cow_name
        if on_date:
            params["date"] = on_date
        return await self._request("GET", "/milk", params=params or None)

    async def create_milk(self, payload: JsonObject) -> JsonObject:
        """Create a milk record."""
        return await self._request("POST", "/milk", json=payload)

    async def delete_milk(self, record_id: str) -> None:
        """Delete a milk record."""
        await self._request("DELETE", f"/milk/{record_id}")

    async def list_activities(self) -> list[JsonObject]:
        """Return activity entries, newest first."""
        return await self._request("GET", "/activities")

    async def upload_image(
        self, filename: str, content: bytes, content_type: str
    ) -> JsonObject:
        """Upload an image and return its metadata including the URL."""
        return await self._request(
            "POST",
            "/images/upload",
            files={"file": (filename, content, content_type)},
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(self, method: str, path: str, **kwargs: object) -> Any:
        headers = {"X-API-Key": self.api_key}
        if self.user:
            headers["X-User"] = self.user
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=15,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise StorageError(f"Cattle Keeper API is unreachable: {exc}") from exc
        body = _json_body(response)
        if response.is_error:
            message = str(body.get("error") or response.reason_phrase)
            error_type = _STATUS_ERRORS.get(response.status_code, StorageError)
            raise error_type(message)
        return body.get("data")


def _json_body(response: httpx.Response) -> dict[str, object]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
