from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..errors import FailureKind, SyncError
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import MAIN_MENU_NAME, CatalogRecord, MenuItem, Restaurant

logger = logging.getLogger(__name__)

MAIN_MENU_PAYLOAD: dict[str, Any] = {
    "name": MAIN_MENU_NAME,
    "description": "Restaurant menu from Google Sheets",
    "is_active": True,
}


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class CatalogClient:
    """
    Async client for the restaurant catalog API.

    Every response is a JSON envelope ``{"success": bool, "data": ...,
    "message": str}``. Each method is a single round trip with no retry.
    """

    def __init__(
        self,
        config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            timeout=config.timeout,
        )

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        """Send one request and return the envelope's ``data`` field."""
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise SyncError(f"{method} {path} failed: {exc}", FailureKind.transport) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise SyncError(
                f"{method} {path} returned a non-JSON response (HTTP {response.status_code})",
                FailureKind.decoding,
            ) from exc

        if not isinstance(body, dict):
            raise SyncError(f"{method} {path} returned an unexpected payload", FailureKind.decoding)

        if body.get("success") is not True:
            message = body.get("message") or f"{method} {path} failed with HTTP {response.status_code}"
            raise SyncError(str(message), FailureKind.application)

        return body.get("data")

    @staticmethod
    def _record(data: Any, what: str) -> CatalogRecord:
        try:
            return CatalogRecord.model_validate(data)
        except ValidationError as exc:
            raise SyncError(f"Catalog returned an invalid {what}", FailureKind.decoding) from exc

    async def find_by_name(self, name: str) -> CatalogRecord | None:
        """
        Look up a restaurant by case-insensitive exact name.

        The search endpoint may return partial matches, so results are
        filtered here. Any failure counts as "not found".
        """
        try:
            data = await self._request("GET", "/search/restaurants", params={"q": name})
        except SyncError as exc:
            logger.debug("Restaurant lookup for %r failed: %s", name, exc)
            return None

        if not isinstance(data, list):
            return None

        wanted = name.lower()
        for entry in data:
            if not isinstance(entry, dict) or str(entry.get("name", "")).lower() != wanted:
                continue
            try:
                return CatalogRecord.model_validate(entry)
            except ValidationError:
                logger.debug("Ignoring malformed search result for %r", name)
                continue
        return None

    async def create(self, restaurant: Restaurant) -> CatalogRecord:
        data = await self._request("POST", "/restaurants", json=restaurant.model_dump())
        return self._record(data, "restaurant")

    async def update(self, restaurant_id: str, restaurant: Restaurant) -> CatalogRecord:
        data = await self._request(
            "PUT",
            f"/restaurants/{_segment(restaurant_id)}",
            json=restaurant.model_dump(),
        )
        # Some catalog versions answer PUT with no body in ``data``.
        if data is None:
            return CatalogRecord(id=restaurant_id, name=restaurant.name)
        return self._record(data, "restaurant")

    async def list_or_create_main_menu(self, restaurant_id: str) -> str:
        """Return the id of the restaurant's first menu, creating "Main Menu" if it has none."""
        path = f"/restaurants/{_segment(restaurant_id)}/menus"
        menus = await self._request("GET", path)

        if isinstance(menus, list) and menus:
            return self._record(menus[0], "menu").id

        created = await self._request("POST", path, json=MAIN_MENU_PAYLOAD)
        return self._record(created, "menu").id

    async def replace_items(self, menu_id: str, items: list[MenuItem]) -> None:
        await self._request(
            "POST",
            f"/menus/{_segment(menu_id)}/items/bulk",
            json={"items": [item.model_dump() for item in items]},
        )
