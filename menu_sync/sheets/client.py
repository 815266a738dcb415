from __future__ import annotations

import logging
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from ..errors import FailureKind, SourceUnavailable
from .config import DEFAULT_SHEETS_CONFIG, SheetsConfig
from .csv_source import CsvSheetSource

logger = logging.getLogger(__name__)


class TableSource(Protocol):
    async def fetch_values(self) -> list[list[str]]: ...


class SheetsClient:
    """Reads a cell range from the Google Sheets v4 values API."""

    def __init__(
        self,
        config: SheetsConfig = DEFAULT_SHEETS_CONFIG,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._http = http

    def _values_url(self, value_range: str) -> str:
        return (
            f"{self.config.base_url.rstrip('/')}/{quote(self.config.sheet_id, safe='')}"
            f"/values/{quote(value_range, safe='!:')}"
        )

    async def fetch_values(self, value_range: str | None = None) -> list[list[str]]:
        """
        Return the rows of ``value_range`` (defaults to the configured range).

        The API omits trailing empty cells, so rows can have different
        lengths. Any failure raises ``SourceUnavailable``.
        """
        url = self._values_url(value_range or self.config.value_range)
        params = {"key": self.config.api_key}

        try:
            if self._http is not None:
                response = await self._http.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as http:
                    response = await http.get(url, params=params)
        except httpx.HTTPError as exc:
            raise SourceUnavailable(f"Sheets request failed: {exc}", FailureKind.transport) from exc

        if response.status_code != 200:
            raise SourceUnavailable(
                f"Sheets API returned HTTP {response.status_code}",
                FailureKind.application,
            )

        try:
            body: Any = response.json()
        except ValueError as exc:
            raise SourceUnavailable("Sheets API returned invalid JSON", FailureKind.decoding) from exc

        if not isinstance(body, dict):
            raise SourceUnavailable("Sheets API returned an unexpected payload", FailureKind.decoding)

        values = body.get("values") or []
        rows = [[str(cell) for cell in row] for row in values if isinstance(row, list)]
        logger.info("Fetched %d rows from sheet %s", len(rows), self.config.sheet_id)
        return rows


def build_source(
    config: SheetsConfig = DEFAULT_SHEETS_CONFIG,
    http: httpx.AsyncClient | None = None,
) -> TableSource:
    """Use the local CSV export when one is configured, else the Sheets API."""
    if config.csv_path is not None:
        return CsvSheetSource(config.csv_path)
    return SheetsClient(config, http=http)
