import asyncio
from pathlib import Path

import httpx
import pytest

from menu_sync.errors import FailureKind, SourceUnavailable
from menu_sync.sheets.client import SheetsClient, build_source
from menu_sync.sheets.config import SheetsConfig
from menu_sync.sheets.csv_source import CsvSheetSource, read_csv_grid

CONFIG = SheetsConfig(api_key="test-key", sheet_id="sheet-123", value_range="Sheet1!A:K", csv_path=None)


def _client(handler) -> SheetsClient:
    return SheetsClient(CONFIG, http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_fetch_values_returns_grid():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json={"range": "Sheet1!A1:K3", "values": [["h"], ["a", "b"]]})

    rows = asyncio.run(_client(handler).fetch_values())

    assert rows == [["h"], ["a", "b"]]
    assert seen["url"].path == "/v4/spreadsheets/sheet-123/values/Sheet1!A:K"
    assert seen["url"].params["key"] == "test-key"


def test_fetch_values_without_values_key_is_empty():
    rows = asyncio.run(_client(lambda request: httpx.Response(200, json={"range": "Sheet1"})).fetch_values())
    assert rows == []


def test_fetch_values_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("dns failure", request=request)

    with pytest.raises(SourceUnavailable) as excinfo:
        asyncio.run(_client(handler).fetch_values())
    assert excinfo.value.kind == FailureKind.transport


def test_fetch_values_auth_failure():
    handler = lambda request: httpx.Response(403, json={"error": {"message": "API key not valid"}})
    with pytest.raises(SourceUnavailable, match="HTTP 403"):
        asyncio.run(_client(handler).fetch_values())


def test_fetch_values_bad_json():
    handler = lambda request: httpx.Response(200, text="<html>nope</html>")
    with pytest.raises(SourceUnavailable) as excinfo:
        asyncio.run(_client(handler).fetch_values())
    assert excinfo.value.kind == FailureKind.decoding


def test_read_csv_grid_trims_trailing_blank_cells(tmp_path: Path):
    csv_path = tmp_path / "menu.csv"
    csv_path.write_text(
        "Restaurant,Item,Price,Category,Description,Image,Available,Location\n"
        "Mama's Kitchen,Nsima,\"MK 1,500\",Main Dishes,,,,Blantyre\n"
        "Nyama House,Goat,MK 3000,,,,,\n",
        encoding="utf-8",
    )

    rows = read_csv_grid(csv_path)

    assert rows[1] == ["Mama's Kitchen", "Nsima", "MK 1,500", "Main Dishes", "", "", "", "Blantyre"]
    # Short once trailing blanks are gone, as the Sheets API would return it.
    assert rows[2] == ["Nyama House", "Goat", "MK 3000"]


def test_read_csv_grid_keeps_na_like_strings(tmp_path: Path):
    csv_path = tmp_path / "menu.csv"
    csv_path.write_text("a,b\nNA,None\n", encoding="utf-8")
    assert read_csv_grid(csv_path)[1] == ["NA", "None"]


def test_csv_source_missing_file(tmp_path: Path):
    source = CsvSheetSource(tmp_path / "missing.csv")
    with pytest.raises(SourceUnavailable):
        asyncio.run(source.fetch_values())


def test_build_source_prefers_csv(tmp_path: Path):
    csv_config = SheetsConfig(csv_path=tmp_path / "menu.csv")
    assert isinstance(build_source(csv_config), CsvSheetSource)
    assert isinstance(build_source(CONFIG), SheetsClient)
