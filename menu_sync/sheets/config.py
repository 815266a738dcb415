from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SheetsConfig:
    """
    Where the menu spreadsheet is read from.

    Columns A-G hold the item fields, H-K the optional restaurant fields, so
    the default range covers A:K.
    """

    api_key: str = os.getenv("GOOGLE_SHEETS_API_KEY", "")
    sheet_id: str = os.getenv("GOOGLE_SHEET_ID", "")
    value_range: str = os.getenv("GOOGLE_SHEET_RANGE", "Sheet1!A:K")
    base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    csv_path: Path | None = Path(os.environ["SHEET_CSV_PATH"]) if os.getenv("SHEET_CSV_PATH") else None
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        if self.csv_path is not None:
            return True
        return bool(self.api_key and self.sheet_id)


DEFAULT_SHEETS_CONFIG = SheetsConfig()
