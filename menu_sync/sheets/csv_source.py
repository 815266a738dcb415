from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pandas as pd

from ..errors import FailureKind, SourceUnavailable

logger = logging.getLogger(__name__)


def _trim_trailing_blanks(row: list[str]) -> list[str]:
    end = len(row)
    while end and row[end - 1] == "":
        end -= 1
    return row[:end]


def read_csv_grid(path: Path) -> list[list[str]]:
    """
    Read a CSV export of the menu sheet as a grid of strings.

    Trailing empty cells are dropped from each row so the grid looks like
    what the Sheets values API returns for the same data.
    """
    try:
        df = pd.read_csv(
            path,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return []
    except (OSError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise SourceUnavailable(f"Cannot read CSV {path}: {exc}", FailureKind.decoding) from exc

    return [_trim_trailing_blanks(list(row)) for row in df.itertuples(index=False, name=None)]


class CsvSheetSource:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def fetch_values(self) -> list[list[str]]:
        rows = await asyncio.to_thread(read_csv_grid, self.path)
        logger.info("Read %d rows from %s", len(rows), self.path)
        return rows
