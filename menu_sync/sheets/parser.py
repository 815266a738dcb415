from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence

from ..catalog.models import (
    DEFAULT_CATEGORY,
    DEFAULT_LOCATION,
    DEFAULT_RATING,
    DEFAULT_RESTAURANT_IMAGE,
    DEFAULT_SPECIALTY,
    MenuItem,
    Restaurant,
    Snapshot,
)
from .identity import IdentityDeriver

logger = logging.getLogger(__name__)

MIN_ROW_CELLS = 7
PLACEHOLDER_IMAGE = "placeholder.jpg"

_LEADING_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

RawRow = Sequence[str | None]


def _cell(row: RawRow, index: int) -> str:
    if index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else str(value)


def resolve_image_url(reference: str, image_base_url: str) -> str:
    base = image_base_url.rstrip("/")
    reference = reference.strip()
    if not reference:
        return f"{base}/{PLACEHOLDER_IMAGE}"
    return f"{base}/{reference}"


def parse_rating(raw: str) -> float:
    """Parse the leading number of a rating cell ("4.8", "4.8 stars"); blank, zero or unparseable gives 4.5."""
    match = _LEADING_FLOAT_RE.match(raw.strip())
    if not match:
        return DEFAULT_RATING
    value = float(match.group(0))
    if not math.isfinite(value) or value == 0:
        return DEFAULT_RATING
    return value


def is_available(raw: str) -> bool:
    # Only the literal sheet boolean FALSE marks an item as unavailable.
    return raw != "FALSE"


def _build_restaurant(row: RawRow, name: str, deriver: IdentityDeriver) -> Restaurant:
    return Restaurant(
        id=deriver.derive(name),
        name=name,
        location=_cell(row, 7) or DEFAULT_LOCATION,
        specialty=_cell(row, 8) or DEFAULT_SPECIALTY,
        rating=parse_rating(_cell(row, 9)),
        image=_cell(row, 10) or DEFAULT_RESTAURANT_IMAGE,
    )


def _build_item(
    row: RawRow,
    restaurant_name: str,
    deriver: IdentityDeriver,
    image_base_url: str,
) -> MenuItem:
    item_name = _cell(row, 1)
    return MenuItem(
        id=deriver.derive(item_name + restaurant_name),
        name=item_name,
        price=_cell(row, 2),
        category=_cell(row, 3) or DEFAULT_CATEGORY,
        description=_cell(row, 4),
        image=resolve_image_url(_cell(row, 5), image_base_url),
        available=is_available(_cell(row, 6)),
    )


def parse_table(
    table: Sequence[RawRow],
    image_base_url: str,
    deriver: IdentityDeriver | None = None,
) -> Snapshot:
    """
    Turn a spreadsheet grid into a Snapshot.

    The first row is a header and is discarded without inspection. Rows with
    fewer than seven cells, or without a restaurant name, are skipped. The
    first row seen for a restaurant name supplies its restaurant-level
    fields; every row contributes one menu item.
    """
    if not table or len(table) < 2:
        return Snapshot()

    deriver = deriver or IdentityDeriver()
    restaurants: dict[str, Restaurant] = {}
    menu_items: dict[str, list[MenuItem]] = {}
    skipped = 0

    for line_number, row in enumerate(table[1:], start=2):
        if len(row) < MIN_ROW_CELLS:
            logger.debug("Skipping row %d: %d cells", line_number, len(row))
            skipped += 1
            continue

        name = _cell(row, 0)
        if not name.strip():
            logger.debug("Skipping row %d: no restaurant name", line_number)
            skipped += 1
            continue

        restaurant = restaurants.get(name)
        if restaurant is None:
            restaurant = _build_restaurant(row, name, deriver)
            restaurants[name] = restaurant
            menu_items[restaurant.id] = []

        menu_items[restaurant.id].append(_build_item(row, name, deriver, image_base_url))

    return Snapshot(
        restaurants=list(restaurants.values()),
        menu_items=menu_items,
        skipped_rows=skipped,
    )
