from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LOCATION = "Malawi"
DEFAULT_SPECIALTY = "Malawian Cuisine"
DEFAULT_RATING = 4.5
DEFAULT_RESTAURANT_IMAGE = (
    "https://images.unsplash.com/photo-1504674900247-0877df9cc836?w=300&h=200&fit=crop"
)
DEFAULT_CATEGORY = "Main Dishes"
MAIN_MENU_NAME = "Main Menu"


class Restaurant(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    location: str = DEFAULT_LOCATION
    specialty: str = DEFAULT_SPECIALTY
    rating: float = DEFAULT_RATING
    image: str = DEFAULT_RESTAURANT_IMAGE


class MenuItem(BaseModel):
    id: str
    name: str
    # Display string such as "MK 1,500"; never used for arithmetic.
    price: str = ""
    category: str = DEFAULT_CATEGORY
    description: str = ""
    image: str
    available: bool = True


class Snapshot(BaseModel):
    """Result of one parse pass over the menu spreadsheet."""

    restaurants: list[Restaurant] = Field(default_factory=list)
    menu_items: dict[str, list[MenuItem]] = Field(default_factory=dict)
    skipped_rows: int = 0

    def items_for(self, restaurant_id: str) -> list[MenuItem]:
        return self.menu_items.get(restaurant_id, [])


class CatalogRecord(BaseModel):
    """An entity as returned by the catalog API (restaurant or menu)."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # The catalog uses integer primary keys for some entities.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value
