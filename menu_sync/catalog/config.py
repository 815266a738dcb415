from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class CatalogConfig:
    base_url: str = os.getenv("MENU_API_BASE_URL", "")
    image_base_url: str = os.getenv("MENU_IMAGE_BASE_URL", "http://localhost:3000/img")
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


DEFAULT_CATALOG_CONFIG = CatalogConfig()
