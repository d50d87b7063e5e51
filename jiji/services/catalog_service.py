"""
Jiji — Shop catalog providers

The matcher consumes a catalog through a single call,
``get_shops(area=None)``, which may be synchronous or a coroutine.  Two
providers ship with the package:

  - ``StaticCatalogProvider``: an in-memory list, for tests and demos.
  - ``JsonFileCatalogProvider``: a JSON array of shop rows on disk (the
    shop master sheet export), re-read on every call.

Both apply the same active-shop quality filter the sheet import used:
rows without a shop name, an area or a Jiji grade are skipped.
"""

from __future__ import annotations

import asyncio
import json
from collections import Counter
from functools import lru_cache
from pathlib import Path
from typing import Any, Awaitable, Iterable, Protocol, Union

import structlog
from pydantic import ValidationError

from jiji.config import get_settings
from jiji.schemas.shop import ShopRecord

logger = structlog.get_logger("jiji.catalog_service")


class CatalogError(Exception):
    """Raised when the shop catalog cannot be read or parsed."""


class ShopCatalogProvider(Protocol):
    def get_shops(
        self, area: str | None = None
    ) -> Union[list[ShopRecord], Awaitable[list[ShopRecord]]]:
        ...


def is_active_shop(shop: ShopRecord) -> bool:
    return bool(shop.shop_name.strip() and shop.area.strip() and shop.jiji_grade.strip())


def _select(shops: Iterable[ShopRecord], area: str | None) -> list[ShopRecord]:
    selected = [s for s in shops if is_active_shop(s)]
    if area:
        selected = [s for s in selected if s.area == area]
    return selected


class StaticCatalogProvider:
    """Serves a fixed list of shops held in memory."""

    def __init__(self, shops: Iterable[ShopRecord | dict[str, Any]]) -> None:
        self._shops: list[ShopRecord] = [
            s if isinstance(s, ShopRecord) else ShopRecord.model_validate(s)
            for s in shops
        ]

    def get_shops(self, area: str | None = None) -> list[ShopRecord]:
        return _select(self._shops, area)


class JsonFileCatalogProvider:
    """Reads the catalog from a JSON file containing a list of shop rows."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def get_shops(self, area: str | None = None) -> list[ShopRecord]:
        log = logger.bind(path=str(self.path), area=area)

        try:
            raw_text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as exc:
            raise CatalogError(f"ショップデータ取得エラー: {exc}") from exc

        shops = self.parse(raw_text)
        selected = _select(shops, area)
        log.info("catalog_loaded", n_rows=len(shops), n_selected=len(selected))
        return selected

    @staticmethod
    def parse(raw_text: str) -> list[ShopRecord]:
        """Parse a JSON array of shop rows into validated records."""
        try:
            rows = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise CatalogError(f"catalog is not valid JSON: {exc}") from exc

        if not isinstance(rows, list):
            raise CatalogError("catalog must be a JSON array of shop rows")

        shops: list[ShopRecord] = []
        for index, row in enumerate(rows):
            try:
                shops.append(ShopRecord.model_validate(row))
            except ValidationError as exc:
                raise CatalogError(f"invalid shop row {index}: {exc}") from exc
        return shops


def summarize_catalog(shops: list[ShopRecord]) -> dict[str, Any]:
    """Area/grade breakdown plus rating and 2-tank price statistics.

    Unrated shops and shops without a fun-dive price are left out of the
    averages; every aggregate is 0 when nothing qualifies.
    """
    ratings = [s.customer_rating for s in shops if s.customer_rating > 0]
    prices = [s.fun_dive_price_2tanks for s in shops if s.fun_dive_price_2tanks > 0]

    return {
        "total_shops": len(shops),
        "area_breakdown": dict(Counter(s.area for s in shops)),
        "grade_breakdown": dict(Counter(s.jiji_grade for s in shops)),
        "average_rating": sum(ratings) / len(ratings) if ratings else 0.0,
        "price_range": {
            "min": min(prices) if prices else 0,
            "max": max(prices) if prices else 0,
            "average": sum(prices) / len(prices) if prices else 0,
        },
    }


@lru_cache(maxsize=1)
def get_catalog_provider() -> JsonFileCatalogProvider:
    """Return the process-wide provider configured by ``CATALOG_PATH``."""
    return JsonFileCatalogProvider(get_settings().CATALOG_PATH)
