"""
Jiji — Shop catalog API

Read-only views over the configured catalog for the admin pages.
"""

from __future__ import annotations

import inspect

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from jiji.schemas.match import CatalogStatistics
from jiji.schemas.shop import ShopRecord
from jiji.services.catalog_service import (
    CatalogError,
    ShopCatalogProvider,
    get_catalog_provider,
    summarize_catalog,
)

logger = structlog.get_logger("jiji.api.shops")

router = APIRouter()


async def _load_shops(provider: ShopCatalogProvider, area: str | None) -> list[ShopRecord]:
    try:
        result = provider.get_shops(area)
        if inspect.isawaitable(result):
            result = await result
    except CatalogError as exc:
        logger.error("catalog_unavailable", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Shop catalog is temporarily unavailable.",
        ) from exc
    return list(result)


@router.get(
    "",
    response_model=list[ShopRecord],
    response_model_by_alias=False,
    summary="List active shops",
)
async def list_shops(
    area: str | None = Query(None, description="Exact area name, e.g. 石垣島"),
    provider: ShopCatalogProvider = Depends(get_catalog_provider),
) -> list[ShopRecord]:
    shops = await _load_shops(provider, area)
    logger.info("list_shops", area=area, count=len(shops))
    return shops


@router.get(
    "/stats",
    response_model=CatalogStatistics,
    summary="Catalog statistics",
)
async def catalog_stats(
    provider: ShopCatalogProvider = Depends(get_catalog_provider),
) -> CatalogStatistics:
    """Area and grade breakdown plus rating and price statistics."""
    shops = await _load_shops(provider, None)
    return CatalogStatistics.model_validate(summarize_catalog(shops))
