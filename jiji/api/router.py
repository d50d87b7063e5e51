"""
Jiji — Main API Router

Aggregates all sub-routers under a single prefix so that ``jiji.main``
can mount the entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from jiji.api import matching, shops

router = APIRouter()

router.include_router(matching.router, prefix="/match", tags=["Matching"])
router.include_router(shops.router, prefix="/shops", tags=["Shops"])
