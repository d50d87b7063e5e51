"""
Jiji — Matching API

Entry point the LINE webhook and the web app call once they have turned a
conversation into a profile and a list of worries.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from jiji.schemas.match import MatchRequest, MatchResponse
from jiji.services.catalog_service import get_catalog_provider
from jiji.services.matching_service import MatchingService

logger = structlog.get_logger("jiji.api.matching")

router = APIRouter()

# ── Service singleton ─────────────────────────────────────────────────────────

_matching_service: MatchingService | None = None


def get_matching_service() -> MatchingService:
    global _matching_service
    if _matching_service is None:
        _matching_service = MatchingService(catalog_provider=get_catalog_provider())
    return _matching_service


# ──────────────────────────────────────────────────────────────────────────────
# POST /shops — Rank shops for a user
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/shops",
    response_model=MatchResponse,
    response_model_exclude_none=True,
    summary="Find the best diving shops for a user's concerns",
)
async def match_shops(
    request: MatchRequest,
    service: MatchingService = Depends(get_matching_service),
) -> MatchResponse:
    """Run emotional matching for one user.

    Matching failures are not HTTP errors: the response carries
    ``success: false`` and a ``fallback_message`` the chat layer can relay
    to the user as-is.
    """
    result = await service.find_optimal_shops(
        profile=request.profile,
        concern_texts=request.concerns,
        preferred_area=request.preferred_area,
        max_results=request.max_results,
    )
    if not result["success"]:
        logger.warning("match_shops_fallback", error=result.get("error"))
    return MatchResponse.model_validate(result)
