"""
Jiji — Emotional shop matching pipeline

Sequences a single matching request:

  1. Fetch the catalog (the only await point) and apply the area filter
  2. Basic eligibility filter
  3. Concern detection (text keywords + profile inference)
  4. Emotional + service scoring, stable ranking by total score
  5. Compose the top-N recommendation cards and the main message
  6. Assemble the result envelope

``find_optimal_shops`` never raises: any failure is logged and returned as
``{"success": False, "error", "fallback_message", "timestamp"}``.  The
service holds no per-request state, so one instance can serve concurrent
requests.
"""

from __future__ import annotations

import inspect
from datetime import datetime, timezone
from typing import Any

import structlog

from jiji.config import get_settings
from jiji.schemas.profile import UserProfile
from jiji.schemas.shop import ShopRecord
from jiji.services.catalog_service import ShopCatalogProvider
from jiji.services.concern_service import ConcernService
from jiji.services.eligibility_service import EligibilityService
from jiji.services.recommendation_service import RecommendationService
from jiji.services.scoring_service import ScoringService

logger = structlog.get_logger("jiji.matching_service")


class MatchingService:
    """Emotional matching orchestrator.

    Collaborators are injected at construction so the service can be tested
    with stubs and wired through FastAPI's dependency-injection graph.
    """

    def __init__(
        self,
        catalog_provider: ShopCatalogProvider,
        concern_service: ConcernService | None = None,
        eligibility_service: EligibilityService | None = None,
        scoring_service: ScoringService | None = None,
        recommendation_service: RecommendationService | None = None,
        data_source: str | None = None,
        default_max_results: int | None = None,
    ) -> None:
        settings = get_settings()

        self.catalog_provider = catalog_provider
        self.concern_service = concern_service or ConcernService()
        self.eligibility_service = eligibility_service or EligibilityService()
        self.scoring_service = scoring_service or ScoringService()
        self.recommendation_service = recommendation_service or RecommendationService()
        self.data_source = data_source or settings.DATA_SOURCE
        self.default_max_results = default_max_results or settings.DEFAULT_MAX_RESULTS

    # ── Public API ────────────────────────────────────────────────────────

    async def find_optimal_shops(
        self,
        profile: UserProfile | dict[str, Any] | None,
        concern_texts: list[str] | None = None,
        preferred_area: str | None = None,
        max_results: int | None = None,
    ) -> dict[str, Any]:
        """Rank the catalog against the user's concerns and profile.

        Parameters
        ----------
        profile:
            ``UserProfile`` (or a plain dict of its fields) for this request.
        concern_texts:
            Separately expressed worries, e.g. individual chat messages.
        preferred_area:
            Exact ``area`` value to restrict the catalog to.
        max_results:
            Number of recommendations to return (default from settings).

        Returns
        -------
        dict
            Success envelope with ``recommendations``, ``main_message``,
            ``matching_stats`` and ``data_source``, or the failure envelope.
        """
        concern_texts = list(concern_texts or [])
        log = logger.bind(area=preferred_area, n_concerns=len(concern_texts))

        try:
            if not isinstance(profile, UserProfile):
                profile = UserProfile.model_validate(profile or {})
            log = log.bind(user=profile.name)
            log.info("matching_start")

            top_n = max(1, max_results or self.default_max_results)

            # ── 1. Catalog ─────────────────────────────────────────────
            all_shops = await self._fetch_catalog(preferred_area)
            log.info("catalog_fetched", total_shops=len(all_shops))

            # ── 2. Eligibility ─────────────────────────────────────────
            candidates = self.eligibility_service.filter_eligible(all_shops, profile)
            log.info("eligibility_filtered", filtered_shops=len(candidates))

            # ── 3. Concerns ────────────────────────────────────────────
            concerns = self.concern_service.detect(profile, concern_texts)
            log.info(
                "concerns_detected",
                categories=[c.value for c in concerns],
            )

            # ── 4. Scoring + ranking ───────────────────────────────────
            scored = self.scoring_service.score_shops(candidates, concerns)
            ranked = self.scoring_service.rank(scored)
            top_shops = ranked[:top_n]
            average_top_score = self.scoring_service.average_score(top_shops)
            log.info(
                "scoring_complete",
                top_score=ranked[0]["total_score"] if ranked else 0,
                average_top_score=average_top_score,
            )

            # ── 5. Composition ─────────────────────────────────────────
            recommendations = self.recommendation_service.compose(top_shops, concerns)
            main_message = self.recommendation_service.main_message(profile, concerns)

        except Exception as exc:
            log.exception("matching_failed")
            return {
                "success": False,
                "error": str(exc),
                "fallback_message": self.recommendation_service.fallback_message(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

        log.info("matching_complete", n_recommendations=len(recommendations))

        return {
            "success": True,
            "recommendations": recommendations,
            "main_message": main_message,
            "matching_stats": {
                "total_shops": len(all_shops),
                "filtered_shops": len(candidates),
                "top_score": ranked[0]["total_score"] if ranked else 0,
                "emotional_factor_count": len(concerns),
                "average_top_score": average_top_score,
            },
            "data_source": self.data_source,
        }

    # ── Private helpers ───────────────────────────────────────────────────

    async def _fetch_catalog(self, preferred_area: str | None) -> list[ShopRecord]:
        """Await the provider once and normalise its rows to ``ShopRecord``.

        Rows that fail validation propagate as errors; the caller turns them
        into the failure envelope.
        """
        result = self.catalog_provider.get_shops(preferred_area)
        if inspect.isawaitable(result):
            result = await result

        shops = [
            row if isinstance(row, ShopRecord) else ShopRecord.model_validate(row)
            for row in result
        ]
        if preferred_area:
            shops = [s for s in shops if s.area == preferred_area]
        return shops
