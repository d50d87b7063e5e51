"""
Jiji — Emotional and service scoring

Every eligible shop receives two additive scores:

  emotional_score — how well the shop answers the concerns the user raised.
                    Four blocks, evaluated in a fixed order, each counted
                    only when it earns more than zero:
                      1. safety             (safety concern)
                      2. personal attention (skill or solo concern)
                      3. cost               (cost concern)
                      4. solo welcome       (solo concern)
  service_score   — concern-independent quality: Jiji grade, rating,
                    review volume and amenities.

  total_score = emotional_score + service_score

All contributions are bonuses, so neither score can go negative.
"""

from __future__ import annotations

import math
from typing import Any

import structlog

from jiji.schemas.match import DetectedConcern
from jiji.schemas.shop import ShopRecord
from jiji.services.concern_lexicon import CONCERN_LABELS, ConcernCategory

logger = structlog.get_logger("jiji.scoring_service")

Concerns = dict[ConcernCategory, DetectedConcern]

_REASON_SEPARATOR = "、"


class ScoringService:
    """Scores, combines and ranks shops.  Stateless and deterministic."""

    # ── Emotional block thresholds ────────────────────────────────────────

    VETERAN_YEARS: int = 10
    SMALL_GROUP_MAX: int = 4
    AT_HOME_GROUP_MAX: int = 6
    REASONABLE_PRICE: int = 12000
    FAIR_PRICE: int = 15000
    WELL_RATED: float = 4.5

    # ── Service score tables (highest applicable tier only) ───────────────

    GRADE_POINTS: dict[str, int] = {"S": 20, "A": 15, "B": 10}
    DEFAULT_GRADE_POINTS: int = 5
    RATING_TIERS: tuple[tuple[float, int], ...] = ((4.8, 15), (4.5, 10), (4.0, 5))
    REVIEW_TIERS: tuple[tuple[int, int], ...] = ((100, 10), (50, 7), (20, 4))
    AMENITY_POINTS: tuple[tuple[str, int], ...] = (
        ("pickup_service", 5),
        ("photo_service", 3),
        ("video_service", 3),
    )

    # ══════════════════════════════════════════════════════════════════════
    # Emotional score
    # ══════════════════════════════════════════════════════════════════════

    def score_emotional(
        self, shop: ShopRecord, concerns: Concerns
    ) -> tuple[int, list[dict], dict[str, int]]:
        """Return ``(emotional_score, reasons, breakdown)`` for one shop.

        ``reasons`` holds one ``{category, concern, solution, empathy, score}``
        entry per block that scored, in block order.  ``breakdown`` maps the
        block bucket (``safety``/``personal``/``cost``/``solo``) to its points.
        """
        blocks: list[tuple[str, ConcernCategory, tuple[int, list[str]]]] = []

        if ConcernCategory.SAFETY in concerns:
            blocks.append(("safety", ConcernCategory.SAFETY, self._safety_block(shop)))

        # Skill and solo share one personal-attention bucket; the skill label
        # wins when both are present.
        if ConcernCategory.SKILL in concerns or ConcernCategory.SOLO in concerns:
            label = (
                ConcernCategory.SKILL
                if ConcernCategory.SKILL in concerns
                else ConcernCategory.SOLO
            )
            blocks.append(("personal", label, self._personal_block(shop)))

        if ConcernCategory.COST in concerns:
            blocks.append(("cost", ConcernCategory.COST, self._cost_block(shop)))

        if ConcernCategory.SOLO in concerns:
            blocks.append(("solo", ConcernCategory.SOLO, self._solo_block(shop)))

        emotional_score = 0
        reasons: list[dict] = []
        breakdown: dict[str, int] = {}

        for bucket, category, (block_score, parts) in blocks:
            if block_score <= 0:
                continue
            emotional_score += block_score
            breakdown[bucket] = block_score
            reasons.append({
                "category": category.value,
                "concern": CONCERN_LABELS[category],
                "solution": _REASON_SEPARATOR.join(parts),
                "empathy": concerns[category].empathy,
                "score": block_score,
            })

        return emotional_score, reasons, breakdown

    def _safety_block(self, shop: ShopRecord) -> tuple[int, list[str]]:
        score = 0
        parts: list[str] = []
        if shop.safety_equipment:
            score += 15
            parts.append("AED・酸素完備")
        if shop.insurance_coverage:
            score += 8
            parts.append("保険完備")
        if shop.experience_years >= self.VETERAN_YEARS:
            score += 7
            parts.append(f"{shop.experience_years}年の実績")
        if shop.has_clean_record:
            score += 5
            parts.append("事故記録なし")
        return score, parts

    def _personal_block(self, shop: ShopRecord) -> tuple[int, list[str]]:
        score = 0
        parts: list[str] = []
        if shop.max_group_size is not None and shop.max_group_size <= self.SMALL_GROUP_MAX:
            score += 12
            parts.append(f"少人数制（最大{shop.max_group_size}名）")
        if shop.private_guide_available:
            score += 10
            parts.append("プライベートガイド可能")
        if shop.beginner_friendly:
            score += 8
            parts.append("初心者に特化したサポート")
        return score, parts

    def _cost_block(self, shop: ShopRecord) -> tuple[int, list[str]]:
        score = 0
        parts: list[str] = []

        # 0 means the plan is not offered; fall back to the beach trial price.
        price = shop.fun_dive_price_2tanks or shop.trial_dive_price_beach
        if price:
            if price <= self.REASONABLE_PRICE:
                score += 15
                parts.append(f"良心的価格（¥{price}）")
            elif price <= self.FAIR_PRICE:
                score += 8
                parts.append(f"適正価格（¥{price}）")

        if shop.equipment_rental_included:
            score += 6
            parts.append("器材レンタル込み")
        if shop.photo_service:
            score += 4
            parts.append("写真撮影サービス")
        if not shop.has_additional_fees:
            score += 3
            parts.append("追加料金なし")
        return score, parts

    def _solo_block(self, shop: ShopRecord) -> tuple[int, list[str]]:
        score = 0
        parts: list[str] = []
        if shop.solo_welcome:
            score += 15
            parts.append("一人参加大歓迎")
        if shop.max_group_size is not None and shop.max_group_size <= self.AT_HOME_GROUP_MAX:
            score += 8
            parts.append("アットホームな雰囲気")
        if shop.customer_rating >= self.WELL_RATED:
            score += 5
            parts.append("高評価（居心地良し）")
        return score, parts

    # ══════════════════════════════════════════════════════════════════════
    # Service score
    # ══════════════════════════════════════════════════════════════════════

    def calculate_service_score(self, shop: ShopRecord) -> int:
        score = self.GRADE_POINTS.get(shop.grade_tier, self.DEFAULT_GRADE_POINTS)

        for threshold, points in self.RATING_TIERS:
            if shop.customer_rating >= threshold:
                score += points
                break

        for threshold, points in self.REVIEW_TIERS:
            if shop.review_count >= threshold:
                score += points
                break

        for attribute, points in self.AMENITY_POINTS:
            if getattr(shop, attribute):
                score += points

        return score

    # ══════════════════════════════════════════════════════════════════════
    # Combination and ranking
    # ══════════════════════════════════════════════════════════════════════

    def score_shops(
        self, shops: list[ShopRecord], concerns: Concerns
    ) -> list[dict[str, Any]]:
        """Score every shop; output is in input order, one entry per shop."""
        scored: list[dict[str, Any]] = []
        for shop in shops:
            emotional_score, reasons, breakdown = self.score_emotional(shop, concerns)
            service_score = self.calculate_service_score(shop)
            total_score = emotional_score + service_score
            scored.append({
                "shop": shop,
                "emotional_score": emotional_score,
                "emotional_reasons": reasons,
                "service_score": service_score,
                "total_score": total_score,
                "score_breakdown": {
                    "emotional": emotional_score,
                    "service": service_score,
                    "total": total_score,
                    "details": breakdown,
                },
            })
        logger.debug(
            "shops_scored",
            n_shops=len(scored),
            concerns=[c.value for c in concerns],
        )
        return scored

    @staticmethod
    def rank(scored: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Sort by ``total_score`` descending.  ``sorted`` is stable, so ties
        keep catalog order."""
        return sorted(scored, key=lambda entry: entry["total_score"], reverse=True)

    @staticmethod
    def average_score(scored: list[dict[str, Any]]) -> int:
        if not scored:
            return 0
        total = sum(entry["total_score"] for entry in scored)
        # Half-up rounding; scores are never negative.
        return math.floor(total / len(scored) + 0.5)
