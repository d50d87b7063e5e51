"""Jiji — hard eligibility rules applied before any scoring."""

from __future__ import annotations

import structlog

from jiji.schemas.profile import UserProfile
from jiji.schemas.shop import LOWEST_GRADE_TIERS, ShopRecord

logger = structlog.get_logger("jiji.eligibility_service")


class EligibilityService:
    """Drops shops that structurally cannot serve the user.

    Each rule is an independent exclusion; a shop failing any of them is
    removed.  The filter is a per-shop predicate, so it never depends on
    the rest of the catalog.
    """

    NOT_BEGINNER_FRIENDLY = "not_beginner_friendly"
    NO_TRIAL_DIVE = "no_trial_dive"
    LOW_GRADE_FOR_FIRST_TIMER = "low_grade_for_first_timer"

    def exclusion_reasons(self, shop: ShopRecord, profile: UserProfile) -> list[str]:
        reasons: list[str] = []
        if profile.is_novice and not shop.beginner_friendly:
            reasons.append(self.NOT_BEGINNER_FRIENDLY)
        if profile.license_type == "none" and not shop.has_trial_dive:
            reasons.append(self.NO_TRIAL_DIVE)
        if (
            profile.diving_experience == "none"
            and shop.grade_tier in LOWEST_GRADE_TIERS
        ):
            reasons.append(self.LOW_GRADE_FOR_FIRST_TIMER)
        return reasons

    def is_eligible(self, shop: ShopRecord, profile: UserProfile) -> bool:
        return not self.exclusion_reasons(shop, profile)

    def filter_eligible(
        self, shops: list[ShopRecord], profile: UserProfile
    ) -> list[ShopRecord]:
        """Return the eligible shops in catalog order."""
        eligible: list[ShopRecord] = []
        for shop in shops:
            reasons = self.exclusion_reasons(shop, profile)
            if reasons:
                logger.debug("shop_excluded", shop_id=shop.shop_id, reasons=reasons)
                continue
            eligible.append(shop)
        return eligible
