"""
Jiji — Concern detection

Turns the worries a user typed into the chat, plus their profile, into the
set of concerns the scorer should address.

  1. Keyword pass: all texts are joined into one lowercased blob and each
     category's keywords are tested as plain substrings.  Substrings inside
     unrelated words still count.
  2. Profile pass: novices are assumed to worry about safety and solo
     participants about going alone, but only when the text did not already
     raise that category.
"""

from __future__ import annotations

import structlog

from jiji.schemas.match import DetectedConcern
from jiji.schemas.profile import UserProfile
from jiji.services.concern_lexicon import (
    CONCERN_DEFINITIONS,
    PROFILE_INFERENCES,
    ConcernCategory,
)

logger = structlog.get_logger("jiji.concern_service")

PROFILE_INFERENCE_SOURCE = "profile_inference"


class ConcernService:
    """Keyword and profile based concern detector.  Stateless."""

    def detect(
        self,
        profile: UserProfile,
        concern_texts: list[str],
    ) -> dict[ConcernCategory, DetectedConcern]:
        """Return detected concerns keyed by category.

        Text matches come first, in lexicon order, followed by any
        profile-inferred categories.  An empty dict is a valid result.
        """
        blob = " ".join(concern_texts).lower()
        detected: dict[ConcernCategory, DetectedConcern] = {}

        for category, definition in CONCERN_DEFINITIONS.items():
            matched = [kw for kw in definition.keywords if kw.lower() in blob]
            if matched:
                detected[category] = DetectedConcern(
                    weight=definition.weight,
                    empathy=definition.empathy,
                    matched_keywords=matched,
                )

        for inference in PROFILE_INFERENCES:
            if inference.category in detected or not inference.applies(profile):
                continue
            detected[inference.category] = DetectedConcern(
                weight=inference.weight,
                empathy=inference.empathy,
                source=PROFILE_INFERENCE_SOURCE,
            )

        logger.debug(
            "concerns_detected",
            categories=[c.value for c in detected],
            n_texts=len(concern_texts),
        )
        return detected
