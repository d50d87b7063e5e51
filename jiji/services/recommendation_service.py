"""
Jiji — Recommendation composer

Turns ranked shops into the chat-ready recommendation cards Jiji sends back,
written in Jiji's first-person voice:

  - ranking label (第1位, 第2位, ...)
  - main comment built from the shop's first one or two score reasons
  - an experience preview anecdote picked by concern priority
  - a short summary tag line

It also writes the top-level message addressed to the user and the fixed
apology used when matching fails.
"""

from __future__ import annotations

from typing import Any

from jiji.schemas.match import DetectedConcern
from jiji.schemas.profile import UserProfile
from jiji.services.concern_lexicon import ConcernCategory

Concerns = dict[ConcernCategory, DetectedConcern]


class RecommendationService:
    """Composes recommendation text.  Pure string assembly, no I/O."""

    # First matching category wins.
    EXPERIENCE_PREVIEWS: tuple[tuple[ConcernCategory, str], ...] = (
        (
            ConcernCategory.SAFETY,
            "「最初は不安でしたが、スタッフの方が『大丈夫、一緒にゆっくりやりましょう』と声をかけてくれて安心できました」",
        ),
        (
            ConcernCategory.SOLO,
            "「一人参加で緊張しましたが、同じような方もいて、すぐに打ち解けることができました」",
        ),
        (
            ConcernCategory.SKILL,
            "「泳ぎが苦手でしたが、インストラクターが私のペースに合わせてくれて、無理なく楽しめました」",
        ),
        (
            ConcernCategory.COST,
            "「予算を抑えたかったのですが、この価格でこのサービスは大満足です」",
        ),
    )
    DEFAULT_EXPERIENCE_PREVIEW = "「期待以上の素晴らしい体験でした。また利用したいと思います」"

    # Every present category contributes, in this order.
    ACKNOWLEDGEMENTS: tuple[tuple[ConcernCategory, str], ...] = (
        (ConcernCategory.SAFETY, "安全面の心配、僕も最初は同じでした。"),
        (ConcernCategory.SOLO, "一人参加の勇気、すごいと思います。"),
        (ConcernCategory.SKILL, "スキルの不安、みんな通る道です。"),
    )

    SUMMARY_SEPARATOR = "・"
    SUMMARY_CLOSING = "で特におすすめです！"
    HIGH_RATING: float = 4.7
    STRONG_EMOTIONAL_MATCH: int = 40

    FALLBACK_MESSAGE = (
        "ごめんなさい、ちょっとデータの調子が悪いみたい。"
        "でも大丈夫、一緒に最高のショップを見つけましょう！"
        "LINE で直接相談してくださいね。"
    )

    # ── Public API ──────────────────────────────────────────────────

    @staticmethod
    def ranking_label(index: int) -> str:
        """Positional label for a zero-based rank index."""
        return f"第{index + 1}位"

    def compose(
        self, top_shops: list[dict[str, Any]], concerns: Concerns
    ) -> list[dict[str, Any]]:
        """Build one recommendation card per scored shop, keeping order."""
        recommendations: list[dict[str, Any]] = []
        for index, entry in enumerate(top_shops):
            recommendations.append({
                "ranking": self.ranking_label(index),
                "shop": self._shop_payload(entry),
                "main_comment": self.main_comment(entry),
                "experience_preview": self.experience_preview(concerns),
                "emotional_match": {
                    "score": entry["emotional_score"],
                    "reasons": entry["emotional_reasons"],
                    "total_score": entry["total_score"],
                },
                "summary": self.summary(entry),
            })
        return recommendations

    def main_comment(self, entry: dict[str, Any]) -> str:
        shop_name = entry["shop"].shop_name
        reasons = entry["emotional_reasons"]

        if not reasons:
            return f"{shop_name}は信頼できるショップです。きっと素敵なダイビングになりますよ。"

        first = reasons[0]
        comment = f"{first['empathy']}。でも{shop_name}なら{first['solution']}で安心です。"

        if len(reasons) > 1:
            second = reasons[1]
            topic = second["concern"].replace("不安", "", 1)
            comment += f"さらに{second['solution']}もあるので、{topic}の面でも安心できます。"

        return comment

    def experience_preview(self, concerns: Concerns) -> str:
        for category, anecdote in self.EXPERIENCE_PREVIEWS:
            if category in concerns:
                return anecdote
        return self.DEFAULT_EXPERIENCE_PREVIEW

    def summary(self, entry: dict[str, Any]) -> str:
        shop = entry["shop"]
        tags: list[str] = []
        if shop.grade_tier == "S":
            tags.append("Jiji最高認定")
        if shop.customer_rating >= self.HIGH_RATING:
            tags.append("高評価")
        if entry["emotional_score"] >= self.STRONG_EMOTIONAL_MATCH:
            tags.append("感情的マッチング度◎")
        if shop.beginner_friendly:
            tags.append("初心者に優しい")

        if not tags:
            return "特におすすめです！"
        return f"{self.SUMMARY_SEPARATOR.join(tags)}{self.SUMMARY_CLOSING}"

    def main_message(self, profile: UserProfile, concerns: Concerns) -> str:
        user_name = profile.display_name
        message = f"{user_name}の気持ち、よく分かります。"

        for category, sentence in self.ACKNOWLEDGEMENTS:
            if category in concerns:
                message += sentence

        message += (
            f"でも大丈夫！{user_name}にピッタリのショップを見つけました。"
            "一歩ずつ、素敵なダイビング体験を積んでいきましょう✨"
        )
        return message

    def fallback_message(self) -> str:
        return self.FALLBACK_MESSAGE

    # ── Private helpers ─────────────────────────────────────────────

    @staticmethod
    def _shop_payload(entry: dict[str, Any]) -> dict[str, Any]:
        payload = entry["shop"].model_dump()
        payload["grade_tier"] = entry["shop"].grade_tier
        for key in (
            "emotional_score",
            "emotional_reasons",
            "service_score",
            "total_score",
            "score_breakdown",
        ):
            payload[key] = entry[key]
        return payload
