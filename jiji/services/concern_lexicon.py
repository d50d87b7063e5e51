"""
Jiji — Concern lexicon

Static table of the emotional worries Jiji listens for.  Each category
carries a keyword set (plain substrings, matched case-insensitively), a
soft importance weight and the empathy line Jiji opens with when the worry
is detected.  Keyword sets may overlap; one phrase can trigger several
categories.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from jiji.schemas.profile import UserProfile


class ConcernCategory(Enum):
    """Concern categories, in detection order."""

    SAFETY = "safety"
    SKILL = "skill"
    SOLO = "solo"
    COST = "cost"
    PHYSICAL = "physical"
    COMMUNICATION = "communication"


@dataclass(frozen=True)
class ConcernDefinition:
    keywords: tuple[str, ...]
    weight: int
    empathy: str


CONCERN_DEFINITIONS: dict[ConcernCategory, ConcernDefinition] = {
    ConcernCategory.SAFETY: ConcernDefinition(
        keywords=("安全", "不安", "怖い", "危険", "心配", "大丈夫", "事故", "溺れる", "器材", "故障"),
        weight=25,
        empathy="僕も最初は安全面がすごく心配でした",
    ),
    ConcernCategory.SKILL: ConcernDefinition(
        keywords=("下手", "できない", "初心者", "自信ない", "泳げない", "経験少ない", "スキル", "上達"),
        weight=20,
        empathy="僕も最初は『絶対無理』って思ってました",
    ),
    ConcernCategory.SOLO: ConcernDefinition(
        keywords=("一人", "ぼっち", "友達いない", "参加不安", "浮く", "馴染める", "知らない人"),
        weight=18,
        empathy="一人参加って勇気いりますよね。僕も同じでした",
    ),
    ConcernCategory.COST: ConcernDefinition(
        keywords=("高い", "料金", "予算", "安い", "お金", "コスト", "節約", "学生", "追加料金"),
        weight=15,
        empathy="お金の心配、僕も学生時代は同じでした",
    ),
    ConcernCategory.PHYSICAL: ConcernDefinition(
        keywords=("体力", "疲れる", "きつい", "年齢", "運動不足", "持病", "健康"),
        weight=12,
        empathy="体力的な不安、よく分かります",
    ),
    ConcernCategory.COMMUNICATION: ConcernDefinition(
        keywords=("英語", "言葉", "コミュニケーション", "質問できない", "恥ずかしい"),
        weight=10,
        empathy="質問するのって恥ずかしいですよね",
    ),
}


@dataclass(frozen=True)
class ProfileInference:
    """A concern implied by the profile alone, used only to fill gaps."""

    category: ConcernCategory
    applies: Callable[[UserProfile], bool]
    weight: int
    empathy: str


PROFILE_INFERENCES: tuple[ProfileInference, ...] = (
    ProfileInference(
        category=ConcernCategory.SAFETY,
        applies=lambda profile: profile.is_novice,
        weight=20,
        empathy="初心者の方は安全面が心配になりますよね",
    ),
    ProfileInference(
        category=ConcernCategory.SOLO,
        applies=lambda profile: profile.participation_style == "solo",
        weight=18,
        empathy="一人参加、僕も最初は緊張しました",
    ),
)

# Labels used in score reasons and recommendation comments.
CONCERN_LABELS: dict[ConcernCategory, str] = {
    ConcernCategory.SAFETY: "安全性不安",
    ConcernCategory.SKILL: "スキル不安",
    ConcernCategory.SOLO: "一人参加不安",
    ConcernCategory.COST: "予算心配",
    ConcernCategory.PHYSICAL: "体力不安",
    ConcernCategory.COMMUNICATION: "コミュニケーション不安",
}
