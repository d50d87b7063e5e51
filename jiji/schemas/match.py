from pydantic import BaseModel, Field
from typing import Optional, Any

from jiji.schemas.profile import UserProfile


class DetectedConcern(BaseModel):
    detected: bool = True
    weight: int
    empathy: str
    matched_keywords: list[str] = []
    source: Optional[str] = None  # "profile_inference" when not found in text


class MatchRequest(BaseModel):
    profile: UserProfile = Field(default_factory=UserProfile)
    concerns: list[str] = []
    preferred_area: Optional[str] = None
    max_results: Optional[int] = Field(None, ge=1, le=10)


class MatchingStats(BaseModel):
    total_shops: int
    filtered_shops: int
    top_score: int
    emotional_factor_count: int
    average_top_score: int = 0


class ScoreReason(BaseModel):
    category: str
    concern: str
    solution: str
    empathy: str
    score: int


class EmotionalMatch(BaseModel):
    score: int
    reasons: list[ScoreReason]
    total_score: int


class Recommendation(BaseModel):
    ranking: str
    shop: dict[str, Any]
    main_comment: str
    experience_preview: str
    emotional_match: EmotionalMatch
    summary: str


class MatchResponse(BaseModel):
    success: bool
    recommendations: list[Recommendation] = []
    main_message: Optional[str] = None
    matching_stats: Optional[MatchingStats] = None
    data_source: Optional[str] = None
    error: Optional[str] = None
    fallback_message: Optional[str] = None
    timestamp: Optional[str] = None


class CatalogStatistics(BaseModel):
    total_shops: int
    area_breakdown: dict[str, int]
    grade_breakdown: dict[str, int]
    average_rating: float
    price_range: dict  # {min, max, average}
