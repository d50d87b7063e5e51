"""
Jiji — Shop catalog record

One row of the shop master sheet.  The catalog arrives from spreadsheet
exports as often as from typed JSON, so boolean and numeric columns are
coerced leniently: ``はい`` / ``○`` / ``yes`` / ``1`` / ``true`` count as
true, numeric cells keep their leading number (``16500円`` is 16500) and
blank or non-numeric cells become 0.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

GRADE_TIERS: tuple[str, ...] = ("S", "A", "B", "C")
LOWEST_GRADE_TIERS = frozenset({"C", ""})

_TRUTHY_CELLS = frozenset({"true", "1", "yes", "はい", "○"})

_BOOLEAN_FIELDS = (
    "fun_dive_available",
    "license_course_available",
    "private_guide_available",
    "equipment_rental_included",
    "safety_equipment",
    "insurance_coverage",
    "female_instructor",
    "english_support",
    "pickup_service",
    "beginner_friendly",
    "solo_welcome",
    "family_friendly",
    "photo_service",
    "video_service",
)

_INTEGER_FIELDS = (
    "fun_dive_price_2tanks",
    "trial_dive_price_beach",
    "trial_dive_price_boat",
    "experience_years",
    "review_count",
)

# Leading number of a cell, so "16500円" and "8名" keep their value.
_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")


def _parse_number(value: str) -> float | None:
    match = _LEADING_NUMBER.match(value)
    return float(match.group(1)) if match else None


class ShopRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # Identity
    shop_id: str
    shop_name: str
    area: str
    phone_line: str = ""
    website: str = ""
    operating_hours: str = ""

    # Services
    fun_dive_available: bool = False
    trial_dive_options: str = ""
    license_course_available: bool = False
    max_group_size: Optional[int] = Field(None, ge=0)
    private_guide_available: bool = False

    # Prices (yen, 0 = not offered)
    fun_dive_price_2tanks: int = Field(0, ge=0)
    trial_dive_price_beach: int = Field(0, ge=0)
    trial_dive_price_boat: int = Field(0, ge=0)
    equipment_rental_included: bool = False
    additional_fees: str = ""

    # Safety and amenities
    safety_equipment: bool = False
    insurance_coverage: bool = False
    female_instructor: bool = False
    english_support: bool = False
    pickup_service: bool = False

    # Strengths
    beginner_friendly: bool = False
    solo_welcome: bool = False
    family_friendly: bool = False
    photo_service: bool = False
    video_service: bool = False

    # Expertise
    speciality_areas: str = ""
    certification_level: str = ""
    experience_years: int = Field(0, ge=0)

    # Track record
    customer_rating: float = Field(0.0, ge=0.0, le=5.0)
    review_count: int = Field(0, ge=0)
    incident_record: str = ""
    jiji_grade: str = ""

    last_updated: str = ""
    notes: str = ""

    @field_validator(*_BOOLEAN_FIELDS, mode="before")
    @classmethod
    def _coerce_boolean_cell(cls, v):
        if v is None:
            return False
        if isinstance(v, str):
            return v.strip().lower() in _TRUTHY_CELLS
        return v

    @field_validator(*_INTEGER_FIELDS, mode="before")
    @classmethod
    def _coerce_integer_cell(cls, v):
        if v is None:
            return 0
        if isinstance(v, str):
            number = _parse_number(v)
            return int(number) if number is not None else 0
        if isinstance(v, float):
            return int(v)
        return v

    @field_validator("customer_rating", mode="before")
    @classmethod
    def _coerce_rating_cell(cls, v):
        if v is None:
            return 0.0
        if isinstance(v, str):
            number = _parse_number(v)
            return number if number is not None else 0.0
        return v

    @field_validator("max_group_size", mode="before")
    @classmethod
    def _coerce_group_size(cls, v):
        """Unknown sizes stay ``None``; ``0`` would pass every small-group check."""
        if isinstance(v, str):
            number = _parse_number(v)
            return int(number) if number is not None else None
        if isinstance(v, float):
            return int(v)
        return v

    @field_validator(
        "trial_dive_options", "additional_fees", "incident_record", "jiji_grade",
        mode="before",
    )
    @classmethod
    def _blank_text(cls, v):
        return "" if v is None else v

    # ── Derived attributes ──────────────────────────────────────────

    @property
    def grade_tier(self) -> str:
        """``S``/``A``/``B``/``C`` from labels like ``S級認定``; ``""`` if ungraded."""
        head = self.jiji_grade.strip()[:1].upper()
        return head if head in GRADE_TIERS else ""

    @property
    def has_trial_dive(self) -> bool:
        return bool(self.trial_dive_options.strip())

    @property
    def has_clean_record(self) -> bool:
        return self.incident_record.strip() in ("", "clean")

    @property
    def has_additional_fees(self) -> bool:
        return bool(self.additional_fees.strip())
