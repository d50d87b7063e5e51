from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional

NOVICE_LEVELS = frozenset({"none", "beginner"})
DEFAULT_USER_NAME = "あなた"


class UserProfile(BaseModel):
    """Per-request profile built by the chat layer.  Every field is optional;
    missing values fall back to defaults instead of failing the request."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: Optional[str] = None
    diving_experience: Optional[str] = None  # none/beginner/advanced/...
    license_type: Optional[str] = None  # none/owd/aow/...
    participation_style: Optional[str] = None  # solo/couple/group
    preferred_area: Optional[str] = None
    budget_range: Optional[str] = None

    @field_validator(
        "diving_experience", "license_type", "participation_style", mode="before"
    )
    @classmethod
    def _normalise_enum_text(cls, v):
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @property
    def display_name(self) -> str:
        return self.name or DEFAULT_USER_NAME

    @property
    def is_novice(self) -> bool:
        return self.diving_experience in NOVICE_LEVELS
