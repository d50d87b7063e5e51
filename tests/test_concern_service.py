"""Unit tests for ConcernService — keyword detection and profile inference."""
import pytest

from jiji.schemas.profile import UserProfile
from jiji.services.concern_lexicon import CONCERN_DEFINITIONS, ConcernCategory
from jiji.services.concern_service import PROFILE_INFERENCE_SOURCE, ConcernService


@pytest.fixture
def concern_service():
    return ConcernService()


class TestKeywordDetection:
    """Tests for the substring keyword pass."""

    def test_first_timer_concerns(self, concern_service, first_timer_concerns):
        """Persona 1 raises safety and solo worries in text."""
        profile = UserProfile(diving_experience="advanced")
        result = concern_service.detect(profile, first_timer_concerns)
        assert list(result) == [ConcernCategory.SAFETY, ConcernCategory.SOLO]
        assert result[ConcernCategory.SAFETY].matched_keywords == ["不安", "心配", "大丈夫", "器材"]
        assert result[ConcernCategory.SOLO].matched_keywords == ["一人"]
        assert result[ConcernCategory.SAFETY].source is None

    def test_definition_values_copied(self, concern_service):
        """Weight and empathy come from the lexicon entry."""
        result = concern_service.detect(UserProfile(), ["料金が高いのが心配"])
        cost = result[ConcernCategory.COST]
        assert cost.detected is True
        assert cost.weight == 15
        assert cost.empathy == CONCERN_DEFINITIONS[ConcernCategory.COST].empathy
        assert cost.matched_keywords == ["高い", "料金"]

    def test_texts_joined_across_messages(self, concern_service):
        """Keywords are found in any of the separately expressed texts."""
        result = concern_service.detect(UserProfile(), ["英語が苦手", "体力に自信ない"])
        assert ConcernCategory.COMMUNICATION in result
        assert ConcernCategory.PHYSICAL in result
        assert ConcernCategory.SKILL in result  # 自信ない

    def test_case_insensitive(self, concern_service, monkeypatch):
        """Matching lowercases both the text and the keyword."""
        from jiji.services import concern_service as module
        from jiji.services.concern_lexicon import ConcernDefinition

        patched = dict(module.CONCERN_DEFINITIONS)
        patched[ConcernCategory.COMMUNICATION] = ConcernDefinition(
            keywords=("English",), weight=10, empathy="x",
        )
        monkeypatch.setattr(module, "CONCERN_DEFINITIONS", patched)

        result = concern_service.detect(UserProfile(), ["I can't speak ENGLISH well"])
        assert result[ConcernCategory.COMMUNICATION].matched_keywords == ["English"]

    def test_substring_false_positive_kept(self, concern_service):
        """'学生' inside '大学生' still counts as a cost concern."""
        result = concern_service.detect(UserProfile(), ["大学生です"])
        assert ConcernCategory.COST in result

    def test_one_phrase_can_trigger_several_categories(self, concern_service):
        """'参加不安' is a solo keyword that also contains the safety keyword '不安'."""
        result = concern_service.detect(UserProfile(), ["参加不安"])
        assert ConcernCategory.SOLO in result
        assert ConcernCategory.SAFETY in result

    def test_near_miss_not_detected(self, concern_service):
        """'浮かない' does not contain the keyword '浮く'."""
        result = concern_service.detect(UserProfile(), ["浮かない？"])
        assert result == {}


class TestProfileInference:
    """Tests for concerns inferred from the profile alone."""

    @pytest.mark.parametrize("experience", ["none", "beginner"])
    def test_novice_infers_safety(self, concern_service, experience):
        result = concern_service.detect(UserProfile(diving_experience=experience), [])
        safety = result[ConcernCategory.SAFETY]
        assert safety.source == PROFILE_INFERENCE_SOURCE
        assert safety.weight == 20
        assert safety.matched_keywords == []

    def test_solo_style_infers_solo(self, concern_service):
        result = concern_service.detect(UserProfile(participation_style="solo"), [])
        assert list(result) == [ConcernCategory.SOLO]
        assert result[ConcernCategory.SOLO].source == PROFILE_INFERENCE_SOURCE

    def test_text_detection_takes_precedence(self, concern_service):
        """Inference never overwrites a concern found in text."""
        profile = UserProfile(diving_experience="none")
        result = concern_service.detect(profile, ["事故が怖い"])
        safety = result[ConcernCategory.SAFETY]
        assert safety.source is None
        assert safety.weight == 25
        assert safety.matched_keywords == ["怖い", "事故"]

    def test_inferred_categories_follow_text_matches(self, concern_service, beginner_solo_on_budget, budget_concerns):
        """Persona 2: solo and cost from text, safety inferred afterwards."""
        result = concern_service.detect(beginner_solo_on_budget, budget_concerns)
        assert list(result) == [
            ConcernCategory.SOLO,
            ConcernCategory.COST,
            ConcernCategory.SAFETY,
        ]
        assert result[ConcernCategory.SAFETY].source == PROFILE_INFERENCE_SOURCE

    def test_experienced_without_text_is_empty(self, concern_service, experienced_couple):
        assert concern_service.detect(experienced_couple, []) == {}

    def test_profile_text_is_normalised(self, concern_service):
        """Enum-like profile fields are compared lowercased and trimmed."""
        result = concern_service.detect(UserProfile(participation_style=" Solo "), [])
        assert ConcernCategory.SOLO in result


class TestIdempotence:
    def test_repeated_detection_identical(self, concern_service, first_timer_solo, first_timer_concerns):
        first = concern_service.detect(first_timer_solo, first_timer_concerns)
        second = concern_service.detect(first_timer_solo, first_timer_concerns)
        assert first == second
