"""Shared pytest fixtures for Jiji tests."""
import json
from pathlib import Path

import pytest

from jiji.schemas.profile import UserProfile
from jiji.schemas.shop import ShopRecord

BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "jiji" / "data" / "shops.json"


@pytest.fixture
def catalog_rows():
    """The five-shop Okinawa demo catalog as raw JSON rows.

    Service scores: ISH001=53, ISH002=48, KER001=45, MYK001=43, MYK002=35.
    """
    return json.loads(BUNDLED_CATALOG.read_text(encoding="utf-8"))


@pytest.fixture
def catalog_shops(catalog_rows):
    return [ShopRecord.model_validate(row) for row in catalog_rows]


@pytest.fixture
def shops_by_id(catalog_shops):
    return {shop.shop_id: shop for shop in catalog_shops}


@pytest.fixture
def make_shop():
    """Factory for a minimal shop with every bonus attribute switched off."""
    def _make(**overrides):
        fields = {
            "shop_id": "TST001",
            "shop_name": "テストダイビング",
            "area": "石垣島",
            "jiji_grade": "B級認定",
            "trial_dive_options": "ビーチ専門",
            "incident_record": "事故1件",
            "additional_fees": "器材レンタル3000円",
        }
        fields.update(overrides)
        return ShopRecord(**fields)
    return _make


@pytest.fixture
def scenario_shop(make_shop):
    """Shop that satisfies every safety, personal and solo condition."""
    return make_shop(
        shop_id="SCN001",
        shop_name="安心ダイビング",
        jiji_grade="S級認定",
        safety_equipment=True,
        insurance_coverage=True,
        experience_years=15,
        incident_record="",
        solo_welcome=True,
        max_group_size=4,
        private_guide_available=True,
        beginner_friendly=True,
        customer_rating=4.6,
        review_count=10,
    )


@pytest.fixture
def first_timer_solo():
    """Persona 1 from the demo: never dived, no licence, coming alone."""
    return UserProfile(
        name="田中美咲",
        diving_experience="none",
        license_type="none",
        participation_style="solo",
        preferred_area="石垣島",
    )


@pytest.fixture
def first_timer_concerns():
    return [
        "初めてのダイビングで不安です",
        "泳ぎが得意じゃないけど大丈夫？",
        "器材が壊れたりしないか心配",
        "一人で参加しても浮かない？",
    ]


@pytest.fixture
def beginner_solo_on_budget():
    """Persona 2 from the demo."""
    return UserProfile(
        name="佐藤健一",
        diving_experience="beginner",
        license_type="OWD",
        participation_style="solo",
        preferred_area="宮古島",
    )


@pytest.fixture
def budget_concerns():
    return [
        "まだ経験が少なくて自信がない",
        "お金をそんなにかけられない",
        "一人参加で知らない人ばかりだと緊張する",
    ]


@pytest.fixture
def experienced_couple():
    return UserProfile(
        name="鈴木",
        diving_experience="advanced",
        license_type="AOW",
        participation_style="couple",
    )
