"""Tests for the catalog providers and catalog statistics."""
import json

import pytest

from jiji.schemas.shop import ShopRecord
from jiji.services.catalog_service import (
    CatalogError,
    JsonFileCatalogProvider,
    StaticCatalogProvider,
    is_active_shop,
    summarize_catalog,
)


@pytest.fixture
def catalog_file(tmp_path, catalog_rows):
    path = tmp_path / "shops.json"
    path.write_text(json.dumps(catalog_rows, ensure_ascii=False), encoding="utf-8")
    return path


class TestActiveFilter:

    @pytest.mark.parametrize("field", ["shop_name", "area", "jiji_grade"])
    def test_blank_required_column_is_inactive(self, make_shop, field):
        assert not is_active_shop(make_shop(**{field: " "}))

    def test_complete_row_is_active(self, make_shop):
        assert is_active_shop(make_shop())


class TestStaticCatalogProvider:

    def test_all_shops(self, catalog_shops):
        provider = StaticCatalogProvider(catalog_shops)
        assert [s.shop_id for s in provider.get_shops()] == [s.shop_id for s in catalog_shops]

    def test_area_filter_is_exact(self, catalog_shops):
        provider = StaticCatalogProvider(catalog_shops)
        assert [s.shop_id for s in provider.get_shops("石垣島")] == ["ISH001", "ISH002"]
        assert provider.get_shops("石垣") == []

    def test_accepts_raw_rows(self, catalog_rows):
        provider = StaticCatalogProvider(catalog_rows)
        assert all(isinstance(s, ShopRecord) for s in provider.get_shops())

    def test_skips_ungraded_rows(self, make_shop):
        provider = StaticCatalogProvider([make_shop(), make_shop(shop_id="TST002", jiji_grade="")])
        assert [s.shop_id for s in provider.get_shops()] == ["TST001"]


class TestJsonFileCatalogProvider:

    @pytest.mark.asyncio
    async def test_loads_bundled_rows(self, catalog_file):
        shops = await JsonFileCatalogProvider(catalog_file).get_shops()
        assert len(shops) == 5
        assert shops[0].shop_name == "石垣島マリンサービス"

    @pytest.mark.asyncio
    async def test_area_filter(self, catalog_file):
        shops = await JsonFileCatalogProvider(catalog_file).get_shops("慶良間")
        assert [s.shop_id for s in shops] == ["KER001"]

    @pytest.mark.asyncio
    async def test_rereads_file_each_call(self, tmp_path, catalog_rows):
        path = tmp_path / "shops.json"
        path.write_text(json.dumps(catalog_rows[:1], ensure_ascii=False), encoding="utf-8")
        provider = JsonFileCatalogProvider(path)
        assert len(await provider.get_shops()) == 1

        path.write_text(json.dumps(catalog_rows, ensure_ascii=False), encoding="utf-8")
        assert len(await provider.get_shops()) == 5

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            await JsonFileCatalogProvider(tmp_path / "missing.json").get_shops()

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path):
        path = tmp_path / "shops.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="not valid JSON"):
            await JsonFileCatalogProvider(path).get_shops()

    def test_payload_must_be_list(self):
        with pytest.raises(CatalogError, match="JSON array"):
            JsonFileCatalogProvider.parse('{"shops": []}')

    def test_invalid_row_reports_index(self):
        rows = [{"shop_id": "A1", "shop_name": "A", "area": "石垣島"}, {"shop_name": "B"}]
        with pytest.raises(CatalogError, match="invalid shop row 1"):
            JsonFileCatalogProvider.parse(json.dumps(rows))

    def test_spreadsheet_cells_coerced(self):
        """Sheet exports deliver every cell as text."""
        row = {
            "shop_id": "SHT001",
            "shop_name": "シートダイビング",
            "area": "宮古島",
            "beginner_friendly": "はい",
            "solo_welcome": "○",
            "photo_service": "いいえ",
            "safety_equipment": "TRUE",
            "fun_dive_price_2tanks": "12000",
            "customer_rating": "4.5",
            "review_count": "未集計",
            "max_group_size": "",
            "incident_record": None,
            "jiji_grade": "A級認定",
        }
        shop = JsonFileCatalogProvider.parse(json.dumps([row], ensure_ascii=False))[0]

        assert shop.beginner_friendly is True
        assert shop.solo_welcome is True
        assert shop.photo_service is False
        assert shop.safety_equipment is True
        assert shop.fun_dive_price_2tanks == 12000
        assert shop.customer_rating == 4.5
        assert shop.review_count == 0
        assert shop.max_group_size is None
        assert shop.has_clean_record
        assert shop.grade_tier == "A"

    def test_numeric_cells_keep_leading_number(self):
        """Units and decimals in sheet cells do not reject the row."""
        row = {
            "shop_id": "UNT001",
            "shop_name": "単位ダイビング",
            "area": "石垣島",
            "jiji_grade": "B級認定",
            "fun_dive_price_2tanks": "16500円",
            "trial_dive_price_beach": "12000.5",
            "max_group_size": "8名",
            "customer_rating": "4.5点",
            "experience_years": "約10年",
        }
        shop = JsonFileCatalogProvider.parse(json.dumps([row], ensure_ascii=False))[0]

        assert shop.fun_dive_price_2tanks == 16500
        assert shop.trial_dive_price_beach == 12000
        assert shop.max_group_size == 8
        assert shop.customer_rating == 4.5
        assert shop.experience_years == 0

    @pytest.mark.parametrize("cell", ["abc", "  ", "要相談"])
    def test_group_size_without_number_is_unknown(self, make_shop, cell):
        assert make_shop(max_group_size=cell).max_group_size is None

    def test_fractional_json_numbers_truncated(self, make_shop):
        shop = make_shop(fun_dive_price_2tanks=12000.5, max_group_size=4.0)
        assert shop.fun_dive_price_2tanks == 12000
        assert shop.max_group_size == 4

    def test_camel_case_columns(self):
        row = {"shopId": "CML001", "shopName": "キャメル", "area": "石垣島", "soloWelcome": True}
        shop = JsonFileCatalogProvider.parse(json.dumps([row], ensure_ascii=False))[0]
        assert shop.shop_id == "CML001"
        assert shop.solo_welcome is True


class TestSummarizeCatalog:

    def test_bundled_catalog(self, catalog_shops):
        stats = summarize_catalog(catalog_shops)
        assert stats["total_shops"] == 5
        assert stats["area_breakdown"] == {"石垣島": 2, "宮古島": 2, "慶良間": 1}
        assert stats["grade_breakdown"] == {"S級認定": 3, "A級認定": 2}
        assert stats["average_rating"] == pytest.approx(4.7)
        # ISH002 lists no fun-dive price
        assert stats["price_range"] == {"min": 12800, "max": 16500, "average": 14250}

    def test_empty(self):
        stats = summarize_catalog([])
        assert stats["total_shops"] == 0
        assert stats["average_rating"] == 0.0
        assert stats["price_range"] == {"min": 0, "max": 0, "average": 0}
