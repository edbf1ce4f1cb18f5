import pytest

from campaign_carbon.models import (
    PlatformEntry, ItemizedAssetInput, CategoryAssetInput, StorageInput
)
from campaign_carbon.calculator import (
    calculate_distribution, calculate_assets, calculate_storage
)
from campaign_carbon.utils.calculations import (
    severity_tier, effective_asset_factor, km_driven_equivalent
)
from campaign_carbon.models import DEFAULT_FACTORS, EmissionFactorTable


def _sum_breakdown_kg(result):
    return sum(item.emissions_g for item in result.breakdown) / 1000.0


def test_platform_contribution_is_impressions_times_factor():
    for platform, factor in DEFAULT_FACTORS.platforms.items():
        result = calculate_distribution([PlatformEntry(platform, 12345, 0.0)])
        assert len(result.breakdown) == 1
        assert result.breakdown[0].emissions_g == 12345 * factor


def test_distribution_metrics():
    # 10,000 x 0.5 g + 20,000 x 0.2 g = 9,000 g
    entries = [
        PlatformEntry("meta", 10000, 100.0),
        PlatformEntry("google", 20000, 50.0),
    ]
    result = calculate_distribution(entries)

    assert result.module == "distribution"
    assert result.total_emissions_kg == pytest.approx(9.0)
    assert result.emissions_per_currency_unit == pytest.approx(9000.0 / 150.0)
    assert result.emissions_per_impression == pytest.approx(9000.0 / 30000)
    assert result.total_impressions == 30000
    assert result.total_budget == pytest.approx(150.0)
    assert result.severity_tier == "low"
    assert [b.category for b in result.breakdown] == ["Meta", "Google"]
    assert result.breakdown[0].description == "10,000 impressions (budget 100.00)"


def test_unknown_platform_and_zero_impressions_are_skipped():
    entries = [
        PlatformEntry("myspace", 5000, 999.0),
        PlatformEntry("youtube", 0, 250.0),
        PlatformEntry("", 100, 0.0),
        PlatformEntry("google-display", 1000, 0.0),
    ]
    result = calculate_distribution(entries)

    assert len(result.breakdown) == 1
    assert result.breakdown[0].category == "Google Display"
    assert result.breakdown[0].description == "1,000 impressions"
    # skipped rows do not count towards budget or impressions
    assert result.total_budget == 0.0
    assert result.total_impressions == 1000
    assert result.emissions_per_currency_unit == 0.0


def test_empty_distribution():
    result = calculate_distribution([])
    assert result.breakdown == ()
    assert result.total_emissions_kg == 0.0
    assert result.emissions_per_currency_unit == 0.0
    assert result.emissions_per_impression == 0.0
    assert result.km_driven_equivalent == 0.0
    assert result.severity_tier == "low"


@pytest.mark.parametrize("kg, tier", [
    (0.0, "low"),
    (99.99, "low"),
    (100.0, "medium"),
    (499.99, "medium"),
    (500.0, "high"),
    (1999.99, "high"),
    (2000.0, "very-high"),
    (1e6, "very-high"),
])
def test_severity_boundaries(kg, tier):
    assert severity_tier(kg) == tier


def test_severity_from_distribution_total():
    # 200,000 impressions x 0.5 g = 100 kg, exactly on the medium boundary
    result = calculate_distribution([PlatformEntry("linkedin", 200000, 0.0)])
    assert result.total_emissions_kg == pytest.approx(100.0)
    assert result.severity_tier == "medium"


def test_km_equivalent():
    assert km_driven_equivalent(18.4) == pytest.approx(100.0)
    # 92,000 x 0.2 g = 18.4 kg
    result = calculate_distribution([PlatformEntry("bing", 92000, 0.0)])
    assert result.km_driven_equivalent == pytest.approx(100.0)


def test_itemized_assets():
    asset_input = ItemizedAssetInput(images=10, text_queries=100, avg_tokens=600, video_seconds=30)
    result = calculate_assets(asset_input)

    by_category = {b.category: b.emissions_g for b in result.breakdown}
    assert by_category["AI Images"] == pytest.approx(20.0)
    assert by_category["AI Text"] == pytest.approx(100 * 2 * 0.036)
    assert by_category["AI Video"] == pytest.approx(15 * 4.4)
    assert result.total_emissions_kg == pytest.approx(_sum_breakdown_kg(result))
    assert result.emissions_per_currency_unit == 0.0
    assert result.emissions_per_impression == 0.0


def test_itemized_zero_categories_produce_no_lines():
    result = calculate_assets(ItemizedAssetInput(images=3))
    assert [b.category for b in result.breakdown] == ["AI Images"]

    result = calculate_assets(ItemizedAssetInput())
    assert result.breakdown == ()
    assert result.total_emissions_kg == 0.0


def test_category_averaging():
    factor = effective_asset_factor(["image", "video"], DEFAULT_FACTORS)
    assert factor == pytest.approx(5.4)

    result = calculate_assets(CategoryAssetInput(asset_types={"image", "video"}, count=10))
    assert len(result.breakdown) == 1
    assert result.breakdown[0].emissions_g == pytest.approx(54.0)
    assert result.total_emissions_kg == pytest.approx(0.054)


def test_unsure_overrides_other_selections():
    assert effective_asset_factor(["image", "unsure"], DEFAULT_FACTORS) == 1.0
    assert effective_asset_factor(["text", "video", "mixed", "unsure"], DEFAULT_FACTORS) == 1.0

    result = calculate_assets(CategoryAssetInput(asset_types={"image", "unsure"}, count=7))
    assert result.breakdown[0].emissions_g == pytest.approx(7.0)


def test_single_and_unknown_asset_types():
    assert effective_asset_factor(["video"], DEFAULT_FACTORS) == 8.8
    assert effective_asset_factor(["video", "hologram"], DEFAULT_FACTORS) == 8.8
    assert effective_asset_factor(["hologram"], DEFAULT_FACTORS) == 0.0
    assert effective_asset_factor([], DEFAULT_FACTORS) == 0.0

    result = calculate_assets(CategoryAssetInput(asset_types={"hologram"}, count=100))
    assert result.breakdown == ()


def test_strategy_by_name():
    with pytest.raises(ValueError):
        calculate_assets(ItemizedAssetInput(images=1), strategy="by-vibes")
    with pytest.raises(TypeError):
        calculate_assets(ItemizedAssetInput(images=1), strategy="category-averaged")

    result = calculate_assets(ItemizedAssetInput(images=1), strategy="itemized")
    assert result.total_emissions_kg == pytest.approx(0.002)


def test_hardware_and_storage():
    storage = StorageInput(gigabytes=100, months=3, laptop_count=2, usage_share_percent=25, green_cloud=False)
    result = calculate_storage(storage)

    assert result.module == "storage"
    hardware, cloud = result.breakdown
    assert hardware.category == "Hardware"
    assert hardware.emissions_g == pytest.approx(2 * 0.25 * 9700)
    assert hardware.description == "2 laptop(s) at 25% usage"
    assert cloud.category == "Cloud Storage"
    assert cloud.emissions_g == pytest.approx(100 * 3 * 20)
    assert cloud.description == "100 GB for 3 month(s)"
    assert result.total_emissions_kg == pytest.approx(_sum_breakdown_kg(result))


def test_green_cloud_discount():
    plain = calculate_storage(StorageInput(gigabytes=250, months=4, laptop_count=0, green_cloud=False))
    green = calculate_storage(StorageInput(gigabytes=250, months=4, laptop_count=0, green_cloud=True))

    assert len(plain.breakdown) == 1
    assert green.breakdown[0].emissions_g == pytest.approx(0.7 * plain.breakdown[0].emissions_g)
    assert green.breakdown[0].description.endswith("(green energy)")


def test_storage_zero_values_produce_no_lines():
    result = calculate_storage(StorageInput(gigabytes=0, laptop_count=0))
    assert result.breakdown == ()

    result = calculate_storage(StorageInput(gigabytes=0, laptop_count=3, usage_share_percent=0))
    assert result.breakdown == ()


def test_assets_include_shared_storage_lines():
    storage = StorageInput(gigabytes=10, months=1, laptop_count=1, usage_share_percent=50)
    itemized = calculate_assets(ItemizedAssetInput(images=5, storage=storage))
    averaged = calculate_assets(CategoryAssetInput(asset_types={"text"}, count=4, storage=storage))

    assert [b.category for b in itemized.breakdown] == ["AI Images", "Hardware", "Cloud Storage"]
    assert [b.category for b in averaged.breakdown] == ["AI Assets", "Hardware", "Cloud Storage"]
    assert itemized.breakdown[1:] == calculate_storage(storage).breakdown
    assert itemized.total_emissions_kg == pytest.approx((10 + 4850 + 200) / 1000.0)


def test_zero_factor_overrides_produce_no_lines():
    factors = EmissionFactorTable(ai_image_g=0.0, ai_text_per_300_tokens_g=0.0, ai_video_per_2_seconds_g=0.0)
    result = calculate_assets(ItemizedAssetInput(images=5, text_queries=20, video_seconds=10), factors)
    assert result.breakdown == ()
    assert result.total_emissions_kg == 0.0

    factors = EmissionFactorTable(ai_image_g=0.0)
    result = calculate_assets(ItemizedAssetInput(images=5, video_seconds=10), factors)
    assert [b.category for b in result.breakdown] == ["AI Video"]

    factors = EmissionFactorTable(platforms={"meta": 0.0})
    assert calculate_distribution([PlatformEntry("meta", 1000, 10.0)], factors).breakdown == ()
