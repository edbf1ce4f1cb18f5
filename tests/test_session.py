import pytest

from campaign_carbon import CalculatorSession, PlatformEntry, ItemizedAssetInput, CategoryAssetInput, StorageInput


def test_new_session_is_uncalculated():
    session = CalculatorSession()
    assert all(not m.calculated for m in session.modules)
    assert session.cumulative() is None
    assert session.platforms == [PlatformEntry()]
    assert isinstance(session.assets.inputs, ItemizedAssetInput)


def test_calculate_moves_module_to_calculated():
    session = CalculatorSession()
    session.update_platform(0, platform="meta", impressions=1000, budget=10.0)

    result = session.distribution.calculate()

    assert session.distribution.calculated
    assert session.distribution.result is result
    assert result.total_emissions_kg == pytest.approx(0.5)
    assert not session.assets.calculated


def test_editing_inputs_keeps_stale_result_until_recalculated():
    session = CalculatorSession()
    session.update_platform(0, platform="google", impressions=1000)
    first = session.distribution.calculate()

    session.update_platform(0, impressions=5000)
    session.add_platform()
    assert session.distribution.result is first
    assert session.distribution.result.total_emissions_kg == pytest.approx(0.2)

    second = session.distribution.calculate()
    assert second.total_emissions_kg == pytest.approx(1.0)
    # the blank row added above is skipped
    assert len(second.breakdown) == 1


def test_platform_rows():
    session = CalculatorSession()
    session.add_platform()
    session.add_platform()
    assert len(session.platforms) == 3

    session.update_platform(2, platform="tiktok")
    removed = session.remove_platform(1)
    assert removed == PlatformEntry()
    assert [p.platform for p in session.platforms] == ["", "tiktok"]

    with pytest.raises(AttributeError):
        session.update_platform(0, clicks=10)
    with pytest.raises(IndexError):
        session.remove_platform(5)


def test_reset():
    session = CalculatorSession()
    session.storage.inputs = StorageInput(gigabytes=10)
    session.storage.calculate()
    session.storage.reset()
    assert not session.storage.calculated


def test_switching_asset_strategy_keeps_storage_and_result():
    session = CalculatorSession()
    storage = StorageInput(gigabytes=50, months=2)
    session.assets.inputs = ItemizedAssetInput(images=10, storage=storage)
    before = session.assets.calculate()

    session.set_asset_strategy("category-averaged")

    assert session.asset_strategy == "category-averaged"
    assert isinstance(session.assets.inputs, CategoryAssetInput)
    assert session.assets.inputs.storage is storage
    assert session.assets.result is before

    session.assets.inputs.asset_types = {"video"}
    session.assets.inputs.count = 5
    after = session.assets.calculate()
    assert after.breakdown[0].category == "AI Assets"


def test_session_strategy_from_constructor():
    session = CalculatorSession(asset_strategy="category-averaged")
    assert isinstance(session.assets.inputs, CategoryAssetInput)


def test_cumulative_of_calculated_modules_only():
    session = CalculatorSession()
    session.update_platform(0, platform="youtube", impressions=10000, budget=100.0)
    session.storage.inputs = StorageInput(gigabytes=100, months=1, laptop_count=0)

    distribution = session.distribution.calculate()
    storage = session.storage.calculate()
    total = session.cumulative()

    assert total.module == "cumulative"
    assert total.total_emissions_kg == pytest.approx(distribution.total_emissions_kg + storage.total_emissions_kg)
    assert total.emissions_per_currency_unit == pytest.approx(distribution.emissions_per_currency_unit)
    assert len(total.breakdown) == 2


def test_calculate_all():
    session = CalculatorSession()
    results = session.calculate_all()
    assert [r.module for r in results] == ["distribution", "assets", "storage"]
    assert all(m.calculated for m in session.modules)
    # default storage has one laptop at 50%
    assert results[2].total_emissions_kg == pytest.approx(4.85)


def test_unknown_asset_strategy_is_rejected():
    session = CalculatorSession()
    with pytest.raises(ValueError):
        session.set_asset_strategy("by-vibes")
    assert session.asset_strategy == "itemized"
    assert isinstance(session.assets.inputs, ItemizedAssetInput)

    with pytest.raises(ValueError):
        CalculatorSession(asset_strategy="by-vibes")
