import os

import matplotlib
matplotlib.use("Agg")
import pandas as pd
import pytest

from campaign_carbon import PlatformEntry, StorageInput, calculate_distribution, calculate_storage, aggregate
from campaign_carbon.audit import CalculationAudit
from campaign_carbon.main import execute_distribution_batch
from campaign_carbon.visualization import Visualizer


def test_full_batch_execution(tmp_path):
    print("Running test_full_batch_execution...")
    df = pd.DataFrame([
        {"Platform": "Google Search", "Impressions": 120000, "Budget": 800},
        {"Platform": "YouTube", "Impressions": 45000, "Budget": 650},
        {"Platform": "Programmatic", "Impressions": 80000, "Budget": 300},
    ])

    result = execute_distribution_batch(df, reports_dir=str(tmp_path), make_charts=True)

    expected_g = 120000 * 0.2 + 45000 * 0.6 + 80000 * 0.5148
    assert result.total_emissions_kg == pytest.approx(expected_g / 1000.0)
    assert result.emissions_per_currency_unit == pytest.approx(expected_g / 1750.0)

    chart_dirs = os.listdir(tmp_path / "batch_run")
    assert len(chart_dirs) == 1
    assert os.path.exists(tmp_path / "batch_run" / chart_dirs[0] / "breakdown_distribution.png")


def test_visualizer_outputs(tmp_path):
    distribution = calculate_distribution([PlatformEntry("meta", 50000, 200.0)])
    storage = calculate_storage(StorageInput(gigabytes=20, months=6))

    vis = Visualizer(mode="single_run", output_root=str(tmp_path))
    assert vis.session_dir.startswith(str(tmp_path / "single_run"))

    path = vis.plot_breakdown(distribution, title="Campaign Distribution")
    assert path is not None and os.path.exists(path)

    comparison = vis.plot_module_comparison({
        "Campaign Distribution": distribution,
        "Storage & Hardware": storage,
        "Cumulative": aggregate(distribution, storage),
    })
    assert os.path.basename(comparison) == "module_comparison.png"
    assert os.path.exists(comparison)

    empty = calculate_storage(StorageInput(gigabytes=0, laptop_count=0))
    assert vis.plot_breakdown(empty) is None


def test_audit_log_records_results(tmp_path):
    audit = CalculationAudit(log_dir=str(tmp_path))
    result = calculate_distribution([PlatformEntry("linkedin", 2000, 0.0)])

    audit.log_result(result)
    assert audit.log_file is None  # disabled by default

    audit.enabled = True
    audit.log_result(result)
    assert audit.log_file is not None

    with open(audit.log_file, encoding="utf-8") as f:
        content = f.read()
    assert "EMISSION CALCULATION AUDIT LOG" in content
    assert "Distribution: Linkedin" in content
    assert "Distribution: TOTAL" in content
    assert "1000.0000 gCO2e" in content
