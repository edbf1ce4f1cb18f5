import logging
import os
from typing import Dict, Optional

import pandas as pd

from .audit import audit_logger
from .calculator import calculate_distribution
from .models import CalculationResult
from .session import CalculatorSession
from .reporting import report_directory, save_breakdown_csv, save_results_txt, MODULE_TITLES
from .utils.input_helpers import (
    prompt_choice, prompt_yes_no, print_header, print_result_overview, style_prompt,
    prompt_platform_entries, prompt_itemized_assets, prompt_category_assets,
    prompt_storage_input, parse_platform_rows, C_SUCCESS, C_RESET
)
from .logging_conf import setup_logging
from .visualization import Visualizer

logger = logging.getLogger(__name__)

REQUIRED_PLATFORM_COLUMNS = ("Platform", "Impressions")


def read_platform_file(path: str) -> Optional[pd.DataFrame]:
    """Read a platform sheet from CSV or Excel; None when unusable."""
    if not os.path.exists(path):
        logger.error(f"Platform file not found at {path}")
        return None

    try:
        if path.lower().endswith((".xlsx", ".xls")):
            df = pd.read_excel(path)
        else:
            df = pd.read_csv(path)
    except Exception as e:
        logger.error(f"Error reading platform file: {e}")
        return None

    missing = [c for c in REQUIRED_PLATFORM_COLUMNS if c not in df.columns]
    if missing:
        logger.error(f"Invalid platform file: missing column(s) {', '.join(missing)}.")
        return None
    return df


def execute_distribution_batch(
    df: pd.DataFrame,
    reports_dir: str = report_directory,
    make_charts: bool = True
) -> CalculationResult:
    """
    Distribution emissions for every row of a platform sheet; writes the
    text export and the breakdown CSV (plus a chart) to reports_dir.
    """
    entries = parse_platform_rows(df)
    print_header(f"Calculating distribution emissions for {len(entries)} platform row(s)...")

    result = calculate_distribution(entries)
    skipped = len(entries) - len(result.breakdown)
    if skipped:
        logger.warning(f"{skipped} row(s) skipped (unknown platform or no impressions).")

    audit_logger.log_result(result)
    print_result_overview(result, title=MODULE_TITLES["distribution"])

    save_results_txt(result, reports_dir)
    save_breakdown_csv(result, reports_dir)

    if make_charts:
        try:
            vis = Visualizer(mode="batch_run", output_root=reports_dir)
            vis.plot_breakdown(result, title=MODULE_TITLES["distribution"])
            print(f"\nCharts saved to: {vis.session_dir}")
        except Exception as e:
            logger.error(f"Batch visualization failed: {e}")

    return result


def run_batch_mode():
    print_header("Batch Mode: Platform File")
    print("Expected columns: Platform, Impressions, Budget (optional)")
    path = input(style_prompt("Path to platform CSV/Excel file: ")).strip().strip('"')
    df = read_platform_file(path)
    if df is None:
        return None
    print(f"\n{C_SUCCESS}Loaded {len(df)} platform rows.{C_RESET}")
    return execute_distribution_batch(df)


def run_single_mode():
    session = CalculatorSession()

    print_header("Step 1: Modules")
    use_distribution = prompt_yes_no("Calculate ad distribution emissions?", default=True)
    use_assets = prompt_yes_no("Calculate asset creation emissions?", default=True)

    separate_storage = False
    if use_assets:
        strategy = prompt_choice("Asset input style", ["itemized", "category-averaged"], default="itemized")
        session.set_asset_strategy(strategy)
        separate_storage = prompt_yes_no("Report hardware & storage as a separate module?", default=False)
    use_storage = separate_storage or (not use_assets and prompt_yes_no("Calculate hardware & storage emissions?", default=False))

    print_header("Step 2: Inputs")
    if use_distribution:
        session.distribution.inputs = prompt_platform_entries()
    if use_assets:
        if session.asset_strategy == "category-averaged":
            session.assets.inputs = prompt_category_assets(include_storage=not separate_storage)
        else:
            session.assets.inputs = prompt_itemized_assets(include_storage=not separate_storage)
    if use_storage:
        session.storage.inputs = prompt_storage_input()

    print_header("Step 3: Results")
    selected = [
        (use_distribution, session.distribution),
        (use_assets, session.assets),
        (use_storage, session.storage),
    ]
    results: Dict[str, CalculationResult] = {}
    for wanted, module in selected:
        if not wanted:
            continue
        result = module.calculate()
        title = MODULE_TITLES[module.name]
        print_result_overview(result, title=title)
        results[title] = result

    if not results:
        print("No module selected. Nothing to calculate.")
        return None

    if len(results) > 1:
        cumulative = session.cumulative()
        audit_logger.log_result(cumulative)
        print_result_overview(cumulative, title="Cumulative")
        results["Cumulative"] = cumulative

    print_header("Step 4: Export")
    if prompt_yes_no("Export results as text and CSV?", default=False):
        for title, result in results.items():
            save_results_txt(result, title=title)
            save_breakdown_csv(result)

    if prompt_yes_no("Save charts?", default=False):
        try:
            vis = Visualizer(mode="single_run")
            for title, result in results.items():
                vis.plot_breakdown(result, title=title)
            if len(results) > 1:
                vis.plot_module_comparison(results)
            print(f"\nCharts saved to: {vis.session_dir}")
        except Exception as e:
            logger.error(f"Visualization failed: {e}")

    return results


def main():
    setup_logging(console_level=logging.INFO)

    print_header("Digital marketing carbon calculator - Start")

    audit_logger.enabled = prompt_yes_no("Keep an audit log of calculations?", default=False)

    print("Select operation mode:")
    mode = prompt_choice("Mode", ["Single Run (Interactive)", "Batch (Platform File)"], default="Single Run (Interactive)")

    if mode == "Batch (Platform File)":
        run_batch_mode()
    else:
        run_single_mode()

    if audit_logger.log_file:
        print(f"Audit log: {audit_logger.log_file}")


if __name__ == "__main__":
    main()
