import os
import logging
from datetime import datetime
from typing import Optional

import pandas as pd

from .models import CalculationResult

logger = logging.getLogger(__name__)

# Reports are written to <project root>/reports unless a directory is given
current_directory = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
report_directory = os.path.join(current_directory, 'reports')

MODULE_TITLES = {
    "distribution": "Campaign Distribution",
    "assets": "Asset Creation",
    "storage": "Storage & Hardware",
    "cumulative": "Cumulative",
}

ASSUMPTIONS = [
    "Platform emissions based on energy consumption of data centers and network infrastructure",
    "AI content includes GPU compute, model training allocation, and cooling systems",
    "Cloud storage accounts for data center energy, redundancy, and cooling",
    "Hardware includes lifecycle emissions of laptops allocated based on usage",
]

BREAKDOWN_COLUMNS = ["Category", "Description", "Emissions (g CO2e)", "Emissions (kg CO2e)"]


def has_per_unit_metrics(result: CalculationResult) -> bool:
    """Budget and impression metrics only mean something where distribution is involved."""
    if result.module == "distribution":
        return True
    return result.module == "cumulative" and result.total_impressions > 0


def format_results_text(result: CalculationResult, title: Optional[str] = None) -> str:
    """
    Plain-text export of a result:
    total, per-unit metrics, km equivalent, then one line per breakdown item.
    """
    if title is None:
        title = MODULE_TITLES.get(result.module, result.module)

    lines = [
        f"Digital Marketing Carbon Calculator Results - {title}",
        "=" * 42,
        "",
        f"Total Emissions: {result.total_emissions_kg:.2f} kg CO2e",
    ]
    if has_per_unit_metrics(result):
        lines.append(f"Emissions per Currency Unit: {result.emissions_per_currency_unit:.2f} g/unit")
        lines.append(f"Emissions per Impression: {result.emissions_per_impression:.2f} g")
    lines.append(f"Equivalent to: {result.km_driven_equivalent:.1f} km driven")

    lines.append("")
    lines.append("Breakdown:")
    for item in result.breakdown:
        lines.append(f"- {item.category}: {item.emissions_g / 1000.0:.3f} kg CO2e ({item.description})")

    lines.append("")
    lines.append("Calculation Assumptions:")
    lines.extend(f"- {a}" for a in ASSUMPTIONS)
    return "\n".join(lines) + "\n"


def breakdown_dataframe(result: CalculationResult) -> pd.DataFrame:
    """One row per breakdown line, in breakdown order."""
    rows = [
        {
            "Category": item.category,
            "Description": item.description,
            "Emissions (g CO2e)": item.emissions_g,
            "Emissions (kg CO2e)": item.emissions_g / 1000.0,
        }
        for item in result.breakdown
    ]
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def _write_with_fallback(path: str, write) -> str:
    """Write via `write(path)`; if the file is locked, use a timestamped name beside it."""
    try:
        write(path)
    except PermissionError:
        root, ext = os.path.splitext(path)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        fallback = f"{root}_{ts}{ext}"
        logger.warning(f"Could not save to {path} (File Locked?). Saving to {fallback} instead.")
        write(fallback)
        path = fallback
    return path


def save_results_txt(result: CalculationResult, reports_dir: str = report_directory, title: Optional[str] = None) -> str:
    """Write the text export; returns the path written."""
    os.makedirs(reports_dir, exist_ok=True)
    out_file = os.path.join(reports_dir, f"carbon-calculator-{result.module}-results.txt")
    text = format_results_text(result, title)

    def write(path):
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    out_file = _write_with_fallback(out_file, write)
    logger.info(f"Results saved to: {out_file}")
    return out_file


def save_breakdown_csv(result: CalculationResult, reports_dir: str = report_directory) -> str:
    """Write the breakdown table as CSV; returns the path written."""
    os.makedirs(reports_dir, exist_ok=True)
    out_file = os.path.join(reports_dir, f"carbon-calculator-{result.module}-breakdown.csv")
    df = breakdown_dataframe(result)

    out_file = _write_with_fallback(out_file, lambda path: df.to_csv(path, index=False))
    logger.info(f"Breakdown saved to: {out_file}")
    return out_file
