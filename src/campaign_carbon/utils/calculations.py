from typing import Iterable, List, Optional
from ..constants import (
    CAR_KGCO2_PER_KM, SEVERITY_MEDIUM_KG, SEVERITY_HIGH_KG, SEVERITY_VERY_HIGH_KG,
    TOKENS_PER_TEXT_UNIT, SECONDS_PER_VIDEO_UNIT, FALLBACK_ASSET_TYPE
)
from ..models import (
    BreakdownLine, CalculationResult, EmissionFactorTable, StorageInput,
    ModuleKind, SeverityTier
)
import logging

logger = logging.getLogger(__name__)


def fmt_quantity(x: float) -> str:
    """
    Format a raw input quantity for breakdown descriptions:
    whole numbers without decimals, others with up to two.
    """
    x = float(x)
    if x.is_integer():
        return str(int(x))
    return f"{x:.2f}".rstrip("0").rstrip(".")


def severity_tier(total_kg: float) -> SeverityTier:
    """
    Bucket total emissions (kg CO2e) into a severity tier.
    Half-open intervals: [0,100) low, [100,500) medium, [500,2000) high, [2000,inf) very-high.
    """
    if total_kg < SEVERITY_MEDIUM_KG:
        return "low"
    if total_kg < SEVERITY_HIGH_KG:
        return "medium"
    if total_kg < SEVERITY_VERY_HIGH_KG:
        return "high"
    return "very-high"


def km_driven_equivalent(total_kg: float) -> float:
    """Distance an average passenger car covers for the same emissions."""
    return total_kg / CAR_KGCO2_PER_KM


def platform_display_name(platform: str) -> str:
    if platform == "google-display":
        return "Google Display"
    return platform[:1].upper() + platform[1:]


def platform_emissions_g(platform: str, impressions: int, factors: EmissionFactorTable) -> float:
    """
    Emissions for one platform row. Unrecognised platforms and zero
    impressions contribute nothing.
    """
    factor = factors.platforms.get(platform)
    if factor is None or impressions <= 0:
        return 0.0
    return impressions * factor


def ai_image_emissions_g(images: int, factors: EmissionFactorTable) -> float:
    return images * factors.ai_image_g


def ai_text_emissions_g(text_queries: int, avg_tokens: float, factors: EmissionFactorTable) -> float:
    # factor is quoted per 300 tokens
    return text_queries * (avg_tokens / TOKENS_PER_TEXT_UNIT) * factors.ai_text_per_300_tokens_g


def ai_video_emissions_g(video_seconds: float, factors: EmissionFactorTable) -> float:
    # factor is quoted per 2 seconds of generated video
    return (video_seconds / SECONDS_PER_VIDEO_UNIT) * factors.ai_video_per_2_seconds_g


def effective_asset_factor(asset_types: Iterable[str], factors: EmissionFactorTable) -> float:
    """
    Per-asset factor for a selection of asset types:
      - "unsure" selected: its factor alone, whatever else is selected
      - one type: that type's factor
      - several types: unweighted mean of their factors
    Unknown keys are ignored; an empty selection gives 0.
    """
    known = sorted({t for t in asset_types if t in factors.asset_types})
    if not known:
        return 0.0
    if FALLBACK_ASSET_TYPE in known:
        return factors.asset_types[FALLBACK_ASSET_TYPE]
    if len(known) == 1:
        return factors.asset_types[known[0]]
    return sum(factors.asset_types[t] for t in known) / len(known)


def hardware_emissions_g(storage: StorageInput, factors: EmissionFactorTable) -> float:
    """Laptop lifecycle emissions for one month, scaled by the usage share."""
    return storage.laptop_count * (storage.usage_share_percent / 100.0) * factors.laptop_per_month_g


def storage_emissions_g(storage: StorageInput, factors: EmissionFactorTable) -> float:
    """Cloud storage emissions; green cloud removes a flat share of the total."""
    grams = storage.gigabytes * storage.months * factors.storage_per_gb_month_g
    if storage.green_cloud:
        grams *= (1.0 - factors.green_cloud_reduction)
    return grams


def hardware_storage_lines(storage: Optional[StorageInput], factors: EmissionFactorTable) -> List[BreakdownLine]:
    """
    Breakdown lines for the shared hardware and storage sub-calculations.
    Zero contributions produce no line.
    """
    if storage is None:
        return []

    lines = []
    hardware_g = hardware_emissions_g(storage, factors)
    if hardware_g > 0:
        lines.append(BreakdownLine(
            category="Hardware",
            description=f"{storage.laptop_count} laptop(s) at {fmt_quantity(storage.usage_share_percent)}% usage",
            emissions_g=hardware_g,
        ))

    storage_g = storage_emissions_g(storage, factors)
    if storage_g > 0:
        green = " (green energy)" if storage.green_cloud else ""
        lines.append(BreakdownLine(
            category="Cloud Storage",
            description=f"{fmt_quantity(storage.gigabytes)} GB for {storage.months} month(s){green}",
            emissions_g=storage_g,
        ))
    return lines


def build_result(
    module: ModuleKind,
    breakdown: Iterable[BreakdownLine],
    per_unit_grams: float = 0.0,
    total_budget: float = 0.0,
    total_impressions: int = 0,
) -> CalculationResult:
    """
    Derive a CalculationResult from breakdown lines.

    Totals always come from the breakdown itself. The per-unit metrics use
    per_unit_grams, which is the distribution emissions only: for a pure
    distribution result that is the total, for the cumulative view it is
    the distribution share.
    """
    lines = tuple(breakdown)
    total_g = sum(line.emissions_g for line in lines)
    total_kg = total_g / 1000.0

    per_currency = per_unit_grams / total_budget if total_budget > 0 else 0.0
    per_impression = per_unit_grams / total_impressions if total_impressions > 0 else 0.0

    return CalculationResult(
        module=module,
        total_emissions_kg=total_kg,
        emissions_per_currency_unit=per_currency,
        emissions_per_impression=per_impression,
        km_driven_equivalent=km_driven_equivalent(total_kg),
        severity_tier=severity_tier(total_kg),
        breakdown=lines,
        total_impressions=total_impressions,
        total_budget=total_budget,
    )
