import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Union

from .constants import AssetStrategyName
from .models import (
    BreakdownLine, CalculationResult, CategoryAssetInput, EmissionFactorTable,
    ItemizedAssetInput, PlatformEntry, StorageInput, DEFAULT_FACTORS
)
from .utils.calculations import (
    ai_image_emissions_g, ai_text_emissions_g, ai_video_emissions_g,
    build_result, effective_asset_factor, fmt_quantity, hardware_storage_lines,
    platform_display_name, platform_emissions_g
)

logger = logging.getLogger(__name__)

AssetInput = Union[ItemizedAssetInput, CategoryAssetInput]


# ============================================================================
# DISTRIBUTION
# ============================================================================

def calculate_distribution(
    entries: Iterable[PlatformEntry],
    factors: EmissionFactorTable = DEFAULT_FACTORS
) -> CalculationResult:
    """
    Ad distribution emissions: impressions x per-impression platform factor.
    Rows with an unknown platform or no impressions are skipped and do not
    count towards the impression and budget totals.
    """
    breakdown = []
    total_g = 0.0
    total_impressions = 0
    total_budget = 0.0

    for entry in entries:
        grams = platform_emissions_g(entry.platform, entry.impressions, factors)
        if grams <= 0:
            logger.debug(f"Skipping platform row {entry!r}: no matching factor or no impressions")
            continue

        total_g += grams
        total_impressions += entry.impressions
        total_budget += entry.budget

        description = f"{entry.impressions:,} impressions"
        if entry.budget > 0:
            description += f" (budget {entry.budget:,.2f})"
        breakdown.append(BreakdownLine(
            category=platform_display_name(entry.platform),
            description=description,
            emissions_g=grams,
        ))

    result = build_result(
        "distribution",
        breakdown,
        per_unit_grams=total_g,
        total_budget=total_budget,
        total_impressions=total_impressions,
    )
    logger.debug(f"Distribution: {len(breakdown)} platform(s), {result.total_emissions_kg:.3f} kg CO2e")
    return result


# ============================================================================
# ASSET CREATION
# ============================================================================

class AssetStrategy(ABC):
    """
    Turns one asset input shape into creation breakdown lines.
    Hardware and storage lines are shared and appended by calculate_assets.
    """
    name: str = ""
    input_type: type = object

    def accepts(self, asset_input) -> bool:
        return isinstance(asset_input, self.input_type)

    @abstractmethod
    def creation_lines(self, asset_input, factors: EmissionFactorTable) -> List[BreakdownLine]:
        ...


class ItemizedAssetStrategy(AssetStrategy):
    """Images, text queries and video seconds, each with its own factor."""
    name = "itemized"
    input_type = ItemizedAssetInput

    def creation_lines(self, asset_input: ItemizedAssetInput, factors: EmissionFactorTable) -> List[BreakdownLine]:
        lines = []

        grams = ai_image_emissions_g(asset_input.images, factors)
        if grams > 0:
            lines.append(BreakdownLine(
                category="AI Images",
                description=f"{asset_input.images} AI-generated images",
                emissions_g=grams,
            ))

        grams = ai_text_emissions_g(asset_input.text_queries, asset_input.avg_tokens, factors)
        if grams > 0:
            lines.append(BreakdownLine(
                category="AI Text",
                description=f"{asset_input.text_queries} queries (avg {fmt_quantity(asset_input.avg_tokens)} tokens)",
                emissions_g=grams,
            ))

        grams = ai_video_emissions_g(asset_input.video_seconds, factors)
        if grams > 0:
            lines.append(BreakdownLine(
                category="AI Video",
                description=f"{fmt_quantity(asset_input.video_seconds)} seconds of AI video",
                emissions_g=grams,
            ))

        return lines


class CategoryAveragedAssetStrategy(AssetStrategy):
    """Asset count times the averaged factor of the selected asset types."""
    name = "category-averaged"
    input_type = CategoryAssetInput

    def creation_lines(self, asset_input: CategoryAssetInput, factors: EmissionFactorTable) -> List[BreakdownLine]:
        factor = effective_asset_factor(asset_input.asset_types, factors)
        grams = asset_input.count * factor
        if grams <= 0:
            return []

        selected = ", ".join(sorted(t for t in asset_input.asset_types if t in factors.asset_types))
        return [BreakdownLine(
            category="AI Assets",
            description=f"{asset_input.count} assets ({selected}) at {factor:.2f} g each",
            emissions_g=grams,
        )]


ASSET_STRATEGIES: Dict[str, AssetStrategy] = {
    ItemizedAssetStrategy.name: ItemizedAssetStrategy(),
    CategoryAveragedAssetStrategy.name: CategoryAveragedAssetStrategy(),
}


def get_asset_strategy(asset_input: AssetInput, strategy: Optional[AssetStrategyName] = None) -> AssetStrategy:
    """
    Look up a strategy by name, or infer it from the input type.
    """
    if strategy is not None:
        if strategy not in ASSET_STRATEGIES:
            raise ValueError(f"Unknown asset strategy '{strategy}'. Options: {sorted(ASSET_STRATEGIES)}")
        chosen = ASSET_STRATEGIES[strategy]
        if not chosen.accepts(asset_input):
            raise TypeError(
                f"Strategy '{strategy}' expects {chosen.input_type.__name__}, got {type(asset_input).__name__}"
            )
        return chosen

    for candidate in ASSET_STRATEGIES.values():
        if candidate.accepts(asset_input):
            return candidate
    raise TypeError(f"No asset strategy accepts {type(asset_input).__name__}")


def calculate_assets(
    asset_input: AssetInput,
    factors: EmissionFactorTable = DEFAULT_FACTORS,
    strategy: Optional[AssetStrategyName] = None
) -> CalculationResult:
    """
    Asset creation emissions using the itemized or category-averaged strategy,
    plus hardware and storage when the input carries them.
    No budget or impression context applies, so per-unit metrics stay 0.
    """
    chosen = get_asset_strategy(asset_input, strategy)
    breakdown = chosen.creation_lines(asset_input, factors)
    breakdown.extend(hardware_storage_lines(asset_input.storage, factors))

    result = build_result("assets", breakdown)
    logger.debug(f"Assets ({chosen.name}): {len(breakdown)} line(s), {result.total_emissions_kg:.3f} kg CO2e")
    return result


# ============================================================================
# HARDWARE & STORAGE
# ============================================================================

def calculate_storage(
    storage_input: StorageInput,
    factors: EmissionFactorTable = DEFAULT_FACTORS
) -> CalculationResult:
    """Hardware and cloud storage as a module of its own."""
    breakdown = hardware_storage_lines(storage_input, factors)
    result = build_result("storage", breakdown)
    logger.debug(f"Storage: {len(breakdown)} line(s), {result.total_emissions_kg:.3f} kg CO2e")
    return result


# ============================================================================
# CUMULATIVE
# ============================================================================

def aggregate(*results: CalculationResult) -> CalculationResult:
    """
    Cumulative view across independently calculated modules.

    Breakdown lines are concatenated in argument order and the total is the
    sum of module totals. Emissions per currency unit and per impression are
    recomputed from the distribution results alone; severity and the km
    equivalent from the summed total.
    """
    breakdown = []
    distribution_g = 0.0
    total_budget = 0.0
    total_impressions = 0

    for result in results:
        breakdown.extend(result.breakdown)
        if result.module == "distribution":
            distribution_g += result.total_emissions_g
            total_budget += result.total_budget
            total_impressions += result.total_impressions
        elif result.module == "cumulative":
            # distribution share of an earlier cumulative view
            distribution_g += result.emissions_per_impression * result.total_impressions
            total_budget += result.total_budget
            total_impressions += result.total_impressions

    return build_result(
        "cumulative",
        breakdown,
        per_unit_grams=distribution_g,
        total_budget=total_budget,
        total_impressions=total_impressions,
    )
