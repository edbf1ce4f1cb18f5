from dataclasses import dataclass, field
from typing import Mapping, Optional, Set, Tuple
from .constants import (
    PLATFORM_EMISSION_FACTORS, ASSET_TYPE_EMISSION_FACTORS,
    EF_AI_IMAGE_G, EF_AI_TEXT_PER_300_TOKENS_G, EF_AI_VIDEO_PER_2_SECONDS_G,
    EF_LAPTOP_PER_MONTH_G, EF_STORAGE_PER_GB_MONTH_G, GREEN_CLOUD_REDUCTION,
    DEFAULT_AVG_TOKENS, DEFAULT_STORAGE_MONTHS, DEFAULT_LAPTOP_COUNT,
    DEFAULT_USAGE_SHARE_PERCENT,
    SeverityTier, ModuleKind
)


@dataclass(frozen=True)
class EmissionFactorTable:
    """
    Static emission factors, grams CO2e per unit:
    - platforms: per impression, keyed by platform
    - asset_types: per asset, keyed by asset type (category-averaged strategy)
    - ai_*: itemized AI content factors
    - laptop / storage: per laptop-month and per GB-month
    """
    platforms: Mapping[str, float] = field(default_factory=lambda: PLATFORM_EMISSION_FACTORS)
    asset_types: Mapping[str, float] = field(default_factory=lambda: ASSET_TYPE_EMISSION_FACTORS)
    ai_image_g: float = EF_AI_IMAGE_G
    ai_text_per_300_tokens_g: float = EF_AI_TEXT_PER_300_TOKENS_G
    ai_video_per_2_seconds_g: float = EF_AI_VIDEO_PER_2_SECONDS_G
    laptop_per_month_g: float = EF_LAPTOP_PER_MONTH_G
    storage_per_gb_month_g: float = EF_STORAGE_PER_GB_MONTH_G
    green_cloud_reduction: float = GREEN_CLOUD_REDUCTION


DEFAULT_FACTORS = EmissionFactorTable()


@dataclass
class PlatformEntry:
    """One row of the distribution form."""
    platform: str = ""
    impressions: int = 0
    budget: float = 0.0


@dataclass
class StorageInput:
    """
    Hardware and cloud storage usage.
    - usage_share_percent scales one laptop-month (0-100)
    - green_cloud applies the flat renewable-energy reduction to storage only
    """
    gigabytes: float = 0.0
    months: int = DEFAULT_STORAGE_MONTHS
    laptop_count: int = DEFAULT_LAPTOP_COUNT
    usage_share_percent: float = DEFAULT_USAGE_SHARE_PERCENT
    green_cloud: bool = False


@dataclass
class ItemizedAssetInput:
    """Discrete counts per AI content type."""
    images: int = 0
    text_queries: int = 0
    avg_tokens: float = DEFAULT_AVG_TOKENS
    video_seconds: float = 0.0
    storage: Optional[StorageInput] = None


@dataclass
class CategoryAssetInput:
    """Selected asset types plus an overall asset count."""
    asset_types: Set[str] = field(default_factory=set)
    count: int = 0
    storage: Optional[StorageInput] = None


@dataclass(frozen=True)
class BreakdownLine:
    category: str
    description: str
    emissions_g: float


@dataclass(frozen=True)
class CalculationResult:
    """
    Result of one module calculation (or the cumulative view).
    total_impressions / total_budget are only non-zero for distribution
    results; aggregate() uses them to recompute the per-unit metrics.
    """
    module: ModuleKind
    total_emissions_kg: float
    emissions_per_currency_unit: float
    emissions_per_impression: float
    km_driven_equivalent: float
    severity_tier: SeverityTier
    breakdown: Tuple[BreakdownLine, ...] = ()
    total_impressions: int = 0
    total_budget: float = 0.0

    @property
    def total_emissions_g(self) -> float:
        return self.total_emissions_kg * 1000.0
