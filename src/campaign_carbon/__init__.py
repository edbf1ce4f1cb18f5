from .models import (
    EmissionFactorTable,
    PlatformEntry,
    ItemizedAssetInput,
    CategoryAssetInput,
    StorageInput,
    BreakdownLine,
    CalculationResult,
    DEFAULT_FACTORS
)
from .calculator import (
    calculate_distribution,
    calculate_assets,
    calculate_storage,
    aggregate,
    ASSET_STRATEGIES
)
from .session import CalculatorSession

__all__ = [
    "EmissionFactorTable",
    "PlatformEntry",
    "ItemizedAssetInput",
    "CategoryAssetInput",
    "StorageInput",
    "BreakdownLine",
    "CalculationResult",
    "DEFAULT_FACTORS",
    "calculate_distribution",
    "calculate_assets",
    "calculate_storage",
    "aggregate",
    "ASSET_STRATEGIES",
    "CalculatorSession"
]
