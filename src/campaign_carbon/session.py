"""
Form state for the three calculator modules.

Each module is either uncalculated (no result) or calculated (result shown).
Only calculate() moves it between the two; editing inputs leaves a previous
result in place until the next explicit calculation.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, TypeVar

from .audit import audit_logger
from .calculator import ASSET_STRATEGIES, calculate_assets, calculate_distribution, calculate_storage, aggregate
from .constants import AssetStrategyName
from .models import (
    CalculationResult, CategoryAssetInput, EmissionFactorTable, ItemizedAssetInput,
    PlatformEntry, StorageInput, DEFAULT_FACTORS
)

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")


def _check_strategy(strategy: str):
    if strategy not in ASSET_STRATEGIES:
        raise ValueError(f"Unknown asset strategy '{strategy}'. Options: {sorted(ASSET_STRATEGIES)}")


@dataclass
class CalculatorModule(Generic[InputT]):
    name: str
    inputs: InputT
    compute: Callable[[InputT], CalculationResult]
    result: Optional[CalculationResult] = None

    @property
    def calculated(self) -> bool:
        return self.result is not None

    def calculate(self) -> CalculationResult:
        self.result = self.compute(self.inputs)
        logger.info(f"{self.name.capitalize()} calculated: {self.result.total_emissions_kg:.2f} kg CO2e")
        audit_logger.log_result(self.result)
        return self.result

    def reset(self):
        self.result = None


@dataclass
class CalculatorSession:
    """
    Owns the editable inputs of every module. The calculation functions
    themselves keep no state; everything lives here.
    """
    factors: EmissionFactorTable = DEFAULT_FACTORS
    asset_strategy: AssetStrategyName = "itemized"
    distribution: CalculatorModule = field(init=False)
    assets: CalculatorModule = field(init=False)
    storage: CalculatorModule = field(init=False)

    def __post_init__(self):
        _check_strategy(self.asset_strategy)
        self.distribution = CalculatorModule(
            "distribution", [PlatformEntry()],
            lambda entries: calculate_distribution(entries, self.factors),
        )
        self.assets = CalculatorModule(
            "assets", self._blank_asset_input(self.asset_strategy),
            lambda asset_input: calculate_assets(asset_input, self.factors),
        )
        self.storage = CalculatorModule(
            "storage", StorageInput(),
            lambda storage_input: calculate_storage(storage_input, self.factors),
        )

    @staticmethod
    def _blank_asset_input(strategy: AssetStrategyName):
        if strategy == "category-averaged":
            return CategoryAssetInput()
        return ItemizedAssetInput()

    @property
    def modules(self) -> List[CalculatorModule]:
        return [self.distribution, self.assets, self.storage]

    # --- distribution rows ---------------------------------------------------

    @property
    def platforms(self) -> List[PlatformEntry]:
        return self.distribution.inputs

    def add_platform(self) -> PlatformEntry:
        entry = PlatformEntry()
        self.platforms.append(entry)
        return entry

    def remove_platform(self, index: int) -> PlatformEntry:
        return self.platforms.pop(index)

    def update_platform(self, index: int, **changes) -> PlatformEntry:
        entry = self.platforms[index]
        for key, value in changes.items():
            if not hasattr(entry, key):
                raise AttributeError(f"PlatformEntry has no field '{key}'")
            setattr(entry, key, value)
        return entry

    # --- assets ----------------------------------------------------------------

    def set_asset_strategy(self, strategy: AssetStrategyName):
        """Switch the asset input shape. The previous result stays until recalculated."""
        _check_strategy(strategy)
        if strategy == self.asset_strategy:
            return
        storage = self.assets.inputs.storage
        self.asset_strategy = strategy
        self.assets.inputs = self._blank_asset_input(strategy)
        self.assets.inputs.storage = storage

    # --- results ---------------------------------------------------------------

    def calculate_all(self) -> List[CalculationResult]:
        return [m.calculate() for m in self.modules]

    def cumulative(self) -> Optional[CalculationResult]:
        """Aggregate of the modules calculated so far, or None."""
        results = [m.result for m in self.modules if m.calculated]
        if not results:
            return None
        return aggregate(*results)
