"""
Human-readable framing of a result: severity labels and a real-world
comparison chosen by severity tier.
"""

from dataclasses import dataclass
from math import floor

from .constants import TYPICAL_DRIVING_KGCO2_PER_MONTH, SeverityTier
from .models import CalculationResult


@dataclass(frozen=True)
class Equivalency:
    text: str
    description: str


SEVERITY_LABELS = {
    "low": "Low Emissions",
    "medium": "Moderate Emissions",
    "high": "High Emissions",
    "very-high": "Very High Emissions",
}

SEVERITY_RANGES = {
    "low": "< 100 kg threshold",
    "medium": "100-500 kg range",
    "high": "500-2,000 kg range",
    "very-high": "> 2,000 kg",
}


def severity_label(tier: SeverityTier) -> str:
    return SEVERITY_LABELS.get(tier, SEVERITY_LABELS["low"])


def days_of_typical_driving(total_kg: float) -> int:
    # typical driving emits ~145 kg CO2e per 30 days; rounds half up
    return int(floor(total_kg / TYPICAL_DRIVING_KGCO2_PER_MONTH * 30 + 0.5))


def equivalency_for(result: CalculationResult) -> Equivalency:
    """Real-world comparison for the given result's severity tier."""
    kg = result.total_emissions_kg
    tier = result.severity_tier

    if tier == "low":
        text = "One-way flight London to Paris"
    elif tier == "medium":
        text = "Round-trip flight London to Rome"
    elif tier == "high":
        text = f"{days_of_typical_driving(kg)} days of typical driving"
    elif tier == "very-high":
        text = "Round-trip transatlantic flight"
    else:
        return Equivalency(
            text=f"{result.km_driven_equivalent:.1f} km driven",
            description=f"{kg:.1f} kg CO2e",
        )

    return Equivalency(text=text, description=f"{kg:.1f} kg CO2e ({SEVERITY_RANGES[tier]})")
