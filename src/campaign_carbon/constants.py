from types import MappingProxyType
from typing import Literal
import logging

from .config import load_excel_config

logger = logging.getLogger(__name__)

# ============================================================================
# EMISSION FACTORS & CONSTANTS
# ============================================================================

# Load overrides once at import. Any key missing from the parameter sheet
# keeps its built-in value below.
_config = load_excel_config()


def _get(key, default):
    raw = _config.get(key, default)
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Parameter {key}={raw!r} is not numeric. Using default {default}.")
        return float(default)


# Ad distribution, grams CO2e per impression
EF_PLATFORM_GOOGLE = _get("EF_PLATFORM_GOOGLE", 0.2)                  # Google Search Ads
EF_PLATFORM_GOOGLE_DISPLAY = _get("EF_PLATFORM_GOOGLE_DISPLAY", 0.5)  # Google Display Ads
EF_PLATFORM_YOUTUBE = _get("EF_PLATFORM_YOUTUBE", 0.6)                # 30-second video ad
EF_PLATFORM_META = _get("EF_PLATFORM_META", 0.5)                      # Facebook / Instagram
EF_PLATFORM_TIKTOK = _get("EF_PLATFORM_TIKTOK", 0.3)
EF_PLATFORM_PROGRAMMATIC = _get("EF_PLATFORM_PROGRAMMATIC", 0.5148)
EF_PLATFORM_BING = _get("EF_PLATFORM_BING", 0.2)
EF_PLATFORM_PINTEREST = _get("EF_PLATFORM_PINTEREST", 0.5)
EF_PLATFORM_REDDIT = _get("EF_PLATFORM_REDDIT", 0.5)
EF_PLATFORM_LINKEDIN = _get("EF_PLATFORM_LINKEDIN", 0.5)

PLATFORM_EMISSION_FACTORS = MappingProxyType({
    "google": EF_PLATFORM_GOOGLE,
    "google-display": EF_PLATFORM_GOOGLE_DISPLAY,
    "youtube": EF_PLATFORM_YOUTUBE,
    "meta": EF_PLATFORM_META,
    "tiktok": EF_PLATFORM_TIKTOK,
    "programmatic": EF_PLATFORM_PROGRAMMATIC,
    "bing": EF_PLATFORM_BING,
    "pinterest": EF_PLATFORM_PINTEREST,
    "reddit": EF_PLATFORM_REDDIT,
    "linkedin": EF_PLATFORM_LINKEDIN,
})

# Asset creation, category-averaged (grams CO2e per asset)
EF_ASSET_TEXT = _get("EF_ASSET_TEXT", 0.5)
EF_ASSET_IMAGE = _get("EF_ASSET_IMAGE", 2.0)
EF_ASSET_VIDEO = _get("EF_ASSET_VIDEO", 8.8)
EF_ASSET_MIXED = _get("EF_ASSET_MIXED", 3.0)
EF_ASSET_UNSURE = _get("EF_ASSET_UNSURE", 1.0)

ASSET_TYPE_EMISSION_FACTORS = MappingProxyType({
    "text": EF_ASSET_TEXT,
    "image": EF_ASSET_IMAGE,
    "video": EF_ASSET_VIDEO,
    "mixed": EF_ASSET_MIXED,
    "unsure": EF_ASSET_UNSURE,
})

# "unsure" overrides any other selection
FALLBACK_ASSET_TYPE = "unsure"

# Asset creation, itemized
EF_AI_IMAGE_G = _get("EF_AI_IMAGE_G", 2.0)
EF_AI_TEXT_PER_300_TOKENS_G = _get("EF_AI_TEXT_PER_300_TOKENS_G", 0.036)
EF_AI_VIDEO_PER_2_SECONDS_G = _get("EF_AI_VIDEO_PER_2_SECONDS_G", 4.4)
TOKENS_PER_TEXT_UNIT = 300
SECONDS_PER_VIDEO_UNIT = 2

# Hardware & storage
EF_LAPTOP_PER_MONTH_G = _get("EF_LAPTOP_PER_MONTH_G", 9700.0)
EF_STORAGE_PER_GB_MONTH_G = _get("EF_STORAGE_PER_GB_MONTH_G", 20.0)
GREEN_CLOUD_REDUCTION = _get("GREEN_CLOUD_REDUCTION", 0.3)

# Equivalents
CAR_KGCO2_PER_KM = _get("CAR_KGCO2_PER_KM", 0.184)
TYPICAL_DRIVING_KGCO2_PER_MONTH = _get("TYPICAL_DRIVING_KGCO2_PER_MONTH", 145.0)

# Severity tiers, lower bounds in kg CO2e (half-open intervals)
SEVERITY_MEDIUM_KG = _get("SEVERITY_MEDIUM_KG", 100.0)
SEVERITY_HIGH_KG = _get("SEVERITY_HIGH_KG", 500.0)
SEVERITY_VERY_HIGH_KG = _get("SEVERITY_VERY_HIGH_KG", 2000.0)

# Input defaults applied by the input-collection layer
DEFAULT_AVG_TOKENS = 300
DEFAULT_STORAGE_MONTHS = 1
DEFAULT_LAPTOP_COUNT = 1
DEFAULT_USAGE_SHARE_PERCENT = 50.0

# ============================================================================
# TYPES
# ============================================================================

SeverityTier = Literal["low", "medium", "high", "very-high"]
ModuleKind = Literal["distribution", "assets", "storage", "cumulative"]
AssetStrategyName = Literal["itemized", "category-averaged"]
