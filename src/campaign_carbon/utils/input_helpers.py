import logging
import math
from typing import Any, List, Optional, Set

import pandas as pd
import colorama
from colorama import Fore, Style, Back

from ..constants import (
    PLATFORM_EMISSION_FACTORS, ASSET_TYPE_EMISSION_FACTORS,
    DEFAULT_AVG_TOKENS, DEFAULT_STORAGE_MONTHS, DEFAULT_LAPTOP_COUNT,
    DEFAULT_USAGE_SHARE_PERCENT
)
from ..models import (
    CalculationResult, CategoryAssetInput, ItemizedAssetInput, PlatformEntry, StorageInput
)
from ..equivalency import equivalency_for, severity_label
from ..reporting import has_per_unit_metrics

colorama.init(autoreset=True)

logger = logging.getLogger(__name__)

# Style Constants
C_HEADER = Fore.CYAN + Style.BRIGHT
C_PROMPT = Fore.YELLOW
C_CHOICE = Fore.MAGENTA
C_ERROR = Fore.RED
C_SUCCESS = Fore.GREEN
C_RESET = Style.RESET_ALL

SEVERITY_COLORS = {
    "low": Fore.GREEN,
    "medium": Fore.YELLOW,
    "high": Fore.RED,
    "very-high": Fore.RED + Style.BRIGHT,
}


def style_prompt(prompt_text: str) -> str:
    """Helper to wrap input prompt in color."""
    return f"{C_PROMPT}{prompt_text}{C_RESET}"


def print_header(text: str):
    """Print a styled header."""
    # print directly, the logger formatter would recolour it
    print(f"\n{C_HEADER}{'='*60}")
    print(f"{text.center(60)}")
    print(f"{'='*60}{C_RESET}")


# ============================================================================
# COERCION
# ============================================================================
# The calculator expects clean non-negative numbers. Raw form or file values
# are coerced here: unparseable -> default, negative -> 0 (or the default for
# fields that must be positive).

def _to_float(raw: Any) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def coerce_float(raw: Any, default: float = 0.0) -> float:
    """Non-negative float; unparseable input gives the default, negatives give 0."""
    value = _to_float(raw)
    if value is None:
        return default
    return max(value, 0.0)


def coerce_int(raw: Any, default: int = 0) -> int:
    """Non-negative integer (fractions truncated); same rules as coerce_float."""
    value = _to_float(raw)
    if value is None:
        return default
    return max(int(value), 0)


def coerce_positive_int(raw: Any, default: int) -> int:
    """Strictly positive integer; anything else gives the default."""
    value = coerce_int(raw, default)
    return value if value > 0 else default


def coerce_percent(raw: Any, default: float = DEFAULT_USAGE_SHARE_PERCENT) -> float:
    """Percentage clamped to 0-100."""
    return min(coerce_float(raw, default), 100.0)


def coerce_bool(raw: Any, default: bool = False) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return default
    s = str(raw).strip().lower()
    if s in ("y", "yes", "true", "1"):
        return True
    if s in ("n", "no", "false", "0"):
        return False
    return default


def normalize_platform(raw: Any) -> str:
    """
    Map free-text platform names ("Google Search", "Facebook", "Microsoft Bing")
    onto factor table keys. Unknown names come back lower-cased and are
    skipped by the calculator.
    """
    s = str(raw if raw is not None else "").strip().lower()
    if not s or s == "nan":
        return ""
    if s in PLATFORM_EMISSION_FACTORS:
        return s
    if "google" in s and "display" in s:
        return "google-display"
    if "google" in s:
        return "google"
    if "youtube" in s:
        return "youtube"
    if "meta" in s or "facebook" in s or "instagram" in s:
        return "meta"
    if "tiktok" in s or "tik tok" in s:
        return "tiktok"
    if "programmatic" in s:
        return "programmatic"
    if "bing" in s or "microsoft" in s:
        return "bing"
    if "pinterest" in s:
        return "pinterest"
    if "reddit" in s:
        return "reddit"
    if "linkedin" in s:
        return "linkedin"
    return s


def parse_asset_types(raw: Any) -> Set[str]:
    """Comma/space separated asset types, unknown keys dropped."""
    if raw is None:
        return set()
    if isinstance(raw, str):
        parts = raw.replace(",", " ").split()
    else:
        parts = [str(p) for p in raw]
    return {p.strip().lower() for p in parts if p.strip().lower() in ASSET_TYPE_EMISSION_FACTORS}


def parse_platform_rows(df: pd.DataFrame) -> List[PlatformEntry]:
    """
    Parse a platform sheet (columns Platform, Impressions, Budget) into entries.
    Budget is optional; cells are coerced like form input.
    """
    entries = []
    for _, row in df.iterrows():
        entries.append(PlatformEntry(
            platform=normalize_platform(row.get("Platform")),
            impressions=coerce_int(row.get("Impressions"), 0),
            budget=coerce_float(row.get("Budget"), 0.0),
        ))
    return entries


# ============================================================================
# PROMPTS
# ============================================================================

def prompt_choice(label: str, options: List[str], default: str) -> str:
    """
    Prompt user to pick one value from a list of options; returns the chosen option.
    Supports selecting by index (1-based) or typing the name.
    """
    display_parts = []
    for idx, opt in enumerate(options, 1):
        display_parts.append(f"[{C_SUCCESS}{idx}{C_PROMPT}] {C_CHOICE}{opt}{C_PROMPT}")
    opts_str = " / ".join(display_parts)

    while True:
        print(f"\n{C_PROMPT}{label} options:{C_RESET} {opts_str}")
        s = input(style_prompt(f"Select option (name or number) [default={default}]: ")).strip().lower()

        if not s:
            return default

        if s.isdigit():
            idx = int(s)
            if 1 <= idx <= len(options):
                return options[idx-1]

        for opt in options:
            if s == opt.lower():
                return opt

        logger.warning(f"Invalid choice '{s}'. Please enter a number 1-{len(options)} or the option name.")


def prompt_yes_no(label: str, default: bool) -> bool:
    """
    Prompt user for yes/no answer, returning True/False.
    """
    d = "y" if default else "n"
    opts = f"{C_CHOICE}y{C_PROMPT}/{C_CHOICE}n{C_PROMPT}"
    while True:
        s = input(style_prompt(f"{label} [{opts}] (default={d}): ")).strip().lower()
        if not s:
            return default
        if s in ("y", "yes"):
            return True
        if s in ("n", "no"):
            return False
        logger.warning("Please answer y or n.")


def prompt_number(label: str, default: float, coerce=coerce_float):
    """Read a number; bad input falls back to the default instead of re-asking."""
    raw = input(style_prompt(f"{label} [default={default}]: ")).strip()
    if not raw:
        return default
    value = coerce(raw, default)
    if _to_float(raw) is None:
        logger.warning(f"'{raw}' is not a number. Using {value}.")
    return value


def prompt_platform_entries() -> List[PlatformEntry]:
    """Collect platform rows until the user stops adding."""
    print(f"\n{C_HEADER}Distribution platforms{C_RESET}")
    options = list(PLATFORM_EMISSION_FACTORS.keys())
    entries = []
    while True:
        platform = prompt_choice("Platform", options, default=options[0])
        impressions = prompt_number("Impressions", 0, coerce_int)
        budget = prompt_number("Budget", 0.0, coerce_float)
        entries.append(PlatformEntry(platform=platform, impressions=impressions, budget=budget))
        if not prompt_yes_no("Add another platform?", default=False):
            return entries


def prompt_storage_input() -> StorageInput:
    print(f"\n{C_HEADER}Hardware & storage{C_RESET}")
    return StorageInput(
        gigabytes=prompt_number("Cloud storage (GB)", 0.0, coerce_float),
        months=prompt_number("Storage duration (months)", DEFAULT_STORAGE_MONTHS, coerce_positive_int),
        laptop_count=prompt_number("Laptops used", DEFAULT_LAPTOP_COUNT, coerce_int),
        usage_share_percent=prompt_number("Laptop usage share (%)", DEFAULT_USAGE_SHARE_PERCENT, coerce_percent),
        green_cloud=prompt_yes_no("Green cloud storage (renewable energy)?", default=False),
    )


def prompt_itemized_assets(include_storage: bool = True) -> ItemizedAssetInput:
    print(f"\n{C_HEADER}AI content creation (itemized){C_RESET}")
    asset_input = ItemizedAssetInput(
        images=prompt_number("AI images generated", 0, coerce_int),
        text_queries=prompt_number("AI text queries", 0, coerce_int),
        avg_tokens=prompt_number("Average tokens per query", DEFAULT_AVG_TOKENS, coerce_positive_int),
        video_seconds=prompt_number("AI video seconds", 0.0, coerce_float),
    )
    if include_storage:
        asset_input.storage = prompt_storage_input()
    return asset_input


def prompt_category_assets(include_storage: bool = False) -> CategoryAssetInput:
    print(f"\n{C_HEADER}AI content creation (by asset type){C_RESET}")
    print(f"  Types: {', '.join(ASSET_TYPE_EMISSION_FACTORS.keys())}")
    types = set()
    while not types:
        raw = input(style_prompt("Asset types (comma separated) [default=unsure]: ")).strip()
        types = parse_asset_types(raw) if raw else {"unsure"}
        if not types:
            logger.warning("No recognised asset type. Try again.")
    asset_input = CategoryAssetInput(
        asset_types=types,
        count=prompt_number("Number of assets", 0, coerce_int),
    )
    if include_storage:
        asset_input.storage = prompt_storage_input()
    return asset_input


# ============================================================================
# OUTPUT
# ============================================================================

def print_result_overview(result: CalculationResult, title: str = ""):
    """
    Common console rendering for all modules.
    """
    print(f"\n{Back.BLACK}{C_HEADER}{'='*60}")
    print(f"   RESULT: {(title or result.module).upper()}")
    print(f"{'='*60}{Style.RESET_ALL}")

    color = SEVERITY_COLORS.get(result.severity_tier, "")
    print(f"\n  {color}{Style.BRIGHT}{severity_label(result.severity_tier)}{C_RESET}")

    print(f"\n{C_HEADER}Emission Breakdown:{C_RESET}")
    if not result.breakdown:
        print("  (nothing to report)")
    for item in result.breakdown:
        print(f"  {item.category:<16} : {item.emissions_g / 1000.0:>10.3f} kg  {item.emissions_g:>12.1f} g  ({item.description})")

    print(f"{'-'*60}")
    print(f"  {Style.BRIGHT}TOTAL EMISSIONS : {C_SUCCESS}{result.total_emissions_kg:.2f}{C_RESET} {Style.BRIGHT}kg CO2e{C_RESET}")
    if has_per_unit_metrics(result):
        print(f"  Per currency unit : {result.emissions_per_currency_unit:.2f} g/unit")
        print(f"  Per impression    : {result.emissions_per_impression:.2f} g")

    equivalency = equivalency_for(result)
    print(f"  Equivalent to     : {equivalency.text}")
    print(f"                      {equivalency.description}")
    print(f"  Driving distance  : {result.km_driven_equivalent:.1f} km")
    print(f"{'='*60}\n")
