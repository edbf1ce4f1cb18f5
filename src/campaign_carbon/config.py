import os
import logging
from typing import Any, Dict, Optional

import pandas as pd

logger = logging.getLogger(__name__)

# <root>/data/parameters_config/emission_factors.xlsx, root being two levels
# above this package directory.
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "data", "parameters_config", "emission_factors.xlsx")

CONFIG_ENV_VAR = "CAMPAIGN_CARBON_CONFIG"
REQUIRED_COLUMNS = ("Key", "Value")


def resolve_config_path() -> str:
    """Parameter sheet path, honouring the CAMPAIGN_CARBON_CONFIG override."""
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def parse_factor_value(raw: Any) -> Optional[float]:
    """Numeric cell value as float; None for text, blanks and NaN."""
    if isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if pd.isna(value):
        return None
    return value


def factors_from_frame(df: pd.DataFrame, source: str = "sheet") -> Dict[str, float]:
    """
    Key -> float for every usable row of a parameter frame.
    Rows without a key are ignored; non-numeric values are reported and
    dropped so the built-in factor stays in force.
    """
    factors: Dict[str, float] = {}
    for key, raw in zip(df["Key"], df["Value"]):
        if pd.isna(key):
            continue
        key = str(key).strip()
        if not key or pd.isna(raw):
            continue
        value = parse_factor_value(raw)
        if value is None:
            logger.warning(f"Parameter {key}={raw!r} in {source} is not numeric. Using the built-in default.")
            continue
        factors[key] = value
    return factors


def load_excel_config(path: Optional[str] = None) -> Dict[str, float]:
    """
    Emission factor overrides from the Excel parameter sheet.

    Only the Key and Value columns are read (Unit, Section and Description
    are there for whoever edits the sheet). A missing file, an unreadable
    file or a sheet without Key/Value yields an empty dict and the
    built-in factors apply.
    """
    if path is None:
        path = resolve_config_path()

    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using built-in emission factors.")
        return {}

    try:
        df = pd.read_excel(path)
    except Exception as e:
        logger.error(f"Failed to load config from {path}: {e}")
        return {}

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        logger.warning(f"Excel file {path} missing 'Key' or 'Value' columns.")
        return {}

    factors = factors_from_frame(df, source=path)
    logger.info(f"Loaded {len(factors)} parameters from {path}")
    return factors
