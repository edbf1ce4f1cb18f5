import os
import logging
from datetime import datetime
from typing import Dict, Any, Optional

from .models import CalculationResult

logger = logging.getLogger(__name__)

# 1. Load Report Save Location
current_directory = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Build the path to reports relative to the current directory
report_directory = os.path.join(current_directory, 'reports')


class CalculationAudit:
    """
    Text audit trail of calculated results, one file per session.
    Off by default; the console enables it. The file is created on the
    first record, not at import.
    """

    def __init__(self, log_dir: str = report_directory, enabled: bool = False):
        self.enabled = enabled
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_dir = log_dir
        self.log_file: Optional[str] = None

    def _ensure_file(self) -> str:
        if self.log_file is None:
            os.makedirs(self.log_dir, exist_ok=True)
            self.log_file = os.path.join(self.log_dir, f"audit_{self.session_id}.txt")
            with open(self.log_file, "w", encoding="utf-8") as f:
                f.write("=== EMISSION CALCULATION AUDIT LOG ===\n")
                f.write(f"Session: {self.session_id}\n")
                f.write("======================================\n\n")
        return self.log_file

    def log_calculation(self, context: str, formula: str, variables: Dict[str, Any], result: float, unit: str = ""):
        """
        Log a calculation step to the audit file.

        Args:
            context: Description of what is being calculated (e.g., "Distribution: Meta")
            formula: Text representation of equation (e.g., "Impressions * EF_Platform")
            variables: Dict of actual values used (e.g., {"Impressions": 1000})
            result: The final result
            unit: Unit of the result (e.g., "gCO2e")
        """
        if not self.enabled:
            return

        try:
            with open(self._ensure_file(), "a", encoding="utf-8") as f:
                f.write(f"[{datetime.now().strftime('%H:%M:%S')}] {context}\n")
                f.write(f"  Formula: {formula}\n")

                vars_str = ", ".join([f"{k}={v}" for k, v in variables.items()])
                f.write(f"  Inputs:  {vars_str}\n")

                f.write(f"  Result:  {result:.4f} {unit}\n")
                f.write("-" * 40 + "\n")
        except OSError as e:
            logger.error(f"Failed to write to audit log: {e}")

    def log_result(self, result: CalculationResult):
        """Record every breakdown line of a result, then its totals."""
        if not self.enabled:
            return

        for item in result.breakdown:
            self.log_calculation(
                context=f"{result.module.capitalize()}: {item.category}",
                formula="Quantity * EF",
                variables={"Description": item.description},
                result=item.emissions_g,
                unit="gCO2e",
            )
        self.log_calculation(
            context=f"{result.module.capitalize()}: TOTAL",
            formula="Sum(breakdown) / 1000",
            variables={
                "Lines": len(result.breakdown),
                "Severity": result.severity_tier,
                "Km_equivalent": round(result.km_driven_equivalent, 1),
            },
            result=result.total_emissions_kg,
            unit="kgCO2e",
        )


# Global Accessor
audit_logger = CalculationAudit()
