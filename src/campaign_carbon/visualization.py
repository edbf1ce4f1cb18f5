import matplotlib.pyplot as plt
import os
from datetime import datetime
from typing import Dict, Optional
from .models import CalculationResult
from .equivalency import severity_label
import logging

logger = logging.getLogger(__name__)

# ============================================================================
# VISUALIZER CLASS
# ============================================================================

# Charts go to <project root>/reports/<mode>/<timestamp>
current_directory = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
report_directory = os.path.join(current_directory, 'reports')


class Visualizer:
    def __init__(self, mode: str = "single_run", output_root: Optional[str] = None):
        """
        Initialize Visualizer.
        mode: 'single_run' (for interactive) or 'batch_run' (for platform files)
        """
        self.mode = mode
        self.output_root = output_root or report_directory
        self._setup_style()
        self.session_dir = self._create_session_dir()

    def _setup_style(self):
        """Clean, report-ready matplotlib defaults."""
        plt.rcParams.update(plt.rcParamsDefault)

        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Arial', 'Helvetica', 'Calibri', 'DejaVu Sans'],
            'font.size': 12,
            'axes.titlesize': 16,
            'axes.titleweight': 'bold',
            'axes.labelsize': 13,
            'xtick.labelsize': 11,
            'ytick.labelsize': 11,
            'text.color': '#2C3E50',
            'axes.labelcolor': '#2C3E50',
            'xtick.color': '#2C3E50',
            'ytick.color': '#2C3E50',
            'axes.spines.top': False,
            'axes.spines.right': False,
            'axes.spines.left': False,
            'grid.color': '#E0E0E0',
            'grid.linestyle': ':',
            'axes.grid': True,
            'axes.grid.axis': 'y',
            'axes.axisbelow': True
        })

        # Severity palette follows the tier colours of the console output
        self.colors = {
            'low': '#81C784',
            'medium': '#FFD54F',
            'high': '#FF8A65',
            'very-high': '#D32F2F',
            'neutral': '#5D6D7E',
            'text': '#2C3E50',
        }

    def _create_session_dir(self) -> str:
        """Create the specific directory for this session's plots."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        subdir = "batch_run" if self.mode == "batch_run" else "single_run"
        path = os.path.join(self.output_root, subdir, timestamp)
        os.makedirs(path, exist_ok=True)
        return path

    def get_save_path(self, filename: str) -> str:
        return os.path.join(self.session_dir, filename)

    def _save(self, fig, filename: str) -> str:
        plt.tight_layout()
        filepath = self.get_save_path(filename)
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved to: {filepath}")
        return filepath

    # ============================================================================
    # PLOTS
    # ============================================================================

    def plot_breakdown(self, result: CalculationResult, title: str = "") -> Optional[str]:
        """Bar chart of breakdown lines (kg CO2e) for one result."""
        if not result.breakdown:
            logger.warning("Nothing to plot: the result has no breakdown lines.")
            return None

        categories = [item.category for item in result.breakdown]
        values = [item.emissions_g / 1000.0 for item in result.breakdown]

        fig, ax = plt.subplots(figsize=(10, 6), dpi=150)
        bars = ax.bar(categories, values, color=self.colors['neutral'], alpha=0.85, width=0.6, edgecolor='none')

        ax.set_ylabel("Emissions (kg CO2e)", fontweight='bold')
        heading = title or result.module.capitalize()
        ax.set_title(f"Emission Breakdown: {heading}\n{severity_label(result.severity_tier)}", pad=20, loc='left')
        plt.xticks(rotation=45, ha='right')
        ax.yaxis.set_ticks_position('none')

        top = max(values)
        for bar in bars:
            height = bar.get_height()
            if height > 0:
                ax.text(bar.get_x() + bar.get_width()/2., height + top*0.01,
                        f'{height:.3f}',
                        ha='center', va='bottom', fontsize=10, fontweight='bold', color=self.colors['text'])

        return self._save(fig, f"breakdown_{result.module}.png")

    def plot_module_comparison(self, results: Dict[str, CalculationResult]) -> Optional[str]:
        """Total emissions per module, bars coloured by severity tier."""
        if not results:
            return None

        names = list(results.keys())
        totals = [r.total_emissions_kg for r in results.values()]
        colors = [self.colors.get(r.severity_tier, self.colors['neutral']) for r in results.values()]

        fig, ax = plt.subplots(figsize=(10, 6), dpi=150)
        bars = ax.bar(names, totals, color=colors, width=0.5)

        ax.set_ylabel("Total Emissions (kg CO2e)", fontweight='bold')
        ax.set_title("Emissions by Module", pad=20, loc='left')
        if max(totals) > 0:
            ax.set_ylim(0, max(totals)*1.15)

        for bar, r in zip(bars, results.values()):
            height = bar.get_height()
            ax.text(bar.get_x() + bar.get_width()/2., height,
                    f'{height:.2f}\n{r.km_driven_equivalent:.0f} km',
                    ha='center', va='bottom', fontsize=10, color=self.colors['text'])

        return self._save(fig, "module_comparison.png")
