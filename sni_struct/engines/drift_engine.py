"""
Story Drift Calculator - SNI 1726:2019 Section 7.8.6 / 7.12.1
"""

from typing import List, Tuple

from .base import CalculationEngine
from ..core.constants import ENGINEERING_CONSTANTS
from ..core.data_models import CalculationStep, DriftCheck
from ..core.errors import CalculationError, CalculationErrorKind


class DriftEngine(CalculationEngine):
    """
    Story drift checker.
    Amplifies the elastic displacement and compares the drift ratio with the
    allowable story drift.
    """

    stage = "drift"

    def calculate_story_drift(
        self,
        displacement: float,
        story_height: float,
        cd: float,
        importance_factor: float,
    ) -> Tuple[DriftCheck, List[CalculationStep]]:
        """
        Args:
            displacement: Elastic story displacement δe (mm)
            story_height: Story height (mm)
            cd: Deflection amplification factor
            importance_factor: Ie

        Returns:
            (DriftCheck, calculation steps)
        """
        self.calculations = []

        if story_height <= 0 or importance_factor <= 0:
            raise CalculationError(
                CalculationErrorKind.DIVISION_BY_ZERO,
                f"Story height and Ie must be positive "
                f"(h={story_height}, Ie={importance_factor})",
                stage=self.stage,
            )

        limit = ENGINEERING_CONSTANTS.LIMITS.DRIFT_RATIO_MAX
        design_displacement = self._finite(
            cd * displacement / importance_factor, "Design displacement δd"
        )

        self._add_calc_step(
            "Calculate design story displacement",
            "δd = Cd × δe / Ie",
            f"δd = {cd} × {displacement:.3f} / {importance_factor} = {design_displacement:.3f}",
            design_displacement,
            "mm",
            "SNI 1726:2019 Section 7.8.6",
        )

        drift_ratio = design_displacement / story_height

        self._add_calc_step(
            "Calculate story drift ratio",
            "Drift ratio = δd / hstory",
            f"Drift ratio = {design_displacement:.3f} / {story_height:.0f} = {drift_ratio:.6f}",
            drift_ratio,
            "unitless",
            "SNI 1726:2019 Section 7.8.6",
        )

        compliant = drift_ratio <= limit

        self._add_calc_step(
            "Check drift limit",
            f"Drift ratio <= {limit}",
            f"{drift_ratio:.6f} {'<=' if compliant else '>'} {limit}: "
            f"{'OK' if compliant else 'EXCEEDS LIMIT'}",
            1.0 if compliant else 0.0,
            "boolean",
            "SNI 1726:2019 Table 20",
            verified=compliant,
        )

        check = DriftCheck(
            elastic_displacement=displacement,
            design_displacement=design_displacement,
            story_height=story_height,
            drift_ratio=drift_ratio,
            limit=limit,
            compliant=compliant,
        )
        return check, list(self.calculations)
