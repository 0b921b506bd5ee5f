"""
Shared audit-trail plumbing for the calculation engines.
"""

import math
from typing import List, Optional

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.data_models import CalculationStep
from ..core.errors import CalculationError, CalculationErrorKind


class CalculationEngine:
    """
    Base for calculators that record a step-by-step audit trail.
    Public calculation methods reset ``calculations`` on entry.
    """

    stage = ""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.calculations: List[CalculationStep] = []

    def _add_calc_step(
        self,
        description: str,
        formula: str,
        calculation: str,
        result: float,
        unit: str,
        reference: str = "",
        verified: bool = True,
    ) -> CalculationStep:
        """Add a calculation step to the audit trail"""
        step = CalculationStep(
            step=len(self.calculations) + 1,
            description=description,
            formula=formula,
            calculation=calculation,
            result=result,
            unit=unit,
            reference=reference,
            verified=verified,
            stage=self.stage,
        )
        self.calculations.append(step)
        return step

    def _finite(self, value: float, quantity: str) -> float:
        """Raise NON_FINITE instead of letting NaN/inf leak into results"""
        if not math.isfinite(value):
            raise CalculationError(
                CalculationErrorKind.NON_FINITE,
                f"{quantity} is not a finite number ({value})",
                stage=self.stage,
            )
        return value
