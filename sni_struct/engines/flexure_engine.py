"""
Flexural Reinforcement Designer - SNI 2847:2019
Singly reinforced rectangular section, ultimate strength method.
"""

import math
from typing import List, Optional, Tuple

from .base import CalculationEngine
from ..core.config import EngineConfig
from ..core.constants import (
    BAR_SIZES,
    ENGINEERING_CONSTANTS,
    MAX_BAR_COUNT,
    MIN_BAR_COUNT,
    TRANSVERSE_STEEL_FACTOR,
)
from ..core.data_models import CalculationStep, MaterialProperties, ReinforcementSummary
from ..core.errors import CalculationError, CalculationErrorKind, InputContractError


def bar_area(diameter: float) -> float:
    """Cross-sectional area of one bar (mm²)"""
    return math.pi * diameter ** 2 / 4


class FlexureEngine(CalculationEngine):
    """
    Beam flexural design per SNI 2847:2019.

    After calculate_required_steel() the governing ratios of the last call
    are available as rho_required, rho_min and rho_max.
    """

    stage = "flexure"

    def __init__(self, config: Optional[EngineConfig] = None):
        super().__init__(config)
        self.rho_required = 0.0
        self.rho_min = 0.0
        self.rho_max = ENGINEERING_CONSTANTS.LIMITS.MAX_REINFORCEMENT

    def calculate_required_steel(
        self,
        moment: float,
        width: float,
        effective_depth: float,
        materials: MaterialProperties,
    ) -> Tuple[float, List[CalculationStep]]:
        """
        Required tension steel area for a factored moment.

        Args:
            moment: Factored moment Mu (kN·m)
            width: Section width b (mm)
            effective_depth: Effective depth d (mm)
            materials: fc and fy (MPa)

        Returns:
            (As in mm², calculation steps)

        Raises:
            InputContractError: Non-positive width/depth or negative moment
            CalculationError: SECTION_CAPACITY_EXCEEDED when the section cannot
                develop the moment (k > 1)
        """
        self.calculations = []

        if width <= 0 or effective_depth <= 0:
            raise InputContractError(
                "section width and effective depth must be > 0",
                field="width" if width <= 0 else "effective_depth",
                value=width if width <= 0 else effective_depth,
            )
        if moment < 0:
            raise InputContractError("must be >= 0", field="moment", value=moment)

        phi = ENGINEERING_CONSTANTS.SAFETY_FACTORS.CONCRETE_PHI
        fc = materials.concrete.fc
        fy = materials.steel.fy
        b, d = width, effective_depth

        mu = moment * 1e6  # kN·m -> N·mm
        mn = mu / phi

        self._add_calc_step(
            "Calculate required nominal moment strength",
            "Mn = Mu / φ",
            f"Mn = {moment:.2f} × 10⁶ / {phi} = {mn:.3e}",
            mn,
            "N·mm",
            "SNI 2847:2019 Section 9.3.2.1",
        )

        m = fy / (0.85 * fc)
        k = 2 * mn / (b * d ** 2 * 0.85 * fc)

        if k > 1:
            step = self._add_calc_step(
                "Section capacity exceeded: compression block cannot develop Mn",
                "k = 2Mn / (b·d²·0.85fc') <= 1",
                f"k = 2 × {mn:.3e} / ({b:.0f} × {d:.0f}² × 0.85 × {fc}) = {k:.4f} > 1",
                k,
                "unitless",
                "SNI 2847:2019 Section 9.3.1.1",
                verified=False,
            )
            raise CalculationError(
                CalculationErrorKind.SECTION_CAPACITY_EXCEEDED,
                f"Moment {moment:.1f} kN·m exceeds the capacity of a {b:.0f}x{d:.0f} mm "
                f"section (k = {k:.3f}); increase section size or concrete strength",
                step=step,
                stage=self.stage,
            )

        rho = self._finite((1 / m) * (1 - math.sqrt(1 - k)), "Steel ratio ρ")

        self._add_calc_step(
            "Calculate required steel reinforcement ratio",
            "ρ = (1/m) × [1 - √(1 - k)], m = fy/(0.85fc'), k = 2Mn/(b·d²·0.85fc')",
            f"m = {fy} / (0.85 × {fc}) = {m:.2f}\n"
            f"k = {k:.4f}\n"
            f"ρ = (1/{m:.2f}) × [1 - √(1 - {k:.4f})] = {rho:.5f}",
            rho,
            "ratio",
            "SNI 2847:2019 Section 9.3.1.1",
        )

        rho_min = max(1.4 / fy, 0.25 * math.sqrt(fc) / fy)
        rho_max = ENGINEERING_CONSTANTS.LIMITS.MAX_REINFORCEMENT
        rho_required = max(rho, rho_min)

        self.rho_min = rho_min
        self.rho_max = rho_max
        self.rho_required = rho_required

        rho_design = rho_required
        if rho_required > rho_max:
            self._add_calc_step(
                "WARNING: Steel ratio exceeds maximum limit",
                f"ρ > ρmax = {rho_max}",
                f"{rho_required:.4f} > {rho_max}, ρ limited to ρmax",
                rho_max,
                "ratio",
                "SNI 2847:2019 Section 9.3.3.1",
                verified=False,
            )
            # ρmin still governs when fy is so low that ρmin > ρmax
            rho_design = max(rho_max, rho_min)

        as_required = self._finite(rho_design * b * d, "Steel area As")

        self._add_calc_step(
            "Calculate required steel area",
            "As = ρ × b × d, ρmin = max(1.4/fy, 0.25√fc'/fy)",
            f"ρmin = max(1.4/{fy}, 0.25√{fc}/{fy}) = {rho_min:.5f}\n"
            f"As = {rho_design:.5f} × {b:.0f} × {d:.0f} = {as_required:.0f}",
            as_required,
            "mm²",
            "SNI 2847:2019 Section 9.6.1.2",
        )

        return as_required, list(self.calculations)

    def select_bars(self, area_required: float) -> Tuple[int, int]:
        """
        Smallest standard bar that satisfies As with 2-8 bars.
        Falls back to 2D16 when no size fits that range.

        Returns:
            (bar diameter in mm, number of bars)
        """
        for diameter in BAR_SIZES:
            count = math.ceil(area_required / bar_area(diameter))
            if MIN_BAR_COUNT <= count <= MAX_BAR_COUNT:
                selected = (diameter, count)
                fits = True
                break
        else:
            selected = (16, 2)
            fits = False

        diameter, count = selected
        provided = count * bar_area(diameter)
        self._add_calc_step(
            "Select longitudinal bars" if fits else "WARNING: No bar size fits 2-8 bars, default used",
            "n = ⌈As / (π·db²/4)⌉, 2 <= n <= 8",
            f"{count}D{diameter}: As,prov = {count} × π × {diameter}²/4 = {provided:.0f} mm² "
            f"(As,req = {area_required:.0f} mm²)",
            provided,
            "mm²",
            "SNI 2847:2019 Section 25.2",
            verified=fits and provided >= area_required,
        )
        return diameter, count

    def design_section(
        self,
        moment: float,
        width: float,
        effective_depth: float,
        materials: MaterialProperties,
    ) -> Tuple[ReinforcementSummary, List[CalculationStep]]:
        """Required steel, bar selection and transverse estimate in one pass"""
        as_required, _ = self.calculate_required_steel(moment, width, effective_depth, materials)
        diameter, count = self.select_bars(as_required)

        summary = ReinforcementSummary(
            longitudinal=as_required,
            transverse=TRANSVERSE_STEEL_FACTOR * as_required,
            minimum_ratio=self.rho_min,
            maximum_ratio=self.rho_max,
            required_ratio=self.rho_required,
            bar_diameter=diameter,
            bar_count=count,
        )
        return summary, list(self.calculations)


def calculate_required_steel(
    moment: float,
    width: float,
    effective_depth: float,
    materials: MaterialProperties,
) -> Tuple[float, List[CalculationStep]]:
    """Required steel area with a fresh engine"""
    return FlexureEngine().calculate_required_steel(moment, width, effective_depth, materials)


def select_bars(area_required: float) -> Tuple[int, int]:
    """(bar diameter, count) for a required steel area"""
    return FlexureEngine().select_bars(area_required)
