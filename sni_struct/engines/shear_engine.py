"""
Beam Shear Calculator - SNI 2847:2019 Section 22.5
Concrete shear capacity, required stirrup contribution and stirrup spacing.
"""

import math
from typing import List, Tuple

from .base import CalculationEngine
from ..core.constants import (
    ABSOLUTE_MAX_STIRRUP_SPACING,
    ENGINEERING_CONSTANTS,
    MAX_STIRRUP_SPACING,
    SHEAR_VC_FACTOR,
    STIRRUP_DIAMETER,
    STIRRUP_EFFICIENCY,
    STIRRUP_LEGS,
    STIRRUP_YIELD_STRENGTH,
)
from ..core.data_models import CalculationStep, MaterialProperties, ShearDesign
from ..core.errors import InputContractError


class ShearEngine(CalculationEngine):
    """
    Beam shear design with 2-leg Ø10 stirrups.
    """

    stage = "shear"

    def calculate_shear(
        self,
        demand: float,
        width: float,
        effective_depth: float,
        materials: MaterialProperties,
    ) -> Tuple[ShearDesign, List[CalculationStep]]:
        """
        Args:
            demand: Factored shear Vu (kN)
            width: Section width b (mm)
            effective_depth: Effective depth d (mm)
            materials: fc (MPa)

        Returns:
            (ShearDesign, calculation steps)
        """
        self.calculations = []

        if width <= 0 or effective_depth <= 0:
            raise InputContractError(
                "section width and effective depth must be > 0",
                field="width" if width <= 0 else "effective_depth",
                value=width if width <= 0 else effective_depth,
            )
        if demand < 0:
            raise InputContractError("must be >= 0", field="demand", value=demand)

        phi = ENGINEERING_CONSTANTS.SAFETY_FACTORS.CONCRETE_PHI_SHEAR
        fc = materials.concrete.fc
        b, d = width, effective_depth

        vc = SHEAR_VC_FACTOR * math.sqrt(fc) * b * d / 1000

        self._add_calc_step(
            "Concrete shear capacity",
            "Vc = 0.17√fc' × b × d",
            f"Vc = {SHEAR_VC_FACTOR} × √{fc} × {b:.0f} × {d:.0f} / 1000 = {vc:.1f}",
            vc,
            "kN",
            "SNI 2847:2019 Section 22.5.5.1",
        )

        vs_required = max(0.0, demand - phi * vc)

        self._add_calc_step(
            "Required stirrup shear contribution",
            "Vs = max(0, Vu - φVc)",
            f"Vs = max(0, {demand:.1f} - {phi} × {vc:.1f}) = {vs_required:.1f}",
            vs_required,
            "kN",
            "SNI 2847:2019 Section 22.5.1.1",
        )

        av = STIRRUP_LEGS * math.pi * STIRRUP_DIAMETER ** 2 / 4
        stirrup_force = STIRRUP_EFFICIENCY * STIRRUP_YIELD_STRENGTH * av * d
        if vs_required > 0:
            spacing_required = stirrup_force / (vs_required * 1000)
        else:
            spacing_required = float(MAX_STIRRUP_SPACING)
        max_spacing = min(d / 2, MAX_STIRRUP_SPACING, ABSOLUTE_MAX_STIRRUP_SPACING)
        spacing = self._finite(min(spacing_required, max_spacing), "Stirrup spacing")

        self._add_calc_step(
            "Stirrup spacing",
            "s = 0.22 × fyt × Av × d / Vs <= min(d/2, 300, 600)",
            f"Av = {STIRRUP_LEGS} × π × {STIRRUP_DIAMETER}²/4 = {av:.1f} mm²\n"
            f"s,req = {spacing_required:.0f} mm, s,max = {max_spacing:.0f} mm\n"
            f"s = {spacing:.0f} mm",
            spacing,
            "mm",
            "SNI 2847:2019 Section 9.7.6.2.2",
        )

        vs_provided = stirrup_force / (spacing * 1000)
        capacity = phi * vc + vs_provided
        capacity_ratio = demand / capacity if capacity > 0 else 0.0

        self._add_calc_step(
            "Shear capacity ratio",
            "Vu / (φVc + Vs,prov)",
            f"{demand:.1f} / ({phi} × {vc:.1f} + {vs_provided:.1f}) = {capacity_ratio:.3f}",
            capacity_ratio,
            "ratio",
            "SNI 2847:2019 Section 22.5",
            verified=capacity_ratio <= 1.0 + 1e-9,
        )

        design = ShearDesign(
            demand=demand,
            concrete_capacity=vc,
            steel_required=vs_required,
            stirrup_spacing=spacing,
            capacity_ratio=capacity_ratio,
        )
        return design, list(self.calculations)
