"""
Seismic Calculator - SNI 1726:2019 Equivalent Lateral Force Procedure
Fundamental period, base shear, design response spectrum and the vertical
distribution of seismic forces.
"""

from typing import List, Optional, Sequence, Tuple, Union

from .base import CalculationEngine
from ..core.config import EngineConfig
from ..core.constants import (
    CS_MIN_ABSOLUTE,
    CS_MIN_FACTOR,
    FIXED_FA,
    FIXED_FV,
    LONG_PERIOD_TL,
    PERIOD_SD1_PLACEHOLDER,
    PERIOD_UPPER_LIMIT_CU,
)
from ..core.data_models import (
    BuildingType,
    CalculationStep,
    SeismicParameters,
    StoryForce,
    StructuralGeometry,
    _as_enum,
)
from ..core.errors import CalculationError, CalculationErrorKind
from ..core.load_tables import PERIOD_COEFFICIENTS, get_site_coefficients


class SeismicEngine(CalculationEngine):
    """
    Seismic load calculator per SNI 1726:2019.
    Site coefficients come from the fixed site-class-C assumption or, in
    "table" mode, from the interpolated Fa/Fv tables.
    """

    stage = "seismic"

    def calculate_fundamental_period(
        self,
        geometry: StructuralGeometry,
        building_type: Union[BuildingType, str, None] = None,
    ) -> Tuple[float, List[CalculationStep]]:
        """
        Approximate fundamental period Ta = Ct × h^x with the Cu upper limit.

        Returns:
            (period in s, calculation steps)
        """
        self.calculations = []
        system = _as_enum(BuildingType, building_type or self.config.building_type,
                          "building_type")
        ct, x = PERIOD_COEFFICIENTS[system.value]
        height = geometry.height

        ta = self._finite(ct * height ** x, "Approximate period Ta")

        self._add_calc_step(
            "Calculate approximate fundamental period",
            "Ta = Ct × h^x",
            f"Ta = {ct} × {height:.1f}^{x} = {ta:.4f}",
            ta,
            "s",
            "SNI 1726:2019 Section 7.8.2.1",
        )

        # Cap uses a fixed Sd1 rather than the project's spectrum
        t_upper = max(PERIOD_UPPER_LIMIT_CU * ta, PERIOD_SD1_PLACEHOLDER)
        period = min(ta, t_upper)

        self._add_calc_step(
            "Apply upper limit to fundamental period (Sd1 assumed 0.4)",
            "T = min(Ta, max(Cu × Ta, 0.4))",
            f"T = min({ta:.4f}, max({PERIOD_UPPER_LIMIT_CU} × {ta:.4f}, "
            f"{PERIOD_SD1_PLACEHOLDER})) = {period:.4f}",
            period,
            "s",
            "SNI 1726:2019 Section 7.8.2.1",
        )

        return period, list(self.calculations)

    def get_site_coefficients(self, seismic: SeismicParameters) -> Tuple[float, float]:
        """(Fa, Fv) according to the configured site coefficient mode"""
        if self.config.site_coefficient_mode == "fixed":
            return FIXED_FA, FIXED_FV

        coefficients = get_site_coefficients(seismic.site_class.value, seismic.ss, seismic.s1)
        if coefficients is None:
            raise CalculationError(
                CalculationErrorKind.SITE_SPECIFIC_REQUIRED,
                f"Site class {seismic.site_class.value} has no tabulated Fa/Fv; "
                "a site-specific response analysis is required",
                stage=self.stage,
            )
        return coefficients

    def design_spectral_accelerations(self, seismic: SeismicParameters) -> Tuple[float, float]:
        """(Sds, Sd1) in g"""
        fa, fv = self.get_site_coefficients(seismic)
        sds = (2.0 / 3.0) * seismic.ss * fa
        sd1 = (2.0 / 3.0) * seismic.s1 * fv
        return sds, sd1

    def calculate_base_shear(
        self,
        weight: float,
        period: float,
        seismic: SeismicParameters,
    ) -> Tuple[float, List[CalculationStep]]:
        """
        Seismic base shear V = Cs × W.

        Args:
            weight: Effective seismic weight (kN)
            period: Fundamental period (s); T <= 0 skips the Cs upper bound
            seismic: Spectral accelerations and system factors

        Returns:
            (base shear in kN, calculation steps)
        """
        self.calculations = []
        r = seismic.response_modification
        ie = seismic.importance_factor

        if r <= 0 or ie <= 0:
            raise CalculationError(
                CalculationErrorKind.DIVISION_BY_ZERO,
                f"R and Ie must be positive (R={r}, Ie={ie})",
                stage=self.stage,
            )

        fa, fv = self.get_site_coefficients(seismic)
        sms = seismic.ss * fa
        sm1 = seismic.s1 * fv
        sds = (2.0 / 3.0) * sms
        sd1 = (2.0 / 3.0) * sm1

        self._add_calc_step(
            "Calculate design response spectrum parameters",
            "Sds = (2/3) × Ss × Fa, Sd1 = (2/3) × S1 × Fv",
            f"Sds = (2/3) × {seismic.ss} × {fa:.2f} = {sds:.3f}\n"
            f"Sd1 = (2/3) × {seismic.s1} × {fv:.2f} = {sd1:.3f}",
            sds,
            "g",
            "SNI 1726:2019 Section 6.2",
        )

        cs = sds / (r / ie)
        cs_min = max(CS_MIN_FACTOR * sds * ie, CS_MIN_ABSOLUTE)
        if period > 0:
            cs_max = sd1 / (period * (r / ie))
            cs = min(cs, cs_max)
            bounds = f"Cs,max = {sd1:.3f} / ({period:.3f} × {r}/{ie}) = {cs_max:.4f}\n"
        else:
            bounds = "Cs,max not applied (T <= 0)\n"
        cs = self._finite(max(cs, cs_min), "Seismic response coefficient Cs")

        self._add_calc_step(
            "Calculate seismic response coefficient",
            "Cs = Sds / (R/Ie), Cs,min <= Cs <= Cs,max",
            f"Cs = {sds:.3f} / ({r}/{ie})\n"
            f"{bounds}"
            f"Cs,min = max({CS_MIN_FACTOR} × {sds:.3f} × {ie}, {CS_MIN_ABSOLUTE}) = {cs_min:.4f}\n"
            f"Cs = {cs:.4f}",
            cs,
            "unitless",
            "SNI 1726:2019 Section 7.8.1.1",
        )

        base_shear = self._finite(cs * weight, "Base shear")

        self._add_calc_step(
            "Calculate seismic base shear",
            "V = Cs × W",
            f"V = {cs:.4f} × {weight:.1f} = {base_shear:.1f}",
            base_shear,
            "kN",
            "SNI 1726:2019 Section 7.8.1",
        )

        return base_shear, list(self.calculations)

    def design_response_spectrum(
        self,
        seismic: SeismicParameters,
        periods: Optional[Sequence[float]] = None,
    ) -> List[Tuple[float, float]]:
        """
        Design response spectrum Sa(T) per SNI 1726:2019 Section 6.4.

        Args:
            seismic: Spectral accelerations
            periods: Periods to evaluate (s); defaults to 0 - 4 s at 0.05 s

        Returns:
            List of (T, Sa) pairs, Sa in g
        """
        if periods is None:
            periods = [round(i * 0.05, 2) for i in range(81)]

        sds, sd1 = self.design_spectral_accelerations(seismic)
        if sds <= 0:
            return [(t, 0.0) for t in periods]

        t0 = 0.2 * sd1 / sds
        ts = sd1 / sds
        tl = LONG_PERIOD_TL

        spectrum = []
        for t in periods:
            if t <= t0:
                sa = sds * (0.4 + 0.6 * t / t0) if t0 > 0 else sds
            elif t <= ts:
                sa = sds
            elif t <= tl:
                sa = sd1 / t
            else:
                sa = sd1 * tl / (t * t)
            spectrum.append((t, sa))
        return spectrum

    def distribute_lateral_forces(
        self,
        base_shear: float,
        period: float,
        geometry: StructuralGeometry,
        floor_weight: float,
    ) -> List[StoryForce]:
        """
        Vertical distribution Fx = Cvx × V, Cvx = wx·hx^k / Σ wi·hi^k.

        Args:
            base_shear: V (kN)
            period: Fundamental period (s), sets the exponent k
            geometry: Floors and story height
            floor_weight: Seismic weight per floor (kN)
        """
        if period <= 0.5:
            k = 1.0
        elif period >= 2.5:
            k = 2.0
        else:
            k = 1.0 + (period - 0.5) / 2.0

        levels = [
            (floor, floor * geometry.story_height)
            for floor in range(1, geometry.number_of_floors + 1)
        ]
        denominator = sum(floor_weight * h ** k for _, h in levels)
        if denominator <= 0:
            raise CalculationError(
                CalculationErrorKind.DIVISION_BY_ZERO,
                "Sum of wi·hi^k is zero; floor weight must be positive",
                stage=self.stage,
            )

        return [
            StoryForce(
                floor=floor,
                height=h,
                weight=floor_weight,
                force=base_shear * floor_weight * h ** k / denominator,
            )
            for floor, h in levels
        ]


def calculate_fundamental_period(
    geometry: StructuralGeometry,
    building_type: Union[BuildingType, str] = BuildingType.CONCRETE_MOMENT,
    config: Optional[EngineConfig] = None,
) -> Tuple[float, List[CalculationStep]]:
    """Fundamental period with a fresh engine"""
    return SeismicEngine(config).calculate_fundamental_period(geometry, building_type)


def calculate_base_shear(
    weight: float,
    period: float,
    seismic: SeismicParameters,
    config: Optional[EngineConfig] = None,
) -> Tuple[float, List[CalculationStep]]:
    """Base shear with a fresh engine"""
    return SeismicEngine(config).calculate_base_shear(weight, period, seismic)
