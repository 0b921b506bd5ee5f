"""
Comprehensive Analysis Orchestrator

Runs the simplified closed-form analysis of a regular RC frame building:
weight -> period -> base shear -> member demand -> flexure -> shear -> drift
-> story forces, merging every calculator's audit trail into one log.

Calculation domain errors are caught per stage and reported on the result;
stages that depend on a failed stage are skipped and their fields left None.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .base import CalculationEngine
from .drift_engine import DriftEngine
from .flexure_engine import FlexureEngine
from .seismic_engine import SeismicEngine
from .shear_engine import ShearEngine
from ..core.config import EngineConfig
from ..core.constants import (
    AXIAL_SHARE_FACTOR,
    ENGINEERING_CONSTANTS,
    GRAVITY,
    MOMENT_COEFFICIENT,
    OVERTURN_ARM_FACTOR,
    SHEAR_COEFFICIENT,
)
from ..core.data_models import (
    BuildingType,
    CalculationLog,
    CodeCompliance,
    DriftCheck,
    LoadConditions,
    MaterialProperties,
    ReinforcementSummary,
    ShearDesign,
    StructuralAnalysisResults,
    StructuralGeometry,
)
from ..core.errors import CalculationError
from ..core.load_combinations import active_combinations, evaluate_combinations

logger = logging.getLogger(__name__)

# Approximate global shear share used for the reported maximum shear
GLOBAL_SHEAR_SHARE = 0.6

# Stages feeding the governing check; a failure in any of them is reported
# instead of a utilization taken from the surviving checks
GOVERNING_STAGE_FAILURES = {
    "period": ("Lateral system - typical story", "Fundamental period not determined"),
    "base_shear": ("Lateral system - typical story", "Seismic base shear not determined"),
    "flexure": ("Beam B1 - midspan", "Section capacity exceeded"),
    "shear": ("Beam B1 - support", "Shear capacity not determined"),
    "drift": ("Lateral system - typical story", "Story drift not determined"),
}

REFERENCES = (
    "SNI 1726:2019 - Tata cara perencanaan ketahanan gempa untuk struktur bangunan gedung "
    "dan non gedung",
    "SNI 2847:2019 - Persyaratan beton struktural untuk bangunan gedung",
    "ACI 318-19 - Building Code Requirements for Structural Concrete",
)

REVIEW_NOTES = (
    "All calculations performed per applicable codes",
    "Results are preliminary - detailed analysis required",
    "Professional engineer review mandatory before construction",
)


class AnalysisEngine(CalculationEngine):
    """
    Sequential analysis pipeline. Each call builds fresh calculators, so one
    instance may be reused but should not be shared between threads.
    """

    stage = "loads"

    def analyze(
        self,
        geometry: StructuralGeometry,
        materials: MaterialProperties,
        loads: LoadConditions,
        building_type: Union[BuildingType, str, None] = None,
        combinations: Optional[Iterable[str]] = None,
    ) -> StructuralAnalysisResults:
        """
        Args:
            geometry: Building geometry (m)
            materials: Concrete and steel properties (MPa)
            loads: Area loads (kN/m²) and seismic parameters
            building_type: Seismic system for the period; defaults to config
            combinations: Explicit load combination ids, or None for defaults

        Raises:
            InputContractError: Unknown load combination id
        """
        self.calculations = []
        selected = list(combinations) if combinations is not None else None
        active_combinations(selected)

        config = self.config
        log = CalculationLog()
        errors: List[Dict[str, Any]] = []
        seismic = loads.seismic_parameters

        # 1. Building weight
        total_weight = self._calculate_weight(geometry, materials, loads)
        log.extend(self.calculations, "loads")

        # 2. Fundamental period
        seismic_engine = SeismicEngine(config)
        period = self._run_stage(
            "period", log, errors, seismic_engine,
            lambda: seismic_engine.calculate_fundamental_period(geometry, building_type),
        )

        # 3. Base shear
        base_shear = None
        if period is not None:
            base_shear = self._run_stage(
                "base_shear", log, errors, seismic_engine,
                lambda: seismic_engine.calculate_base_shear(total_weight, period, seismic),
            )

        # 4. Member demand (simply supported beam over the longest bay)
        span = geometry.max_bay_spacing
        distributed_load = loads.dead_load + loads.live_load
        max_moment = MOMENT_COEFFICIENT * distributed_load * span ** 2
        beam_shear = SHEAR_COEFFICIENT * distributed_load * span
        self.calculations = []
        self._add_calc_step(
            "Approximate beam demand (simply supported, longest bay)",
            "M = 0.125 × (D + L) × L², V = 0.5 × (D + L) × L",
            f"M = {MOMENT_COEFFICIENT} × {distributed_load:.2f} × {span:.2f}² = {max_moment:.2f} kN·m\n"
            f"V = {SHEAR_COEFFICIENT} × {distributed_load:.2f} × {span:.2f} = {beam_shear:.2f} kN",
            max_moment,
            "kN·m",
            "Simplified frame analysis",
        )
        log.extend(self.calculations, "member_forces")

        # 5. Flexure on the assumed beam section
        b = config.beam_width_mm
        d = config.effective_depth_mm
        flexure_engine = FlexureEngine(config)
        reinforcement: Optional[ReinforcementSummary] = self._run_stage(
            "flexure", log, errors, flexure_engine,
            lambda: flexure_engine.design_section(max_moment, b, d, materials),
        )

        # 6. Shear on the same section
        shear_engine = ShearEngine(config)
        shear_design: Optional[ShearDesign] = self._run_stage(
            "shear", log, errors, shear_engine,
            lambda: shear_engine.calculate_shear(beam_shear, b, d, materials),
        )

        # 7. Drift from the equivalent single-degree displacement
        drift: Optional[DriftCheck] = None
        displacement = None
        if base_shear is not None and period is not None:
            displacement = base_shear * period ** 2 / (4 * math.pi ** 2)
            drift_engine = DriftEngine(config)
            drift = self._run_stage(
                "drift", log, errors, drift_engine,
                lambda: drift_engine.calculate_story_drift(
                    displacement,
                    geometry.story_height * 1000,
                    config.deflection_amplification,
                    seismic.importance_factor,
                ),
            )

        # 8. Story forces and load combinations
        story_forces = ()
        if base_shear is not None and period is not None:
            try:
                story_forces = tuple(seismic_engine.distribute_lateral_forces(
                    base_shear, period, geometry, total_weight / geometry.number_of_floors
                ))
            except CalculationError as e:
                self._record_error(errors, e, "story_forces")

        seismic_area_load = 0.0
        if base_shear is not None:
            seismic_area_load = base_shear / (geometry.plan_area * geometry.number_of_floors)
        combination_loads = tuple(evaluate_combinations(loads, selected, seismic_area_load))

        utilization, critical_member, failure_mode = self._governing_check(
            reinforcement, shear_design, drift, errors
        )
        safety_margin = 100.0 - utilization if utilization is not None else None

        drift_ok = drift is not None and drift.compliant
        flexure_ok = (reinforcement is not None
                      and reinforcement.required_ratio <= reinforcement.maximum_ratio)
        shear_ok = shear_design is not None and shear_design.capacity_ratio <= 1.0 + 1e-9
        deflection_limit = span * 1000 / ENGINEERING_CONSTANTS.LIMITS.DEFLECTION_L_OVER

        compliance = CodeCompliance(
            sni1726=drift_ok and base_shear is not None,
            sni2847=flexure_ok and shear_ok,
            deflection_check=displacement is not None and displacement < deflection_limit,
            drift_check=drift_ok,
        )

        status = "FAIL" if errors else "OK"
        if errors:
            logger.warning(
                f"Analysis finished with {len(errors)} calculation error(s): "
                f"{', '.join(e['kind'] for e in errors)}"
            )
        else:
            logger.info(
                f"Analysis complete: T={period:.3f} s, V={base_shear:.1f} kN, "
                f"utilization={utilization:.1f}% ({failure_mode})"
            )

        return StructuralAnalysisResults(
            fundamental_period=period,
            base_shear=base_shear,
            total_weight=total_weight,
            overturn_moment=(
                base_shear * geometry.height * OVERTURN_ARM_FACTOR
                if base_shear is not None else None
            ),
            max_moment=max_moment,
            max_shear=GLOBAL_SHEAR_SHARE * base_shear if base_shear is not None else None,
            max_axial_force=total_weight * AXIAL_SHARE_FACTOR,
            max_deflection=displacement,
            max_drift=drift.design_displacement if drift is not None else None,
            drift_ratio=drift.drift_ratio if drift is not None else None,
            drift_compliance=drift_ok,
            reinforcement=reinforcement,
            shear_design=shear_design,
            story_forces=story_forces,
            load_combinations=combination_loads,
            utilization_ratio=utilization,
            safety_margin=safety_margin,
            critical_member=critical_member,
            failure_mode=failure_mode,
            code_compliance=compliance,
            calculation_steps=log.steps,
            references=REFERENCES,
            review_notes=REVIEW_NOTES,
            errors=tuple(errors),
            status=status,
        )

    def _calculate_weight(
        self,
        geometry: StructuralGeometry,
        materials: MaterialProperties,
        loads: LoadConditions,
    ) -> float:
        """W = D × A × n + L × B × H × ρc × g / 1000 (kN)"""
        superimposed = loads.dead_load * geometry.plan_area * geometry.number_of_floors
        volume = geometry.length * geometry.width * geometry.height
        self_weight = volume * materials.concrete.density * GRAVITY / 1000
        total_weight = self._finite(superimposed + self_weight, "Building weight")

        self._add_calc_step(
            "Calculate total building weight",
            "W = D × L × B × n + L × B × H × ρc × g / 1000",
            f"W = {loads.dead_load} × {geometry.plan_area:.1f} × {geometry.number_of_floors} + "
            f"{volume:.1f} × {materials.concrete.density} × {GRAVITY} / 1000 = {total_weight:.1f}",
            total_weight,
            "kN",
            "SNI 1727:2020 / SNI 1726:2019 Section 7.7.2",
        )
        return total_weight

    def _run_stage(self, stage, log, errors, engine, calculate):
        """Run one calculator; on a domain error keep its partial steps and record it"""
        try:
            value, steps = calculate()
        except CalculationError as e:
            log.extend(engine.calculations, stage)
            self._record_error(errors, e, stage)
            return None
        log.extend(steps, stage)
        return value

    @staticmethod
    def _record_error(errors: List[Dict[str, Any]], error: CalculationError, stage: str) -> None:
        error.stage = stage
        logger.warning(f"Calculation error in stage '{stage}': {error}")
        errors.append(error.to_dict())

    @staticmethod
    def _governing_check(
        reinforcement: Optional[ReinforcementSummary],
        shear_design: Optional[ShearDesign],
        drift: Optional[DriftCheck],
        errors: Sequence[Dict[str, Any]] = (),
    ) -> Tuple[Optional[float], str, str]:
        """
        (utilization %, critical member, failure mode) of the governing check.

        A failed governing stage leaves utilization None and names that stage.
        """
        for error in errors:
            if error["stage"] in GOVERNING_STAGE_FAILURES:
                member, mode = GOVERNING_STAGE_FAILURES[error["stage"]]
                return None, member, mode

        candidates = []
        if reinforcement is not None and reinforcement.maximum_ratio > 0:
            candidates.append((
                reinforcement.required_ratio / reinforcement.maximum_ratio,
                "Beam B1 - midspan",
                "Flexural yielding of reinforcement",
            ))
        if shear_design is not None:
            candidates.append((
                shear_design.capacity_ratio,
                "Beam B1 - support",
                "Diagonal tension shear failure",
            ))
        if drift is not None and drift.limit > 0:
            candidates.append((
                drift.drift_ratio / drift.limit,
                "Lateral system - typical story",
                "Excessive story drift",
            ))

        if not candidates:
            return None, "Undetermined", "Undetermined"

        ratio, member, mode = max(candidates, key=lambda c: c[0])
        return ratio * 100.0, member, mode


def analyze(
    geometry: StructuralGeometry,
    materials: MaterialProperties,
    loads: LoadConditions,
    building_type: Union[BuildingType, str, None] = None,
    combinations: Optional[Iterable[str]] = None,
    config: Optional[EngineConfig] = None,
) -> StructuralAnalysisResults:
    """Run the full analysis with a fresh engine"""
    return AnalysisEngine(config).analyze(
        geometry, materials, loads, building_type=building_type, combinations=combinations
    )
