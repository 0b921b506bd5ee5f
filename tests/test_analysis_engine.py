"""
Tests for the end-to-end analysis pipeline.

Tests cover:
- Weight, period and base shear chaining
- Stage order and numbering of the merged audit trail
- Per-stage error capture (section capacity exceeded)
- Governing check, utilization and code compliance flags
- Load combination selection
"""

import math

import pytest

from sni_struct.core.config import EngineConfig
from sni_struct.core.data_models import (
    ConcreteProperties,
    LoadConditions,
    MaterialProperties,
    SeismicParameters,
    SiteClass,
    SteelProperties,
    StructuralGeometry,
)
from sni_struct.core.errors import InputContractError
from sni_struct.engines.analysis_engine import AnalysisEngine, analyze

SCENARIO_A_WEIGHT = 5.0 * 600 * 8 + 30 * 20 * 32 * 2400 * 9.81 / 1000


@pytest.fixture
def scenario_a_results(analysis_inputs):
    geometry, materials, loads = analysis_inputs
    return analyze(geometry, materials, loads)


@pytest.fixture
def heavy_inputs():
    """Gravity load far beyond what the assumed beam section can carry"""
    geometry = StructuralGeometry(length=30, width=20, height=32, number_of_floors=8)
    materials = MaterialProperties(
        concrete=ConcreteProperties(fc=30.0),
        steel=SteelProperties(fy=400.0, fu=550.0),
    )
    loads = LoadConditions(
        dead_load=400.0,
        live_load=100.0,
        seismic_parameters=SeismicParameters(ss=0.8, s1=0.3),
    )
    return geometry, materials, loads


class TestGlobalResponse:

    def test_total_weight(self, scenario_a_results):
        assert scenario_a_results.total_weight == pytest.approx(SCENARIO_A_WEIGHT)

    def test_period_and_base_shear_chain(self, scenario_a_results):
        period = 0.0466 * 32.0 ** 0.9
        sds, sd1 = 2 / 3 * 0.8 * 1.2, 2 / 3 * 0.3 * 1.8
        cs = min(sds / 8.0, sd1 / (period * 8.0))

        assert scenario_a_results.fundamental_period == pytest.approx(period)
        assert scenario_a_results.base_shear == pytest.approx(cs * SCENARIO_A_WEIGHT)

    def test_derived_global_quantities(self, scenario_a_results):
        v = scenario_a_results.base_shear
        t = scenario_a_results.fundamental_period

        assert scenario_a_results.overturn_moment == pytest.approx(0.7 * v * 32.0)
        assert scenario_a_results.max_shear == pytest.approx(0.6 * v)
        assert scenario_a_results.max_axial_force == pytest.approx(0.4 * SCENARIO_A_WEIGHT)
        assert scenario_a_results.max_deflection == pytest.approx(v * t ** 2 / (4 * math.pi ** 2))

    def test_member_demand(self, scenario_a_results):
        assert scenario_a_results.max_moment == pytest.approx(0.125 * 9.0 * 36.0)

    def test_story_forces_sum_to_base_shear(self, scenario_a_results):
        forces = scenario_a_results.story_forces

        assert len(forces) == 8
        assert sum(f.force for f in forces) == pytest.approx(scenario_a_results.base_shear)
        assert forces[0].weight == pytest.approx(SCENARIO_A_WEIGHT / 8)


class TestAuditTrail:

    def test_stage_order(self, scenario_a_results):
        stages = []
        for step in scenario_a_results.calculation_steps:
            if not stages or stages[-1] != step.stage:
                stages.append(step.stage)

        assert stages == [
            "loads", "period", "base_shear", "member_forces", "flexure", "shear", "drift",
        ]

    def test_steps_numbered_consecutively(self, scenario_a_results):
        numbers = [s.step for s in scenario_a_results.calculation_steps]
        assert numbers == list(range(1, len(numbers) + 1))

    def test_analysis_is_idempotent(self, analysis_inputs):
        engine = AnalysisEngine()
        first = engine.analyze(*analysis_inputs)
        second = engine.analyze(*analysis_inputs)

        assert first == second
        assert len(first.calculation_steps) == len(second.calculation_steps)

    def test_references_and_review_notes(self, scenario_a_results):
        assert any(r.startswith("SNI 1726:2019") for r in scenario_a_results.references)
        assert "Professional engineer review mandatory before construction" in \
            scenario_a_results.review_notes


class TestDesignAndCompliance:

    def test_reinforcement_for_light_office_loads(self, scenario_a_results):
        reinforcement = scenario_a_results.reinforcement

        assert reinforcement.longitudinal == pytest.approx(0.0035 * 300 * 440)
        assert (reinforcement.bar_diameter, reinforcement.bar_count) == (12, 5)

    def test_shear_design_uses_beam_shear(self, scenario_a_results):
        shear = scenario_a_results.shear_design

        assert shear.demand == pytest.approx(0.5 * 9.0 * 6.0)
        assert shear.stirrup_spacing == pytest.approx(220.0)

    def test_drift_governs_and_fails(self, scenario_a_results):
        results = scenario_a_results

        assert results.drift_compliance is False
        assert results.critical_member == "Lateral system - typical story"
        assert results.failure_mode == "Excessive story drift"
        assert results.utilization_ratio == pytest.approx(results.drift_ratio / 0.025 * 100)
        assert results.safety_margin == pytest.approx(100.0 - results.utilization_ratio)

    def test_code_compliance_flags(self, scenario_a_results):
        compliance = scenario_a_results.code_compliance

        assert compliance.sni2847 is True
        assert compliance.sni1726 is False
        assert compliance.drift_check is False

    def test_no_errors_for_valid_building(self, scenario_a_results):
        assert scenario_a_results.errors == ()
        assert scenario_a_results.status == "OK"
        assert not scenario_a_results.has_errors

    def test_site_class_matters_in_table_mode(self, analysis_inputs):
        fixed = analyze(*analysis_inputs)
        table = analyze(*analysis_inputs, config=EngineConfig(site_coefficient_mode="table"))

        assert table.base_shear != pytest.approx(fixed.base_shear)

    def test_deeper_section_governed_by_minimum_steel(self, analysis_inputs):
        deep = analyze(*analysis_inputs, config=EngineConfig(beam_depth_mm=800.0))
        assert deep.reinforcement.longitudinal > 0
        assert deep.reinforcement.required_ratio == pytest.approx(0.0035)


class TestCalculationErrors:

    def test_section_capacity_exceeded_is_recorded(self, heavy_inputs):
        results = analyze(*heavy_inputs)

        kinds = [e["kind"] for e in results.errors]
        assert "section_capacity_exceeded" in kinds
        assert results.errors[0]["stage"] == "flexure"
        assert results.reinforcement is None
        assert results.status == "FAIL"
        assert results.code_compliance.sni2847 is False

    def test_failed_stage_keeps_partial_steps(self, heavy_inputs):
        results = analyze(*heavy_inputs)
        flexure_steps = [s for s in results.calculation_steps if s.stage == "flexure"]

        assert flexure_steps
        assert flexure_steps[-1].verified is False

    def test_later_stages_still_run(self, heavy_inputs):
        results = analyze(*heavy_inputs)

        assert results.shear_design is not None
        assert results.base_shear is not None
        assert results.drift_ratio is not None

    def test_failed_flexure_leaves_utilization_undetermined(self, heavy_inputs):
        results = analyze(*heavy_inputs)

        assert results.utilization_ratio is None
        assert results.safety_margin is None
        assert results.critical_member == "Beam B1 - midspan"
        assert results.failure_mode == "Section capacity exceeded"

    def test_single_long_bay_beyond_section_capacity(self):
        """Test a light building whose only failing check is flexure"""
        geometry = StructuralGeometry(
            length=30, width=30, height=3, number_of_floors=1, bay_spacing_x=30
        )
        materials = MaterialProperties(
            concrete=ConcreteProperties(fc=30.0),
            steel=SteelProperties(fy=400.0, fu=550.0),
        )
        loads = LoadConditions(
            dead_load=4.0,
            live_load=2.0,
            seismic_parameters=SeismicParameters(ss=0.05, s1=0.02),
        )

        results = analyze(geometry, materials, loads)

        assert results.max_moment == pytest.approx(675.0)
        assert [e["kind"] for e in results.errors] == ["section_capacity_exceeded"]
        assert results.status == "FAIL"
        assert results.drift_ratio is not None
        assert results.utilization_ratio is None
        assert results.safety_margin is None
        assert results.critical_member == "Beam B1 - midspan"
        assert "capacity" in results.failure_mode.lower()

    def test_failed_seismic_stage_names_lateral_system(self, analysis_inputs):
        geometry, materials, loads = analysis_inputs
        loads.seismic_parameters.site_class = SiteClass.SF
        results = analyze(geometry, materials, loads,
                          config=EngineConfig(site_coefficient_mode="table"))

        assert results.utilization_ratio is None
        assert results.critical_member == "Lateral system - typical story"
        assert results.failure_mode == "Seismic base shear not determined"

    def test_site_class_f_in_table_mode_stops_seismic_chain(self, analysis_inputs):
        geometry, materials, loads = analysis_inputs
        loads.seismic_parameters.site_class = SiteClass.SF
        results = analyze(geometry, materials, loads,
                          config=EngineConfig(site_coefficient_mode="table"))

        assert [e["kind"] for e in results.errors] == ["site_specific_required"]
        assert results.base_shear is None
        assert results.drift_ratio is None
        assert results.story_forces == ()
        assert results.code_compliance.sni1726 is False


class TestLoadCombinations:

    def test_default_combinations(self, scenario_a_results):
        combos = {c.combination_id: c for c in scenario_a_results.load_combinations}

        assert len(combos) == 6
        assert combos["1.2D+1.6L"].factored_load == pytest.approx(12.4)
        assert combos["1.2D+1.0L+1.0W"].is_active is False
        assert combos["1.2D+1.0L+1.0E"].is_active is True

    def test_earthquake_combination_uses_seismic_area_load(self, scenario_a_results):
        combos = {c.combination_id: c for c in scenario_a_results.load_combinations}
        seismic = scenario_a_results.base_shear / (600.0 * 8)

        assert combos["0.9D+1.0E"].factored_load == pytest.approx(0.9 * 5.0 + seismic)

    def test_explicit_selection(self, analysis_inputs):
        results = analyze(*analysis_inputs, combinations=["1.4D", "0.9D+1.0W"])
        active = [c.combination_id for c in results.load_combinations if c.is_active]

        assert active == ["1.4D", "0.9D+1.0W"]

    def test_unknown_combination_rejected(self, analysis_inputs):
        with pytest.raises(InputContractError) as exc_info:
            analyze(*analysis_inputs, combinations=["1.5D"])
        assert exc_info.value.field == "combinations"
