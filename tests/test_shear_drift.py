"""
Tests for the beam shear calculator and the story drift check.
"""

import math

import pytest

from sni_struct.core.data_models import ConcreteProperties, MaterialProperties, SteelProperties
from sni_struct.core.errors import CalculationError, CalculationErrorKind, InputContractError
from sni_struct.engines.drift_engine import DriftEngine
from sni_struct.engines.shear_engine import ShearEngine

VC_300x440 = 0.17 * math.sqrt(30.0) * 300 * 440 / 1000


@pytest.fixture
def materials():
    return MaterialProperties(
        concrete=ConcreteProperties(fc=30.0),
        steel=SteelProperties(fy=400.0, fu=550.0),
    )


class TestShearEngine:

    def test_concrete_capacity(self, materials):
        design, steps = ShearEngine().calculate_shear(100.0, 300.0, 440.0, materials)

        assert design.concrete_capacity == pytest.approx(VC_300x440)
        assert steps[0].result == pytest.approx(VC_300x440)
        assert len(steps) == 4
        assert [s.stage for s in steps] == ["shear"] * 4

    def test_spacing_capped_at_half_depth(self, materials):
        design, _ = ShearEngine().calculate_shear(100.0, 300.0, 440.0, materials)

        assert design.steel_required == pytest.approx(100.0 - 0.75 * VC_300x440)
        assert design.stirrup_spacing == pytest.approx(220.0)
        assert design.capacity_ratio < 1.0

    def test_low_demand_needs_no_stirrup_contribution(self, materials):
        design, steps = ShearEngine().calculate_shear(20.0, 300.0, 440.0, materials)

        assert design.steel_required == 0.0
        assert design.stirrup_spacing == pytest.approx(220.0)
        assert steps[-1].verified is True

    def test_spacing_cap_for_deep_section(self, materials):
        design, _ = ShearEngine().calculate_shear(20.0, 300.0, 900.0, materials)
        assert design.stirrup_spacing == pytest.approx(300.0)

    def test_high_demand_tightens_spacing(self, materials):
        design, steps = ShearEngine().calculate_shear(300.0, 300.0, 440.0, materials)

        stirrup_force = 0.22 * 280 * (2 * math.pi * 100 / 4) * 440
        expected = stirrup_force / ((300.0 - 0.75 * VC_300x440) * 1000)
        assert design.stirrup_spacing == pytest.approx(expected)
        assert design.capacity_ratio == pytest.approx(1.0)
        assert steps[-1].verified is True

    def test_spacing_non_increasing_in_demand(self, materials):
        engine = ShearEngine()
        spacings = [
            engine.calculate_shear(v, 300.0, 440.0, materials)[0].stirrup_spacing
            for v in (0.0, 50.0, 100.0, 150.0, 250.0, 400.0)
        ]
        assert spacings == sorted(spacings, reverse=True)

    def test_invalid_section_rejected(self, materials):
        with pytest.raises(InputContractError) as exc_info:
            ShearEngine().calculate_shear(100.0, 300.0, 0.0, materials)
        assert exc_info.value.field == "effective_depth"


class TestDriftEngine:

    def test_drift_at_limit_is_compliant(self):
        check, steps = DriftEngine().calculate_story_drift(100.0, 4000.0, 1.0, 1.0)

        assert check.drift_ratio == pytest.approx(0.025)
        assert check.compliant is True
        assert check.limit == 0.025
        assert steps[-1].result == 1.0
        assert steps[-1].unit == "boolean"

    def test_amplified_drift_exceeds_limit(self):
        check, steps = DriftEngine().calculate_story_drift(20.0, 4000.0, 5.5, 1.0)

        assert check.design_displacement == pytest.approx(110.0)
        assert check.drift_ratio == pytest.approx(0.0275)
        assert check.compliant is False
        assert steps[-1].verified is False
        assert "EXCEEDS LIMIT" in steps[-1].calculation

    def test_importance_factor_reduces_design_displacement(self):
        check, _ = DriftEngine().calculate_story_drift(30.0, 4000.0, 5.5, 1.5)
        assert check.design_displacement == pytest.approx(110.0)

    @pytest.mark.parametrize("height,ie", [(0.0, 1.0), (4000.0, 0.0)])
    def test_zero_divisor_raises(self, height, ie):
        with pytest.raises(CalculationError) as exc_info:
            DriftEngine().calculate_story_drift(10.0, height, 5.5, ie)
        assert exc_info.value.kind == CalculationErrorKind.DIVISION_BY_ZERO
