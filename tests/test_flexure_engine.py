"""
Tests for beam flexural design: required steel, ratio limits and bar selection.
"""

import math

import pytest

from sni_struct.core.data_models import ConcreteProperties, MaterialProperties, SteelProperties
from sni_struct.core.errors import CalculationError, CalculationErrorKind, InputContractError
from sni_struct.engines.flexure_engine import (
    FlexureEngine,
    bar_area,
    calculate_required_steel,
    select_bars,
)


@pytest.fixture
def materials():
    return MaterialProperties(
        concrete=ConcreteProperties(fc=30.0),
        steel=SteelProperties(fy=400.0, fu=550.0),
    )


class TestRequiredSteel:

    def test_minimum_ratio_governs_light_moment(self, materials):
        area, steps = calculate_required_steel(40.5, 300.0, 440.0, materials)

        assert area == pytest.approx(0.0035 * 300 * 440)
        assert [s.step for s in steps] == [1, 2, 3]
        assert all(s.verified for s in steps)
        assert steps[-1].unit == "mm²"

    def test_ratios_exposed_after_calculation(self, materials):
        engine = FlexureEngine()
        engine.calculate_required_steel(40.5, 300.0, 440.0, materials)

        assert engine.rho_min == pytest.approx(0.0035)
        assert engine.rho_max == 0.025
        assert engine.rho_required == pytest.approx(0.0035)

    def test_calculated_ratio_governs_moderate_moment(self, materials):
        area, steps = calculate_required_steel(150.0, 300.0, 440.0, materials)

        rho = steps[1].result
        assert rho > 0.0035
        assert area == pytest.approx(rho * 300 * 440)

    def test_zero_moment_gives_minimum_steel(self, materials):
        area, _ = calculate_required_steel(0.0, 300.0, 440.0, materials)
        assert area == pytest.approx(462.0)

    def test_over_reinforced_section_clamped_to_rho_max(self, materials):
        area, steps = calculate_required_steel(480.0, 300.0, 440.0, materials)

        assert area == pytest.approx(0.025 * 300 * 440)
        warnings = [s for s in steps if not s.verified]
        assert len(warnings) == 1
        assert warnings[0].description.startswith("WARNING")

    def test_low_yield_steel_keeps_minimum_ratio_above_maximum(self):
        weak = MaterialProperties(
            concrete=ConcreteProperties(fc=30.0),
            steel=SteelProperties(fy=50.0, fu=80.0),
        )
        area, _ = calculate_required_steel(40.5, 300.0, 440.0, weak)

        assert area == pytest.approx(1.4 / 50.0 * 300 * 440)

    def test_section_capacity_exceeded(self, materials):
        engine = FlexureEngine()

        with pytest.raises(CalculationError) as exc_info:
            engine.calculate_required_steel(2000.0, 300.0, 440.0, materials)

        error = exc_info.value
        assert error.kind == CalculationErrorKind.SECTION_CAPACITY_EXCEEDED
        assert error.stage == "flexure"
        assert error.step is not None
        assert error.step.verified is False
        assert error.step.result > 1.0
        assert engine.calculations[-1] is error.step

    @pytest.mark.parametrize("width,depth", [(0.0, 440.0), (300.0, -1.0)])
    def test_invalid_section_rejected(self, materials, width, depth):
        with pytest.raises(InputContractError):
            calculate_required_steel(50.0, width, depth, materials)

    def test_negative_moment_rejected(self, materials):
        with pytest.raises(InputContractError) as exc_info:
            calculate_required_steel(-1.0, 300.0, 440.0, materials)
        assert exc_info.value.field == "moment"

    def test_steel_area_monotone_in_moment(self, materials):
        moments = [0.0, 20.0, 60.0, 120.0, 200.0, 300.0, 400.0]
        areas = [calculate_required_steel(m, 300.0, 440.0, materials)[0] for m in moments]
        assert areas == sorted(areas)

    def test_calculations_reset_between_calls(self, materials):
        engine = FlexureEngine()
        engine.calculate_required_steel(480.0, 300.0, 440.0, materials)
        engine.calculate_required_steel(40.5, 300.0, 440.0, materials)

        assert len(engine.calculations) == 3


class TestBarSelection:

    def test_bar_area(self):
        assert bar_area(16) == pytest.approx(math.pi * 64)

    @pytest.mark.parametrize("area,expected", [
        (462.0, (12, 5)),
        (3300.0, (25, 7)),
        (250.0, (12, 3)),
    ])
    def test_smallest_bar_within_count_range(self, area, expected):
        assert select_bars(area) == expected

    def test_small_area_falls_back_to_default(self):
        engine = FlexureEngine()
        assert engine.select_bars(100.0) == (16, 2)
        assert engine.calculations[-1].verified is False

    def test_large_area_falls_back_to_default(self):
        engine = FlexureEngine()
        assert engine.select_bars(7000.0) == (16, 2)

        step = engine.calculations[-1]
        assert step.verified is False
        assert step.description.startswith("WARNING")

    def test_selected_bars_cover_required_area(self):
        engine = FlexureEngine()
        diameter, count = engine.select_bars(1234.0)

        assert 2 <= count <= 8
        assert count * bar_area(diameter) >= 1234.0
        assert engine.calculations[-1].verified is True


def test_design_section_summary(materials):
    engine = FlexureEngine()
    summary, steps = engine.design_section(480.0, 300.0, 440.0, materials)

    assert summary.longitudinal == pytest.approx(3300.0)
    assert summary.transverse == pytest.approx(0.3 * 3300.0)
    assert (summary.bar_diameter, summary.bar_count) == (25, 7)
    assert summary.required_ratio > summary.maximum_ratio
    assert [s.step for s in steps] == list(range(1, len(steps) + 1))
    assert steps[-1].description == "Select longitudinal bars"


@pytest.mark.parametrize("moment", [0.0, 10.0, 75.0, 150.0, 320.0, 480.0])
@pytest.mark.parametrize("fc,fy", [(25.0, 400.0), (40.0, 240.0), (30.0, 500.0)])
def test_steel_area_never_below_minimum(moment, fc, fy):
    materials = MaterialProperties(
        concrete=ConcreteProperties(fc=fc),
        steel=SteelProperties(fy=fy, fu=1.3 * fy),
    )
    engine = FlexureEngine()
    try:
        area, _ = engine.calculate_required_steel(moment, 300.0, 440.0, materials)
    except CalculationError as e:
        assert e.kind == CalculationErrorKind.SECTION_CAPACITY_EXCEEDED
        return

    assert area >= engine.rho_min * 300.0 * 440.0 - 1e-9
