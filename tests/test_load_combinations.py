"""
Unit tests for the load combination system.

Tests cover:
- Combination library definitions and factors
- Default-active set and explicit selection
- Factored load evaluation
- Governing combination
"""

import pytest

from sni_struct.core.data_models import CombinationLoad, LoadConditions, SeismicParameters
from sni_struct.core.errors import InputContractError
from sni_struct.core.load_combinations import (
    DEFAULT_ACTIVE_COMBINATIONS,
    LOAD_COMBINATIONS,
    LoadComponentType,
    active_combinations,
    evaluate_combinations,
    governing_combination,
)


@pytest.fixture
def loads():
    return LoadConditions(
        dead_load=5.0,
        live_load=4.0,
        wind_load=1.0,
        seismic_parameters=SeismicParameters(ss=0.8, s1=0.3),
    )


class TestLoadCombinationLibrary:
    """Tests for load combination definitions."""

    def test_library_order(self):
        """Test the library lists the six strength combinations in order."""
        assert list(LOAD_COMBINATIONS) == [
            "1.4D",
            "1.2D+1.6L",
            "1.2D+1.0L+1.0E",
            "1.2D+1.0L+1.0W",
            "0.9D+1.0E",
            "0.9D+1.0W",
        ]

    def test_factors(self):
        combo = LOAD_COMBINATIONS["1.2D+1.0L+1.0E"]

        assert combo.get_factor(LoadComponentType.DEAD) == 1.2
        assert combo.get_factor(LoadComponentType.LIVE) == 1.0
        assert combo.get_factor(LoadComponentType.EARTHQUAKE) == 1.0
        assert combo.get_factor(LoadComponentType.WIND) == 0.0

    def test_gravity_only(self):
        assert LOAD_COMBINATIONS["1.4D"].is_gravity_only
        assert LOAD_COMBINATIONS["1.2D+1.6L"].is_gravity_only
        assert not LOAD_COMBINATIONS["0.9D+1.0W"].is_gravity_only

    def test_wind_combinations_are_opt_in(self):
        """Test that wind combinations are not active by default."""
        assert DEFAULT_ACTIVE_COMBINATIONS == {
            "1.4D", "1.2D+1.6L", "1.2D+1.0L+1.0E", "0.9D+1.0E",
        }

    def test_library_is_read_only(self):
        with pytest.raises(TypeError):
            LOAD_COMBINATIONS["2.0D"] = LOAD_COMBINATIONS["1.4D"]


class TestActiveCombinations:
    """Tests for combination selection."""

    def test_defaults_when_nothing_selected(self):
        ids = [c.combination_id for c in active_combinations()]
        assert ids == ["1.4D", "1.2D+1.6L", "1.2D+1.0L+1.0E", "0.9D+1.0E"]

    def test_explicit_selection_returned_in_library_order(self):
        ids = [c.combination_id for c in active_combinations(["0.9D+1.0W", "1.4D"])]
        assert ids == ["1.4D", "0.9D+1.0W"]

    def test_empty_selection_means_none_active(self):
        assert active_combinations([]) == []

    def test_unknown_combination_raises_error(self):
        with pytest.raises(InputContractError) as exc_info:
            active_combinations(["1.4D", "1.6W"])

        assert exc_info.value.field == "combinations"
        assert exc_info.value.value == ["1.6W"]


class TestEvaluateCombinations:
    """Tests for factored load evaluation."""

    def test_gravity_and_wind_loads(self, loads):
        results = {r.combination_id: r for r in evaluate_combinations(loads)}

        assert results["1.4D"].factored_load == pytest.approx(7.0)
        assert results["1.2D+1.6L"].factored_load == pytest.approx(12.4)
        assert results["1.2D+1.0L+1.0W"].factored_load == pytest.approx(11.0)
        assert results["0.9D+1.0W"].factored_load == pytest.approx(5.5)

    def test_every_combination_reported(self, loads):
        results = evaluate_combinations(loads)

        assert len(results) == 6
        assert [r.is_active for r in results] == [True, True, True, False, True, False]

    def test_seismic_area_load(self, loads):
        results = {r.combination_id: r for r in evaluate_combinations(loads, seismic=2.0)}

        assert results["1.2D+1.0L+1.0E"].factored_load == pytest.approx(12.0)
        assert results["0.9D+1.0E"].factored_load == pytest.approx(6.5)

    def test_without_seismic_load_earthquake_terms_vanish(self, loads):
        results = {r.combination_id: r for r in evaluate_combinations(loads)}
        assert results["0.9D+1.0E"].factored_load == pytest.approx(4.5)

    def test_display_name(self, loads):
        results = evaluate_combinations(loads)
        assert results[1].name == "1.2D + 1.6L"


class TestGoverningCombination:

    def test_largest_active_load_governs(self, loads):
        governing = governing_combination(evaluate_combinations(loads))

        assert governing.combination_id == "1.2D+1.6L"

    def test_seismic_combination_can_govern(self, loads):
        governing = governing_combination(evaluate_combinations(loads, seismic=2.0))
        assert governing.factored_load == pytest.approx(12.4)

        governing = governing_combination(evaluate_combinations(loads, seismic=3.0))
        assert governing.combination_id == "1.2D+1.0L+1.0E"

    def test_inactive_combinations_ignored(self, loads):
        results = evaluate_combinations(loads, selected=["1.4D"])
        assert governing_combination(results).combination_id == "1.4D"

    def test_no_active_combination(self):
        results = [CombinationLoad("1.4D", "1.4D", 7.0, is_active=False)]
        assert governing_combination(results) is None
