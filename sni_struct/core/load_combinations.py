"""
Load Combination System - SNI 1727:2020 / SNI 1726:2019

Strength design combinations with an explicit default-active set. A caller
either accepts the defaults or passes an explicit selection, which is then
used exactly as given.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .data_models import CombinationLoad, LoadConditions
from .errors import InputContractError

logger = logging.getLogger(__name__)


class LoadComponentType(Enum):
    """Types of load components in combinations."""
    DEAD = "D"
    LIVE = "L"
    EARTHQUAKE = "E"
    WIND = "W"


@dataclass(frozen=True)
class LoadCombinationDefinition:
    """Definition of a single load combination.

    Attributes:
        combination_id: Identifier, e.g. "1.2D+1.6L"
        name: Display name
        load_factors: Factor per load component
        description: Description with code reference
        default_active: Whether the combination is active when the caller
            makes no explicit selection
    """
    combination_id: str
    name: str
    load_factors: Mapping[LoadComponentType, float]
    description: str
    default_active: bool

    def get_factor(self, component: LoadComponentType) -> float:
        """Factor for a component (0.0 if the component is not in the combination)"""
        return self.load_factors.get(component, 0.0)

    def factored_load(self, loads: LoadConditions, seismic: float = 0.0) -> float:
        """Factored area load (kN/m²).

        Args:
            loads: Unfactored dead/live/wind area loads
            seismic: Equivalent earthquake area load (kN/m²), 0 if not evaluated
        """
        return (
            self.get_factor(LoadComponentType.DEAD) * loads.dead_load
            + self.get_factor(LoadComponentType.LIVE) * loads.live_load
            + self.get_factor(LoadComponentType.WIND) * loads.wind_load
            + self.get_factor(LoadComponentType.EARTHQUAKE) * seismic
        )

    @property
    def is_gravity_only(self) -> bool:
        return (self.get_factor(LoadComponentType.EARTHQUAKE) == 0.0
                and self.get_factor(LoadComponentType.WIND) == 0.0)


def _combo(combination_id: str, factors: Dict[LoadComponentType, float], description: str,
           default_active: bool) -> LoadCombinationDefinition:
    name = combination_id.replace("+", " + ")
    return LoadCombinationDefinition(
        combination_id=combination_id,
        name=name,
        load_factors=MappingProxyType(dict(factors)),
        description=description,
        default_active=default_active,
    )


D, L, EQ, W = (LoadComponentType.DEAD, LoadComponentType.LIVE,
               LoadComponentType.EARTHQUAKE, LoadComponentType.WIND)

# Ordered library; wind combinations are opt-in
LOAD_COMBINATIONS: Mapping[str, LoadCombinationDefinition] = MappingProxyType({
    c.combination_id: c for c in (
        _combo("1.4D", {D: 1.4}, "Dead load only - SNI 1727:2020", True),
        _combo("1.2D+1.6L", {D: 1.2, L: 1.6}, "Dead + live load - SNI 1727:2020", True),
        _combo("1.2D+1.0L+1.0E", {D: 1.2, L: 1.0, EQ: 1.0},
               "Dead + live + earthquake load - SNI 1726:2019", True),
        _combo("1.2D+1.0L+1.0W", {D: 1.2, L: 1.0, W: 1.0},
               "Dead + live + wind load - SNI 1727:2020", False),
        _combo("0.9D+1.0E", {D: 0.9, EQ: 1.0},
               "Minimum dead + earthquake load - SNI 1726:2019", True),
        _combo("0.9D+1.0W", {D: 0.9, W: 1.0},
               "Minimum dead + wind load - SNI 1727:2020", False),
    )
})

DEFAULT_ACTIVE_COMBINATIONS = frozenset(
    cid for cid, combo in LOAD_COMBINATIONS.items() if combo.default_active
)


def active_combinations(selected: Optional[Iterable[str]] = None) -> List[LoadCombinationDefinition]:
    """Resolve the active combinations in library order.

    Args:
        selected: Explicit combination ids, or None for the default-active set

    Raises:
        InputContractError: If a selected id is not in the library
    """
    if selected is None:
        chosen = DEFAULT_ACTIVE_COMBINATIONS
    else:
        chosen = frozenset(selected)
        unknown = sorted(chosen - set(LOAD_COMBINATIONS))
        if unknown:
            raise InputContractError(
                f"unknown load combination(s): {', '.join(unknown)}",
                field="combinations", value=unknown,
            )
    return [combo for cid, combo in LOAD_COMBINATIONS.items() if cid in chosen]


def evaluate_combinations(
    loads: LoadConditions,
    selected: Optional[Iterable[str]] = None,
    seismic: float = 0.0,
) -> List[CombinationLoad]:
    """Factored area load for every library combination, flagged active or not."""
    active_ids = {c.combination_id for c in active_combinations(selected)}
    results = [
        CombinationLoad(
            combination_id=combo.combination_id,
            name=combo.name,
            factored_load=combo.factored_load(loads, seismic),
            is_active=combo.combination_id in active_ids,
        )
        for combo in LOAD_COMBINATIONS.values()
    ]
    logger.debug(f"Evaluated {len(results)} load combinations ({len(active_ids)} active)")
    return results


def governing_combination(results: Iterable[CombinationLoad]) -> Optional[CombinationLoad]:
    """Active combination with the largest factored load"""
    active = [r for r in results if r.is_active]
    if not active:
        return None
    return max(active, key=lambda r: r.factored_load)
