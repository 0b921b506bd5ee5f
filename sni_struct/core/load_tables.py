"""
Code Tables per SNI 1727:2020 (Table 4-1), SNI 2052:2017 steel grades and
SNI 1726:2019 (site coefficients Table 6/7, period coefficients Table 18)
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class OccupancyLiveLoad:
    """Minimum uniformly distributed live load for an occupancy"""
    occupancy: str
    description: str
    qk: float   # kN/m²


# Minimum live loads per SNI 1727:2020 Table 4-1 (simplified)
LIVE_LOAD_TABLE: Mapping[str, OccupancyLiveLoad] = MappingProxyType({
    "residential": OccupancyLiveLoad("residential", "Dwellings and apartments", 2.0),
    "office": OccupancyLiveLoad("office", "Offices for general use", 4.0),
    "retail": OccupancyLiveLoad("retail", "Retail stores", 5.0),
    "industrial": OccupancyLiveLoad("industrial", "Light manufacturing", 6.0),
    "warehouse": OccupancyLiveLoad("warehouse", "Heavy storage", 12.0),
})

DEFAULT_LIVE_LOAD = 4.0  # kN/m², used when the occupancy is not tabulated


def get_code_live_load(occupancy_type: str) -> float:
    """Code minimum live load (kN/m²) for an occupancy type"""
    entry = LIVE_LOAD_TABLE.get((occupancy_type or "").strip().lower())
    if entry is None:
        return DEFAULT_LIVE_LOAD
    return entry.qk


# Nominal yield strength of Indonesian reinforcing grades (MPa)
STEEL_GRADE_YIELD: Mapping[str, float] = MappingProxyType({
    "BjTS-24": 240.0,
    "BjTS-37": 370.0,
    "BjTS-40": 400.0,
    "BjTS-50": 500.0,
})


def get_expected_yield_strength(grade: str) -> Optional[float]:
    """Nominal fy for a steel grade, or None for unknown grades"""
    return STEEL_GRADE_YIELD.get(grade)


# Approximate period parameters (Ct, x) per SNI 1726:2019 Table 18
PERIOD_COEFFICIENTS: Mapping[str, Tuple[float, float]] = MappingProxyType({
    "concrete-moment": (0.0466, 0.9),
    "steel-moment": (0.0724, 0.8),
    "braced": (0.0731, 0.75),
})


# Site coefficients per SNI 1726:2019 Tables 6 and 7
SS_GRID: Tuple[float, ...] = (0.25, 0.5, 0.75, 1.0, 1.25)
S1_GRID: Tuple[float, ...] = (0.1, 0.2, 0.3, 0.4, 0.5)

FA_TABLE: Mapping[str, Tuple[float, ...]] = MappingProxyType({
    "SA": (0.8, 0.8, 0.8, 0.8, 0.8),
    "SB": (0.9, 0.9, 0.9, 0.9, 0.9),
    "SC": (1.2, 1.2, 1.1, 1.0, 1.0),
    "SD": (1.6, 1.4, 1.2, 1.1, 1.0),
    "SE": (2.5, 1.7, 1.2, 0.9, 0.8),
})

FV_TABLE: Mapping[str, Tuple[float, ...]] = MappingProxyType({
    "SA": (0.8, 0.8, 0.8, 0.8, 0.8),
    "SB": (0.9, 0.9, 0.9, 0.9, 0.9),
    "SC": (1.7, 1.6, 1.5, 1.4, 1.3),
    "SD": (2.4, 2.2, 2.0, 1.9, 1.8),
    "SE": (3.5, 3.2, 2.8, 2.4, 2.4),
})


def interpolate(x: float, xs: Sequence[float], ys: Sequence[float]) -> float:
    """Linear interpolation clamped to the end values of the table"""
    if x <= xs[0]:
        return ys[0]
    if x >= xs[-1]:
        return ys[-1]
    for i in range(len(xs) - 1):
        x0, x1 = xs[i], xs[i + 1]
        if x0 <= x <= x1:
            t = (x - x0) / (x1 - x0)
            return ys[i] + t * (ys[i + 1] - ys[i])
    return ys[-1]


def get_site_coefficients(site_class: str, ss: float, s1: float) -> Optional[Tuple[float, float]]:
    """Return (Fa, Fv) for a site class, or None when the class (SF) needs a
    site-specific response analysis."""
    fa_row: Optional[Sequence[float]] = FA_TABLE.get(site_class)
    fv_row: Optional[Sequence[float]] = FV_TABLE.get(site_class)
    if fa_row is None or fv_row is None:
        return None
    return interpolate(ss, SS_GRID, fa_row), interpolate(s1, S1_GRID, fv_row)


def site_class_table() -> Dict[str, Dict[str, Tuple[float, ...]]]:
    """Plain copy of the site coefficient tables for display"""
    return {
        site: {"Fa": FA_TABLE[site], "Fv": FV_TABLE[site]}
        for site in FA_TABLE
    }
