"""
Load Validator - SNI 1727:2020 gravity loads
"""

from dataclasses import dataclass
from typing import List

from .rules import Rule, evaluate_rules, fmt
from ..core.constants import (
    ESSENTIAL_FACILITY_LIVE_FACTOR,
    LIVE_LOAD_TOLERANCE,
    MIN_DEAD_LOAD,
)
from ..core.data_models import (
    Category,
    ImportanceCategory,
    ProjectLoads,
    Severity,
    ValidationContext,
    ValidationResult,
)
from ..core.load_tables import get_code_live_load

ESSENTIAL_CATEGORIES = (ImportanceCategory.III, ImportanceCategory.IV)


@dataclass(frozen=True)
class LoadFacts:
    loads: ProjectLoads
    context: ValidationContext

    @property
    def code_live_load(self) -> float:
        return get_code_live_load(self.loads.occupancy_type)


LOAD_RULES = (
    Rule(
        rule_id="loads.min_dead_load",
        applies=lambda f: f.loads.dead_load < MIN_DEAD_LOAD,
        severity=Severity.CRITICAL,
        category=Category.ENGINEERING,
        message=lambda f: f"Dead load {fmt(f.loads.dead_load)} kN/m² seems unrealistically low",
        recommendation="Include structural weight, finishes, and MEP systems",
        code_reference="SNI 1727:2020 Load Calculations",
        block_construction=True,
    ),
    Rule(
        rule_id="loads.code_live_load",
        applies=lambda f: f.loads.live_load < f.code_live_load * LIVE_LOAD_TOLERANCE,
        severity=Severity.CRITICAL,
        category=Category.CODE,
        message=lambda f: (
            f"Live load {fmt(f.loads.live_load)} kN/m² below code minimum for "
            f"{f.loads.occupancy_type}"
        ),
        recommendation=lambda f: f"Use minimum {fmt(f.code_live_load)} kN/m² per SNI 1727",
        code_reference="SNI 1727:2020 Table 4-1",
        block_construction=True,
    ),
    Rule(
        rule_id="loads.essential_facility",
        applies=lambda f: (
            f.context.importance_category in ESSENTIAL_CATEGORIES
            and f.loads.live_load < f.code_live_load * ESSENTIAL_FACILITY_LIVE_FACTOR
        ),
        severity=Severity.WARNING,
        category=Category.SAFETY,
        message="Essential/critical facilities should use increased live loads",
        recommendation=lambda f: (
            f"Consider {f.code_live_load * ESSENTIAL_FACILITY_LIVE_FACTOR:.1f} kN/m² "
            "for added safety"
        ),
        code_reference="Engineering Conservative Practice",
    ),
)


def validate_load_conditions(
    loads: ProjectLoads, context: ValidationContext
) -> List[ValidationResult]:
    return evaluate_rules(LOAD_RULES, LoadFacts(loads, context))
