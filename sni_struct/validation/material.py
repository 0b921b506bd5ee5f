"""
Material Validators - concrete and reinforcing steel
"""

from dataclasses import dataclass
from typing import List

from .rules import Rule, evaluate_rules, fmt
from ..core.constants import (
    DENSITY_TOLERANCE,
    ENGINEERING_CONSTANTS,
    GRADE_FY_TOLERANCE,
    HIGH_RISK_MIN_FC,
)
from ..core.data_models import (
    Category,
    ConcreteSpecification,
    Severity,
    SteelSpecification,
    ValidationContext,
    ValidationResult,
)
from ..core.load_tables import get_expected_yield_strength

CONCRETE = ENGINEERING_CONSTANTS.CONCRETE
STEEL = ENGINEERING_CONSTANTS.STEEL


def _is_blank(text: str) -> bool:
    return not (text or "").strip()


@dataclass(frozen=True)
class ConcreteFacts:
    concrete: ConcreteSpecification
    context: ValidationContext

    @property
    def density_deviation(self) -> float:
        return abs(self.concrete.density - CONCRETE.DENSITY) / CONCRETE.DENSITY


@dataclass(frozen=True)
class SteelFacts:
    steel: SteelSpecification
    context: ValidationContext

    @property
    def fu_fy_ratio(self) -> float:
        return self.steel.fu / self.steel.fy


CONCRETE_RULES = (
    Rule(
        rule_id="concrete.min_strength",
        applies=lambda f: f.concrete.fc < CONCRETE.MIN_FC,
        severity=Severity.CRITICAL,
        category=Category.SAFETY,
        message=lambda f: f"Concrete strength {fmt(f.concrete.fc)} MPa is below minimum safe limit",
        recommendation=f"Use concrete with fc ≥ {fmt(CONCRETE.MIN_FC)} MPa per SNI 2847",
        code_reference="SNI 2847:2019 Section 5.1.1",
        block_construction=True,
    ),
    Rule(
        rule_id="concrete.max_strength",
        applies=lambda f: f.concrete.fc > CONCRETE.MAX_FC,
        severity=Severity.CRITICAL,
        category=Category.ENGINEERING,
        message=lambda f: (
            f"Concrete strength {fmt(f.concrete.fc)} MPa exceeds practical construction limits"
        ),
        recommendation=(
            "Consider high-strength concrete design provisions or reduce to "
            f"{fmt(CONCRETE.MAX_FC)} MPa"
        ),
        code_reference="ACI 318-19 Section 5.1",
        block_construction=True,
    ),
    Rule(
        rule_id="concrete.density",
        applies=lambda f: f.density_deviation > DENSITY_TOLERANCE,
        severity=Severity.WARNING,
        category=Category.ENGINEERING,
        message=lambda f: (
            f"Concrete density {fmt(f.concrete.density)} kg/m³ deviates significantly "
            "from normal weight"
        ),
        recommendation="Verify aggregate type and adjust structural calculations accordingly",
        code_reference="ACI 318-19 Section 19.2.1",
    ),
    Rule(
        rule_id="concrete.test_certificate",
        applies=lambda f: _is_blank(f.concrete.test_certificate),
        severity=Severity.CRITICAL,
        category=Category.PROFESSIONAL,
        message="Material test certificate is required for construction",
        recommendation="Obtain laboratory test certificate from accredited testing facility",
        code_reference="SNI 2847:2019 Section 5.6",
        block_construction=True,
    ),
    Rule(
        rule_id="concrete.high_risk_strength",
        applies=lambda f: f.context.is_high_risk and f.concrete.fc < HIGH_RISK_MIN_FC,
        severity=Severity.CRITICAL,
        category=Category.SAFETY,
        message="High-value/high-occupancy projects require higher concrete strength",
        recommendation=f"Use minimum fc = {fmt(HIGH_RISK_MIN_FC)} MPa for critical structures",
        code_reference="Engineering Judgment - Risk Assessment",
        block_construction=True,
    ),
)


def _grade_mismatch(f: SteelFacts) -> bool:
    expected = get_expected_yield_strength(f.steel.grade)
    if expected is None:
        return False
    return abs(f.steel.fy - expected) > expected * GRADE_FY_TOLERANCE


STEEL_RULES = (
    Rule(
        rule_id="steel.min_yield",
        applies=lambda f: f.steel.fy < STEEL.MIN_FY,
        severity=Severity.CRITICAL,
        category=Category.SAFETY,
        message=lambda f: f"Steel yield strength {fmt(f.steel.fy)} MPa is below minimum requirements",
        recommendation=f"Use steel with fy ≥ {fmt(STEEL.MIN_FY)} MPa",
        code_reference="SNI 2847:2019 Section 20.2.2",
        block_construction=True,
    ),
    Rule(
        rule_id="steel.ductility",
        applies=lambda f: f.fu_fy_ratio < STEEL.MIN_FU_FY_RATIO,
        severity=Severity.CRITICAL,
        category=Category.SAFETY,
        message=lambda f: f"Steel fu/fy ratio {f.fu_fy_ratio:.2f} is too low for ductile behavior",
        recommendation=(
            f"Use steel with fu/fy ≥ {fmt(STEEL.MIN_FU_FY_RATIO)} to ensure ductile failure mode"
        ),
        code_reference="ACI 318-19 Section 20.2.2.4",
        block_construction=True,
    ),
    Rule(
        rule_id="steel.grade_consistency",
        applies=_grade_mismatch,
        severity=Severity.WARNING,
        category=Category.ENGINEERING,
        message=lambda f: (
            f"Steel grade {f.steel.grade} yield strength {fmt(f.steel.fy)} MPa inconsistent "
            "with typical values"
        ),
        recommendation=lambda f: (
            "Verify steel grade specification - expected fy ≈ "
            f"{fmt(get_expected_yield_strength(f.steel.grade))} MPa"
        ),
        code_reference="SNI 2052:2017 Steel Standards",
    ),
    Rule(
        rule_id="steel.test_certificate",
        applies=lambda f: _is_blank(f.steel.test_certificate),
        severity=Severity.CRITICAL,
        category=Category.PROFESSIONAL,
        message="Steel test certificate is mandatory for structural construction",
        recommendation="Obtain mill test certificate or laboratory test results",
        code_reference="SNI 2847:2019 Section 20.2",
        block_construction=True,
    ),
)


def validate_concrete_material(
    concrete: ConcreteSpecification, context: ValidationContext
) -> List[ValidationResult]:
    """Concrete strength, density, certificate and risk checks"""
    return evaluate_rules(CONCRETE_RULES, ConcreteFacts(concrete, context))


def validate_steel_material(
    steel: SteelSpecification, context: ValidationContext
) -> List[ValidationResult]:
    """Steel strength, ductility, grade and certificate checks"""
    return evaluate_rules(STEEL_RULES, SteelFacts(steel, context))
