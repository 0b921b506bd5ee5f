"""
Seismic Parameter Validator - SNI 1726:2019 hazard inputs
"""

from dataclasses import dataclass
from typing import List

from .rules import Rule, evaluate_rules, fmt
from ..core.constants import HIGH_S1, HIGH_SS, JAKARTA_MIN_SS, MIN_S1, MIN_SS
from ..core.data_models import (
    Category,
    SeismicParameters,
    Severity,
    SiteClass,
    ValidationContext,
    ValidationResult,
)


@dataclass(frozen=True)
class SeismicFacts:
    seismic: SeismicParameters
    location: str
    context: ValidationContext

    @property
    def in_jakarta(self) -> bool:
        return "jakarta" in (self.location or "").lower()


def _accelerations(f: SeismicFacts) -> str:
    return f"Ss={fmt(f.seismic.ss)}g, S1={fmt(f.seismic.s1)}g"


SEISMIC_RULES = (
    Rule(
        rule_id="seismic.low_parameters",
        applies=lambda f: f.seismic.ss < MIN_SS or f.seismic.s1 < MIN_S1,
        severity=Severity.WARNING,
        category=Category.ENGINEERING,
        message=lambda f: f"Very low seismic parameters ({_accelerations(f)}) - verify location",
        recommendation="Confirm seismic parameters using official hazard maps",
        code_reference="SNI 1726:2019 Section 6.1",
    ),
    Rule(
        rule_id="seismic.high_zone",
        applies=lambda f: f.seismic.ss > HIGH_SS or f.seismic.s1 > HIGH_S1,
        severity=Severity.CRITICAL,
        category=Category.SAFETY,
        message=lambda f: f"High seismic zone ({_accelerations(f)}) requires special provisions",
        recommendation="Apply special seismic design requirements per SNI 1726",
        code_reference="SNI 1726:2019 Section 11.4",
    ),
    Rule(
        rule_id="seismic.site_class_f",
        applies=lambda f: f.seismic.site_class == SiteClass.SF,
        severity=Severity.CRITICAL,
        category=Category.SAFETY,
        message="Site Class F requires site-specific geotechnical investigation",
        recommendation="Perform detailed soil investigation and site response analysis",
        code_reference="SNI 1726:2019 Section 6.2.1",
        block_construction=True,
    ),
    Rule(
        rule_id="seismic.jakarta_hazard",
        applies=lambda f: f.in_jakarta and f.seismic.ss < JAKARTA_MIN_SS,
        severity=Severity.WARNING,
        category=Category.ENGINEERING,
        message="Jakarta typically has higher seismic parameters",
        recommendation="Verify seismic parameters using Puskim hazard maps",
        code_reference="SNI 1726:2019 Hazard Maps",
    ),
)


def validate_seismic_parameters(
    seismic: SeismicParameters, location: str, context: ValidationContext
) -> List[ValidationResult]:
    return evaluate_rules(SEISMIC_RULES, SeismicFacts(seismic, location, context))
