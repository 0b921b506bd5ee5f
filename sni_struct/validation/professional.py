"""
Professional Sign-off Check
"""

from typing import List

from .rules import Rule, evaluate_rules
from ..core.data_models import Category, Severity, ValidationContext, ValidationResult

PROFESSIONAL_RULES = (
    Rule(
        rule_id="professional.engineer_license",
        applies=lambda ctx: not (ctx.engineer_license or "").strip(),
        severity=Severity.CRITICAL,
        category=Category.PROFESSIONAL,
        message="Licensed structural engineer must be assigned to project",
        recommendation="Assign licensed engineer with valid registration",
        code_reference="Professional Engineering Law",
        block_construction=True,
    ),
)


def validate_professional_signoff(context: ValidationContext) -> List[ValidationResult]:
    return evaluate_rules(PROFESSIONAL_RULES, context)
