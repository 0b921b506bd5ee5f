"""
Table-driven validation rules.

A validator is a tuple of Rule objects evaluated in order against a facts
object. Every rule whose predicate holds produces one ValidationResult; no
rule short-circuits another.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Union

from ..core.data_models import Category, Severity, ValidationResult

logger = logging.getLogger(__name__)

TextBuilder = Union[str, Callable[[Any], str]]


@dataclass(frozen=True)
class Rule:
    """
    One validation rule.

    Attributes:
        rule_id: Stable identifier reported on the result
        applies: Predicate over the facts; True means the rule fires
        severity: Finding severity
        category: Finding category
        message: Fixed text or a builder taking the facts
        recommendation: Fixed text or a builder taking the facts
        code_reference: Governing code clause
        requires_engineer_review: Whether a licensed engineer must review
        block_construction: Whether the finding blocks construction approval
    """
    rule_id: str
    applies: Callable[[Any], bool]
    severity: Severity
    category: Category
    message: TextBuilder
    recommendation: TextBuilder
    code_reference: str
    requires_engineer_review: bool = True
    block_construction: bool = False

    def evaluate(self, facts: Any) -> ValidationResult:
        return ValidationResult(
            is_valid=False,
            severity=self.severity,
            category=self.category,
            message=_render(self.message, facts),
            recommendation=_render(self.recommendation, facts),
            code_reference=self.code_reference,
            requires_engineer_review=self.requires_engineer_review,
            block_construction=self.block_construction,
            rule_id=self.rule_id,
        )


def _render(text: TextBuilder, facts: Any) -> str:
    return text(facts) if callable(text) else text


def evaluate_rules(rules: Iterable[Rule], facts: Any) -> List[ValidationResult]:
    """Evaluate every rule in table order and collect the findings.

    A predicate that raises is a programming error and propagates.
    """
    results = []
    for rule in rules:
        if rule.applies(facts):
            logger.debug(f"Rule {rule.rule_id} fired ({rule.severity.value}/{rule.category.value})")
            results.append(rule.evaluate(facts))
    return results


def fmt(value: float) -> str:
    """Render a number without a trailing .0 (17.0 -> '17', 0.45 -> '0.45')"""
    return f"{value:g}"
