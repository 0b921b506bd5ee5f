"""
Error taxonomy for the SNI engine.

Validation findings are never raised; they are returned as ValidationResult.
Only calculation domain errors and input contract violations are exceptions.
"""

from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .data_models import CalculationStep


class CalculationErrorKind(Enum):
    """Numeric impossibilities a calculator can hit"""
    SECTION_CAPACITY_EXCEEDED = "section_capacity_exceeded"
    NEGATIVE_SQRT = "negative_sqrt"
    DIVISION_BY_ZERO = "division_by_zero"
    NON_FINITE = "non_finite"
    SITE_SPECIFIC_REQUIRED = "site_specific_required"


class SNIEngineError(Exception):
    """Base exception for the engine."""
    pass


class InputContractError(SNIEngineError, ValueError):
    """Raised when an input violates its contract (negative length, empty id...).

    Attributes:
        field: Name of the offending field
        value: The rejected value
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class CalculationError(SNIEngineError):
    """Raised instead of producing NaN/Infinity.

    Attributes:
        kind: What went wrong
        message: Error description
        step: The audit step that failed, if one was built
        stage: Calculator stage that raised (filled in by the orchestrator)
    """

    def __init__(
        self,
        kind: CalculationErrorKind,
        message: str,
        step: Optional["CalculationStep"] = None,
        stage: str = "",
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.step = step
        self.stage = stage

    def __str__(self) -> str:
        parts = [f"[{self.kind.value}]", self.message]
        if self.stage:
            parts.insert(0, f"({self.stage})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe record of the error"""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "stage": self.stage,
            "step": self.step.to_dict() if self.step is not None else None,
        }
