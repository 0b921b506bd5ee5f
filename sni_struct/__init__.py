"""
SNI structural calculation and zero-tolerance validation engine.

Validation and calculation are decoupled: callers validate a project first
and only treat analysis results as approved when the gate is not BLOCKED.
"""

from .core.config import EngineConfig, configure_logging
from .core.data_models import (
    GateStatus,
    MaterialProperties,
    LoadConditions,
    ProjectData,
    StructuralAnalysisResults,
    StructuralGeometry,
    ValidationContext,
    ValidationResult,
)
from .core.errors import CalculationError, CalculationErrorKind, InputContractError, SNIEngineError
from .engines.analysis_engine import AnalysisEngine, analyze
from .validation.orchestrator import (
    ValidationReport,
    gate_status,
    is_construction_blocked,
    validate,
    validate_batch,
)

__version__ = "0.1.0"
