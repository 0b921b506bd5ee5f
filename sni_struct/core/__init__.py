# Core data model, constants and code tables
from .constants import ENGINEERING_CONSTANTS, EngineeringConstants
from .data_models import (
    StructuralGeometry, ConcreteProperties, SteelProperties, MaterialProperties,
    SeismicParameters, LoadConditions, ValidationContext, ProjectData,
    ValidationResult, CalculationStep, StructuralAnalysisResults,
    Severity, Category, SiteClass, BuildingType, GateStatus,
)
from .errors import CalculationError, CalculationErrorKind, InputContractError, SNIEngineError
from .config import EngineConfig, configure_logging
