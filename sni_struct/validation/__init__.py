# Zero-tolerance validation gate
from .rules import Rule, evaluate_rules
from .material import validate_concrete_material, validate_steel_material
from .seismic import validate_seismic_parameters
from .geometry import validate_structural_geometry
from .loads import validate_load_conditions
from .professional import validate_professional_signoff
from .orchestrator import (
    validate,
    validate_batch,
    validate_report,
    gate_status,
    is_construction_blocked,
    ValidationReport,
)
