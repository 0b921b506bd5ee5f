"""
Data Models for the SNI Structural Calculation & Validation Engine

Units: geometry is in metres; member-level quantities (section width, depth,
effective depth, displacement, story height in drift checks) are in millimetres.
"""

import math
from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from .constants import ENGINEERING_CONSTANTS, HIGH_RISK_OCCUPANCY, HIGH_RISK_PROJECT_VALUE
from .errors import InputContractError


class Severity(Enum):
    """Finding severity"""
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


class Category(Enum):
    """Finding category"""
    SAFETY = "SAFETY"
    CODE = "CODE"
    ENGINEERING = "ENGINEERING"
    PROFESSIONAL = "PROFESSIONAL"


class SiteClass(Enum):
    """Site classification per SNI 1726:2019 Table 5"""
    SA = "SA"   # Hard rock
    SB = "SB"   # Rock
    SC = "SC"   # Very dense soil / soft rock
    SD = "SD"   # Medium soil
    SE = "SE"   # Soft soil
    SF = "SF"   # Requires site-specific investigation


class BuildingType(Enum):
    """Seismic force-resisting system used for the approximate period"""
    CONCRETE_MOMENT = "concrete-moment"
    STEEL_MOMENT = "steel-moment"
    BRACED = "braced"


class ProjectType(Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    INFRASTRUCTURE = "infrastructure"


class SeismicZone(Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very-high"


class ImportanceCategory(Enum):
    """Risk category per SNI 1726:2019 Table 3"""
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"


class GateStatus(Enum):
    """Construction approval gate derived from validation results"""
    APPROVED = "APPROVED"
    REVIEW_REQUIRED = "REVIEW_REQUIRED"
    BLOCKED = "BLOCKED"


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

_MISSING = object()
E = TypeVar("E", bound=Enum)


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and tuples into JSON-safe structures."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return value


def _pick(data: Mapping[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    """Return the first key present in data (snake_case or camelCase)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    if default is _MISSING:
        raise InputContractError("required field is missing", field=keys[0])
    return default


def _as_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InputContractError(
            f"invalid value {value!r}, expected one of: {allowed}", field=field_name, value=value
        )


def _require_positive(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise InputContractError("must be a finite number > 0", field=name, value=value)


def _require_non_negative(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise InputContractError("must be a finite number >= 0", field=name, value=value)


# ---------------------------------------------------------------------------
# Analysis inputs
# ---------------------------------------------------------------------------

@dataclass
class StructuralGeometry:
    """Building geometry (all lengths in m)"""
    length: float
    width: float
    height: float
    number_of_floors: int
    bay_spacing_x: float = 6.0
    bay_spacing_y: float = 6.0
    story_height: Optional[float] = None    # Defaults to height / floors
    foundation_depth: float = 1.5

    def __post_init__(self):
        if not isinstance(self.number_of_floors, int) or self.number_of_floors < 1:
            raise InputContractError(
                "must be an integer >= 1", field="number_of_floors", value=self.number_of_floors
            )
        if self.story_height is None:
            self.story_height = self.height / self.number_of_floors if self.height > 0 else 0.0
        for name in ("length", "width", "height", "bay_spacing_x", "bay_spacing_y",
                     "story_height", "foundation_depth"):
            _require_positive(name, getattr(self, name))

    @property
    def plan_area(self) -> float:
        """Floor plate area (m²)"""
        return self.length * self.width

    @property
    def max_bay_spacing(self) -> float:
        return max(self.bay_spacing_x, self.bay_spacing_y)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StructuralGeometry":
        return cls(
            length=_pick(data, "length"),
            width=_pick(data, "width"),
            height=_pick(data, "height"),
            number_of_floors=_pick(data, "number_of_floors", "numberOfFloors", "floors"),
            bay_spacing_x=_pick(data, "bay_spacing_x", "baySpacingX", default=6.0),
            bay_spacing_y=_pick(data, "bay_spacing_y", "baySpacingY", default=6.0),
            story_height=_pick(data, "story_height", "storyHeight", default=None),
            foundation_depth=_pick(data, "foundation_depth", "foundationDepth", default=1.5),
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


@dataclass
class ConcreteProperties:
    """Concrete properties (fc in MPa, density in kg/m³)"""
    fc: float
    density: float = ENGINEERING_CONSTANTS.CONCRETE.DENSITY
    elastic_modulus: Optional[float] = None   # MPa, defaults to 4700√fc
    poisson_ratio: float = ENGINEERING_CONSTANTS.CONCRETE.POISSON_RATIO

    def __post_init__(self):
        _require_positive("fc", self.fc)
        _require_positive("density", self.density)
        if self.elastic_modulus is None:
            self.elastic_modulus = 4700 * math.sqrt(self.fc)
        _require_positive("elastic_modulus", self.elastic_modulus)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConcreteProperties":
        return cls(
            fc=_pick(data, "fc"),
            density=_pick(data, "density", default=ENGINEERING_CONSTANTS.CONCRETE.DENSITY),
            elastic_modulus=_pick(data, "elastic_modulus", "elasticModulus", default=None),
            poisson_ratio=_pick(data, "poisson_ratio", "poissonRatio",
                                default=ENGINEERING_CONSTANTS.CONCRETE.POISSON_RATIO),
        )


@dataclass
class SteelProperties:
    """Reinforcing steel properties (MPa, kg/m³).

    fu > fy is deliberately not enforced here; the steel validator reports it.
    """
    fy: float
    fu: float
    elastic_modulus: float = ENGINEERING_CONSTANTS.STEEL.ELASTIC_MODULUS
    density: float = ENGINEERING_CONSTANTS.STEEL.DENSITY

    def __post_init__(self):
        for name in ("fy", "fu", "elastic_modulus", "density"):
            _require_positive(name, getattr(self, name))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SteelProperties":
        return cls(
            fy=_pick(data, "fy"),
            fu=_pick(data, "fu"),
            elastic_modulus=_pick(data, "elastic_modulus", "elasticModulus",
                                  default=ENGINEERING_CONSTANTS.STEEL.ELASTIC_MODULUS),
            density=_pick(data, "density", default=ENGINEERING_CONSTANTS.STEEL.DENSITY),
        )


@dataclass
class MaterialProperties:
    """Concrete + steel pair used by the calculators"""
    concrete: ConcreteProperties
    steel: SteelProperties

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MaterialProperties":
        return cls(
            concrete=ConcreteProperties.from_dict(_pick(data, "concrete")),
            steel=SteelProperties.from_dict(_pick(data, "steel")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


@dataclass
class SeismicParameters:
    """Mapped spectral accelerations (g) and system factors"""
    ss: float
    s1: float
    site_class: SiteClass = SiteClass.SD
    importance_factor: float = 1.0        # Ie
    response_modification: float = 8.0    # R

    def __post_init__(self):
        self.site_class = _as_enum(SiteClass, self.site_class, "site_class")
        _require_non_negative("ss", self.ss)
        _require_non_negative("s1", self.s1)
        _require_positive("importance_factor", self.importance_factor)
        _require_positive("response_modification", self.response_modification)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SeismicParameters":
        return cls(
            ss=_pick(data, "ss"),
            s1=_pick(data, "s1"),
            site_class=_pick(data, "site_class", "siteClass", default=SiteClass.SD),
            importance_factor=_pick(data, "importance_factor", "importanceFactor", default=1.0),
            response_modification=_pick(data, "response_modification", "responseModification",
                                        default=8.0),
        )


@dataclass
class LoadConditions:
    """Area loads (kN/m²) and seismic parameters"""
    dead_load: float
    live_load: float
    seismic_parameters: SeismicParameters
    wind_load: float = 0.0

    def __post_init__(self):
        for name in ("dead_load", "live_load", "wind_load"):
            _require_non_negative(name, getattr(self, name))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoadConditions":
        return cls(
            dead_load=_pick(data, "dead_load", "deadLoad"),
            live_load=_pick(data, "live_load", "liveLoad"),
            wind_load=_pick(data, "wind_load", "windLoad", default=0.0),
            seismic_parameters=SeismicParameters.from_dict(
                _pick(data, "seismic_parameters", "seismicParameters")
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


# ---------------------------------------------------------------------------
# Validation inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationContext:
    """Project metadata consulted by the validators. Read-only."""
    project_type: ProjectType = ProjectType.COMMERCIAL
    seismic_zone: SeismicZone = SeismicZone.MODERATE
    importance_category: ImportanceCategory = ImportanceCategory.II
    engineer_license: str = ""
    project_value: float = 0.0    # USD
    occupancy: int = 0            # Number of people

    def __post_init__(self):
        object.__setattr__(self, "project_type",
                           _as_enum(ProjectType, self.project_type, "project_type"))
        object.__setattr__(self, "seismic_zone",
                           _as_enum(SeismicZone, self.seismic_zone, "seismic_zone"))
        object.__setattr__(self, "importance_category",
                           _as_enum(ImportanceCategory, self.importance_category,
                                    "importance_category"))
        _require_non_negative("project_value", self.project_value)
        _require_non_negative("occupancy", self.occupancy)

    @property
    def is_high_risk(self) -> bool:
        return self.project_value > HIGH_RISK_PROJECT_VALUE or self.occupancy > HIGH_RISK_OCCUPANCY

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ValidationContext":
        return cls(
            project_type=_pick(data, "project_type", "projectType", default=ProjectType.COMMERCIAL),
            seismic_zone=_pick(data, "seismic_zone", "seismicZone", default=SeismicZone.MODERATE),
            importance_category=_pick(data, "importance_category", "importanceCategory",
                                      default=ImportanceCategory.II),
            engineer_license=_pick(data, "engineer_license", "engineerLicense", default=""),
            project_value=_pick(data, "project_value", "projectValue", default=0.0),
            occupancy=_pick(data, "occupancy", default=0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


@dataclass
class ProjectInfo:
    name: str = "Untitled Project"
    location: str = ""


@dataclass
class ConcreteSpecification:
    """Concrete as specified for construction"""
    fc: float
    density: float = ENGINEERING_CONSTANTS.CONCRETE.DENSITY
    test_certificate: str = ""

    def __post_init__(self):
        _require_positive("fc", self.fc)
        _require_positive("density", self.density)


@dataclass
class SteelSpecification:
    """Reinforcement as specified for construction"""
    fy: float
    fu: float
    grade: str = ""
    test_certificate: str = ""

    def __post_init__(self):
        _require_positive("fy", self.fy)
        _require_positive("fu", self.fu)


@dataclass
class ProjectMaterials:
    concrete: ConcreteSpecification
    steel: SteelSpecification


@dataclass
class ProjectLoads:
    """Loads as entered on the project (kN/m²)"""
    dead_load: float
    live_load: float
    seismic: SeismicParameters
    occupancy_type: str = "office"
    wind_load: float = 0.0

    def __post_init__(self):
        for name in ("dead_load", "live_load", "wind_load"):
            _require_non_negative(name, getattr(self, name))


@dataclass
class ProjectData:
    """Complete project submitted to the validation gate."""
    materials: ProjectMaterials
    geometry: StructuralGeometry
    loads: ProjectLoads
    project_info: ProjectInfo = field(default_factory=ProjectInfo)

    def to_analysis_inputs(self) -> Tuple[StructuralGeometry, MaterialProperties, LoadConditions]:
        """Build the calculator inputs from the validated project data"""
        materials = MaterialProperties(
            concrete=ConcreteProperties(
                fc=self.materials.concrete.fc,
                density=self.materials.concrete.density,
            ),
            steel=SteelProperties(fy=self.materials.steel.fy, fu=self.materials.steel.fu),
        )
        loads = LoadConditions(
            dead_load=self.loads.dead_load,
            live_load=self.loads.live_load,
            wind_load=self.loads.wind_load,
            seismic_parameters=self.loads.seismic,
        )
        return self.geometry, materials, loads

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectData":
        """Accepts snake_case payloads and the nested camelCase layout of the
        web workbench (``loads.deadLoad.structuralWeight`` etc.)."""
        info = _pick(data, "project_info", "projectInfo", default={})
        materials = _pick(data, "materials")
        concrete = _pick(materials, "concrete")
        steel = _pick(materials, "steel")
        loads = _pick(data, "loads")

        dead = _pick(loads, "dead_load", "deadLoad")
        if isinstance(dead, Mapping):
            dead = _pick(dead, "structural_weight", "structuralWeight")
        live = _pick(loads, "live_load", "liveLoad")
        occupancy_type = _pick(loads, "occupancy_type", "occupancyType", default="office")
        if isinstance(live, Mapping):
            occupancy_type = _pick(live, "occupancy_type", "occupancyType", default=occupancy_type)
            live = _pick(live, "occupancy_load", "occupancyLoad")

        return cls(
            project_info=ProjectInfo(
                name=_pick(info, "name", default="Untitled Project"),
                location=_pick(info, "location", default=""),
            ),
            materials=ProjectMaterials(
                concrete=ConcreteSpecification(
                    fc=_pick(concrete, "fc"),
                    density=_pick(concrete, "density",
                                  default=ENGINEERING_CONSTANTS.CONCRETE.DENSITY),
                    test_certificate=_pick(concrete, "test_certificate", "testCertificate",
                                           default=""),
                ),
                steel=SteelSpecification(
                    fy=_pick(steel, "fy"),
                    fu=_pick(steel, "fu"),
                    grade=_pick(steel, "grade", default=""),
                    test_certificate=_pick(steel, "test_certificate", "testCertificate",
                                           default=""),
                ),
            ),
            geometry=StructuralGeometry.from_dict(_pick(data, "geometry")),
            loads=ProjectLoads(
                dead_load=dead,
                live_load=live,
                occupancy_type=occupancy_type,
                wind_load=_pick(loads, "wind_load", "windLoad", default=0.0),
                seismic=SeismicParameters.from_dict(
                    _pick(loads, "seismic", "seismicLoad", "seismic_parameters")
                ),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationResult:
    """A single validation finding. Produced once, never mutated."""
    is_valid: bool
    severity: Severity
    category: Category
    message: str
    recommendation: str
    code_reference: str
    requires_engineer_review: bool
    block_construction: bool
    rule_id: str = ""

    @property
    def is_blocking(self) -> bool:
        return not self.is_valid and self.block_construction

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


@dataclass(frozen=True)
class CalculationStep:
    """One line of the calculation audit trail"""
    step: int
    description: str
    formula: str
    calculation: str
    result: float
    unit: str
    reference: str
    verified: bool = True
    stage: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


class CalculationLog:
    """Ordered, append-only audit trail owned by one analysis run.

    Steps appended from a calculator are renumbered into a single sequence
    and tagged with the stage that produced them.
    """

    def __init__(self):
        self._steps: List[CalculationStep] = []

    def extend(self, steps: Iterable[CalculationStep], stage: str) -> None:
        for step in steps:
            self._steps.append(replace(step, step=len(self._steps) + 1, stage=stage))

    def for_stage(self, stage: str) -> List[CalculationStep]:
        return [s for s in self._steps if s.stage == stage]

    @property
    def steps(self) -> Tuple[CalculationStep, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self):
        return iter(self._steps)


@dataclass(frozen=True)
class ReinforcementSummary:
    """Beam reinforcement (areas in mm², ratios unitless)"""
    longitudinal: float = 0.0       # mm²
    transverse: float = 0.0         # mm²/m (approximation)
    minimum_ratio: float = 0.0
    maximum_ratio: float = ENGINEERING_CONSTANTS.LIMITS.MAX_REINFORCEMENT
    required_ratio: float = 0.0
    bar_diameter: int = 0           # mm
    bar_count: int = 0


@dataclass(frozen=True)
class ShearDesign:
    """Beam shear design (kN, mm)"""
    demand: float = 0.0
    concrete_capacity: float = 0.0      # Vc
    steel_required: float = 0.0         # Vs,req
    stirrup_spacing: float = 0.0        # mm
    capacity_ratio: float = 0.0


@dataclass(frozen=True)
class DriftCheck:
    """Story drift check (mm)"""
    elastic_displacement: float     # δe
    design_displacement: float      # δd = Cd·δe/Ie
    story_height: float
    drift_ratio: float
    limit: float
    compliant: bool


@dataclass(frozen=True)
class StoryForce:
    """Equivalent lateral force at one floor"""
    floor: int
    height: float   # m above base
    weight: float   # kN
    force: float    # kN


@dataclass(frozen=True)
class CombinationLoad:
    """Factored area load for one load combination"""
    combination_id: str
    name: str
    factored_load: float    # kN/m²
    is_active: bool = True


@dataclass(frozen=True)
class CodeCompliance:
    sni1726: bool = False           # Seismic
    sni2847: bool = False           # Concrete
    deflection_check: bool = False  # Serviceability
    drift_check: bool = False       # Story drift


@dataclass(frozen=True)
class StructuralAnalysisResults:
    """Aggregate of one analysis run. Immutable; owned by the caller."""
    # Global response
    fundamental_period: Optional[float]     # s
    base_shear: Optional[float]             # kN
    total_weight: float                     # kN
    overturn_moment: Optional[float]        # kN·m

    # Member forces
    max_moment: float                       # kN·m
    max_shear: Optional[float]              # kN
    max_axial_force: float                  # kN
    max_deflection: Optional[float]         # mm

    # Drift
    max_drift: Optional[float]              # mm
    drift_ratio: Optional[float]
    drift_compliance: bool

    # Design
    reinforcement: Optional[ReinforcementSummary]
    shear_design: Optional[ShearDesign]
    story_forces: Tuple[StoryForce, ...]
    load_combinations: Tuple[CombinationLoad, ...]

    # Safety assessment
    utilization_ratio: Optional[float]      # %
    safety_margin: Optional[float]          # %
    critical_member: str
    failure_mode: str

    code_compliance: CodeCompliance
    calculation_steps: Tuple[CalculationStep, ...]
    references: Tuple[str, ...] = ()
    review_notes: Tuple[str, ...] = ()
    errors: Tuple[Dict[str, Any], ...] = ()
    status: str = "OK"

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)
