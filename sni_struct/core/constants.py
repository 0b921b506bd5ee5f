"""
Engineering Constants for SNI 1726/2847/1727 Structural Design
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ConcreteConstants:
    """Concrete material bounds"""
    DENSITY: float = 2400.0             # kg/m³ (normal weight)
    DENSITY_LIGHTWEIGHT: float = 1840.0  # kg/m³
    POISSON_RATIO: float = 0.18
    THERMAL_EXPANSION: float = 10e-6    # /°C
    MIN_FC: float = 17.0                # MPa
    MAX_FC: float = 83.0                # MPa (practical upper limit)
    BETA1_LIMIT: float = 0.65           # ACI 318


@dataclass(frozen=True)
class SteelConstants:
    """Reinforcing steel bounds"""
    DENSITY: float = 7850.0             # kg/m³
    ELASTIC_MODULUS: float = 200000.0   # MPa
    POISSON_RATIO: float = 0.30
    THERMAL_EXPANSION: float = 12e-6    # /°C
    MIN_FY: float = 240.0               # MPa
    MAX_FY: float = 690.0               # MPa
    MIN_FU_FY_RATIO: float = 1.25       # Ductility requirement


@dataclass(frozen=True)
class SafetyFactors:
    """Load factors and strength reduction factors (SNI 2847 / ACI 318)"""
    DEAD_ULTIMATE: float = 1.2
    LIVE_ULTIMATE: float = 1.6
    WIND_ULTIMATE: float = 1.0
    SEISMIC_ULTIMATE: float = 1.0
    DEAD_SERVICE: float = 1.0
    LIVE_SERVICE: float = 1.0
    CONCRETE_PHI: float = 0.9           # Flexure
    CONCRETE_PHI_SHEAR: float = 0.75
    STEEL_PHI: float = 0.9


@dataclass(frozen=True)
class CodeLimits:
    """Code limits"""
    DRIFT_RATIO_MAX: float = 0.025      # SNI 1726 Table 20
    DEFLECTION_L_OVER: float = 250.0    # L/250
    MIN_REINFORCEMENT: float = 0.0018
    MAX_REINFORCEMENT: float = 0.025
    MIN_COVER: float = 40.0             # mm
    MIN_SPACING: float = 25.0           # mm


@dataclass(frozen=True)
class EngineeringConstants:
    """Process-wide reference values. Frozen; safe to share between threads."""
    CONCRETE: ConcreteConstants = field(default_factory=ConcreteConstants)
    STEEL: SteelConstants = field(default_factory=SteelConstants)
    SAFETY_FACTORS: SafetyFactors = field(default_factory=SafetyFactors)
    LIMITS: CodeLimits = field(default_factory=CodeLimits)


ENGINEERING_CONSTANTS = EngineeringConstants()

# Gravity
GRAVITY = 9.81  # m/s²

# Validation thresholds
DENSITY_TOLERANCE = 0.10            # 10% deviation from normal weight
GRADE_FY_TOLERANCE = 0.10           # 10% deviation from nominal grade fy
HIGH_RISK_PROJECT_VALUE = 1_000_000  # USD
HIGH_RISK_OCCUPANCY = 100           # persons
HIGH_RISK_MIN_FC = 25.0             # MPa
MIN_SS = 0.1                        # g
MIN_S1 = 0.05                       # g
HIGH_SS = 1.5                       # g
HIGH_S1 = 0.6                       # g
JAKARTA_MIN_SS = 0.6                # g
MIN_PLAN_DIMENSION = 3.0            # m
MAX_PLAN_ASPECT_RATIO = 5.0
MIN_STORY_HEIGHT = 2.4              # m
MAX_STORY_HEIGHT = 6.0              # m
MAX_BAY_SPACING = 12.0              # m
HIGH_SEISMIC_HEIGHT_LIMIT = 40.0    # m
MIN_DEAD_LOAD = 3.0                 # kN/m²
LIVE_LOAD_TOLERANCE = 0.9           # Fraction of code minimum accepted
ESSENTIAL_FACILITY_LIVE_FACTOR = 1.25

# Seismic Design (SNI 1726:2019)
PERIOD_UPPER_LIMIT_CU = 1.4
PERIOD_SD1_PLACEHOLDER = 0.4        # Fixed Sd1 used for the period cap
FIXED_FA = 1.2                      # Site class C assumption
FIXED_FV = 1.8                      # Site class C assumption
CS_MIN_FACTOR = 0.044
CS_MIN_ABSOLUTE = 0.01
LONG_PERIOD_TL = 12.0               # s, Indonesia

# Shear Design (SNI 2847:2019 Cl 22.5)
SHEAR_VC_FACTOR = 0.17
STIRRUP_DIAMETER = 10               # mm
STIRRUP_LEGS = 2
STIRRUP_YIELD_STRENGTH = 280        # MPa
STIRRUP_EFFICIENCY = 0.22
MAX_STIRRUP_SPACING = 300           # mm
ABSOLUTE_MAX_STIRRUP_SPACING = 600  # mm

# Simplified frame analysis
MOMENT_COEFFICIENT = 0.125          # wL²/8
SHEAR_COEFFICIENT = 0.5             # wL/2
DEFAULT_DEFLECTION_AMPLIFICATION = 5.5  # Cd, special RC moment frame
OVERTURN_ARM_FACTOR = 0.7
AXIAL_SHARE_FACTOR = 0.4
TRANSVERSE_STEEL_FACTOR = 0.3

# Bar sizes available for longitudinal reinforcement (mm)
BAR_SIZES = (12, 16, 19, 22, 25, 28, 32)
MIN_BAR_COUNT = 2
MAX_BAR_COUNT = 8
