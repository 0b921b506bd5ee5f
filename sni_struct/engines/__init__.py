# Engineering calculation engines
from .seismic_engine import SeismicEngine, calculate_fundamental_period, calculate_base_shear
from .flexure_engine import FlexureEngine, calculate_required_steel, select_bars
from .shear_engine import ShearEngine
from .drift_engine import DriftEngine
from .analysis_engine import AnalysisEngine, analyze
