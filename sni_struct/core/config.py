"""
Engine Configuration Module.

Handles the tunable assumptions of the simplified analysis (site coefficient
mode, assumed beam section, deflection amplification) and runtime settings,
loaded from environment variables or a .env file.

Usage:
    config = EngineConfig.from_env()
    results = AnalysisEngine(config=config).analyze(geometry, materials, loads)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .constants import DEFAULT_DEFLECTION_AMPLIFICATION
from .data_models import BuildingType

logger = logging.getLogger(__name__)

SITE_COEFFICIENT_MODES = ("fixed", "table")


@dataclass(frozen=True)
class EngineConfig:
    """Engine configuration.

    Attributes:
        site_coefficient_mode: "fixed" uses Fa=1.2/Fv=1.8 (site class C
            assumption); "table" interpolates SNI 1726 Tables 6/7 by site class
        building_type: Seismic system used for the approximate period
        beam_width_mm: Assumed beam width for member design (mm)
        beam_depth_mm: Assumed overall beam depth (mm)
        beam_cover_mm: Cover + bar allowance subtracted from depth (mm)
        deflection_amplification: Cd used in the drift check
        batch_max_workers: Thread pool size for batch validation
        log_level: Logging level name for configure_logging()
    """

    site_coefficient_mode: str = "fixed"
    building_type: BuildingType = BuildingType.CONCRETE_MOMENT
    beam_width_mm: float = 300.0
    beam_depth_mm: float = 500.0
    beam_cover_mm: float = 60.0
    deflection_amplification: float = DEFAULT_DEFLECTION_AMPLIFICATION
    batch_max_workers: int = 4
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.site_coefficient_mode not in SITE_COEFFICIENT_MODES:
            raise ValueError(
                f"Invalid site coefficient mode: {self.site_coefficient_mode}. "
                f"Must be one of: {', '.join(SITE_COEFFICIENT_MODES)}"
            )

        if not isinstance(self.building_type, BuildingType):
            try:
                object.__setattr__(self, "building_type", BuildingType(self.building_type))
            except ValueError:
                raise ValueError(f"Invalid building type: {self.building_type}")

        if self.beam_width_mm <= 0 or self.beam_depth_mm <= 0:
            raise ValueError("Beam dimensions must be positive")

        if self.beam_cover_mm < 0 or self.beam_cover_mm >= self.beam_depth_mm:
            raise ValueError("Beam cover must be non-negative and less than beam depth")

        if self.deflection_amplification <= 0:
            raise ValueError("Deflection amplification factor must be positive")

        if self.batch_max_workers < 1:
            raise ValueError("Batch worker count must be at least 1")

        if logging.getLevelName(self.log_level.upper()) not in (
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL
        ):
            raise ValueError(f"Invalid log level: {self.log_level}")

    @property
    def effective_depth_mm(self) -> float:
        """Effective depth d = h - cover allowance (mm)"""
        return self.beam_depth_mm - self.beam_cover_mm

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineConfig":
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            EngineConfig instance with loaded configuration

        Raises:
            ValueError: If a variable cannot be parsed or is out of range
            FileNotFoundError: If env_file is specified but doesn't exist

        Environment Variables:
            SNI_SITE_COEFFICIENT_MODE: fixed or table
            SNI_BUILDING_TYPE: concrete-moment, steel-moment or braced
            SNI_BEAM_WIDTH_MM / SNI_BEAM_DEPTH_MM / SNI_BEAM_COVER_MM
            SNI_DEFLECTION_AMPLIFICATION: Cd
            SNI_BATCH_MAX_WORKERS: Thread pool size
            SNI_LOG_LEVEL: DEBUG, INFO, WARNING, ...
        """
        if env_file:
            cls._load_env_file(env_file)

        defaults = cls()
        try:
            config = cls(
                site_coefficient_mode=os.getenv(
                    "SNI_SITE_COEFFICIENT_MODE", defaults.site_coefficient_mode
                ).lower(),
                building_type=os.getenv("SNI_BUILDING_TYPE", defaults.building_type.value),
                beam_width_mm=float(os.getenv("SNI_BEAM_WIDTH_MM", defaults.beam_width_mm)),
                beam_depth_mm=float(os.getenv("SNI_BEAM_DEPTH_MM", defaults.beam_depth_mm)),
                beam_cover_mm=float(os.getenv("SNI_BEAM_COVER_MM", defaults.beam_cover_mm)),
                deflection_amplification=float(
                    os.getenv("SNI_DEFLECTION_AMPLIFICATION", defaults.deflection_amplification)
                ),
                batch_max_workers=int(
                    os.getenv("SNI_BATCH_MAX_WORKERS", defaults.batch_max_workers)
                ),
                log_level=os.getenv("SNI_LOG_LEVEL", defaults.log_level),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid engine configuration: {e}") from e

        logger.info(
            f"Engine configured: site coefficients={config.site_coefficient_mode}, "
            f"system={config.building_type.value}, "
            f"beam={config.beam_width_mm:.0f}x{config.beam_depth_mm:.0f}mm"
        )
        return config

    @staticmethod
    def _load_env_file(env_file: str) -> None:
        """Load environment variables from .env file.

        Args:
            env_file: Path to .env file

        Raises:
            FileNotFoundError: If env_file doesn't exist
        """
        if not os.path.isfile(env_file) or not load_dotenv(env_file, override=True):
            raise FileNotFoundError(f".env file not found: {env_file}")


def configure_logging(level: Optional[str] = None, config: Optional[EngineConfig] = None) -> None:
    """Attach a basic stream handler to the package logger.

    The level defaults to the config's log_level.
    """
    if level is None:
        level = (config or DEFAULT_CONFIG).log_level
    package_logger = logging.getLogger("sni_struct")
    package_logger.setLevel(level.upper())
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
        package_logger.addHandler(handler)


DEFAULT_CONFIG = EngineConfig()
