"""
Validation Orchestrator

Runs every validator in a fixed order and derives the construction gate.
Validation never raises for domain conditions; every failed rule becomes a
ValidationResult so the operator sees the complete issue list in one pass.
"""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .geometry import validate_structural_geometry
from .loads import validate_load_conditions
from .material import validate_concrete_material, validate_steel_material
from .professional import validate_professional_signoff
from .seismic import validate_seismic_parameters
from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.data_models import GateStatus, ProjectData, ValidationContext, ValidationResult

logger = logging.getLogger(__name__)


def validate(project: ProjectData, context: ValidationContext) -> List[ValidationResult]:
    """
    Run all validators: concrete, steel, seismic, geometry, loads, then the
    professional sign-off. Results keep each validator's rule order.
    """
    results: List[ValidationResult] = []
    results.extend(validate_concrete_material(project.materials.concrete, context))
    results.extend(validate_steel_material(project.materials.steel, context))
    results.extend(validate_seismic_parameters(
        project.loads.seismic, project.project_info.location, context
    ))
    results.extend(validate_structural_geometry(project.geometry, context))
    results.extend(validate_load_conditions(project.loads, context))
    results.extend(validate_professional_signoff(context))

    blocking = sum(1 for r in results if r.is_blocking)
    if blocking:
        logger.warning(
            f"Project '{project.project_info.name}': {blocking} blocking finding(s), "
            f"{len(results)} total"
        )
    else:
        logger.info(f"Project '{project.project_info.name}': {len(results)} finding(s), none blocking")
    return results


def is_construction_blocked(results: Iterable[ValidationResult]) -> bool:
    """True if any finding blocks construction"""
    return any(r.is_blocking for r in results)


def gate_status(results: Iterable[ValidationResult]) -> GateStatus:
    """
    BLOCKED if any finding blocks construction, REVIEW_REQUIRED if any
    remaining finding needs engineer review, else APPROVED.
    """
    results = list(results)
    if is_construction_blocked(results):
        return GateStatus.BLOCKED
    if any(not r.is_valid and r.requires_engineer_review for r in results):
        return GateStatus.REVIEW_REQUIRED
    return GateStatus.APPROVED


@dataclass(frozen=True)
class ValidationReport:
    """Findings of one project with summary counts"""
    results: Tuple[ValidationResult, ...]
    status: GateStatus
    by_severity: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: Iterable[ValidationResult]) -> "ValidationReport":
        results = tuple(results)
        return cls(
            results=results,
            status=gate_status(results),
            by_severity=dict(Counter(r.severity.value for r in results)),
            by_category=dict(Counter(r.category.value for r in results)),
        )

    @property
    def blocking(self) -> List[ValidationResult]:
        return [r for r in self.results if r.is_blocking]

    @property
    def construction_blocked(self) -> bool:
        return self.status == GateStatus.BLOCKED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "by_severity": dict(self.by_severity),
            "by_category": dict(self.by_category),
            "results": [r.to_dict() for r in self.results],
        }


def validate_report(project: ProjectData, context: ValidationContext) -> ValidationReport:
    return ValidationReport.from_results(validate(project, context))


def validate_batch(
    items: Iterable[Tuple[ProjectData, ValidationContext]],
    max_workers: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> List[List[ValidationResult]]:
    """
    Validate many projects concurrently.

    Args:
        items: (project, context) pairs
        max_workers: Thread pool size; overrides the configured batch size
        config: Engine configuration supplying batch_max_workers

    Returns:
        One result list per item, in input order
    """
    items = list(items)
    if not items:
        return []
    workers = max_workers or (config or DEFAULT_CONFIG).batch_max_workers
    pool_size = min(workers, len(items))
    with ThreadPoolExecutor(max_workers=pool_size) as executor:
        results = list(executor.map(lambda pair: validate(*pair), items))
    logger.info(f"Validated {len(items)} project(s) with {pool_size} worker(s)")
    return results
