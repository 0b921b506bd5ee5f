"""
Geometry Validator - plan dimensions, proportions, story height and spans
"""

from dataclasses import dataclass
from typing import List

from .rules import Rule, evaluate_rules, fmt
from ..core.constants import (
    HIGH_SEISMIC_HEIGHT_LIMIT,
    MAX_BAY_SPACING,
    MAX_PLAN_ASPECT_RATIO,
    MAX_STORY_HEIGHT,
    MIN_PLAN_DIMENSION,
    MIN_STORY_HEIGHT,
)
from ..core.data_models import (
    Category,
    SeismicZone,
    Severity,
    StructuralGeometry,
    ValidationContext,
    ValidationResult,
)


@dataclass(frozen=True)
class GeometryFacts:
    geometry: StructuralGeometry
    context: ValidationContext

    @property
    def aspect_ratio(self) -> float:
        g = self.geometry
        return max(g.length, g.width) / min(g.length, g.width)

    @property
    def story_height(self) -> float:
        # Average story height, independent of any explicit story_height
        return self.geometry.height / self.geometry.number_of_floors


GEOMETRY_RULES = (
    Rule(
        rule_id="geometry.min_dimension",
        applies=lambda f: (f.geometry.length < MIN_PLAN_DIMENSION
                           or f.geometry.width < MIN_PLAN_DIMENSION),
        severity=Severity.CRITICAL,
        category=Category.ENGINEERING,
        message="Building dimensions too small for structural analysis",
        recommendation=f"Minimum building dimensions should be ≥ {fmt(MIN_PLAN_DIMENSION)}m",
        code_reference="Engineering Practice Guidelines",
        block_construction=True,
    ),
    Rule(
        rule_id="geometry.aspect_ratio",
        applies=lambda f: f.aspect_ratio > MAX_PLAN_ASPECT_RATIO,
        severity=Severity.WARNING,
        category=Category.ENGINEERING,
        message=lambda f: (
            f"High aspect ratio {f.aspect_ratio:.1f} may cause torsional irregularity"
        ),
        recommendation="Consider structural walls or bracing to reduce torsion",
        code_reference="SNI 1726:2019 Table 7.3-1",
    ),
    Rule(
        rule_id="geometry.min_story_height",
        applies=lambda f: f.story_height < MIN_STORY_HEIGHT,
        severity=Severity.WARNING,
        category=Category.CODE,
        message=lambda f: f"Story height {f.story_height:.1f}m below minimum for occupancy",
        recommendation=f"Minimum ceiling height {fmt(MIN_STORY_HEIGHT)}m for habitable spaces",
        code_reference="Building Code Requirements",
        requires_engineer_review=False,
    ),
    Rule(
        rule_id="geometry.max_story_height",
        applies=lambda f: f.story_height > MAX_STORY_HEIGHT,
        severity=Severity.WARNING,
        category=Category.ENGINEERING,
        message=lambda f: f"Unusually high story height {f.story_height:.1f}m",
        recommendation="Verify structural requirements for tall stories",
        code_reference="Engineering Practice Guidelines",
    ),
    Rule(
        rule_id="geometry.bay_spacing",
        applies=lambda f: f.geometry.bay_spacing_x > MAX_BAY_SPACING,
        severity=Severity.CRITICAL,
        category=Category.ENGINEERING,
        message=lambda f: (
            f"Large bay spacing {fmt(f.geometry.bay_spacing_x)}m requires special beam design"
        ),
        recommendation="Consider post-tensioned beams or additional supports",
        code_reference="ACI 318-19 Span Limitations",
    ),
    Rule(
        rule_id="geometry.high_seismic_height",
        applies=lambda f: (f.context.seismic_zone == SeismicZone.HIGH
                           and f.geometry.height > HIGH_SEISMIC_HEIGHT_LIMIT),
        severity=Severity.CRITICAL,
        category=Category.SAFETY,
        message="High-rise buildings in seismic zones require special analysis",
        recommendation="Perform dynamic analysis and special seismic provisions",
        code_reference="SNI 1726:2019 Section 7.2.1",
    ),
)


def validate_structural_geometry(
    geometry: StructuralGeometry, context: ValidationContext
) -> List[ValidationResult]:
    return evaluate_rules(GEOMETRY_RULES, GeometryFacts(geometry, context))
