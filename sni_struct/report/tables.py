"""
Tabular export of the calculation audit trail and validation findings.

DataFrames are intended for display by an embedding application and for CSV
export; rendering itself is out of scope here.
"""

from typing import Iterable, List, Optional

import pandas as pd

from ..core.data_models import (
    CalculationStep,
    StoryForce,
    StructuralAnalysisResults,
    ValidationResult,
)
from ..core.load_tables import S1_GRID, SS_GRID, site_class_table

STEP_COLUMNS = [
    "Step", "Stage", "Description", "Formula", "Calculation",
    "Result", "Unit", "Reference", "Verified",
]

FINDING_COLUMNS = [
    "Rule", "Severity", "Category", "Message", "Recommendation",
    "Code Reference", "Engineer Review", "Blocks Construction",
]

STORY_COLUMNS = ["Floor", "Height (m)", "Weight (kN)", "Force (kN)"]


def calculation_steps_frame(steps: Iterable[CalculationStep]) -> pd.DataFrame:
    """
    Audit trail as a DataFrame.

    Returns:
        DataFrame with columns: Step, Stage, Description, Formula, Calculation,
        Result, Unit, Reference, Verified
    """
    rows = [
        {
            "Step": s.step,
            "Stage": s.stage,
            "Description": s.description,
            "Formula": s.formula,
            "Calculation": s.calculation,
            "Result": s.result,
            "Unit": s.unit,
            "Reference": s.reference,
            "Verified": s.verified,
        }
        for s in steps
    ]
    if not rows:
        return pd.DataFrame(columns=STEP_COLUMNS)
    return pd.DataFrame(rows, columns=STEP_COLUMNS)


def validation_results_frame(results: Iterable[ValidationResult]) -> pd.DataFrame:
    """Validation findings, one row per fired rule, in evaluation order"""
    rows = [
        {
            "Rule": r.rule_id,
            "Severity": r.severity.value,
            "Category": r.category.value,
            "Message": r.message,
            "Recommendation": r.recommendation,
            "Code Reference": r.code_reference,
            "Engineer Review": r.requires_engineer_review,
            "Blocks Construction": r.block_construction,
        }
        for r in results
    ]
    if not rows:
        return pd.DataFrame(columns=FINDING_COLUMNS)
    return pd.DataFrame(rows, columns=FINDING_COLUMNS)


def story_forces_frame(forces: Iterable[StoryForce]) -> pd.DataFrame:
    rows = [
        {
            "Floor": f.floor,
            "Height (m)": round(f.height, 2),
            "Weight (kN)": round(f.weight, 1),
            "Force (kN)": round(f.force, 1),
        }
        for f in forces
    ]
    if not rows:
        return pd.DataFrame(columns=STORY_COLUMNS)
    return pd.DataFrame(rows, columns=STORY_COLUMNS)


def site_coefficients_frame() -> pd.DataFrame:
    """Fa/Fv site coefficient tables in long format (one row per grid point)"""
    rows: List[dict] = []
    for site, coefficients in site_class_table().items():
        for name, values in coefficients.items():
            grid = SS_GRID if name == "Fa" else S1_GRID
            for accel, factor in zip(grid, values):
                rows.append({
                    "Site Class": site,
                    "Coefficient": name,
                    "Spectral Acceleration (g)": accel,
                    "Factor": factor,
                })
    return pd.DataFrame(rows)


def analysis_summary_frame(results: StructuralAnalysisResults) -> pd.DataFrame:
    """Key scalar results as a two-column Quantity/Value table"""
    summary = [
        ("Fundamental period (s)", results.fundamental_period),
        ("Base shear (kN)", results.base_shear),
        ("Total weight (kN)", results.total_weight),
        ("Overturning moment (kN·m)", results.overturn_moment),
        ("Max moment (kN·m)", results.max_moment),
        ("Max axial force (kN)", results.max_axial_force),
        ("Drift ratio", results.drift_ratio),
        ("Utilization (%)", results.utilization_ratio),
        ("Safety margin (%)", results.safety_margin),
        ("Critical member", results.critical_member),
        ("Failure mode", results.failure_mode),
        ("Status", results.status),
    ]
    return pd.DataFrame(summary, columns=["Quantity", "Value"])


def export_csv(df: pd.DataFrame, path: Optional[str] = None) -> str:
    """
    Export a DataFrame as CSV.

    Args:
        df: Table to export
        path: File to write; when omitted only the CSV text is returned

    Returns:
        CSV text
    """
    csv = df.to_csv(index=False)
    if path is not None:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(csv)
    return csv
