# Tabular report output
from .tables import (
    calculation_steps_frame,
    validation_results_frame,
    story_forces_frame,
    analysis_summary_frame,
    site_coefficients_frame,
    export_csv,
)
