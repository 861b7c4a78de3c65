"""
Analytics module for NicheScope.

Provides deterministic outlier statistics over platform snapshots.
"""

from .outliers import (
    classify_performance,
    compute_z_scores,
    select_top_outliers,
    views_per_hour,
)

__all__ = [
    "classify_performance",
    "compute_z_scores",
    "select_top_outliers",
    "views_per_hour",
]
