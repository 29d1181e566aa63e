"""
Comparison Module for Planogram Compliance

This module provides the core logic for classifying a detection snapshot
against a planogram layout.

Discrepancy Types:
- MISSING: Expected product not detected in its cell
- MISPLACED: Detection in the cell carries a different label
- OVERSTOCK: Detection outside every defined cell
"""

from .comparator import (
    compare,
    PlanogramComparator,
    compare_planogram,
    compute_compliance_score,
    generate_compliance_report,
    validate_against_ground_truth
)
from .policies import (
    MisplacementPolicy,
    LabelMismatchPolicy,
    CaseInsensitiveLabelPolicy,
    IgnoreLabelsPolicy,
    get_policy
)

__all__ = [
    'compare',
    'PlanogramComparator',
    'compare_planogram',
    'compute_compliance_score',
    'generate_compliance_report',
    'validate_against_ground_truth',
    'MisplacementPolicy',
    'LabelMismatchPolicy',
    'CaseInsensitiveLabelPolicy',
    'IgnoreLabelsPolicy',
    'get_policy'
]
