"""
ShelfSnap Planogram Comparator

This package checks a shelf photo's detection snapshot against the expected
planogram layout and reports missing, misplaced and overstocked products.

Main modules:
- data_models: Planograms, items, detections and discrepancies
- geometry: Normalized cell derivation and center-in-cell tests
- comparison: The comparator, misplacement policies and reports
- builder: Grid-based planogram construction
- scan: Scan screen state machine (live / frozen / drag)
- sources: Detection and planogram data source interfaces
- synthetic_data: Scenario generation for demos and tests
"""

from .comparison.comparator import compare, PlanogramComparator
from .data_models import (
    Planogram, PlanogramItem, Detection, BoundingBox,
    Discrepancy, DiscrepancyType
)
from .errors import ComparisonError, InvalidLayout, InvalidItem

__version__ = "1.0.0"

__all__ = [
    'compare',
    'PlanogramComparator',
    'Planogram',
    'PlanogramItem',
    'Detection',
    'BoundingBox',
    'Discrepancy',
    'DiscrepancyType',
    'ComparisonError',
    'InvalidLayout',
    'InvalidItem'
]
