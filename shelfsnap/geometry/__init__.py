"""
Geometry Module for Planogram Comparison

This module maps planogram items onto the detector's normalized
coordinate space:
- Cell rectangle derivation from millimetre placements
- Vectorized center-in-cell tests over detection snapshots
"""

from .cells import (
    CellRect,
    cell_rect,
    validate_layout,
    detection_centers,
    points_in_cell,
    first_point_in_cell,
    planogram_cells
)

__all__ = [
    'CellRect',
    'cell_rect',
    'validate_layout',
    'detection_centers',
    'points_in_cell',
    'first_point_in_cell',
    'planogram_cells'
]
