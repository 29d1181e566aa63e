"""
Cell Geometry for Planogram Comparison

Converts a planogram item's millimetre placement into a rectangle in the
same normalized [0, 1] space the detector reports bounding boxes in.

For a planogram with S shelves of width W and an item on row r spanning
[x, x + w] millimetres:

    left   = x / W            top    = r / S
    right  = (x + w) / W      bottom = (r + 1) / S

Rows share a uniform height of 1/S and every row uses the same width W.
Values are NOT clamped: an item that overhangs the shelf yields a cell that
extends past 1.0, which keeps malformed input visible.

Complexity:
    cell_rect: O(1)
    points_in_cell: O(m) for m detection centers (vectorized)
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..data_models import Planogram, PlanogramItem, Detection
from ..errors import InvalidLayout


@dataclass(frozen=True)
class CellRect:
    """
    Normalized rectangle of one planogram cell.

    Attributes:
        left, right: Horizontal extent in shelf-width units
        top, bottom: Vertical extent in shelf-stack units
    """
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        """Inclusive point-in-rectangle test on all four edges."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def as_array(self) -> np.ndarray:
        """Return [left, top, right, bottom] as numpy array."""
        return np.array([self.left, self.top, self.right, self.bottom], dtype=np.float64)


def validate_layout(planogram: Planogram) -> None:
    """
    Reject layouts that cannot be normalized.

    Raises:
        InvalidLayout: if shelves_count <= 0 or shelf_width_mm <= 0
    """
    if planogram.shelves_count <= 0 or planogram.shelf_width_mm <= 0:
        raise InvalidLayout(
            planogram.id, planogram.shelves_count, planogram.shelf_width_mm
        )


def cell_rect(planogram: Planogram, item: PlanogramItem) -> CellRect:
    """
    Derive the normalized cell rectangle of ``item``.

    Args:
        planogram: Layout supplying shelves_count and shelf_width_mm
        item: Placement to convert

    Returns:
        CellRect in normalized coordinates (unclamped)

    Raises:
        InvalidLayout: if the planogram cannot be normalized
    """
    validate_layout(planogram)

    shelf_width = float(planogram.shelf_width_mm)
    shelves = float(planogram.shelves_count)

    left = item.x_mm / shelf_width
    right = (item.x_mm + item.width_mm) / shelf_width
    top = item.shelf_index / shelves
    bottom = (item.shelf_index + 1) / shelves

    return CellRect(left=left, top=top, right=right, bottom=bottom)


def detection_centers(detections: Sequence[Detection]) -> np.ndarray:
    """
    Extract bounding-box centers as a NumPy array for vectorized operations.

    Returns:
        np.ndarray: Shape (m, 2) array of (mid_x, mid_y)
    """
    if len(detections) == 0:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([d.bounding_box.center for d in detections], dtype=np.float64)


def points_in_cell(points: np.ndarray, cell: CellRect) -> np.ndarray:
    """
    Boolean mask of the points that fall inside ``cell`` (edges inclusive).

    Args:
        points: Shape (m, 2) array of (x, y)
        cell: Rectangle to test against

    Returns:
        np.ndarray: Shape (m,) boolean mask
    """
    if points.size == 0:
        return np.zeros(0, dtype=bool)
    xs = points[:, 0]
    ys = points[:, 1]
    return (
        (xs >= cell.left) & (xs <= cell.right) &
        (ys >= cell.top) & (ys <= cell.bottom)
    )


def first_point_in_cell(points: np.ndarray, cell: CellRect) -> int:
    """
    Index of the first point inside ``cell``, or -1 when none is.

    Ties are resolved by input order.
    """
    hits = np.flatnonzero(points_in_cell(points, cell))
    return int(hits[0]) if hits.size else -1


def planogram_cells(planogram: Planogram, items: Sequence[PlanogramItem]) -> List[CellRect]:
    """Derive the cell of every item, in input order."""
    validate_layout(planogram)
    return [cell_rect(planogram, item) for item in items]
