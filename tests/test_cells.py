"""
Tests for Cell Geometry

This module tests the conversion of millimetre placements into
normalized cell rectangles and the vectorized center-in-cell helpers.

Run with: pytest tests/test_cells.py -v
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfsnap.geometry.cells import (
    CellRect,
    cell_rect,
    validate_layout,
    detection_centers,
    points_in_cell,
    first_point_in_cell,
    planogram_cells
)
from shelfsnap.data_models import Planogram, PlanogramItem, Detection, BoundingBox
from shelfsnap.errors import InvalidLayout


def make_item(shelf: int, x_mm: int, width_mm: int) -> PlanogramItem:
    return PlanogramItem(id=f"i{shelf}_{x_mm}", planogram_id="p", product_id="P",
                         shelf_index=shelf, x_mm=x_mm, width_mm=width_mm)


class TestCellRect:
    """Tests for cell rectangle derivation."""

    def test_single_shelf_half_width(self):
        planogram = Planogram(id="p", shelves_count=1, shelf_width_mm=1000)

        cell = cell_rect(planogram, make_item(0, 0, 500))

        assert cell == CellRect(left=0.0, top=0.0, right=0.5, bottom=1.0)

    def test_rows_have_uniform_height(self):
        planogram = Planogram(id="p", shelves_count=4, shelf_width_mm=1600)

        cell = cell_rect(planogram, make_item(2, 400, 400))

        assert cell.left == pytest.approx(0.25)
        assert cell.right == pytest.approx(0.5)
        assert cell.top == pytest.approx(0.5)
        assert cell.bottom == pytest.approx(0.75)

    def test_overhang_not_clamped(self):
        planogram = Planogram(id="p", shelves_count=1, shelf_width_mm=1000)

        cell = cell_rect(planogram, make_item(0, 800, 400))

        assert cell.right == pytest.approx(1.2)

    def test_out_of_range_shelf_propagates(self):
        planogram = Planogram(id="p", shelves_count=2, shelf_width_mm=1000)

        cell = cell_rect(planogram, make_item(3, 0, 100))

        assert cell.top == pytest.approx(1.5)
        assert cell.bottom == pytest.approx(2.0)

    @pytest.mark.parametrize("shelves,width", [(0, 1000), (1, 0), (-1, 1000), (2, -5)])
    def test_invalid_layout(self, shelves, width):
        planogram = Planogram(id="p", shelves_count=shelves, shelf_width_mm=width)

        with pytest.raises(InvalidLayout):
            cell_rect(planogram, make_item(0, 0, 100))
        with pytest.raises(InvalidLayout):
            validate_layout(planogram)

    def test_planogram_cells_in_item_order(self):
        planogram = Planogram(id="p", shelves_count=2, shelf_width_mm=1000)
        items = [make_item(1, 0, 500), make_item(0, 500, 500)]

        cells = planogram_cells(planogram, items)

        assert [c.top for c in cells] == [0.5, 0.0]


class TestContainment:
    """Tests for inclusive point-in-cell checks."""

    def test_contains_edges(self):
        cell = CellRect(left=0.0, top=0.0, right=0.5, bottom=0.5)

        assert cell.contains(0.5, 0.5)
        assert cell.contains(0.0, 0.0)
        assert not cell.contains(0.5000001, 0.25)
        assert not cell.contains(0.25, -0.0001)

    def test_detection_centers(self):
        detections = [
            Detection(id="a", bounding_box=BoundingBox(0.0, 0.0, 0.5, 0.5)),
            Detection(id="b", bounding_box=BoundingBox(0.5, 0.5, 1.0, 1.0)),
        ]

        centers = detection_centers(detections)

        assert centers.shape == (2, 2)
        np.testing.assert_allclose(centers, [[0.25, 0.25], [0.75, 0.75]])

    def test_detection_centers_empty(self):
        assert detection_centers([]).shape == (0, 2)

    def test_points_in_cell_matches_contains(self):
        cell = CellRect(left=0.2, top=0.2, right=0.6, bottom=0.6)
        points = np.array([[0.2, 0.2], [0.6, 0.6], [0.1, 0.3], [0.4, 0.7], [0.5, 0.5]])

        mask = points_in_cell(points, cell)

        assert mask.tolist() == [cell.contains(x, y) for x, y in points]
        assert mask.tolist() == [True, True, False, False, True]

    def test_first_point_in_cell(self):
        cell = CellRect(left=0.5, top=0.0, right=1.0, bottom=1.0)
        points = np.array([[0.1, 0.5], [0.7, 0.5], [0.8, 0.5]])

        assert first_point_in_cell(points, cell) == 1

    def test_first_point_in_cell_none(self):
        cell = CellRect(left=0.5, top=0.0, right=1.0, bottom=1.0)

        assert first_point_in_cell(np.array([[0.1, 0.5]]), cell) == -1
        assert first_point_in_cell(np.empty((0, 2)), cell) == -1


class TestBoundingBox:
    """Tests for bounding box helpers used by the geometry code."""

    def test_from_xywh(self):
        box = BoundingBox.from_xywh(0.1, 0.2, 0.3, 0.4)

        assert box.right == pytest.approx(0.4)
        assert box.bottom == pytest.approx(0.6)
        assert box.center == pytest.approx((0.25, 0.4))

    def test_translated(self):
        box = BoundingBox(0.1, 0.1, 0.3, 0.3).translated(0.2, -0.1)

        assert box.left == pytest.approx(0.3)
        assert box.top == pytest.approx(0.0)
        assert box.width == pytest.approx(0.2)
        assert box.height == pytest.approx(0.2)
