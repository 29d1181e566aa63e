"""
Tests for the Planogram Builder

Run with: pytest tests/test_builder.py -v
"""

import itertools

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfsnap.builder import PlanogramGrid, DEFAULT_COLUMN_WIDTH_MM
from shelfsnap.comparison.comparator import compare
from shelfsnap.data_models import Planogram, Product, Detection, BoundingBox


def counter_ids():
    counter = itertools.count()
    return lambda: f"id{next(counter)}"


class TestGridEditing:

    def test_defaults(self):
        grid = PlanogramGrid()

        assert (grid.rows, grid.cols) == (3, 4)
        assert grid.shelf_width_mm == 4 * DEFAULT_COLUMN_WIDTH_MM
        assert grid.get(0, 0) is None

    def test_assign_and_clear(self):
        grid = PlanogramGrid(rows=2, cols=2)

        grid.assign(1, 1, "milk")
        assert grid.get(1, 1) == "milk"

        grid.clear(1, 1)
        assert grid.get(1, 1) is None

    def test_cell_out_of_range(self):
        grid = PlanogramGrid(rows=2, cols=2)

        with pytest.raises(ValueError):
            grid.assign(2, 0, "milk")

    @pytest.mark.parametrize("rows,cols", [(0, 4), (7, 4), (3, 0), (3, 9)])
    def test_dimension_limits(self, rows, cols):
        with pytest.raises(ValueError):
            PlanogramGrid(rows=rows, cols=cols)

    def test_resize_keeps_fitting_selections(self):
        grid = PlanogramGrid(rows=2, cols=3)
        grid.assign(0, 0, "milk")
        grid.assign(1, 2, "bread")

        grid.resize(3, 2)

        assert grid.get(0, 0) == "milk"
        assert grid.get(2, 1) is None
        with pytest.raises(ValueError):
            grid.get(1, 2)

        grid.resize(3, 3)
        assert grid.get(1, 2) is None

    def test_placeholder_catalogue_labels(self):
        grid = PlanogramGrid(rows=1, cols=2)
        grid.assign(0, 0, "juice")

        assert grid.cell_label(0, 0) == "Orange Juice"
        assert grid.cell_label(0, 1) == "Select"

    def test_assign_product_from_catalogue(self):
        soap = Product(id="p-9", sku="soap", name="Soap", width_mm=80)
        grid = PlanogramGrid(rows=1, cols=2, catalogue=[soap])

        grid.assign_product(0, 1, soap)

        assert grid.get(0, 1) == "p-9"
        assert grid.cell_label(0, 1) == "Soap"
        assert "milk" not in grid.catalogue

    def test_existing_planogram_sets_rows(self):
        existing = Planogram(id="keep", name="Dairy", shelves_count=5, shelf_width_mm=1600)

        grid = PlanogramGrid(existing=existing)

        assert grid.rows == 5


class TestBuild:

    def test_one_item_per_filled_cell(self):
        grid = PlanogramGrid(rows=2, cols=3)
        grid.assign(0, 1, "milk")
        grid.assign(1, 0, "bread")

        planogram, items = grid.build(name="Bay 1", id_factory=counter_ids())

        assert planogram.id == "id0"
        assert planogram.name == "Bay 1"
        assert planogram.shelves_count == 2
        assert planogram.shelf_width_mm == 1200
        assert [(i.product_id, i.shelf_index, i.x_mm, i.width_mm, i.facings) for i in items] == [
            ("milk", 0, 400, 400, 1),
            ("bread", 1, 0, 400, 1),
        ]
        assert all(i.planogram_id == planogram.id for i in items)

    def test_existing_planogram_keeps_identity(self):
        existing = Planogram(id="keep", name="Dairy", section="D", shelves_count=2,
                             shelf_width_mm=800)
        grid = PlanogramGrid(cols=2, existing=existing)

        planogram, items = grid.build()

        assert planogram.id == "keep"
        assert planogram.name == "Dairy"
        assert planogram.section == "D"
        assert items == []

    def test_built_planogram_compares_cleanly(self):
        grid = PlanogramGrid(rows=1, cols=2)
        grid.assign(0, 0, "milk")
        grid.assign(0, 1, "bread")
        planogram, items = grid.build()

        detections = [
            Detection(id="a", bounding_box=BoundingBox(0.1, 0.2, 0.4, 0.8), label="milk"),
            Detection(id="b", bounding_box=BoundingBox(0.6, 0.2, 0.9, 0.8), label="bread"),
        ]

        assert compare(planogram, items, detections) == []
