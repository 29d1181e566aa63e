"""
Tests for Data Model Serialization

Run with: pytest tests/test_data_models.py -v
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfsnap.data_models import Planogram, PlanogramItem, ComparisonScenario
from shelfsnap.geometry.cells import cell_rect


def item_dict(**overrides):
    data = {
        "id": "i1", "planogram_id": "p", "product_id": "A",
        "shelf_index": 0, "x_mm": 0, "width_mm": 500
    }
    data.update(overrides)
    return data


class TestPlanogramItemFromDict:

    def test_fractional_lengths_preserved(self):
        item = PlanogramItem.from_dict(item_dict(x_mm=499.9, width_mm=100.5))

        assert item.x_mm == 499.9
        assert item.width_mm == 100.5

    def test_whole_lengths_stay_integers(self):
        item = PlanogramItem.from_dict(item_dict(x_mm=500.0, width_mm="250"))

        assert item.x_mm == 500 and isinstance(item.x_mm, int)
        assert item.width_mm == 250 and isinstance(item.width_mm, int)

    def test_fractional_offset_moves_cell_edge(self):
        planogram = Planogram(id="p", shelves_count=1, shelf_width_mm=1000)
        item = PlanogramItem.from_dict(item_dict(x_mm=499.9))

        assert cell_rect(planogram, item).left == 499.9 / 1000

    def test_scenario_file_keeps_fractional_lengths(self, tmp_path):
        scenario = ComparisonScenario(
            planogram=Planogram(id="p", shelves_count=1, shelf_width_mm=1000),
            items=[PlanogramItem.from_dict(item_dict(x_mm=12.5, width_mm=487.5))],
            detections=[]
        )
        path = tmp_path / "scenario.json"
        scenario.save_to_json(str(path))

        loaded = ComparisonScenario.load_from_json(str(path))

        assert loaded.items[0].x_mm == 12.5
        assert loaded.items[0].width_mm == 487.5
