"""
Tests for the Command-Line Interface

Run with: pytest tests/test_main.py -v
"""

import json

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfsnap.main import main
from shelfsnap.comparison.comparator import PlanogramComparator
from shelfsnap.data_models import ComparisonScenario, Planogram, PlanogramItem


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MISPLACEMENT_POLICY", "INVALID_ITEM_POLICY", "LOG_LEVEL"):
        monkeypatch.delenv(f"SHELFSNAP_{name}", raising=False)


class TestMain:

    def test_generate_json_report(self, capsys):
        code = main(["--generate-data", "--no-save", "--json", "--quiet", "--seed", "3"])

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["total_expected"] > 0
        assert 0.0 <= report["compliance_score"] <= 1.0

    def test_generate_and_save(self, tmp_path, capsys):
        code = main(["-g", "--output-dir", str(tmp_path), "--verbose", "--num-rows", "2"])

        out = capsys.readouterr().out
        assert code == 0
        assert "PLANOGRAM COMPLIANCE REPORT" in out
        assert "Ground Truth Validation" in out
        assert (tmp_path / "scenario_generated_2x4.json").exists()

    def test_input_file(self, tmp_path, capsys):
        scenario = ComparisonScenario(
            planogram=Planogram(id="p", shelves_count=1, shelf_width_mm=1000),
            items=[PlanogramItem(id="i1", planogram_id="p", product_id="A",
                                 shelf_index=0, x_mm=0, width_mm=1000)],
            detections=[],
            scenario_id="file"
        )
        path = tmp_path / "s.json"
        scenario.save_to_json(str(path))

        code = main(["-i", str(path), "--json", "--quiet"])

        report = json.loads(capsys.readouterr().out)
        assert code == 0
        assert report["discrepancies"][0]["type"] == "missing"

    def test_invalid_layout_exit_code(self, tmp_path):
        scenario = ComparisonScenario(
            planogram=Planogram(id="p", shelves_count=1, shelf_width_mm=0),
            items=[], detections=[]
        )
        path = tmp_path / "bad.json"
        scenario.save_to_json(str(path))

        assert main(["-i", str(path), "--quiet"]) == 2

    def test_reject_invalid_items_exit_code(self, tmp_path):
        scenario = ComparisonScenario(
            planogram=Planogram(id="p", shelves_count=1, shelf_width_mm=1000),
            items=[PlanogramItem(id="i1", planogram_id="p", product_id="A",
                                 shelf_index=4, x_mm=0, width_mm=1000)],
            detections=[]
        )
        path = tmp_path / "items.json"
        scenario.save_to_json(str(path))

        assert main(["-i", str(path), "--quiet", "--invalid-items", "reject"]) == 2
        assert main(["-i", str(path), "--quiet"]) == 0

    def test_json_output_is_clean_without_quiet(self, capsys):
        code = main(["--generate-data", "--no-save", "--json", "--seed", "5"])

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert "discrepancies" in report

    def test_unknown_policy_from_env_is_usage_error(self, monkeypatch):
        monkeypatch.setenv("SHELFSNAP_MISPLACEMENT_POLICY", "fuzzy")

        with pytest.raises(SystemExit) as exc_info:
            main(["--generate-data", "--no-save", "--quiet"])
        assert exc_info.value.code == 2

    @pytest.mark.parametrize("flag,value", [("--num-rows", "7"), ("--num-cols", "9"), ("--num-rows", "0")])
    def test_grid_size_out_of_range_is_usage_error(self, flag, value, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-g", "--no-save", "--quiet", flag, value])

        assert exc_info.value.code == 2
        assert "must be in" in capsys.readouterr().err

    def test_missing_input_file_is_usage_error(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["-i", str(tmp_path / "nope.json"), "--quiet"])
        assert exc_info.value.code == 2

    def test_malformed_input_file_is_usage_error(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(SystemExit) as exc_info:
            main(["-i", str(path)])

        assert exc_info.value.code == 2
        assert "cannot load scenario" in capsys.readouterr().err

    def test_visualization_failure_does_not_abort(self, monkeypatch, capsys):
        def unavailable(scenario):
            raise ImportError("No module named 'matplotlib'")

        monkeypatch.setattr("shelfsnap.main.visualize_scenario", unavailable)

        code = main(["-g", "--no-save", "--quiet", "-v"])

        assert code == 0
        assert "Visualization failed" in capsys.readouterr().out

    def test_validation_scores_the_printed_report(self, monkeypatch, capsys):
        calls = []
        original = PlanogramComparator.analyze

        def counting(self, *args):
            calls.append(1)
            return original(self, *args)

        monkeypatch.setattr(PlanogramComparator, "analyze", counting)

        code = main(["-g", "--no-save", "--seed", "7"])

        assert code == 0
        assert len(calls) == 1
        assert "Ground Truth Validation" in capsys.readouterr().out
