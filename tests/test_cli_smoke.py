"""
Minimal smoke tests for the fitwizard CLI.

Tests basic functionality:
- App runs without errors
- Plans are generated, saved and listed
- Workouts can be logged against a saved plan
- History and analysis read the logs back
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fitwizard.cli.main import app


runner = CliRunner()

GYM_ARGS = [
    "--goal", "hypertrophy",
    "--experience", "intermediate",
    "--equipment", "barbell,dumbbells,bench,squat_rack,cables,machines",
    "--muscles", "chest,upper_back,lats,quads,hamstrings",
    "--days", "4",
    "--duration", "60",
]


@pytest.fixture
def temp_store_dir():
    """Create a temporary directory for the plan store."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _generate(store_dir: Path, *extra: str) -> dict:
    result = runner.invoke(app, ["generate", "--store-dir", str(store_dir), "--json", *GYM_ARGS, *extra])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "log-workout" in result.output

    def test_generate_saves_plan(self, temp_store_dir):
        """Test generate writes the plan to the store."""
        plan = _generate(temp_store_dir)

        assert plan["split_type"] == "upper_lower"
        assert plan["opt_phase"] == "muscular_development"
        assert len(plan["workout_days"]) == 4
        assert (temp_store_dir / "plans" / f"{plan['id']}.json").exists()

    def test_generate_table_output(self, temp_store_dir):
        """Test generate prints the plan and where it was saved."""
        result = runner.invoke(app, ["generate", "--store-dir", str(temp_store_dir), *GYM_ARGS])

        assert result.exit_code == 0
        assert "Upper A" in result.output
        assert "Saved plan" in result.output

    def test_generate_no_save(self, temp_store_dir):
        result = runner.invoke(app, ["generate", "--store-dir", str(temp_store_dir), "--no-save", "--json"])

        assert result.exit_code == 0
        assert not (temp_store_dir / "plans").exists()

    def test_generate_rejects_invalid_days(self, temp_store_dir):
        result = runner.invoke(app, ["generate", "--store-dir", str(temp_store_dir), "--days", "7"])

        assert result.exit_code == 1
        assert "between 2 and 6" in result.output

    def test_generate_rejects_unknown_goal(self, temp_store_dir):
        result = runner.invoke(app, ["generate", "--store-dir", str(temp_store_dir), "--goal", "yoga"])

        assert result.exit_code == 1
        assert "Unknown goal" in result.output

    def test_validate_reports_errors(self):
        """Test validate exits 1 and lists every problem."""
        result = runner.invoke(app, ["validate", "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["valid"] is False
        assert "Please select a training goal" in data["errors"]
        assert "Please select at least one equipment option" in data["errors"]

    def test_validate_reports_balance_warnings(self):
        result = runner.invoke(app, [
            "validate", "--json",
            "--goal", "strength",
            "--equipment", "bodyweight",
            "--muscles", "chest,triceps",
            "--days", "2",
        ])

        assert result.exit_code == 0
        ids = {w["id"] for w in json.loads(result.stdout)["warnings"]}
        assert ids == {"frequency_low", "missing_legs", "imbalance_push", "equip_strength"}

    def test_show_and_list_plans(self, temp_store_dir):
        """Test show-plan and list-plans read the saved plan back."""
        plan = _generate(temp_store_dir)

        shown = runner.invoke(app, ["show-plan", "--store-dir", str(temp_store_dir), "--json"])
        assert shown.exit_code == 0
        assert json.loads(shown.stdout)["id"] == plan["id"]

        by_id = runner.invoke(app, ["show-plan", plan["id"], "--store-dir", str(temp_store_dir)])
        assert by_id.exit_code == 0
        assert "Weekly Volume" in by_id.output

        listed = runner.invoke(app, ["list-plans", "--store-dir", str(temp_store_dir), "--json"])
        assert listed.exit_code == 0
        assert [p["id"] for p in json.loads(listed.stdout)] == [plan["id"]]

    def test_show_plan_empty_store(self, temp_store_dir):
        result = runner.invoke(app, ["show-plan", "--store-dir", str(temp_store_dir)])

        assert result.exit_code == 1
        assert "No saved plans" in result.output

    def test_log_workout_and_history(self, temp_store_dir):
        """Test log-workout appends to the log and history shows it."""
        plan = _generate(temp_store_dir)
        exercise_id = plan["workout_days"][0]["exercises"][0]["exercise"]["id"]

        result = runner.invoke(app, [
            "log-workout",
            "--store-dir", str(temp_store_dir),
            "--day", "1",
            "--date", "2026-02-18T18:00",
            "--sets", f"{exercise_id}=8@135/2,8@135/2,7@135/1",
        ])
        assert result.exit_code == 0, result.output
        assert "Logged" in result.output
        assert "2026-02-18" in (temp_store_dir / "logs.jsonl").read_text()

        history = runner.invoke(app, ["history", "--store-dir", str(temp_store_dir), "--json"])
        assert history.exit_code == 0
        logs = json.loads(history.stdout)
        assert len(logs) == 1
        assert logs[0]["plan_id"] == plan["id"]
        assert logs[0]["total_volume"] == 8 * 135 * 2 + 7 * 135

    def test_log_workout_rejects_unknown_exercise(self, temp_store_dir):
        _generate(temp_store_dir)

        result = runner.invoke(app, [
            "log-workout",
            "--store-dir", str(temp_store_dir),
            "--sets", "not_in_plan=8@100/2",
        ])

        assert result.exit_code == 1
        assert "not in plan" in result.output

    def test_log_workout_rejects_bad_sets(self, temp_store_dir):
        plan = _generate(temp_store_dir)
        exercise_id = plan["workout_days"][0]["exercises"][0]["exercise"]["id"]

        result = runner.invoke(app, [
            "log-workout",
            "--store-dir", str(temp_store_dir),
            "--sets", f"{exercise_id}=eight@135",
        ])

        assert result.exit_code == 1
        assert "Invalid sets format" in result.output

    def test_analyze_runs(self, temp_store_dir):
        """Test analyze reads logs in the window."""
        plan = _generate(temp_store_dir)
        exercise_id = plan["workout_days"][0]["exercises"][0]["exercise"]["id"]
        for date in ("2026-02-12", "2026-02-16"):
            runner.invoke(app, [
                "log-workout",
                "--store-dir", str(temp_store_dir),
                "--date", date,
                "--sets", f"{exercise_id}=10@100/4,10@100/4",
            ])

        result = runner.invoke(app, [
            "analyze", "--store-dir", str(temp_store_dir), "--as-of", "2026-02-19", "--week", "1", "--json",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["workouts"] == 2
        assert data["recommendations"][0]["exercise_id"] == exercise_id
        assert data["recommendations"][0]["action"] in ("increase", "maintain")

        table = runner.invoke(app, ["analyze", "--store-dir", str(temp_store_dir), "--as-of", "2026-02-19"])
        assert table.exit_code == 0

    def test_analyze_without_logs(self, temp_store_dir):
        _generate(temp_store_dir)

        result = runner.invoke(app, ["analyze", "--store-dir", str(temp_store_dir)])

        assert result.exit_code == 0
        assert "No workouts logged" in result.output

    def test_suggest(self):
        result = runner.invoke(app, ["suggest", "--muscles", "chest", "--equipment", "barbell,bench", "--json"])

        assert result.exit_code == 0
        picks = json.loads(result.stdout)
        assert 0 < len(picks) <= 5
        assert "chest" in picks[0]["primary_muscles"]

    def test_phases_lookup(self):
        result = runner.invoke(app, ["phases", "--goal", "general", "--experience", "advanced", "--json"])

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [r["phase"] for r in rows] == ["power"]
        assert rows[0]["is_superset"] is True

    def test_phases_table(self):
        result = runner.invoke(app, ["phases"])

        assert result.exit_code == 0
        assert "OPT Phases" in result.output
