"""
Tests for JSON serialization, schema migration, set-string parsing and the
file-based plan store.
"""

import json
from datetime import datetime, timedelta

import pytest

from fitwizard.core.exercises.base import Exercise
from fitwizard.core.exercises.registry import ExerciseCatalog
from fitwizard.core.landmarks import landmarks_from_config
from fitwizard.core.models import ExerciseLog, SetLog, WizardSelections, WorkoutLog
from fitwizard.core.planner import generate_plan
from fitwizard.io.plan_store import PlanStore
from fitwizard.io.serializers import (
    CURRENT_SCHEMA_VERSION,
    ValidationError,
    dict_to_plan,
    dict_to_workout_log,
    json_line_to_workout_log,
    migrate_plan_dict,
    needs_migration,
    parse_sets_string,
    plan_to_dict,
    workout_log_to_dict,
    workout_log_to_json_line,
)

NOW = datetime(2026, 2, 19, 10, 0)

CATALOG = ExerciseCatalog([
    Exercise(
        id="db_press",
        name="DB Bench Press",
        primary_muscles=["chest"],
        secondary_muscles=["triceps"],
        equipment=["dumbbells"],
        patterns=["horizontal_push"],
        difficulty="Beginner",
    ),
    Exercise(
        id="goblet_squat",
        name="Goblet Squat",
        primary_muscles=["quads", "glutes"],
        equipment=["dumbbells", "kettlebells"],
        patterns=["squat"],
        contraindications=["knee_injury"],
        cues=["Elbows inside knees"],
    ),
])


def _make_plan(**overrides):
    values = dict(
        goal="hypertrophy",
        experience_level="intermediate",
        equipment=["dumbbells"],
        target_muscles=["chest", "quads"],
        days_per_week=3,
        session_duration=45,
        first_name="Sam",
    )
    values.update(overrides)
    return generate_plan(
        WizardSelections(**values),
        append_timestamp=True,
        catalog=CATALOG,
        landmarks=landmarks_from_config({}),
        now=NOW,
    )


def _make_log(log_id: str = "log_1", plan_id: str = "plan_a", days_ago: int = 0) -> WorkoutLog:
    started = NOW - timedelta(days=days_ago)
    return WorkoutLog(
        id=log_id,
        plan_id=plan_id,
        day_index=0,
        day_name="Full Body A",
        started_at=started,
        completed_at=started + timedelta(minutes=50),
        duration=50,
        exercises=[
            ExerciseLog(
                exercise_id="db_press",
                exercise_name="DB Bench Press",
                sets=[
                    SetLog(set_number=1, weight=50, reps=10, rir=2),
                    SetLog(set_number=2, weight=50, reps=9, rir=1, notes="grip slipped"),
                ],
            ),
            ExerciseLog(exercise_id="goblet_squat", exercise_name="Goblet Squat", skipped=True, skip_reason="knee"),
        ],
        perceived_difficulty=7,
        total_volume=950.0,
    )


# =============================================================================
# Plan serialization
# =============================================================================


class TestPlanSerialization:
    def test_plan_survives_json(self):
        plan = _make_plan()
        restored = dict_to_plan(json.loads(json.dumps(plan_to_dict(plan))))
        assert restored == plan

    def test_schema_version_written(self):
        data = plan_to_dict(_make_plan())
        assert data["schema_version"] == CURRENT_SCHEMA_VERSION
        assert not needs_migration(data)

    def test_datetimes_are_iso_strings(self):
        data = plan_to_dict(_make_plan())
        assert data["created_at"] == "2026-02-19T10:00:00"

    def test_personalization_kept(self):
        data = plan_to_dict(_make_plan())
        assert data["selections"]["first_name"] == "Sam"
        assert data["selections"]["is_trainer"] is False

    def test_missing_field_raises(self):
        data = plan_to_dict(_make_plan())
        del data["selections"]["goal"]
        with pytest.raises(ValidationError, match="goal"):
            dict_to_plan(data)

    def test_invalid_prescription_raises(self):
        data = plan_to_dict(_make_plan())
        data["workout_days"][0]["exercises"][0]["rir"] = 11
        with pytest.raises(ValidationError):
            dict_to_plan(data)

    def test_bad_timestamp_raises(self):
        data = plan_to_dict(_make_plan())
        data["created_at"] = "yesterday"
        with pytest.raises(ValidationError, match="created_at"):
            dict_to_plan(data)


# =============================================================================
# Schema migration
# =============================================================================


class TestMigration:
    def _v0(self) -> dict:
        """A current plan dict rewritten the way v0 stored it."""
        data = plan_to_dict(_make_plan())
        del data["schema_version"]
        del data["notes"]
        data["createdAt"] = data.pop("created_at")
        data["splitType"] = data.pop("split_type")
        data["workoutDays"] = data.pop("workout_days")
        data["rirProgression"] = data.pop("rir_progression")
        data["optPhase"] = data.pop("opt_phase")
        return data

    def test_v0_needs_migration(self):
        assert needs_migration(self._v0())

    def test_v0_keys_renamed(self):
        migrated = migrate_plan_dict(self._v0())
        assert migrated["schema_version"] == 1
        assert migrated["split_type"] == "full_body"
        assert "workoutDays" not in migrated
        assert migrated["notes"] == []

    def test_v0_loads(self):
        plan = _make_plan()
        restored = dict_to_plan(self._v0())
        assert restored.id == plan.id
        assert restored.workout_days == plan.workout_days
        assert restored.notes == ()

    def test_newer_schema_rejected(self):
        data = plan_to_dict(_make_plan())
        data["schema_version"] = CURRENT_SCHEMA_VERSION + 1
        with pytest.raises(ValidationError, match="newer"):
            dict_to_plan(data)

    def test_garbage_version_rejected(self):
        with pytest.raises(ValidationError):
            migrate_plan_dict({"schema_version": "one"})


# =============================================================================
# Workout logs
# =============================================================================


class TestWorkoutLogSerialization:
    def test_json_line_round_trip(self):
        log = _make_log()
        line = workout_log_to_json_line(log)
        assert "\n" not in line
        assert json_line_to_workout_log(line) == log

    def test_skipped_exercise_kept(self):
        data = workout_log_to_dict(_make_log())
        squat = data["exercises"][1]
        assert squat["skipped"] is True
        assert squat["skip_reason"] == "knee"
        assert squat["sets"] == []

    def test_defaults_for_optional_fields(self):
        log = dict_to_workout_log({
            "id": "log_min",
            "plan_id": "plan_a",
            "started_at": "2026-02-19T07:30:00",
            "exercises": [{"exercise_id": "db_press", "sets": [{"set_number": 1, "reps": 12}]}],
        })
        assert log.completed_at is None
        s = log.exercises[0].sets[0]
        assert (s.weight, s.weight_unit, s.rir, s.completed) == (0.0, "lbs", 0, True)

    def test_invalid_set_raises(self):
        data = workout_log_to_dict(_make_log())
        data["exercises"][0]["sets"][0]["weight_unit"] = "stone"
        with pytest.raises(ValidationError, match="weight_unit"):
            dict_to_workout_log(data)

    def test_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON"):
            json_line_to_workout_log("{not json")

    def test_non_object_line(self):
        with pytest.raises(ValidationError):
            json_line_to_workout_log("[1, 2]")


# =============================================================================
# Set strings
# =============================================================================


class TestParseSetsString:
    def test_full_entries(self):
        sets = parse_sets_string("8@135/2, 8@135/1, 6@140/0")
        assert [(s.set_number, s.reps, s.weight, s.rir) for s in sets] == [
            (1, 8, 135.0, 2),
            (2, 8, 135.0, 1),
            (3, 6, 140.0, 0),
        ]
        assert all(s.weight_unit == "lbs" and s.completed for s in sets)

    def test_explicit_unit_overrides_default(self):
        sets = parse_sets_string("5@100kg/1,5@225lbs/1", default_unit="lbs")
        assert [s.weight_unit for s in sets] == ["kg", "lbs"]

    def test_default_unit(self):
        assert parse_sets_string("5@60.5/2", default_unit="kg")[0].weight_unit == "kg"

    def test_bodyweight_and_default_rir(self):
        sets = parse_sets_string("12, 10/1", default_rir=3)
        assert [(s.reps, s.weight, s.rir) for s in sets] == [(12, 0.0, 3), (10, 0.0, 1)]

    @pytest.mark.parametrize("bad", ["", " , ", "eight@135/2", "8@/2", "8@135/x", "8@135/11"])
    def test_invalid(self, bad):
        with pytest.raises(ValidationError):
            parse_sets_string(bad)


# =============================================================================
# Plan store
# =============================================================================


class TestPlanStore:
    def test_init(self, tmp_path):
        store = PlanStore(tmp_path / "store")
        assert not store.exists()
        store.init()
        assert store.exists()
        assert store.logs_path.exists()

    def test_save_and_load_plan(self, tmp_path):
        store = PlanStore(tmp_path)
        plan = _make_plan()
        path = store.save_plan(plan)
        assert path == tmp_path / "plans" / f"{plan.id}.json"
        assert store.load_plan(plan.id) == plan

    def test_load_unknown_plan(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PlanStore(tmp_path).load_plan("plan_missing")

    def test_load_corrupt_plan(self, tmp_path):
        store = PlanStore(tmp_path)
        store.init()
        store.plan_path("plan_bad").write_text("{oops")
        with pytest.raises(ValidationError):
            store.load_plan("plan_bad")

    def test_list_plans_newest_first(self, tmp_path):
        store = PlanStore(tmp_path)
        older = _make_plan()
        newer = generate_plan(
            older.selections,
            append_timestamp=True,
            catalog=CATALOG,
            landmarks=landmarks_from_config({}),
            now=NOW + timedelta(hours=1),
        )
        store.save_plan(newer)
        store.save_plan(older)
        assert [p.id for p in store.list_plans()] == [newer.id, older.id]
        assert store.latest_plan().id == newer.id

    def test_empty_store(self, tmp_path):
        store = PlanStore(tmp_path)
        assert store.list_plans() == []
        assert store.latest_plan() is None
        assert store.load_logs() == []

    def test_logs_sorted_and_filtered(self, tmp_path):
        store = PlanStore(tmp_path)
        store.append_log(_make_log("log_new", "plan_a", days_ago=0))
        store.append_log(_make_log("log_old", "plan_a", days_ago=3))
        store.append_log(_make_log("log_other", "plan_b", days_ago=1))
        assert [log.id for log in store.load_logs()] == ["log_old", "log_other", "log_new"]
        assert [log.id for log in store.load_logs("plan_a")] == ["log_old", "log_new"]

    def test_duplicate_log_rejected(self, tmp_path):
        store = PlanStore(tmp_path)
        store.append_log(_make_log())
        with pytest.raises(ValidationError, match="already exists"):
            store.append_log(_make_log())
        assert len(store.load_logs()) == 1

    def test_bad_log_line_reports_line_number(self, tmp_path):
        store = PlanStore(tmp_path)
        store.append_log(_make_log())
        with open(store.logs_path, "a") as f:
            f.write("\n{broken\n")
        with pytest.raises(ValidationError, match="line 3"):
            store.load_logs()
