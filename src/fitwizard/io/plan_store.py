"""
File-based storage for plans and workout logs.

Layout under the store root:
- plans/<plan_id>.json: one generated plan per file
- logs.jsonl: one workout log per line, oldest first
"""

import json
from pathlib import Path

from ..core.models import Plan, WorkoutLog
from .serializers import (
    ValidationError,
    dict_to_plan,
    json_line_to_workout_log,
    plan_to_dict,
    workout_log_to_json_line,
)


class PlanStore:
    """
    Manages plans and workout logs on disk.

    Plans are immutable once saved; saving a plan with an existing id
    overwrites it with the same content.  Logs are append-only.
    """

    def __init__(self, root: str | Path):
        """
        Initialize the store.

        Args:
            root: Directory holding plans/ and logs.jsonl
        """
        self.root = Path(root)
        self.plans_dir = self.root / "plans"
        self.logs_path = self.root / "logs.jsonl"

    def exists(self) -> bool:
        """Check if the store has been initialized."""
        return self.plans_dir.is_dir()

    def init(self) -> None:
        """
        Create the store directories and an empty log file if missing.
        """
        self.plans_dir.mkdir(parents=True, exist_ok=True)
        if not self.logs_path.exists():
            self.logs_path.touch()

    def plan_path(self, plan_id: str) -> Path:
        return self.plans_dir / f"{plan_id}.json"

    def save_plan(self, plan: Plan) -> Path:
        """
        Write a plan to plans/<id>.json.

        Returns:
            Path of the written file
        """
        self.init()
        path = self.plan_path(plan.id)
        with open(path, "w") as f:
            json.dump(plan_to_dict(plan), f, indent=2)
        return path

    def load_plan(self, plan_id: str) -> Plan:
        """
        Load a saved plan by id.

        Raises:
            FileNotFoundError: If no plan with this id is stored
            ValidationError: If the file is not a valid plan
        """
        path = self.plan_path(plan_id)
        if not path.exists():
            raise FileNotFoundError(f"Plan not found: {plan_id}")
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"Error parsing {path}: expected a JSON object")
        return dict_to_plan(data)

    def list_plans(self) -> list[Plan]:
        """
        Load every saved plan, newest first.

        Raises:
            ValidationError: If any stored plan is invalid
        """
        if not self.plans_dir.exists():
            return []
        plans = [self.load_plan(p.stem) for p in sorted(self.plans_dir.glob("*.json"))]
        plans.sort(key=lambda p: p.created_at, reverse=True)
        return plans

    def latest_plan(self) -> Plan | None:
        """Most recently created plan, or None if none are stored."""
        plans = self.list_plans()
        return plans[0] if plans else None

    def append_log(self, log: WorkoutLog) -> None:
        """
        Append a workout log.

        Raises:
            ValidationError: If a log with the same id already exists
        """
        self.init()
        if any(existing.id == log.id for existing in self.load_logs()):
            raise ValidationError(f"Workout log already exists: {log.id}")
        with open(self.logs_path, "a") as f:
            f.write(workout_log_to_json_line(log) + "\n")

    def load_logs(self, plan_id: str | None = None) -> list[WorkoutLog]:
        """
        Load workout logs, oldest first.

        Args:
            plan_id: Only return logs for this plan

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.logs_path.exists():
            return []

        logs: list[WorkoutLog] = []
        with open(self.logs_path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    log = json_line_to_workout_log(line)
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.logs_path}: {e}"
                    ) from e
                if plan_id is None or log.plan_id == plan_id:
                    logs.append(log)

        logs.sort(key=lambda log: log.started_at)
        return logs


def get_default_store_dir() -> Path:
    """Default store root: ~/.fitwizard."""
    return Path.home() / ".fitwizard"
