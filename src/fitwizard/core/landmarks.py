"""
Volume landmarks: minimum effective and maximum recoverable weekly sets.

Landmarks are stored for an intermediate lifter and scaled by experience
(beginners are capped more conservatively).  Scaled values are floored to
whole sets.
"""

import math
import warnings
from dataclasses import dataclass

from .config import DEFAULT_VOLUME_LANDMARKS, EXPERIENCE_VOLUME_SCALE, FALLBACK_LANDMARK


@dataclass(frozen=True)
class VolumeLandmark:
    """Weekly set landmarks for one muscle group (unscaled)."""

    muscle_group: str
    mev: int
    mrv: int

    def __post_init__(self) -> None:
        if self.mev < 0 or self.mrv < 0:
            raise ValueError(f"landmarks for {self.muscle_group} must be non-negative")
        if self.mev > self.mrv:
            raise ValueError(f"MEV above MRV for {self.muscle_group}: {self.mev} > {self.mrv}")


class VolumeLandmarkTable:
    """Read-only per-muscle landmark lookup with experience scaling."""

    def __init__(
        self,
        landmarks: dict[str, VolumeLandmark],
        experience_scale: dict[str, float] | None = None,
    ):
        self._landmarks = dict(landmarks)
        self._scale = dict(experience_scale or EXPERIENCE_VOLUME_SCALE)

    def __contains__(self, muscle: object) -> bool:
        return muscle in self._landmarks

    def scale(self, experience_level: str) -> float:
        """Multiplier for an experience level (1.0 if unknown)."""
        return self._scale.get(experience_level, 1.0)

    def landmark(self, muscle: str) -> VolumeLandmark:
        """Unscaled landmark for *muscle* (a conservative fallback if unknown)."""
        if muscle in self._landmarks:
            return self._landmarks[muscle]
        mev, mrv = FALLBACK_LANDMARK
        return VolumeLandmark(muscle, mev, mrv)

    def mev(self, muscle: str, experience_level: str) -> int:
        return math.floor(self.landmark(muscle).mev * self.scale(experience_level))

    def mrv(self, muscle: str, experience_level: str) -> int:
        """Maximum recoverable weekly sets for *muscle* at this experience level."""
        return math.floor(self.landmark(muscle).mrv * self.scale(experience_level))

    def weekly_target(self, muscle: str, experience_level: str) -> int:
        """
        Weekly sets the planner aims for: the midpoint of MEV and MRV.

        Never zero while the MRV allows at least one set, so every target
        muscle receives some work.
        """
        mev = self.mev(muscle, experience_level)
        mrv = self.mrv(muscle, experience_level)
        if mrv <= 0:
            return 0
        return max(1, (mev + mrv) // 2)


def landmarks_from_config(cfg: dict) -> VolumeLandmarkTable:
    """
    Build a table from the ``volume_landmarks`` / ``experience_volume_scale``
    sections of the model config, falling back to config.py defaults for
    anything missing or malformed.
    """
    landmarks = {m: VolumeLandmark(m, mev, mrv) for m, (mev, mrv) in DEFAULT_VOLUME_LANDMARKS.items()}

    for muscle, raw in (cfg.get("volume_landmarks") or {}).items():
        try:
            base = landmarks.get(muscle)
            mev = int(raw.get("mev", base.mev if base else FALLBACK_LANDMARK[0]))
            mrv = int(raw.get("mrv", base.mrv if base else FALLBACK_LANDMARK[1]))
            landmarks[muscle] = VolumeLandmark(muscle, mev, mrv)
        except (AttributeError, TypeError, ValueError) as exc:
            warnings.warn(f"fitwizard: ignoring volume landmark for '{muscle}' ({exc})", stacklevel=2)

    scale = dict(EXPERIENCE_VOLUME_SCALE)
    for level, value in (cfg.get("experience_volume_scale") or {}).items():
        try:
            scale[level] = float(value)
        except (TypeError, ValueError):
            warnings.warn(f"fitwizard: ignoring volume scale for '{level}'", stacklevel=2)

    return VolumeLandmarkTable(landmarks, scale)


def load_landmarks() -> VolumeLandmarkTable:
    """Build a table from model.yaml (bundled + user override)."""
    from .engine.config_loader import load_model_config

    return landmarks_from_config(load_model_config())


_DEFAULT_TABLE: VolumeLandmarkTable | None = None


def get_default_landmarks() -> VolumeLandmarkTable:
    """Return the process-wide landmark table, loading it on first use."""
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = load_landmarks()
    return _DEFAULT_TABLE
