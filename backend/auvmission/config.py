"""
Analysis configuration.

Thresholds and pipeline knobs are declarative values. Defaults can be
overridden through AUVMISSION_* environment variables.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Callable, Optional


ENV_PREFIX = "AUVMISSION_"
DATA_FOLDER_ENV = "AUVMISSION_DATA_FOLDER"

DEFAULT_CLUSTER_WINDOW_S = 5.0
LEGACY_CLUSTER_WINDOW_S = 10.0
DEFAULT_SAMPLE_CAP = 2000


@dataclass(frozen=True)
class IncidentThresholds:
    """
    Rule thresholds for incident detection.

    Attributes
    ----------
    roll_limit
        Absolute roll (deg) above which a sample is flagged.
    pitch_limit
        Absolute pitch (deg) above which a sample is flagged.
    error_state_limit
        Error states strictly above this value are flagged.
    min_floor_distance
        Distance to the ocean floor (m) below which a sample is flagged.
    """

    roll_limit: float = 45.0
    pitch_limit: float = 45.0
    error_state_limit: int = 0
    min_floor_distance: float = 0.5


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis pass."""

    thresholds: IncidentThresholds = field(default_factory=IncidentThresholds)
    cluster_window_s: float = DEFAULT_CLUSTER_WINDOW_S
    sample_cap: int = DEFAULT_SAMPLE_CAP
    bounds_padding: float = 0.1

    # Renderer defaults
    canvas_width: float = 800.0
    canvas_height: float = 600.0
    attitude_every: int = 20
    attitude_length: float = 10.0

    @classmethod
    def default(cls) -> "AnalysisConfig":
        return cls()

    @classmethod
    def legacy(cls) -> "AnalysisConfig":
        """Preset matching the earlier 10 second incident grouping."""
        return cls(cluster_window_s=LEGACY_CLUSTER_WINDOW_S)

    @classmethod
    def from_env(cls, base: Optional["AnalysisConfig"] = None) -> "AnalysisConfig":
        """Apply AUVMISSION_* overrides on top of base (or the defaults)."""
        base = base or cls()
        thresholds = replace(
            base.thresholds,
            roll_limit=_env("ROLL_LIMIT", float, base.thresholds.roll_limit),
            pitch_limit=_env("PITCH_LIMIT", float, base.thresholds.pitch_limit),
            error_state_limit=_env("ERROR_STATE_LIMIT", int, base.thresholds.error_state_limit),
            min_floor_distance=_env("MIN_FLOOR_DISTANCE", float, base.thresholds.min_floor_distance),
        )
        return replace(
            base,
            thresholds=thresholds,
            cluster_window_s=_env("CLUSTER_WINDOW_S", float, base.cluster_window_s),
            sample_cap=_env("SAMPLE_CAP", int, base.sample_cap),
            bounds_padding=_env("BOUNDS_PADDING", float, base.bounds_padding),
        )

    def with_window(self, window_s: Optional[float]) -> "AnalysisConfig":
        if window_s is None:
            return self
        return replace(self, cluster_window_s=window_s)


def _env(name: str, cast: Callable, default):
    key = ENV_PREFIX + name
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {key}: {raw!r}") from None
