"""
Incident detection and temporal clustering.

Detection evaluates a fixed, ordered list of threshold rules on every
sample of the full (non-decimated) trace. Clustering groups the resulting
flags around seed flags by timestamp distance.
"""

from __future__ import annotations

import bisect
import logging
from collections import Counter
from typing import Callable, Optional, Sequence

from auvmission.config import DEFAULT_CLUSTER_WINDOW_S, IncidentThresholds
from auvmission.models.telemetry import (
    IncidentFlag,
    IncidentReport,
    TelemetrySample,
    is_missing,
)


logger = logging.getLogger(__name__)


_SEARCH_SLACK = 1e-6  # seconds

Rule = Callable[[TelemetrySample, IncidentThresholds], Optional[str]]


def _roll_rule(sample: TelemetrySample, thresholds: IncidentThresholds) -> Optional[str]:
    if is_missing(sample.roll) or abs(sample.roll) <= thresholds.roll_limit:
        return None
    return f"Extreme roll: {sample.roll:.2f}°"


def _pitch_rule(sample: TelemetrySample, thresholds: IncidentThresholds) -> Optional[str]:
    if is_missing(sample.pitch) or abs(sample.pitch) <= thresholds.pitch_limit:
        return None
    return f"Extreme pitch: {sample.pitch:.2f}°"


def _error_state_rule(sample: TelemetrySample, thresholds: IncidentThresholds) -> Optional[str]:
    if sample.error_state is None or sample.error_state <= thresholds.error_state_limit:
        return None
    return f"Error state: {sample.error_state}"


def _floor_proximity_rule(sample: TelemetrySample, thresholds: IncidentThresholds) -> Optional[str]:
    distance = sample.distance_to_floor
    if is_missing(distance) or distance >= thresholds.min_floor_distance:
        return None
    return f"Near floor: {distance:.2f}m"


# Evaluation order determines the order of reasons within a flag
RULES: tuple[Rule, ...] = (
    _roll_rule,
    _pitch_rule,
    _error_state_rule,
    _floor_proximity_rule,
)


def evaluate_sample(
    sample: TelemetrySample,
    thresholds: Optional[IncidentThresholds] = None,
) -> list[str]:
    """Reasons for every rule the sample trips, in rule order."""
    thresholds = thresholds or IncidentThresholds()
    reasons = []
    for rule in RULES:
        reason = rule(sample, thresholds)
        if reason is not None:
            reasons.append(reason)
    return reasons


def detect(
    samples: Sequence[TelemetrySample],
    thresholds: Optional[IncidentThresholds] = None,
) -> list[IncidentFlag]:
    """
    Flag every sample that trips at least one rule.

    Samples without a timestamp are skipped entirely.

    Args:
        samples: Full telemetry sequence
        thresholds: Rule thresholds (defaults if omitted)

    Returns:
        Flags in input order; source_index refers to the position in samples
    """
    thresholds = thresholds or IncidentThresholds()
    flags: list[IncidentFlag] = []
    skipped = 0

    for i, sample in enumerate(samples):
        if not sample.has_timestamp:
            skipped += 1
            continue

        reasons = evaluate_sample(sample, thresholds)
        if reasons:
            flags.append(IncidentFlag(
                source_index=i,
                timestamp=float(sample.timestamp),
                latitude=sample.latitude,
                longitude=sample.longitude,
                depth=sample.depth,
                reasons=tuple(reasons),
            ))

    if skipped:
        logger.debug(f"Skipped {skipped} samples without timestamp")
    logger.debug(f"Flagged {len(flags)} of {len(samples)} samples")
    return flags


def rank_reasons(flags: Sequence[IncidentFlag]) -> list[str]:
    """
    Distinct reasons by descending frequency.

    Ties keep first-encountered order (Counter preserves insertion order
    and sorted() is stable).
    """
    counts = Counter(reason for flag in flags for reason in flag.reasons)
    return [reason for reason, _ in sorted(counts.items(), key=lambda item: -item[1])]


def cluster(
    flags: Sequence[IncidentFlag],
    window_s: float = DEFAULT_CLUSTER_WINDOW_S,
) -> list[IncidentReport]:
    """
    Group flags into incident reports around seed flags.

    Flags are visited in input order. Each unassigned flag seeds a new
    cluster that takes every other unassigned flag whose timestamp is
    strictly less than window_s away from the seed. Distances are measured
    to the seed only, so grouping is not transitive.

    A timestamp index limits each seed to the flags inside its window;
    membership is identical to comparing the seed against every flag.
    Worst case remains O(n^2).

    Args:
        flags: Incident flags, in detection order
        window_s: Grouping window in seconds

    Returns:
        Reports in cluster creation order
    """
    if window_s < 0:
        raise ValueError(f"Cluster window must be non-negative, got {window_s}")
    if not flags:
        return []

    order = sorted(range(len(flags)), key=lambda i: flags[i].timestamp)
    sorted_times = [flags[i].timestamp for i in order]
    assigned = [False] * len(flags)
    reports: list[IncidentReport] = []

    for seed_idx, seed in enumerate(flags):
        if assigned[seed_idx]:
            continue
        assigned[seed_idx] = True

        # Search bounds are slightly wide; the exact test below decides membership
        lo = bisect.bisect_left(sorted_times, seed.timestamp - window_s - _SEARCH_SLACK)
        hi = bisect.bisect_right(sorted_times, seed.timestamp + window_s + _SEARCH_SLACK)
        candidates = sorted(
            j for j in order[lo:hi]
            if not assigned[j] and abs(flags[j].timestamp - seed.timestamp) < window_s
        )
        for j in candidates:
            assigned[j] = True

        members = [seed] + [flags[j] for j in candidates]
        reports.append(_build_report(members))

    logger.debug(f"Clustered {len(flags)} flags into {len(reports)} incidents")
    return reports


def _build_report(members: list[IncidentFlag]) -> IncidentReport:
    n = len(members)
    ranked = rank_reasons(members)
    return IncidentReport(
        latitude=sum(m.latitude for m in members) / n,
        longitude=sum(m.longitude for m in members) / n,
        representative_timestamp=members[0].timestamp,
        member_count=n,
        members=tuple(members),
        primary_reason=ranked[0],
        all_reasons=tuple(ranked),
    )
