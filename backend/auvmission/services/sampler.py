"""
Display decimation for long telemetry traces.

Keeps every stride-th sample so the rendered point count stays bounded.
Incident detection never uses the decimated sequence.
"""

import math
from typing import Sequence, TypeVar

from auvmission.config import DEFAULT_SAMPLE_CAP


T = TypeVar("T")


def compute_stride(n_samples: int, cap: int = DEFAULT_SAMPLE_CAP) -> int:
    """
    Stride that brings n_samples down to at most cap points.

    Args:
        n_samples: Length of the full sequence
        cap: Maximum number of output points

    Returns:
        ceil(n_samples / cap), never less than 1
    """
    if cap < 1:
        raise ValueError(f"Sample cap must be at least 1, got {cap}")
    if n_samples <= 0:
        return 1
    return max(1, math.ceil(n_samples / cap))


def sample(samples: Sequence[T], cap: int = DEFAULT_SAMPLE_CAP) -> list[T]:
    """
    Return the elements at indices 0, stride, 2*stride, ...

    Order is preserved and the first element is always kept.
    """
    stride = compute_stride(len(samples), cap)
    return list(samples[::stride])
