"""
Tests for the display sampler.
"""

import pytest

from auvmission.services.sampler import compute_stride, sample


class TestComputeStride:
    """Tests for stride computation."""

    def test_under_cap_keeps_everything(self):
        assert compute_stride(10, 2000) == 1
        assert compute_stride(2000, 2000) == 1

    def test_just_over_cap(self):
        """One sample over the cap doubles the stride."""
        assert compute_stride(2001, 2000) == 2

    def test_ceiling_division(self):
        assert compute_stride(4001, 2000) == 3
        assert compute_stride(10000, 2000) == 5

    def test_empty_input(self):
        assert compute_stride(0, 2000) == 1

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            compute_stride(100, 0)


class TestSample:
    """Tests for stride sampling."""

    def test_keeps_every_stride_th_item(self):
        result = sample(list(range(2001)), cap=2000)

        assert result[0] == 0
        assert result[1] == 2
        assert result[-1] == 2000
        assert len(result) == 1001

    def test_result_never_exceeds_cap(self):
        for n in (1, 1999, 2000, 2001, 3999, 4000, 4001, 12345):
            assert len(sample(list(range(n)), cap=2000)) <= 2000

    def test_first_item_always_kept(self):
        assert sample(["a", "b", "c"], cap=1) == ["a"]

    def test_empty(self):
        assert sample([], cap=2000) == []

    def test_preserves_order(self):
        items = [5, 3, 9, 1]
        assert sample(items, cap=10) == items
