"""Unit tests for the outlier-resistant average."""

from __future__ import annotations

import pytest

from services.filtering import FilteredAverage, filtered_average


def test_empty_samples_have_no_average() -> None:
    result = filtered_average([])

    assert result == FilteredAverage(average=None, retained=[], removed_count=0)


def test_short_series_uses_plain_mean_without_filtering() -> None:
    samples = [10.0, 10.0, 10.0, 90.0]

    result = filtered_average(samples)

    assert result.average == pytest.approx(30.0)
    assert result.retained == samples
    assert result.removed_count == 0


def test_full_window_keeps_samples_within_two_sigma() -> None:
    samples = [10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0, 80.0, 90.0, 100.0]

    result = filtered_average(samples)

    assert result.average == pytest.approx(55.0)
    assert result.removed_count == 0
    assert result.retained == samples


def test_full_window_discards_outlier() -> None:
    samples = [50.0] * 9 + [0.0]

    result = filtered_average(samples)

    assert result.average == pytest.approx(50.0)
    assert result.removed_count == 1
    assert result.retained == [50.0] * 9


def test_identical_values_are_all_retained() -> None:
    result = filtered_average([42.5] * 12)

    assert result.average == pytest.approx(42.5)
    assert result.removed_count == 0
    assert len(result.retained) == 12


def test_window_parameter_controls_when_filtering_starts() -> None:
    samples = [50.0] * 9 + [0.0]

    unfiltered = filtered_average(samples, window=11)
    filtered = filtered_average(samples, window=10)

    assert unfiltered.average == pytest.approx(45.0)
    assert unfiltered.removed_count == 0
    assert filtered.average == pytest.approx(50.0)
    assert filtered.removed_count == 1


def test_sample_exactly_two_sigma_away_is_retained() -> None:
    # mean 40, sigma 20: the 0.0 sits on the inclusive threshold
    samples = [50.0, 50.0, 50.0, 50.0, 0.0]

    result = filtered_average(samples, window=5)

    assert result.average == pytest.approx(40.0)
    assert result.removed_count == 0


def test_filtering_is_pure() -> None:
    samples = [12.0, 14.0, 13.0, 80.0, 12.5, 13.5, 12.0, 14.0, 13.0, 12.5]
    snapshot = list(samples)

    first = filtered_average(samples)
    second = filtered_average(samples)

    assert first == second
    assert samples == snapshot
