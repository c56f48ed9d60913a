"""Outlier-resistant averaging over a window of fill-level samples."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

DEFAULT_WINDOW = 10
OUTLIER_SIGMA = 2.0


@dataclass(frozen=True)
class FilteredAverage:
    """Average of the samples kept after outlier removal."""

    average: Optional[float] = None
    retained: List[float] = field(default_factory=list)
    removed_count: int = 0


def _mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


def filtered_average(samples: Sequence[float], window: int = DEFAULT_WINDOW) -> FilteredAverage:
    """Average ``samples``, dropping values beyond two standard deviations.

    Filtering only kicks in once at least ``window`` samples are available;
    below that the plain mean is returned. The standard deviation is the
    population one. If every sample is discarded the average is ``None``.
    """
    values = list(samples)
    count = len(values)
    if count == 0:
        return FilteredAverage()
    if count < window:
        return FilteredAverage(average=_mean(values), retained=values)

    mean = _mean(values)
    std_dev = math.sqrt(math.fsum((v - mean) ** 2 for v in values) / count)
    threshold = OUTLIER_SIGMA * std_dev
    retained = [v for v in values if abs(v - mean) <= threshold]

    average = _mean(retained) if retained else None
    return FilteredAverage(
        average=average,
        retained=retained,
        removed_count=count - len(retained),
    )
