"""
Anomaly detection utilities.
Pure functions that flag outliers and spikes in a labeled numeric series.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from analysis.calculations.stats import mean, stddev
from analysis.errors import InvalidInputError
from analysis.serialization import to_jsonable

logger = logging.getLogger(__name__)

OUTLIER_Z_THRESHOLD = 2.0
SPIKE_CHANGE_PCT = 100.0
MIN_POINTS_FOR_OUTLIERS = 3
MIN_POINTS_FOR_SPIKES = 2


class AnomalyType(str, Enum):
    """Kinds of anomaly the detector emits."""
    OUTLIER = 'outlier'
    SPIKE = 'spike'


@dataclass(frozen=True)
class MetricPoint:
    """One observation in a named series."""
    value: Optional[float]
    date: Any


@dataclass(frozen=True)
class AnomalyRecord:
    """A single flagged observation. Never mutated after emission."""
    type: AnomalyType
    metric: str
    value: float
    date: Any
    message: str
    expected: Optional[float] = None
    deviation_pct: Optional[float] = None
    z_score: Optional[float] = None
    change_pct: Optional[float] = None
    from_value: Optional[float] = None
    to_value: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'type': self.type.value,
            'metric': self.metric,
            'value': self.value,
            'date': to_jsonable(self.date),
            'message': self.message,
        }
        if self.type == AnomalyType.OUTLIER:
            result.update({
                'expected': self.expected,
                'deviation_pct': self.deviation_pct,
                'z_score': self.z_score,
            })
        else:
            result.update({
                'change_pct': self.change_pct,
                'from': self.from_value,
                'to': self.to_value,
            })
        return result


def _coerce_point(point: Union[MetricPoint, Dict[str, Any]]) -> MetricPoint:
    """Accept MetricPoint instances or retrieval-layer dicts."""
    if isinstance(point, MetricPoint):
        candidate = point
    elif isinstance(point, dict):
        if 'value' not in point:
            raise InvalidInputError(f"Metric point missing 'value': {point}")
        candidate = MetricPoint(value=point['value'], date=point.get('date'))
    else:
        raise InvalidInputError(f"Unsupported metric point type: {type(point)}")

    value = candidate.value
    if value is None:
        return candidate

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Metric value must be numeric, got {value!r}")

    if not math.isfinite(value):
        raise InvalidInputError(f"Metric value must be finite, got {value}")

    return candidate


def find_outliers(points: List[MetricPoint], metric: str) -> List[AnomalyRecord]:
    """
    Flag points that sit more than 2 standard deviations from the rest.

    The z test scores each point against a leave-one-out baseline: the mean
    and population standard deviation of the other non-null values. A
    baseline with zero dispersion scores nothing as anomalous. The reported
    expected value, deviation_pct and message use the mean of all non-null
    values.

    Args:
        points: Metric points in series order
        metric: Metric name for messages

    Returns:
        Outlier records in series order
    """
    valued = [(i, p) for i, p in enumerate(points) if p.value is not None]
    if len(valued) < MIN_POINTS_FOR_OUTLIERS:
        return []

    values = [p.value for _, p in valued]
    if stddev(values) == 0:
        return []

    series_mean = mean(values)

    outliers = []
    for position, (_, point) in enumerate(valued):
        others = values[:position] + values[position + 1:]
        spread = stddev(others)
        if spread == 0:
            continue

        z = abs(point.value - mean(others)) / spread
        if z <= OUTLIER_Z_THRESHOLD:
            continue

        deviation_pct = None
        if series_mean != 0:
            deviation_pct = (point.value - series_mean) / series_mean * 100

        direction = 'above' if point.value > series_mean else 'below'
        if deviation_pct is not None:
            message = (
                f"Unusual: {metric} of {point.value} is "
                f"{abs(deviation_pct):.1f}% {direction} average"
            )
        else:
            message = f"Unusual: {metric} of {point.value} is {direction} average"

        outliers.append(AnomalyRecord(
            type=AnomalyType.OUTLIER,
            metric=metric,
            value=point.value,
            date=point.date,
            message=message,
            expected=series_mean,
            deviation_pct=deviation_pct,
            z_score=z,
        ))

    return outliers


def find_spikes(points: List[MetricPoint], metric: str) -> List[AnomalyRecord]:
    """
    Flag consecutive pairs whose value changed by more than 100%.

    Pairs with a null member or a zero predecessor are skipped.
    """
    if len(points) < MIN_POINTS_FOR_SPIKES:
        return []

    spikes = []
    for prev, curr in zip(points, points[1:]):
        if prev.value is None or curr.value is None:
            continue
        if prev.value == 0:
            continue

        change_pct = (curr.value - prev.value) / prev.value * 100
        if abs(change_pct) <= SPIKE_CHANGE_PCT:
            continue

        sign = '+' if change_pct > 0 else ''
        spikes.append(AnomalyRecord(
            type=AnomalyType.SPIKE,
            metric=metric,
            value=curr.value,
            date=curr.date,
            message=f"Spike: {metric} changed {sign}{change_pct:.1f}% from previous period",
            change_pct=change_pct,
            from_value=prev.value,
            to_value=curr.value,
        ))

    return spikes


def detect_anomalies(
    series: Sequence[Union[MetricPoint, Dict[str, Any]]],
    metric: str
) -> List[AnomalyRecord]:
    """
    Detect outliers and spikes in a labeled series.

    Both passes run independently; a point can appear in both. Output is all
    outliers in series order followed by all spikes in series order.

    Args:
        series: MetricPoints (or {'value', 'date'} dicts) in series order
        metric: Metric name used in records and messages

    Returns:
        List of AnomalyRecord (empty when data is insufficient)

    Raises:
        InvalidInputError: If a point is malformed
    """
    if not series:
        return []

    points = [_coerce_point(p) for p in series]

    anomalies = find_outliers(points, metric) + find_spikes(points, metric)

    logger.debug(f"Anomaly scan for {metric}: {len(anomalies)} found in {len(points)} points")

    return anomalies
