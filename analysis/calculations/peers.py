"""
Peer comparison utilities.
Pure functions ranking a target value against a peer set.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from analysis.calculations.stats import mean
from analysis.errors import InvalidInputError
from analysis.serialization import dataclass_to_dict


@dataclass(frozen=True)
class PeerComparison:
    """Position of a target value within its peer group."""
    has_comparison: bool
    metric: str
    ticker: Optional[str] = None
    target_value: Optional[float] = None
    peer_median: Optional[float] = None
    peer_average: Optional[float] = None
    peer_min: Optional[float] = None
    peer_max: Optional[float] = None
    vs_median_pct: Optional[float] = None
    vs_average_pct: Optional[float] = None
    rank: Optional[int] = None
    percentile: Optional[float] = None
    peer_count: int = 0
    message: str = ''
    insights: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls, metric: str, ticker: Optional[str] = None) -> 'PeerComparison':
        """Sentinel for an empty peer set."""
        return cls(has_comparison=False, metric=metric, ticker=ticker)

    @property
    def peer_range(self) -> Dict[str, Optional[float]]:
        return {'min': self.peer_min, 'max': self.peer_max}

    def to_dict(self) -> Dict[str, Any]:
        result = dataclass_to_dict(self)
        result['peer_range'] = self.peer_range
        return result


def _value_of(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get('value')
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return item
    return getattr(item, 'value', None)


def _check_number(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{label} must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{label} must be finite, got {value}")
    return value


def index_median(values: Sequence[float]) -> float:
    """
    Middle element of the ascending-sorted values at index n // 2.

    For even counts this selects the second of the two middle elements
    ([1, 2, 3, 4] -> 3); it is not the average-of-two-middles median.
    """
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def _pct_delta(value: float, reference: float) -> Optional[float]:
    if reference == 0:
        return None
    return (value - reference) / reference * 100


def compare_to_peers(
    target: Dict[str, Any],
    peers: Sequence[Any],
    metric: str
) -> PeerComparison:
    """
    Rank a target value against a peer set.

    rank = number of peers strictly greater than the target + 1 (1 = highest).
    percentile = (peer_count - rank + 1) / peer_count * 100.

    With peer_count peers, 1 <= rank <= peer_count + 1 and percentile lies in
    [0, 100]. Percentile is 0 exactly when the target ranks below every peer
    (rank == peer_count + 1), so 0 is a valid result and not a missing value.

    Args:
        target: {'ticker': str, 'value': number}
        peers: Peer records ({'value'}), objects with .value, or bare numbers
        metric: Metric name for messages

    Returns:
        PeerComparison; the empty sentinel when no peer has a value

    Raises:
        InvalidInputError: If the target value is missing or not numeric
    """
    if not isinstance(target, dict):
        raise InvalidInputError(f"Target must be a dict with 'value', got {type(target)}")

    ticker = target.get('ticker')
    if not peers:
        return PeerComparison.empty(metric, ticker=ticker)

    target_value = _check_number(target.get('value'), 'Target value')

    peer_values = [
        _check_number(v, 'Peer value')
        for v in (_value_of(p) for p in peers)
        if v is not None
    ]
    if not peer_values:
        return PeerComparison.empty(metric, ticker=ticker)

    peer_count = len(peer_values)
    peer_median = index_median(peer_values)
    peer_average = mean(peer_values)

    rank = sum(1 for v in peer_values if v > target_value) + 1
    percentile = (peer_count - rank + 1) / peer_count * 100

    vs_median = _pct_delta(target_value, peer_median)
    vs_average = _pct_delta(target_value, peer_average)

    label = ticker or 'Target'
    if vs_median is not None:
        sign = '+' if vs_median > 0 else ''
        message = f"{label}'s {metric} of {target_value} is {sign}{vs_median:.1f}% vs peer median"
    else:
        message = f"{label}'s {metric} of {target_value} compared with a zero peer median"

    insights = [
        f"Ranks #{rank} out of {peer_count + 1} peers",
        f"{percentile:.0f}th percentile",
        'Above peer median' if target_value > peer_median else 'Below peer median',
    ]

    return PeerComparison(
        has_comparison=True,
        metric=metric,
        ticker=ticker,
        target_value=target_value,
        peer_median=peer_median,
        peer_average=peer_average,
        peer_min=min(peer_values),
        peer_max=max(peer_values),
        vs_median_pct=vs_median,
        vs_average_pct=vs_average,
        rank=rank,
        percentile=percentile,
        peer_count=peer_count,
        message=message,
        insights=insights,
    )
