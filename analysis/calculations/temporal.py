"""
Temporal pattern utilities.
Pure functions measuring the regularity of event intervals and frequency shifts.
"""

import logging
import pandas as pd
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from analysis.calculations.dates import SECONDS_PER_DAY, to_timestamp
from analysis.calculations.stats import mean, stddev
from analysis.errors import InvalidInputError
from analysis.serialization import dataclass_to_dict

logger = logging.getLogger(__name__)

REGULARITY_RATIO = 0.3
MIN_INTERVALS_FOR_FREQUENCY_CHANGE = 4
RECENT_INTERVALS = 2
FREQUENCY_CHANGE_PCT = 50.0


@dataclass(frozen=True)
class Insight:
    """A reportable observation attached to a pattern."""
    type: str
    message: str
    change_pct: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


@dataclass(frozen=True)
class TemporalPattern:
    """Interval regularity of a stream of events."""
    has_pattern: bool
    event_type: str
    avg_interval_days: Optional[float] = None
    total_events: int = 0
    is_regular: bool = False
    insights: List[Insight] = field(default_factory=list)
    message: str = ''

    @classmethod
    def empty(cls, event_type: str, total_events: int = 0) -> 'TemporalPattern':
        """Sentinel for fewer than two events."""
        return cls(has_pattern=False, event_type=event_type, total_events=total_events)

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


def _event_date(event: Any) -> Any:
    if isinstance(event, dict):
        if 'date' not in event:
            raise InvalidInputError(f"Event missing 'date': {event}")
        return event['date']
    if hasattr(event, 'date'):
        return event.date
    raise InvalidInputError(f"Unsupported event type: {type(event)}")


def event_intervals(events: Sequence[Any]) -> List[float]:
    """
    Day intervals between consecutive events after sorting by date.

    The input sequence is not mutated.
    """
    dates = pd.Series([to_timestamp(_event_date(e)) for e in events])
    dates = dates.sort_values(kind='stable').reset_index(drop=True)
    deltas = dates.diff().dropna()
    return [td.total_seconds() / SECONDS_PER_DAY for td in deltas]


def _frequency_change(intervals: List[float]) -> Optional[Insight]:
    """Compare the last two intervals against the historical ones."""
    if len(intervals) < MIN_INTERVALS_FOR_FREQUENCY_CHANGE:
        return None

    historical_avg = mean(intervals[:-RECENT_INTERVALS])
    recent_avg = mean(intervals[-RECENT_INTERVALS:])

    if historical_avg == 0:
        return None

    change = (recent_avg - historical_avg) / historical_avg * 100
    if abs(change) <= FREQUENCY_CHANGE_PCT:
        return None

    # Longer intervals mean the events are happening less often
    direction = 'decreased' if change > 0 else 'increased'
    return Insight(
        type='frequency_change',
        message=f"Event frequency {direction} {abs(change):.0f}% recently",
        change_pct=change,
    )


def analyze_temporal_patterns(events: Sequence[Any], event_type: str) -> TemporalPattern:
    """
    Measure how regularly a type of event occurs.

    Args:
        events: Records with a 'date' key or attribute
        event_type: Label used in messages (e.g. "AAPL SEC filings")

    Returns:
        TemporalPattern; the empty sentinel when fewer than two events exist

    Raises:
        InvalidInputError: If an event has no parseable date
    """
    if not events or len(events) < 2:
        return TemporalPattern.empty(event_type, total_events=len(events or []))

    intervals = event_intervals(events)

    avg_interval = mean(intervals)
    spread = stddev(intervals)
    is_regular = spread < REGULARITY_RATIO * avg_interval

    if is_regular:
        message = f"{event_type} occurs regularly every ~{round(avg_interval)} days"
    else:
        message = f"{event_type} frequency is irregular"

    insights = []
    change = _frequency_change(intervals)
    if change is not None:
        insights.append(change)

    logger.debug(
        f"Temporal pattern for {event_type}: avg={avg_interval:.1f}d "
        f"std={spread:.1f}d regular={is_regular}"
    )

    return TemporalPattern(
        has_pattern=is_regular,
        event_type=event_type,
        avg_interval_days=avg_interval,
        total_events=len(events),
        is_regular=is_regular,
        insights=insights,
        message=message,
    )
