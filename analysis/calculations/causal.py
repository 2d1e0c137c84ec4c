"""
Causal candidate generation.
Pairs time-stamped events with later outcomes inside a bounded window.
Temporal proximity only; no causation is inferred.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from analysis.calculations.dates import calendar_days_between, to_timestamp
from analysis.errors import InvalidInputError
from analysis.serialization import dataclass_to_dict

CAUSAL_WINDOW_DAYS = 90
HIGH_CONFIDENCE_DAYS = 30
MEDIUM_CONFIDENCE_DAYS = 60


class CausalConfidence(str, Enum):
    """Confidence bands by days between event and outcome."""
    HIGH = 'High'
    MEDIUM = 'Medium'
    LOW = 'Low'


@dataclass(frozen=True)
class CausalCandidate:
    """An (event, outcome) pair close enough in time to be worth examining."""
    event: Any
    event_date: pd.Timestamp
    outcome: Any
    outcome_date: pd.Timestamp
    days_later: int
    confidence: CausalConfidence

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


def confidence_for_lag(days_later: int) -> CausalConfidence:
    """Map a lag in days to its confidence band."""
    if days_later <= HIGH_CONFIDENCE_DAYS:
        return CausalConfidence.HIGH
    elif days_later <= MEDIUM_CONFIDENCE_DAYS:
        return CausalConfidence.MEDIUM
    else:
        return CausalConfidence.LOW


def _label(record: Any) -> Any:
    """Descriptive part of a record: its label field if any, else the record."""
    if isinstance(record, dict):
        for key in ('event', 'outcome', 'description', 'title', 'type', 'name'):
            if record.get(key) is not None:
                return record[key]
    return record


def _dated(records: Sequence[Any], kind: str) -> List[Tuple[pd.Timestamp, int, Any]]:
    dated = []
    for i, record in enumerate(records):
        if isinstance(record, dict):
            raw = record.get('date')
        else:
            raw = getattr(record, 'date', None)
        if raw is None:
            raise InvalidInputError(f"{kind} at position {i} has no date")
        dated.append((to_timestamp(raw), i, record))
    # Position breaks ties so equal dates keep input order
    dated.sort(key=lambda item: (item[0], item[1]))
    return dated


def find_causal_candidates(
    events: Sequence[Any],
    outcomes: Sequence[Any],
    window_days: int = CAUSAL_WINDOW_DAYS
) -> List[CausalCandidate]:
    """
    Pair each event with every outcome that follows it within the window.

    days_later counts calendar days, so an outcome on the same day as its
    event is never paired and 0 < days_later <= window_days always holds.

    Args:
        events: Records with a 'date' (dict key or attribute)
        outcomes: Records with a 'date' (dict key or attribute)
        window_days: Maximum lag in days (inclusive)

    Returns:
        Candidates ordered by event date, then outcome date

    Raises:
        InvalidInputError: If a record has no date or the window is not positive
    """
    if window_days <= 0:
        raise InvalidInputError(f"Window must be positive, got {window_days}")

    if not events or not outcomes:
        return []

    dated_events = _dated(events, 'Event')
    dated_outcomes = _dated(outcomes, 'Outcome')

    candidates = []
    for event_date, _, event in dated_events:
        for outcome_date, _, outcome in dated_outcomes:
            days_later = calendar_days_between(event_date, outcome_date)
            if days_later <= 0:
                continue
            if days_later > window_days:
                break
            candidates.append(CausalCandidate(
                event=_label(event),
                event_date=event_date,
                outcome=_label(outcome),
                outcome_date=outcome_date,
                days_later=days_later,
                confidence=confidence_for_lag(days_later),
            ))

    return candidates
