"""
Sentiment trend comparison across an ordered set of scored documents.
Detects sentiment and tone shifts between consecutive documents and an
overall direction over the most recent ones.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from analysis.calculations.dates import to_timestamp
from analysis.serialization import dataclass_to_dict
from sentiment.scorer import Sentiment, SentimentScore

TREND_WINDOW = 3
MIN_TREND_VOTES = 2


class Trend(str, Enum):
    IMPROVING = 'Improving'
    DECLINING = 'Declining'
    STABLE = 'Stable'


@dataclass(frozen=True)
class SentimentShift:
    """A change of sentiment or tone between two consecutive documents."""
    kind: str
    from_value: str
    to_value: str
    from_source: str
    to_source: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'from': self.from_value,
            'to': self.to_value,
            'from_source': self.from_source,
            'to_source': self.to_source,
            'message': self.message,
        }


@dataclass(frozen=True)
class SentimentTrend:
    has_comparison: bool
    shifts: List[SentimentShift] = field(default_factory=list)
    trend: Optional[Trend] = None
    message: str = ''
    insights: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> 'SentimentTrend':
        """Sentinel for fewer than two scored documents."""
        return cls(has_comparison=False)

    @property
    def sentiment_shifts(self) -> List[SentimentShift]:
        return [s for s in self.shifts if s.kind == 'sentiment']

    @property
    def tone_shifts(self) -> List[SentimentShift]:
        return [s for s in self.shifts if s.kind == 'tone']

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


def _order(scores: List[SentimentScore]) -> List[SentimentScore]:
    """Chronological when every score is dated, input order otherwise."""
    if all(s.date is not None for s in scores):
        return sorted(scores, key=lambda s: to_timestamp(s.date))
    return list(scores)


def _shifts(ordered: List[SentimentScore]) -> List[SentimentShift]:
    shifts = []
    for prev, curr in zip(ordered, ordered[1:]):
        if prev.sentiment != curr.sentiment:
            shifts.append(SentimentShift(
                kind='sentiment',
                from_value=prev.sentiment.value,
                to_value=curr.sentiment.value,
                from_source=prev.source,
                to_source=curr.source,
                message=(
                    f"Sentiment shifted from {prev.sentiment.value} to {curr.sentiment.value} "
                    f"({prev.source} -> {curr.source})"
                ),
            ))
        if prev.tone != curr.tone:
            shifts.append(SentimentShift(
                kind='tone',
                from_value=prev.tone.value,
                to_value=curr.tone.value,
                from_source=prev.source,
                to_source=curr.source,
                message=(
                    f"Management tone changed from {prev.tone.value.lower()} to "
                    f"{curr.tone.value.lower()} ({prev.source} -> {curr.source})"
                ),
            ))
    return shifts


def classify_trend(ordered: List[SentimentScore]) -> Trend:
    """Majority of Positive vs Negative over the last three scores."""
    recent = ordered[-TREND_WINDOW:]
    positive = sum(1 for s in recent if s.sentiment == Sentiment.POSITIVE)
    negative = sum(1 for s in recent if s.sentiment == Sentiment.NEGATIVE)

    if positive > negative and positive >= MIN_TREND_VOTES:
        return Trend.IMPROVING
    elif negative > positive and negative >= MIN_TREND_VOTES:
        return Trend.DECLINING
    else:
        return Trend.STABLE


def compare_sentiments(scores: Sequence[SentimentScore]) -> SentimentTrend:
    """
    Compare sentiment across documents.

    Unscored sentinels are ignored. Documents are sorted by date when all of
    them are dated (stable on ties), otherwise taken in the order given.

    Args:
        scores: SentimentScore results from analyze_sentiment

    Returns:
        SentimentTrend; the empty sentinel when fewer than two scores remain
    """
    usable = [s for s in scores or [] if s.has_sentiment]
    if len(usable) < 2:
        return SentimentTrend.empty()

    ordered = _order(usable)
    shifts = _shifts(ordered)
    trend = classify_trend(ordered)

    if trend == Trend.IMPROVING:
        message = 'Sentiment improving across recent documents'
    elif trend == Trend.DECLINING:
        message = 'Sentiment declining across recent documents'
    else:
        message = 'Sentiment stable across recent documents'

    return SentimentTrend(
        has_comparison=True,
        shifts=shifts,
        trend=trend,
        message=message,
        insights=[s.message for s in shifts],
    )
