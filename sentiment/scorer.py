"""
Lexicon-based sentiment and tone scoring for filing and transcript text.
Pure function of (text, lexicon): identical inputs always give identical scores.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional, Pattern, Tuple

from analysis.errors import InvalidInputError
from analysis.serialization import dataclass_to_dict
from sentiment.lexicon import DEFAULT_LEXICON, SentimentLexicon

MIN_TEXT_LENGTH = 50
NET_SENTIMENT_THRESHOLD = 0.5
HEDGING_CAUTIOUS_PCT = 2.0
POSITIVE_CONFIDENT_PCT = 2.0
HEDGING_CONFIDENT_MAX_PCT = 1.0
NEGATIVE_CONCERNED_PCT = 2.0


class Sentiment(str, Enum):
    POSITIVE = 'Positive'
    NEGATIVE = 'Negative'
    NEUTRAL = 'Neutral'


class Tone(str, Enum):
    CONFIDENT = 'Confident'
    CAUTIOUS = 'Cautious'
    CONCERNED = 'Concerned'
    BALANCED = 'Balanced'


@dataclass(frozen=True)
class SentimentCounts:
    positive: int = 0
    negative: int = 0
    hedging: int = 0


@dataclass(frozen=True)
class SentimentPercentages:
    positive_pct: float = 0.0
    negative_pct: float = 0.0
    hedging_pct: float = 0.0
    net: float = 0.0


@dataclass(frozen=True)
class SentimentScore:
    """Sentiment and tone of one text, with the counts behind them."""
    source: str
    has_sentiment: bool
    sentiment: Optional[Sentiment] = None
    tone: Optional[Tone] = None
    scores: SentimentPercentages = field(default_factory=SentimentPercentages)
    counts: SentimentCounts = field(default_factory=SentimentCounts)
    total_words: int = 0
    lexicon_version: Optional[str] = None
    message: str = ''
    date: Any = None

    @classmethod
    def empty(cls, source: str, date: Any = None) -> 'SentimentScore':
        """Sentinel for text too short to score."""
        return cls(source=source, has_sentiment=False, date=date)

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


@lru_cache(maxsize=16)
def _compile_lexicon(lexicon: SentimentLexicon) -> Tuple[Tuple[Pattern, ...], ...]:
    """Whole-word patterns for each term, compiled once per lexicon."""
    def patterns(terms):
        return tuple(re.compile(r'\b' + re.escape(term) + r'\b') for term in sorted(terms))

    return patterns(lexicon.positive), patterns(lexicon.negative), patterns(lexicon.hedging)


def _count_terms(text: str, patterns: Tuple[Pattern, ...]) -> int:
    return sum(len(p.findall(text)) for p in patterns)


def classify_sentiment(net: float) -> Sentiment:
    """Strict thresholds: a net of exactly +/-0.5 is Neutral."""
    if net > NET_SENTIMENT_THRESHOLD:
        return Sentiment.POSITIVE
    elif net < -NET_SENTIMENT_THRESHOLD:
        return Sentiment.NEGATIVE
    else:
        return Sentiment.NEUTRAL


def classify_tone(positive_pct: float, negative_pct: float, hedging_pct: float) -> Tone:
    """First matching rule wins: Cautious, Confident, Concerned, Balanced."""
    if hedging_pct > HEDGING_CAUTIOUS_PCT:
        return Tone.CAUTIOUS
    elif positive_pct > POSITIVE_CONFIDENT_PCT and hedging_pct < HEDGING_CONFIDENT_MAX_PCT:
        return Tone.CONFIDENT
    elif negative_pct > NEGATIVE_CONCERNED_PCT:
        return Tone.CONCERNED
    else:
        return Tone.BALANCED


def analyze_sentiment(
    text: Optional[str],
    source: str,
    lexicon: Optional[SentimentLexicon] = None,
    date: Any = None
) -> SentimentScore:
    """
    Score the sentiment and tone of a text blob.

    Args:
        text: Filing, transcript or press release text
        source: Label for the text (e.g. "AAPL 10-K")
        lexicon: Term lists to use (defaults to DEFAULT_LEXICON)
        date: Optional date carried onto the score for trend comparison

    Returns:
        SentimentScore; the empty sentinel for text under 50 characters

    Raises:
        InvalidInputError: If text is not a string
    """
    if text is None:
        return SentimentScore.empty(source, date=date)

    if not isinstance(text, str):
        raise InvalidInputError(f"Text must be a string, got {type(text)}")

    if len(text) < MIN_TEXT_LENGTH:
        return SentimentScore.empty(source, date=date)

    lexicon = lexicon or DEFAULT_LEXICON
    lowered = text.lower()
    total_words = len(lowered.split())
    if total_words == 0:
        return SentimentScore.empty(source, date=date)

    positive_patterns, negative_patterns, hedging_patterns = _compile_lexicon(lexicon)
    counts = SentimentCounts(
        positive=_count_terms(lowered, positive_patterns),
        negative=_count_terms(lowered, negative_patterns),
        hedging=_count_terms(lowered, hedging_patterns),
    )

    positive_pct = counts.positive * 100 / total_words
    negative_pct = counts.negative * 100 / total_words
    hedging_pct = counts.hedging * 100 / total_words
    net = positive_pct - negative_pct

    sentiment = classify_sentiment(net)
    tone = classify_tone(positive_pct, negative_pct, hedging_pct)

    return SentimentScore(
        source=source,
        has_sentiment=True,
        sentiment=sentiment,
        tone=tone,
        scores=SentimentPercentages(
            positive_pct=positive_pct,
            negative_pct=negative_pct,
            hedging_pct=hedging_pct,
            net=net,
        ),
        counts=counts,
        total_words=total_words,
        lexicon_version=lexicon.version,
        message=f"{source}: {sentiment.value} sentiment with {tone.value.lower()} tone",
        date=date,
    )
