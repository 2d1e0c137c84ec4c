"""
Compound question decomposition.
Pattern-matches the raw question (no model call) into typed sub-queries.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from analysis.serialization import dataclass_to_dict

logger = logging.getLogger(__name__)

MIN_ASPECT_LENGTH = 10

COMPARATIVE_PATTERN = re.compile(r'\b(?:compare|vs\.?|versus|difference between)\b', re.IGNORECASE)

CAUSAL_PATTERNS = [
    re.compile(r'\bhow\b(?P<cause>.+?)\baffect(?:s|ed|ing)?\b(?P<effect>.*)', re.IGNORECASE | re.DOTALL),
    re.compile(r'\bimpact of\b(?P<cause>.+?)\bon\b(?P<effect>.*)', re.IGNORECASE | re.DOTALL),
    re.compile(r'\binfluence(?: of)?\b(?P<cause>.+?)\bon\b(?P<effect>.*)', re.IGNORECASE | re.DOTALL),
]

ASPECT_SPLIT_PATTERN = re.compile(r'\b(?:and|also|additionally)\b', re.IGNORECASE)

LEADING_AUXILIARY = re.compile(r'^(?:does|do|did|will|would|could|might|may|can|is|are|has|have)\s+', re.IGNORECASE)


class SubQueryType(str, Enum):
    INDIVIDUAL_ANALYSIS = 'individual_analysis'
    COMPARISON = 'comparison'
    CAUSE_ANALYSIS = 'cause_analysis'
    HISTORICAL_CORRELATION = 'historical_correlation'
    CURRENT_EXPOSURE = 'current_exposure'
    ASPECT_ANALYSIS = 'aspect_analysis'


@dataclass(frozen=True)
class SubQuery:
    """One executable piece of a compound question."""
    type: SubQueryType
    purpose: str
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


def _clean_fragment(text: str) -> str:
    return text.strip().strip(' ,;:.?!').strip()


def _unique(tickers: Sequence[str]) -> List[str]:
    seen = []
    for t in tickers:
        if t and t not in seen:
            seen.append(t)
    return seen


def _comparative(question: str, tickers: List[str]) -> List[SubQuery]:
    if len(tickers) < 2 or not COMPARATIVE_PATTERN.search(question):
        return []

    sub_queries = [
        SubQuery(
            type=SubQueryType.INDIVIDUAL_ANALYSIS,
            purpose=f"Analyze {ticker} individually",
            params={'ticker': ticker},
        )
        for ticker in tickers
    ]
    sub_queries.append(SubQuery(
        type=SubQueryType.COMPARISON,
        purpose=f"Compare {', '.join(tickers)}",
        params={'tickers': list(tickers)},
    ))
    return sub_queries


def _causal(question: str, tickers: List[str]) -> List[SubQuery]:
    for pattern in CAUSAL_PATTERNS:
        match = pattern.search(question)
        if not match:
            continue

        cause = LEADING_AUXILIARY.sub('', _clean_fragment(match.group('cause')))
        effect = _clean_fragment(match.group('effect'))
        if not cause:
            continue

        params = {'cause': cause, 'effect': effect, 'tickers': list(tickers)}
        return [
            SubQuery(
                type=SubQueryType.CAUSE_ANALYSIS,
                purpose=f"Understand {cause}",
                params=dict(params),
            ),
            SubQuery(
                type=SubQueryType.HISTORICAL_CORRELATION,
                purpose=f"Find past instances where {cause} moved {effect or 'the outcome'}",
                params=dict(params),
            ),
            SubQuery(
                type=SubQueryType.CURRENT_EXPOSURE,
                purpose=f"Assess current exposure of {effect or 'the portfolio'} to {cause}",
                params=dict(params),
            ),
        ]
    return []


def _multi_aspect(question: str) -> List[SubQuery]:
    fragments = [_clean_fragment(f) for f in ASPECT_SPLIT_PATTERN.split(question)]
    aspects = [f for f in fragments if len(f) > MIN_ASPECT_LENGTH]
    if len(aspects) < 2:
        return []

    return [
        SubQuery(
            type=SubQueryType.ASPECT_ANALYSIS,
            purpose=f"Aspect {i}: {aspect}",
            params={'aspect': aspect, 'order': i},
        )
        for i, aspect in enumerate(aspects, start=1)
    ]


def decompose_query(question: str, tickers: Optional[Sequence[str]] = None) -> List[SubQuery]:
    """
    Split a compound question into typed sub-queries.

    Shapes are tried in order and the first one that matches wins:
    comparative (needs two or more tickers), causal, multi-aspect.
    Decomposition is advisory; an empty list means the question is simple.

    Args:
        question: Raw user question
        tickers: Tickers already resolved by the upstream intent classifier

    Returns:
        List of SubQuery (possibly empty)
    """
    if not question or not question.strip():
        return []

    tickers = _unique(tickers or [])

    for shape in (
        lambda: _comparative(question, tickers),
        lambda: _causal(question, tickers),
        lambda: _multi_aspect(question),
    ):
        sub_queries = shape()
        if sub_queries:
            logger.debug(f"Decomposed question into {len(sub_queries)} sub-queries")
            return sub_queries

    return []
