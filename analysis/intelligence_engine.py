"""
Intelligence engine - composes every analytics component into one report.
Pure function over an already-fetched bundle; the report is created per call
and owned by the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from analysis.calculations.anomalies import AnomalyRecord, MetricPoint, detect_anomalies
from analysis.calculations.causal import CausalCandidate, find_causal_candidates
from analysis.calculations.dates import to_timestamp
from analysis.calculations.peers import PeerComparison, compare_to_peers
from analysis.calculations.temporal import TemporalPattern, analyze_temporal_patterns, event_intervals
from analysis.confidence import ConfidenceReport, calculate_confidence
from analysis.cross_reference import ValidationFinding, cross_reference_data
from analysis.missing_data import FetchedData, MissingDataGap, QueryIntent, identify_missing_data
from analysis.records import Filing
from analysis.serialization import to_jsonable
from entities.relationships import EntityGraph, build_entity_relationships
from query.decomposer import SubQuery, decompose_query
from query.followups import generate_follow_ups
from sentiment.lexicon import SentimentLexicon, get_configured_lexicon
from sentiment.scorer import SentimentScore, analyze_sentiment
from sentiment.trend import SentimentTrend, compare_sentiments

logger = logging.getLogger(__name__)

MIN_FILINGS_FOR_PATTERNS = 3


@dataclass(frozen=True)
class PeerSet:
    """A target value and the peer values to rank it against."""
    metric: str
    target: Dict[str, Any]
    peers: List[Any]


@dataclass
class IntelligenceBundle:
    """Everything the retrieval layer fetched for one chat turn."""
    question: str = ''
    intent: QueryIntent = field(default_factory=QueryIntent)
    fetched: FetchedData = field(default_factory=FetchedData)
    filings: List[Filing] = field(default_factory=list)
    metric_series: Dict[str, List[MetricPoint]] = field(default_factory=dict)
    peer_sets: List[PeerSet] = field(default_factory=list)
    events: List[Any] = field(default_factory=list)
    outcomes: List[Any] = field(default_factory=list)
    data_points: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IntelligenceBundle':
        """Build from plain retrieval-layer dictionaries (e.g. parsed JSON)."""
        return cls(
            question=data.get('question') or '',
            intent=QueryIntent.from_dict(data.get('intent') or {}),
            fetched=FetchedData.from_dict(data.get('fetched') or {}),
            filings=[Filing.coerce(f) for f in data.get('filings') or []],
            metric_series={
                name: [MetricPoint(value=p.get('value'), date=p.get('date')) for p in points]
                for name, points in (data.get('metric_series') or {}).items()
            },
            peer_sets=[
                PeerSet(metric=p['metric'], target=p['target'], peers=list(p.get('peers') or []))
                for p in data.get('peer_sets') or []
            ],
            events=list(data.get('events') or []),
            outcomes=list(data.get('outcomes') or []),
            data_points=dict(data.get('data_points') or {}),
        )


@dataclass
class IntelligenceReport:
    """All analytics artifacts produced for one chat turn."""
    as_of: pd.Timestamp
    confidence: ConfidenceReport
    anomalies: List[AnomalyRecord] = field(default_factory=list)
    temporal_patterns: Dict[str, TemporalPattern] = field(default_factory=dict)
    sentiments: List[SentimentScore] = field(default_factory=list)
    sentiment_trend: Optional[SentimentTrend] = None
    peer_comparisons: List[PeerComparison] = field(default_factory=list)
    missing_data: List[MissingDataGap] = field(default_factory=list)
    sub_queries: List[SubQuery] = field(default_factory=list)
    causal_candidates: List[CausalCandidate] = field(default_factory=list)
    entity_graph: Optional[EntityGraph] = None
    follow_ups: List[str] = field(default_factory=list)
    validations: List[ValidationFinding] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'as_of': self.as_of.isoformat(),
            'confidence': self.confidence.to_dict(),
            'anomalies': to_jsonable(self.anomalies),
            'temporal_patterns': to_jsonable(self.temporal_patterns),
            'sentiments': to_jsonable(self.sentiments),
            'sentiment_trend': self.sentiment_trend.to_dict() if self.sentiment_trend else None,
            'peer_comparisons': to_jsonable(self.peer_comparisons),
            'missing_data': to_jsonable(self.missing_data),
            'sub_queries': to_jsonable(self.sub_queries),
            'causal_candidates': to_jsonable(self.causal_candidates),
            'entity_graph': self.entity_graph.to_dict() if self.entity_graph else None,
            'follow_ups': list(self.follow_ups),
            'validations': to_jsonable(self.validations),
        }


def _filings_by_ticker(filings: List[Filing]) -> Dict[str, List[Filing]]:
    grouped: Dict[str, List[Filing]] = {}
    for filing in filings:
        grouped.setdefault(filing.ticker, []).append(filing)
    return grouped


def _filing_interval_series(filings: List[Filing]) -> List[MetricPoint]:
    """Days since the previous filing, dated at each later filing."""
    dates = sorted(to_timestamp(f.date) for f in filings)
    intervals = event_intervals([{'date': d} for d in dates])
    return [MetricPoint(value=v, date=d) for v, d in zip(intervals, dates[1:])]


def analyze_filing_patterns(filings: List[Filing]) -> Dict[str, Any]:
    """
    Temporal patterns and filing-interval anomalies per ticker.

    Only tickers with at least three dated filings are analyzed.
    """
    patterns = {}
    anomalies = []

    for ticker, ticker_filings in _filings_by_ticker(filings).items():
        dated = [f for f in ticker_filings if f.date is not None]
        if len(dated) < MIN_FILINGS_FOR_PATTERNS:
            continue

        pattern = analyze_temporal_patterns(dated, f"{ticker} SEC filings")
        if pattern.has_pattern or pattern.insights:
            patterns[ticker] = pattern

        anomalies.extend(detect_anomalies(
            _filing_interval_series(dated),
            f"{ticker} filing interval (days)",
        ))

    return {'patterns': patterns, 'anomalies': anomalies}


def score_filing_sentiments(
    filings: List[Filing],
    lexicon: Optional[SentimentLexicon] = None
) -> List[SentimentScore]:
    """Score every filing that carries enough text; unscored filings are dropped."""
    scores = []
    for filing in filings:
        score = analyze_sentiment(filing.content, filing.label, lexicon=lexicon, date=filing.date)
        if score.has_sentiment:
            scores.append(score)
    return scores


def build_intelligence_report(
    bundle: IntelligenceBundle,
    as_of: Optional[Any] = None,
    lexicon: Optional[SentimentLexicon] = None
) -> IntelligenceReport:
    """
    Run every analytics component over a fetched bundle.

    A component without enough data contributes nothing; it never prevents
    the rest of the report from being assembled. Malformed input raises.

    Args:
        bundle: Retrieved data and query intent for one chat turn
        as_of: Reference time for staleness checks (defaults to now)
        lexicon: Sentiment lexicon (defaults to get_configured_lexicon())

    Returns:
        IntelligenceReport
    """
    reference = to_timestamp(as_of) if as_of is not None else pd.Timestamp(datetime.now())
    lexicon = lexicon or get_configured_lexicon()
    intent = bundle.intent
    fetched = bundle.fetched

    logger.info(
        f"Building intelligence report: {len(bundle.filings)} filings, "
        f"{len(bundle.metric_series)} series, {fetched.total_sources} sources"
    )

    sub_queries = decompose_query(bundle.question, intent.tickers)
    if sub_queries:
        logger.info(f"Complex query decomposed into {len(sub_queries)} sub-queries")

    filing_analysis = analyze_filing_patterns(bundle.filings)
    anomalies = list(filing_analysis['anomalies'])
    for metric, series in bundle.metric_series.items():
        anomalies.extend(detect_anomalies(series, metric))

    sentiments = score_filing_sentiments(bundle.filings, lexicon=lexicon)
    sentiment_trend = None
    if len(sentiments) >= 2:
        sentiment_trend = compare_sentiments(sentiments)

    entity_graph = None
    if bundle.filings:
        entity_graph = build_entity_relationships(bundle.filings)

    peer_comparisons = []
    for peer_set in bundle.peer_sets:
        comparison = compare_to_peers(peer_set.target, peer_set.peers, peer_set.metric)
        if comparison.has_comparison:
            peer_comparisons.append(comparison)
        else:
            logger.warning(f"No peer values for {peer_set.metric}; comparison skipped")

    causal_candidates = find_causal_candidates(bundle.events, bundle.outcomes)

    missing_data = identify_missing_data(intent, fetched, as_of=reference)
    follow_ups = generate_follow_ups(intent, fetched)
    validations = cross_reference_data(bundle.data_points)

    confidence = calculate_confidence(
        total_sources=fetched.total_sources,
        source_freshness=fetched.source_freshness,
        has_expected_data=fetched.has_expected_data,
        has_partial_data=fetched.has_partial_data,
    )

    logger.info(
        f"Intelligence report ready: confidence {confidence.score} ({confidence.level.value}), "
        f"{len(anomalies)} anomalies, {len(missing_data)} gaps, {len(sentiments)} sentiment scores"
    )

    return IntelligenceReport(
        as_of=reference,
        confidence=confidence,
        anomalies=anomalies,
        temporal_patterns=filing_analysis['patterns'],
        sentiments=sentiments,
        sentiment_trend=sentiment_trend,
        peer_comparisons=peer_comparisons,
        missing_data=missing_data,
        sub_queries=sub_queries,
        causal_candidates=causal_candidates,
        entity_graph=entity_graph,
        follow_ups=follow_ups,
        validations=validations,
    )
