"""
Missing-data gap detection.
Diffs what a query expected to find against what retrieval actually returned.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd

from analysis.calculations.dates import days_between, to_timestamp
from analysis.errors import InvalidInputError
from analysis.serialization import dataclass_to_dict

logger = logging.getLogger(__name__)

DEFAULT_FORM_TYPES = ('10-K', '10-Q', '8-K')
STALE_INSTITUTIONAL_DAYS = 90

SEC_FILINGS_SOURCE = 'sec_filings'
INSTITUTIONAL_SOURCE = 'institutional_ownership'


class Severity(str, Enum):
    """Gap severity."""
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


@dataclass(frozen=True)
class QueryIntent:
    """What the upstream intent classifier decided the user asked for."""
    intent: str = 'general'
    tickers: List[str] = field(default_factory=list)
    form_types: Optional[List[str]] = None
    data_sources: List[str] = field(default_factory=list)
    is_future_outlook: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueryIntent':
        """Build from a retrieval-layer dict; data sources may be names or {'collection': name}."""
        sources = []
        for ds in data.get('data_sources') or []:
            sources.append(ds.get('collection') if isinstance(ds, dict) else ds)
        return cls(
            intent=data.get('intent') or 'general',
            tickers=list(data.get('tickers') or []),
            form_types=data.get('form_types'),
            data_sources=[s for s in sources if s],
            is_future_outlook=bool(data.get('is_future_outlook', False)),
        )

    def requests(self, source: str) -> bool:
        return source in self.data_sources


def _count(data: Dict[str, Any], key: str) -> int:
    """Read a non-negative whole-number count; missing or null means 0."""
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"'{key}' must be numeric, got {value!r}")
    if not math.isfinite(value) or value < 0 or value != int(value):
        raise InvalidInputError(f"'{key}' must be a non-negative whole number, got {value}")
    return int(value)


@dataclass(frozen=True)
class FetchedData:
    """Summary of what the retrieval layer actually returned."""
    tickers: List[str] = field(default_factory=list)
    sec_filing_types: List[str] = field(default_factory=list)
    institutional_data_date: Any = None
    upcoming_events: int = 0
    has_institutional_data: bool = False
    has_policy_data: bool = False
    has_events: bool = False
    total_sources: int = 0
    source_freshness: List[float] = field(default_factory=list)
    has_expected_data: bool = False
    has_partial_data: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FetchedData':
        completeness = data.get('data_completeness') or {}
        return cls(
            tickers=list(data.get('tickers') or []),
            sec_filing_types=list(data.get('sec_filing_types') or []),
            institutional_data_date=data.get('institutional_data_date'),
            upcoming_events=_count(data, 'upcoming_events'),
            has_institutional_data=bool(data.get('has_institutional_data', False)),
            has_policy_data=bool(data.get('has_policy_data', False)),
            has_events=bool(data.get('has_events', False)),
            total_sources=_count(data, 'total_sources'),
            source_freshness=list(data.get('source_freshness') or []),
            has_expected_data=bool(completeness.get('has_expected_data', False)),
            has_partial_data=bool(completeness.get('has_partial_data', False)),
        )


@dataclass(frozen=True)
class MissingDataGap:
    """One piece of expected coverage that was not retrieved."""
    type: str
    message: str
    severity: Severity
    ticker: Optional[str] = None
    form_type: Optional[str] = None
    data_type: Optional[str] = None
    last_update: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in dataclass_to_dict(self).items() if v is not None}


def identify_missing_data(
    intent: QueryIntent,
    fetched: FetchedData,
    as_of: Optional[Any] = None
) -> List[MissingDataGap]:
    """
    Identify expected data that retrieval did not return.

    Rules are independent and all evaluated:
    - expected ticker absent                          -> missing_ticker (high)
    - expected form type absent, filings requested    -> missing_filing (medium)
    - institutional data requested, > 90 days old     -> stale_data (low)
    - forward-looking intent, no upcoming events      -> no_future_events (medium)

    Args:
        intent: What the query asked for
        fetched: What was retrieved
        as_of: Reference date for staleness (defaults to now)

    Returns:
        List of MissingDataGap in rule order
    """
    gaps = []
    reference = to_timestamp(as_of) if as_of is not None else pd.Timestamp(datetime.now())

    fetched_tickers = set(fetched.tickers)
    for ticker in intent.tickers:
        if ticker not in fetched_tickers:
            gaps.append(MissingDataGap(
                type='missing_ticker',
                ticker=ticker,
                message=f"No data found for {ticker}",
                severity=Severity.HIGH,
            ))

    if intent.requests(SEC_FILINGS_SOURCE):
        expected_forms = intent.form_types or list(DEFAULT_FORM_TYPES)
        found_forms = set(fetched.sec_filing_types)
        for form in expected_forms:
            if form not in found_forms:
                gaps.append(MissingDataGap(
                    type='missing_filing',
                    form_type=form,
                    message=f"No {form} filings found in specified time range",
                    severity=Severity.MEDIUM,
                ))

    if intent.requests(INSTITUTIONAL_SOURCE) and fetched.institutional_data_date is not None:
        data_date = to_timestamp(fetched.institutional_data_date)
        days_since_update = days_between(data_date, reference)
        if days_since_update > STALE_INSTITUTIONAL_DAYS:
            gaps.append(MissingDataGap(
                type='stale_data',
                data_type=INSTITUTIONAL_SOURCE,
                last_update=data_date.date().isoformat(),
                message=(
                    f"Institutional ownership data is {round(days_since_update)} days old - "
                    f"next 13F filing may update this"
                ),
                severity=Severity.LOW,
            ))

    if intent.is_future_outlook and not fetched.upcoming_events:
        gaps.append(MissingDataGap(
            type='no_future_events',
            message='No scheduled events found - company may not have announced earnings dates',
            severity=Severity.MEDIUM,
        ))

    if gaps:
        logger.info(f"Identified {len(gaps)} data gaps")

    return gaps
