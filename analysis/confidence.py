"""
Response confidence scoring.
Additive budget model over source count, freshness and completeness.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from analysis.errors import InvalidInputError
from analysis.serialization import dataclass_to_dict

# Used as the average age when no freshness data exists
UNKNOWN_FRESHNESS_DAYS = 999


class ConfidenceLevel(str, Enum):
    """Coarse confidence bands."""
    VERY_LOW = 'Very Low'
    LOW = 'Low'
    MODERATE = 'Moderate'
    HIGH = 'High'


@dataclass(frozen=True)
class ConfidenceReport:
    """Composite confidence score with the factors that produced it."""
    score: int
    level: ConfidenceLevel
    factors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    sources: int = 0
    avg_freshness_days: int = UNKNOWN_FRESHNESS_DAYS
    has_expected_data: bool = False
    has_partial_data: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


def source_factor(total_sources: int):
    """Points (0-40), factor label and optional warning for the source count."""
    if total_sources >= 5:
        return 40, 'Multiple data sources', None
    elif total_sources >= 3:
        return 30, 'Several data sources', None
    elif total_sources >= 2:
        return 20, 'Limited sources', 'Consider verifying with additional sources'
    elif total_sources == 1:
        return 10, 'Single source only', 'Based on a single source - treat as preliminary'
    else:
        return 0, 'No data sources', None


def freshness_factor(avg_age_days: float):
    """Points (0-30), factor label and optional warning for average data age."""
    if avg_age_days <= 7:
        return 30, 'Very recent data (< 1 week)', None
    elif avg_age_days <= 30:
        return 25, 'Recent data (< 1 month)', None
    elif avg_age_days <= 90:
        return 15, 'Moderately recent data (< 3 months)', None
    else:
        return 5, 'Older data (> 3 months)', 'Data may be outdated - check for recent updates'


def completeness_factor(has_expected_data: bool, has_partial_data: bool):
    """Points (0-30), factor label and optional warning for data coverage."""
    if has_expected_data:
        return 30, 'Complete data coverage', None
    elif has_partial_data:
        return 15, 'Partial data coverage', 'Some expected data missing'
    else:
        return 0, 'Limited data coverage', 'Significant data gaps detected'


def classify_confidence(score: float) -> ConfidenceLevel:
    """Map a 0-100 score to its level."""
    if score >= 80:
        return ConfidenceLevel.HIGH
    elif score >= 60:
        return ConfidenceLevel.MODERATE
    elif score >= 40:
        return ConfidenceLevel.LOW
    else:
        return ConfidenceLevel.VERY_LOW


def calculate_confidence(
    total_sources: int = 0,
    source_freshness: Optional[Sequence[float]] = None,
    has_expected_data: bool = False,
    has_partial_data: bool = False
) -> ConfidenceReport:
    """
    Calculate a composite confidence score for a response.

    score = min(100, sources (<= 40) + freshness (<= 30) + completeness (<= 30))

    Args:
        total_sources: Number of distinct data sources used
        source_freshness: Age in days of each source
        has_expected_data: All expected data was retrieved
        has_partial_data: Some expected data was retrieved

    Returns:
        ConfidenceReport

    Raises:
        InvalidInputError: If the source count or any age is negative or not a number
    """
    if isinstance(total_sources, bool) or not isinstance(total_sources, int):
        raise InvalidInputError(f"Source count must be an integer, got {total_sources!r}")
    if total_sources < 0:
        raise InvalidInputError(f"Source count must be non-negative, got {total_sources}")

    ages = list(source_freshness or [])
    for age in ages:
        if isinstance(age, bool) or not isinstance(age, (int, float)) or not math.isfinite(age):
            raise InvalidInputError(f"Source age must be a finite number, got {age!r}")
        if age < 0:
            raise InvalidInputError(f"Source age must be non-negative, got {age}")

    avg_age = sum(ages) / len(ages) if ages else UNKNOWN_FRESHNESS_DAYS

    factors = []
    warnings = []
    score = 0

    for points, label, warning in (
        source_factor(total_sources),
        freshness_factor(avg_age),
        completeness_factor(has_expected_data, has_partial_data),
    ):
        score += points
        factors.append(label)
        if warning:
            warnings.append(warning)

    score = min(100, score)

    return ConfidenceReport(
        score=score,
        level=classify_confidence(score),
        factors=factors,
        warnings=warnings,
        sources=total_sources,
        avg_freshness_days=round(avg_age),
        has_expected_data=bool(has_expected_data),
        has_partial_data=bool(has_partial_data),
    )
