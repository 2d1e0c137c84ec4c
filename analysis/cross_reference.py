"""
Cross-reference validation between data points from different sources.
Flags large changes in reported financials between consecutive reports.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from analysis.calculations.dates import to_timestamp
from analysis.errors import InvalidInputError
from analysis.serialization import dataclass_to_dict

FINANCIAL_CHANGE_PCT = 20.0
HIGH_SEVERITY_CHANGE_PCT = 50.0


@dataclass(frozen=True)
class ValidationFinding:
    """A discrepancy worth surfacing alongside the answer."""
    type: str
    metric: str
    change_pct: float
    message: str
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        return dataclass_to_dict(self)


def _require_finite(obs: Dict[str, Any]) -> float:
    value = obs['value']
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Cash value must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"Cash value must be finite, got {value}")
    return value


def _check_cash_change(observations: List[Dict[str, Any]]) -> Optional[ValidationFinding]:
    """Compare the two most recent cash observations."""
    for obs in observations:
        if 'date' not in obs or 'value' not in obs:
            raise InvalidInputError(f"Cash observation needs 'date' and 'value': {obs}")

    ordered = sorted(observations, key=lambda o: to_timestamp(o['date']), reverse=True)
    latest, previous = ordered[0], ordered[1]

    latest_value = _require_finite(latest)
    previous_value = _require_finite(previous)
    if previous_value == 0:
        return None

    change = (latest_value - previous_value) / previous_value * 100
    if abs(change) <= FINANCIAL_CHANGE_PCT:
        return None

    return ValidationFinding(
        type='financial_change',
        metric='cash',
        change_pct=change,
        message=(
            f"Cash position changed {change:.1f}% from "
            f"{previous.get('source', 'unknown source')} ({previous['date']}) to "
            f"{latest.get('source', 'unknown source')} ({latest['date']})"
        ),
        severity='high' if abs(change) > HIGH_SEVERITY_CHANGE_PCT else 'medium',
    )


def cross_reference_data(data_points: Dict[str, List[Dict[str, Any]]]) -> List[ValidationFinding]:
    """
    Validate consistency of data points gathered from several sources.

    Args:
        data_points: Mapping of metric name to observations
            ({'value', 'date', 'source'}); currently 'cash' is checked

    Returns:
        List of ValidationFinding (empty when nothing is inconsistent)
    """
    findings = []

    cash = data_points.get('cash') or []
    if len(cash) >= 2:
        finding = _check_cash_change(cash)
        if finding:
            findings.append(finding)

    return findings
