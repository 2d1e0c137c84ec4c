"""
Tests for causal candidate generation.
"""

import pytest
from datetime import date, timedelta

from analysis.calculations.causal import (
    CausalConfidence,
    confidence_for_lag,
    find_causal_candidates,
)
from analysis.errors import InvalidInputError


class TestConfidenceForLag:

    @pytest.mark.parametrize("days,expected", [
        (1, CausalConfidence.HIGH),
        (30, CausalConfidence.HIGH),
        (31, CausalConfidence.MEDIUM),
        (60, CausalConfidence.MEDIUM),
        (61, CausalConfidence.LOW),
        (90, CausalConfidence.LOW),
    ])
    def test_bands(self, days, expected):
        assert confidence_for_lag(days) == expected


class TestFindCausalCandidates:
    """Tests for event/outcome pairing."""

    def test_pairs_within_window(self):
        events = [{'event': 'Fed rate hike', 'date': '2024-01-01'}]
        outcomes = [
            {'outcome': 'Stock fell 8%', 'date': '2024-01-15'},
            {'outcome': 'Guidance cut', 'date': '2024-02-20'},
            {'outcome': 'CEO departure', 'date': '2024-03-25'},
        ]

        candidates = find_causal_candidates(events, outcomes)

        assert [c.outcome for c in candidates] == ['Stock fell 8%', 'Guidance cut', 'CEO departure']
        assert [c.days_later for c in candidates] == [14, 50, 84]
        assert [c.confidence for c in candidates] == [
            CausalConfidence.HIGH, CausalConfidence.MEDIUM, CausalConfidence.LOW
        ]
        assert candidates[0].event == 'Fed rate hike'

    def test_day_91_excluded_day_90_included(self):
        start = date(2024, 1, 1)
        events = [{'event': 'e', 'date': start}]
        outcomes = [
            {'outcome': 'at 90', 'date': start + timedelta(days=90)},
            {'outcome': 'at 91', 'date': start + timedelta(days=91)},
        ]

        candidates = find_causal_candidates(events, outcomes)

        assert [c.outcome for c in candidates] == ['at 90']

    def test_outcome_before_or_same_day_excluded(self):
        events = [{'event': 'e', 'date': '2024-06-01T09:00:00'}]
        outcomes = [
            {'outcome': 'before', 'date': '2024-05-30'},
            {'outcome': 'same day', 'date': '2024-06-01T17:00:00'},
        ]

        assert find_causal_candidates(events, outcomes) == []

    def test_window_property_holds(self):
        start = date(2024, 1, 1)
        events = [{'event': f"e{i}", 'date': start + timedelta(days=i * 17)} for i in range(10)]
        outcomes = [{'outcome': f"o{i}", 'date': start + timedelta(days=i * 11)} for i in range(30)]

        candidates = find_causal_candidates(events, outcomes)

        assert candidates
        assert all(0 < c.days_later <= 90 for c in candidates)

    def test_ordering_by_event_then_outcome(self):
        events = [{'event': 'late', 'date': '2024-03-01'}, {'event': 'early', 'date': '2024-01-01'}]
        outcomes = [{'outcome': 'b', 'date': '2024-03-10'}, {'outcome': 'a', 'date': '2024-01-10'}]

        candidates = find_causal_candidates(events, outcomes)

        assert [(c.event, c.outcome) for c in candidates] == [
            ('early', 'a'), ('early', 'b'), ('late', 'b')
        ]

    def test_custom_window(self):
        events = [{'event': 'e', 'date': '2024-01-01'}]
        outcomes = [{'outcome': 'o', 'date': '2024-01-20'}]

        assert find_causal_candidates(events, outcomes, window_days=10) == []

    def test_empty_inputs(self):
        assert find_causal_candidates([], [{'date': '2024-01-01'}]) == []
        assert find_causal_candidates([{'date': '2024-01-01'}], []) == []

    def test_missing_date_rejected(self):
        with pytest.raises(InvalidInputError, match="no date"):
            find_causal_candidates([{'event': 'e'}], [{'outcome': 'o', 'date': '2024-01-01'}])

    def test_invalid_window_rejected(self):
        with pytest.raises(InvalidInputError, match="Window"):
            find_causal_candidates([], [], window_days=0)

    def test_to_dict(self):
        candidate = find_causal_candidates(
            [{'event': 'e', 'date': '2024-01-01'}],
            [{'outcome': 'o', 'date': '2024-01-05'}]
        )[0]

        result = candidate.to_dict()

        assert result['days_later'] == 4
        assert result['confidence'] == 'High'
        assert result['event_date'].startswith('2024-01-01')
