"""
Tests for peer comparison.
"""

import pytest
import random

from analysis.calculations.peers import compare_to_peers, index_median
from analysis.errors import InvalidInputError


class TestIndexMedian:
    """Tests for the n // 2 median convention."""

    def test_odd_count(self):
        assert index_median([3, 1, 2]) == 2

    def test_even_count_takes_second_middle(self):
        assert index_median([4, 1, 3, 2]) == 3

    def test_single(self):
        assert index_median([5]) == 5


class TestCompareToPeers:
    """Tests for ranking and percentiles."""

    def test_basic_comparison(self):
        result = compare_to_peers(
            {'ticker': 'AAPL', 'value': 25.0},
            [{'value': 10.0}, {'value': 20.0}, {'value': 30.0}],
            'P/E'
        )

        assert result.has_comparison is True
        assert result.peer_median == 20.0
        assert result.peer_average == pytest.approx(20.0)
        assert result.peer_range == {'min': 10.0, 'max': 30.0}
        assert result.rank == 2
        assert result.percentile == pytest.approx(2 / 3 * 100)
        assert result.vs_median_pct == pytest.approx(25.0)
        assert result.vs_average_pct == pytest.approx(25.0)
        assert result.message == "AAPL's P/E of 25.0 is +25.0% vs peer median"

    def test_highest_value_ranks_first(self):
        result = compare_to_peers({'ticker': 'X', 'value': 100}, [1, 2, 3], 'm')

        assert result.rank == 1
        assert result.percentile == pytest.approx(100.0)
        assert result.insights[0] == "Ranks #1 out of 4 peers"
        assert result.insights[2] == 'Above peer median'

    def test_lowest_value(self):
        result = compare_to_peers({'ticker': 'X', 'value': 0.5}, [1, 2, 3], 'm')

        assert result.rank == 4
        assert result.percentile == 0.0
        assert result.vs_median_pct == pytest.approx(-75.0)
        assert result.insights[1] == "0th percentile"

    def test_ties_are_not_counted_as_better(self):
        result = compare_to_peers({'ticker': 'X', 'value': 2}, [2, 2, 2], 'm')

        assert result.rank == 1

    def test_even_peer_count_median(self):
        result = compare_to_peers({'value': 5}, [1, 2, 3, 4], 'm')

        assert result.peer_median == 3

    def test_null_peers_filtered(self):
        result = compare_to_peers({'value': 5}, [{'value': None}, {'value': 4}], 'm')

        assert result.peer_count == 1
        assert result.rank == 1

    def test_all_null_peers_is_sentinel(self):
        result = compare_to_peers({'ticker': 'X', 'value': 5}, [{'value': None}], 'm')

        assert result.has_comparison is False
        assert result.ticker == 'X'

    def test_empty_peers_is_sentinel(self):
        assert compare_to_peers({'value': 5}, [], 'm').has_comparison is False

    def test_zero_median_has_no_delta(self):
        result = compare_to_peers({'ticker': 'X', 'value': 5}, [0, 0, 1], 'm')

        assert result.vs_median_pct is None
        assert result.vs_average_pct is not None

    def test_missing_target_value(self):
        with pytest.raises(InvalidInputError, match="Target value"):
            compare_to_peers({'ticker': 'X'}, [1, 2], 'm')

    def test_non_numeric_peer(self):
        with pytest.raises(InvalidInputError, match="Peer value"):
            compare_to_peers({'value': 1}, [{'value': 'high'}], 'm')

    def test_rank_and_percentile_bounds(self):
        rng = random.Random(42)
        for _ in range(200):
            peers = [rng.uniform(-50, 50) for _ in range(rng.randint(1, 12))]
            target = rng.uniform(-60, 60)

            result = compare_to_peers({'value': target}, peers, 'm')

            assert 1 <= result.rank <= len(peers) + 1
            assert 0 <= result.percentile <= 100
            if result.rank <= len(peers):
                assert result.percentile > 0

    def test_to_dict_includes_range(self):
        result = compare_to_peers({'ticker': 'X', 'value': 2}, [1, 3], 'm').to_dict()

        assert result['peer_range'] == {'min': 1, 'max': 3}
        assert result['rank'] == 2
