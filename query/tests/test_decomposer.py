"""
Tests for compound question decomposition.
"""

import pytest

from query.decomposer import SubQueryType, decompose_query


class TestComparative:

    def test_compare_two_tickers(self):
        sub_queries = decompose_query("Compare AAPL vs MSFT revenue growth", ['AAPL', 'MSFT'])

        assert [q.type for q in sub_queries] == [
            SubQueryType.INDIVIDUAL_ANALYSIS,
            SubQueryType.INDIVIDUAL_ANALYSIS,
            SubQueryType.COMPARISON,
        ]
        assert sub_queries[0].params == {'ticker': 'AAPL'}
        assert sub_queries[1].purpose == "Analyze MSFT individually"
        assert sub_queries[2].params == {'tickers': ['AAPL', 'MSFT']}

    @pytest.mark.parametrize("question", [
        "NVDA versus AMD on data center revenue",
        "What is the difference between NVDA and AMD margins",
        "nvda vs. amd",
    ])
    def test_comparative_keywords(self, question):
        sub_queries = decompose_query(question, ['NVDA', 'AMD'])
        assert sub_queries[-1].type == SubQueryType.COMPARISON

    def test_duplicate_tickers_collapsed(self):
        sub_queries = decompose_query("Compare AAPL and MSFT", ['AAPL', 'AAPL', 'MSFT'])
        assert len(sub_queries) == 3

    def test_single_ticker_not_comparative(self):
        sub_queries = decompose_query("Compare AAPL revenue", ['AAPL'])
        assert sub_queries == []


class TestCausal:

    def test_how_does_affect(self):
        sub_queries = decompose_query(
            "How does the Fed rate hike affect NVDA margins?", ['NVDA']
        )

        assert [q.type for q in sub_queries] == [
            SubQueryType.CAUSE_ANALYSIS,
            SubQueryType.HISTORICAL_CORRELATION,
            SubQueryType.CURRENT_EXPOSURE,
        ]
        assert sub_queries[0].purpose == "Understand the Fed rate hike"
        assert sub_queries[0].params == {
            'cause': 'the Fed rate hike',
            'effect': 'NVDA margins',
            'tickers': ['NVDA'],
        }

    def test_impact_of_on(self):
        sub_queries = decompose_query("What is the impact of tariffs on Apple's supply chain?")

        assert sub_queries[0].params['cause'] == 'tariffs'
        assert sub_queries[0].params['effect'] == "Apple's supply chain"
        assert sub_queries[0].params['tickers'] == []

    def test_influence_on(self):
        sub_queries = decompose_query("What is the influence of oil prices on airline stocks")
        assert sub_queries[0].params['cause'] == 'oil prices'

    def test_comparative_takes_precedence(self):
        sub_queries = decompose_query(
            "Compare how rate cuts affect AAPL vs MSFT", ['AAPL', 'MSFT']
        )
        assert sub_queries[-1].type == SubQueryType.COMPARISON


class TestMultiAspect:

    def test_aspects_numbered_in_order(self):
        sub_queries = decompose_query(
            "What is Tesla's revenue trend and also how are margins changing"
        )

        assert [q.type for q in sub_queries] == [SubQueryType.ASPECT_ANALYSIS] * 2
        assert sub_queries[0].params == {'aspect': "What is Tesla's revenue trend", 'order': 1}
        assert sub_queries[1].purpose == "Aspect 2: how are margins changing"

    def test_short_fragments_dropped(self):
        assert decompose_query("AAPL and MSFT") == []

    def test_one_long_fragment_is_not_compound(self):
        assert decompose_query("Summarize the latest annual report and") == []


class TestSimpleQuestions:

    @pytest.mark.parametrize("question", [
        "",
        "   ",
        None,
        "What was Apple's revenue last quarter?",
    ])
    def test_no_decomposition(self, question):
        assert decompose_query(question) == []

    def test_to_dict(self):
        result = decompose_query("Compare AAPL vs MSFT", ['AAPL', 'MSFT'])[2].to_dict()
        assert result == {
            'type': 'comparison',
            'purpose': 'Compare AAPL, MSFT',
            'params': {'tickers': ['AAPL', 'MSFT']},
        }
