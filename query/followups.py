"""
Rule-based follow-up question suggestions.
Rules fire in declaration order; the first three unique suggestions are kept.
"""

from typing import Callable, List, NamedTuple, Optional

from analysis.missing_data import FetchedData, QueryIntent

MAX_SUGGESTIONS = 3


class FollowUpRule(NamedTuple):
    """A suggestion template and the condition under which it applies."""
    applies: Callable[[QueryIntent, FetchedData], bool]
    template: str
    needs_ticker: bool = False


FOLLOW_UP_RULES = [
    FollowUpRule(lambda i, f: i.intent == 'sec_filings',
                 'What are the key risk factors for {ticker}?', needs_ticker=True),
    FollowUpRule(lambda i, f: i.intent == 'sec_filings',
                 'Who are the major institutional investors in {ticker}?', needs_ticker=True),
    FollowUpRule(lambda i, f: i.intent == 'sec_filings',
                 'How does this compare to competitors?'),
    FollowUpRule(lambda i, f: i.intent == 'events',
                 "What's {ticker}'s historical performance after similar events?", needs_ticker=True),
    FollowUpRule(lambda i, f: i.intent == 'events',
                 "Show me {ticker}'s recent SEC filings", needs_ticker=True),
    FollowUpRule(lambda i, f: i.is_future_outlook,
                 'What are analysts saying about {ticker}?', needs_ticker=True),
    FollowUpRule(lambda i, f: i.is_future_outlook,
                 "Compare {ticker}'s outlook to industry peers", needs_ticker=True),
    FollowUpRule(lambda i, f: f.has_institutional_data,
                 'Which institutions increased their positions most?'),
    FollowUpRule(lambda i, f: f.has_policy_data,
                 'How might this policy affect my portfolio?'),
    FollowUpRule(lambda i, f: f.has_events,
                 'What are the biggest upcoming catalysts?'),
]


def generate_follow_ups(
    intent: QueryIntent,
    fetched: FetchedData,
    rules: Optional[List[FollowUpRule]] = None,
    limit: int = MAX_SUGGESTIONS
) -> List[str]:
    """
    Suggest next questions from the query intent and what was found.

    Ticker-specific rules use the first requested ticker and are skipped when
    the intent names none.

    Returns:
        Up to `limit` unique suggestions in rule order
    """
    ticker = intent.tickers[0] if intent.tickers else None

    suggestions = []
    for rule in rules if rules is not None else FOLLOW_UP_RULES:
        if rule.needs_ticker and not ticker:
            continue
        if not rule.applies(intent, fetched):
            continue
        suggestion = rule.template.format(ticker=ticker)
        if suggestion not in suggestions:
            suggestions.append(suggestion)
        if len(suggestions) >= limit:
            break

    return suggestions
