"""
Entity relationship graph built from ticker co-mentions in filings.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set

from analysis.records import Filing
from analysis.serialization import to_jsonable
from entities.extractor import EntityExtractor, UppercaseTickerExtractor

logger = logging.getLogger(__name__)

MENTIONED_IN_FILING = 'mentioned_in_filing'


@dataclass(frozen=True)
class Connection:
    from_ticker: str
    to_ticker: str
    type: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {'from': self.from_ticker, 'to': self.to_ticker, 'type': self.type, 'source': self.source}


@dataclass
class CompanyNode:
    """Filings seen for a ticker and the tickers they mention."""
    ticker: str
    filings: List[Filing] = field(default_factory=list)
    related_companies: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ticker': self.ticker,
            'filings': [
                {'form_type': f.form_type, 'date': to_jsonable(f.date)} for f in self.filings
            ],
            'related_companies': sorted(self.related_companies),
        }


@dataclass
class EntityGraph:
    companies: Dict[str, CompanyNode] = field(default_factory=dict)
    connections: List[Connection] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'companies': {t: node.to_dict() for t, node in self.companies.items()},
            'connections': [c.to_dict() for c in self.connections],
        }


def build_entity_relationships(
    filings: Sequence[Any],
    extractor: Optional[EntityExtractor] = None
) -> EntityGraph:
    """
    Build a co-mention graph across a set of filings.

    Each filing gets a node for its own ticker. Every distinct mention in its
    text other than the ticker itself is added to the node's related
    companies and recorded as one mentioned_in_filing connection sourced
    from the filing's form type.

    Args:
        filings: Filing records or dicts with ticker, form_type, content
        extractor: Mention extractor (defaults to UppercaseTickerExtractor)

    Returns:
        EntityGraph
    """
    extractor = extractor or UppercaseTickerExtractor()
    graph = EntityGraph()

    for raw in filings or []:
        filing = Filing.coerce(raw)
        node = graph.companies.setdefault(filing.ticker, CompanyNode(ticker=filing.ticker))
        node.filings.append(filing)

        if not filing.content:
            continue

        for mention in extractor.extract(filing.content):
            if mention == filing.ticker:
                continue
            node.related_companies.add(mention)
            graph.connections.append(Connection(
                from_ticker=filing.ticker,
                to_ticker=mention,
                type=MENTIONED_IN_FILING,
                source=filing.form_type,
            ))

    logger.debug(
        f"Entity graph: {len(graph.companies)} companies, {len(graph.connections)} connections"
    )
    return graph
