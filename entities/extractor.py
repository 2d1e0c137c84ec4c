"""
Ticker mention extraction.
The default extractor is a naive uppercase-token heuristic: any 2-5 letter
capitalized acronym matches, so "CEO" or "GAAP" produce false positives.
Swap in a stronger implementation through the EntityExtractor protocol.
"""

import re
from typing import Iterable, List, Optional, Protocol


class EntityExtractor(Protocol):
    """Finds candidate ticker mentions in free text."""

    def extract(self, text: str) -> List[str]:
        """Return mentions in order of first appearance, without duplicates."""
        ...


class UppercaseTickerExtractor:
    """Matches standalone tokens of 2 to 5 uppercase letters."""

    PATTERN = re.compile(r'\b[A-Z]{2,5}\b')

    def __init__(self, exclude: Optional[Iterable[str]] = None):
        self.exclude = frozenset(exclude or ())

    def extract(self, text: str) -> List[str]:
        if not text:
            return []

        mentions = []
        seen = set()
        for match in self.PATTERN.findall(text):
            if match in seen or match in self.exclude:
                continue
            seen.add(match)
            mentions.append(match)
        return mentions
