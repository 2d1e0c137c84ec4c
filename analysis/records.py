"""
Typed input records handed over by the retrieval layer.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from analysis.errors import InvalidInputError


@dataclass(frozen=True)
class Filing:
    """A ticker-tagged document with optional text content."""
    ticker: str
    form_type: str
    date: Any = None
    content: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Filing':
        ticker = data.get('ticker')
        if not ticker:
            raise InvalidInputError(f"Filing missing 'ticker': {data}")
        return cls(
            ticker=ticker,
            form_type=data.get('form_type') or data.get('formType') or 'unknown',
            date=data.get('date'),
            content=data.get('content'),
        )

    @classmethod
    def coerce(cls, value: Any) -> 'Filing':
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        raise InvalidInputError(f"Unsupported filing type: {type(value)}")

    @property
    def label(self) -> str:
        return f"{self.ticker} {self.form_type}"
