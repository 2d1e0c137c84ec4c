"""
Versioned sentiment lexicons.
The scorer receives a lexicon explicitly so every score can be traced to the
exact term list that produced it.
"""

import os
import logging
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class LexiconError(Exception):
    """Raised when a lexicon file is missing or malformed."""
    pass


@dataclass(frozen=True)
class SentimentLexicon:
    """Immutable term sets for positive, negative and hedging language."""
    version: str
    positive: FrozenSet[str]
    negative: FrozenSet[str]
    hedging: FrozenSet[str]

    @classmethod
    def build(
        cls,
        version: str,
        positive: Iterable[str],
        negative: Iterable[str],
        hedging: Iterable[str]
    ) -> 'SentimentLexicon':
        """Normalise terms to lowercase and freeze them."""
        if not version:
            raise LexiconError("Lexicon version is required")

        def normalise(terms: Iterable[str], name: str) -> FrozenSet[str]:
            cleaned = frozenset(str(t).strip().lower() for t in terms if str(t).strip())
            if not cleaned:
                raise LexiconError(f"Lexicon {version} has no {name} terms")
            return cleaned

        return cls(
            version=str(version),
            positive=normalise(positive, 'positive'),
            negative=normalise(negative, 'negative'),
            hedging=normalise(hedging, 'hedging'),
        )


DEFAULT_LEXICON = SentimentLexicon.build(
    version='v1',
    positive=[
        'growth', 'increase', 'strong', 'exceeded', 'record', 'improved',
        'success', 'positive', 'expansion', 'momentum', 'confident', 'robust',
        'accelerate', 'outperform', 'gain', 'profitable', 'opportunity',
        'innovative', 'leading', 'achieve', 'favorable',
    ],
    negative=[
        'decline', 'decrease', 'weak', 'loss', 'challenging', 'difficult',
        'concern', 'risk', 'uncertain', 'pressure', 'headwind', 'slowdown',
        'impairment', 'adverse', 'deteriorate', 'shortfall', 'volatile',
        'litigation', 'downturn', 'unfavorable', 'restructuring',
    ],
    hedging=[
        'may', 'might', 'could', 'possibly', 'potentially', 'approximately',
        'believe', 'estimate', 'anticipate', 'expect', 'likely',
    ],
)


def load_lexicon(path: Union[str, Path]) -> SentimentLexicon:
    """
    Load a lexicon from a YAML file.

    Expected keys: version, positive, negative, hedging (lists of terms).

    Raises:
        LexiconError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise LexiconError(f"Lexicon file not found: {path}")

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise LexiconError(f"Invalid lexicon YAML {path}: {e}")

    if not isinstance(data, dict):
        raise LexiconError(f"Lexicon file must contain a mapping: {path}")

    for key in ('version', 'positive', 'negative', 'hedging'):
        if key not in data:
            raise LexiconError(f"Lexicon file missing '{key}': {path}")

    for key in ('positive', 'negative', 'hedging'):
        if not isinstance(data[key], list):
            raise LexiconError(f"Lexicon '{key}' must be a list: {path}")

    lexicon = SentimentLexicon.build(
        version=data['version'],
        positive=data['positive'],
        negative=data['negative'],
        hedging=data['hedging'],
    )
    logger.info(f"Loaded sentiment lexicon {lexicon.version} from {path}")
    return lexicon


def get_configured_lexicon(path: Optional[Union[str, Path]] = None) -> SentimentLexicon:
    """
    Resolve the lexicon for this process.

    Uses the explicit path, else SENTIMENT_LEXICON_PATH, else DEFAULT_LEXICON.
    """
    path = path or os.getenv('SENTIMENT_LEXICON_PATH')
    if not path:
        return DEFAULT_LEXICON
    return load_lexicon(path)
