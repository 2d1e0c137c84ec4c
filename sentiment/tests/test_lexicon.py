"""
Tests for sentiment lexicon loading and configuration.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from sentiment.lexicon import (
    DEFAULT_LEXICON,
    LexiconError,
    SentimentLexicon,
    get_configured_lexicon,
    load_lexicon,
)

CONFIG_PATH = Path(__file__).parent.parent.parent / 'config' / 'sentiment_lexicon.yml'


class TestDefaultLexicon:

    def test_version(self):
        assert DEFAULT_LEXICON.version == 'v1'

    def test_term_lists_disjoint(self):
        assert not DEFAULT_LEXICON.positive & DEFAULT_LEXICON.negative
        assert not DEFAULT_LEXICON.positive & DEFAULT_LEXICON.hedging
        assert not DEFAULT_LEXICON.negative & DEFAULT_LEXICON.hedging

    def test_bundled_file_matches_default(self):
        assert load_lexicon(CONFIG_PATH) == DEFAULT_LEXICON


class TestBuild:

    def test_terms_lowercased(self):
        lexicon = SentimentLexicon.build('t', ['Growth '], ['LOSS'], ['May'])

        assert lexicon.positive == frozenset({'growth'})
        assert lexicon.negative == frozenset({'loss'})
        assert lexicon.hedging == frozenset({'may'})

    def test_missing_version(self):
        with pytest.raises(LexiconError, match="version"):
            SentimentLexicon.build('', ['a'], ['b'], ['c'])

    def test_empty_term_list(self):
        with pytest.raises(LexiconError, match="no hedging terms"):
            SentimentLexicon.build('t', ['a'], ['b'], [])


class TestLoadLexicon:

    def test_missing_file(self, tmp_path):
        with pytest.raises(LexiconError, match="not found"):
            load_lexicon(tmp_path / 'nope.yml')

    def test_missing_key(self, tmp_path):
        path = tmp_path / 'lexicon.yml'
        path.write_text("version: v2\npositive: [up]\nnegative: [down]\n")

        with pytest.raises(LexiconError, match="missing 'hedging'"):
            load_lexicon(path)

    def test_term_list_not_a_list(self, tmp_path):
        path = tmp_path / 'lexicon.yml'
        path.write_text("version: v2\npositive: up\nnegative: [down]\nhedging: [maybe]\n")

        with pytest.raises(LexiconError, match="must be a list"):
            load_lexicon(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / 'lexicon.yml'
        path.write_text("- just\n- a list\n")

        with pytest.raises(LexiconError, match="mapping"):
            load_lexicon(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'lexicon.yml'
        path.write_text("version: [unclosed\n")

        with pytest.raises(LexiconError, match="Invalid lexicon YAML"):
            load_lexicon(path)

    def test_custom_file(self, tmp_path):
        path = tmp_path / 'lexicon.yml'
        path.write_text("version: v2\npositive: [up]\nnegative: [down]\nhedging: [maybe]\n")

        lexicon = load_lexicon(path)

        assert lexicon.version == 'v2'
        assert lexicon.positive == frozenset({'up'})


class TestConfiguredLexicon:

    def test_default_when_unset(self):
        with patch.dict('os.environ', {}, clear=True):
            assert get_configured_lexicon() is DEFAULT_LEXICON

    def test_env_var_path(self, tmp_path):
        path = tmp_path / 'lexicon.yml'
        path.write_text("version: env\npositive: [up]\nnegative: [down]\nhedging: [maybe]\n")

        with patch.dict('os.environ', {'SENTIMENT_LEXICON_PATH': str(path)}):
            assert get_configured_lexicon().version == 'env'

    def test_explicit_path_wins(self, tmp_path):
        path = tmp_path / 'lexicon.yml'
        path.write_text("version: explicit\npositive: [up]\nnegative: [down]\nhedging: [maybe]\n")

        with patch.dict('os.environ', {'SENTIMENT_LEXICON_PATH': '/does/not/exist.yml'}):
            assert get_configured_lexicon(path).version == 'explicit'
