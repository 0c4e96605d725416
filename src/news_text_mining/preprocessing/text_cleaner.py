"""
Text normalization for the parsed news corpus.

Turns the line table produced by the corpus loader into a tidy token table:
one row per surviving word, with stop words and corpus noise removed,
singularized word forms and a derived publication year.
"""

import logging
from functools import lru_cache
from typing import Callable, Dict, Any, Iterable, List, Optional

import nltk
import pandas as pd
from nltk.stem import WordNetLemmatizer
from nltk.tokenize import RegexpTokenizer

from ..analysis.utils import get_stopwords
from ..errors import EmptyAnalysisInputError

logger = logging.getLogger(__name__)

# Corpus specific noise: the search term itself, place names and an encoding artifact
DEFAULT_EXCLUDE_WORDS = ['title', 'belval', 'esch', 'escher', 'luxembourg', 'alzette', 'â', 'de']
# Found by inspecting the singularized corpus
DEFAULT_WORD_CORRECTIONS = {'furnaces': 'furnace'}
DEFAULT_POST_EXCLUDE_WORDS = ['wa', 'ha', 'bu', 'd']
# 2014 has too few articles to stand on its own
DEFAULT_YEAR_REMAP = {2014: 2015}

WORD_PATTERN = r"[^\W_]+(?:['’][^\W_]+)*"

TOKEN_COLUMNS = ['title', 'line', 'date', 'word', 'year']


def ensure_nltk_resource(path: str, package: str):
    """Download an NLTK resource if it is not installed yet."""
    try:
        nltk.data.find(path)
    except LookupError:
        logger.info(f"NLTK resource '{package}' not found, downloading it")
        nltk.download(package, quiet=True)


def wordnet_singularizer() -> Callable[[str], str]:
    """
    Build a noun singularizer on top of the WordNet lemmatizer
    (e.g. 'students' -> 'student').
    """
    ensure_nltk_resource('corpora/wordnet', 'wordnet')
    lemmatizer = WordNetLemmatizer()

    def singularize(word: str) -> str:
        return lemmatizer.lemmatize(word, pos='n')

    return singularize


class TextCleaner:
    """Class for tokenizing, filtering and normalizing the corpus lines."""

    def __init__(self, config: Dict[str, Any],
                 stop_words: Optional[Iterable[str]] = None,
                 singularizer: Optional[Callable[[str], str]] = None):
        """
        Initialize the TextCleaner with configuration settings.

        Args:
            config: Dictionary containing preprocessing configuration
            stop_words: Stop word list; defaults to the stopwordsiso lists of
                the configured languages
            singularizer: Function mapping a word to its singular form;
                defaults to the WordNet lemmatizer
        """
        self.config = config
        self.min_word_length = config.get('min_word_length', 1)
        self.exclude_words = set(config.get('exclude_words', DEFAULT_EXCLUDE_WORDS))
        self.word_corrections = dict(config.get('word_corrections', DEFAULT_WORD_CORRECTIONS))
        self.post_exclude_words = set(config.get('post_exclude_words', DEFAULT_POST_EXCLUDE_WORDS))
        self.year_remap = {int(k): int(v) for k, v in config.get('year_remap', DEFAULT_YEAR_REMAP).items()}
        self.singularize = config.get('singularize', True)

        if stop_words is None:
            languages = tuple(config.get('stopword_languages', ['en']))
            stop_words = get_stopwords(languages)
        self.stop_words = set(stop_words) | set(config.get('extra_stopwords', []))

        self.tokenizer = RegexpTokenizer(WORD_PATTERN)
        self._singularizer = singularizer

    def tokenize(self, text: str) -> List[str]:
        """
        Split a line into lowercase word tokens.

        Args:
            text: Input text

        Returns:
            List of tokens, punctuation removed
        """
        if not isinstance(text, str) or not text:
            return []
        return self.tokenizer.tokenize(text.lower())

    def tokenize_lines(self, lines: pd.DataFrame) -> pd.DataFrame:
        """
        Unnest the line table into one row per word.

        Args:
            lines: DataFrame with columns title, line, text, date

        Returns:
            DataFrame with columns title, line, date, word in source order
        """
        tokens = lines.assign(word=lines['text'].map(self.tokenize)).explode('word')
        tokens = tokens.dropna(subset=['word'])
        return tokens[['title', 'line', 'date', 'word']].reset_index(drop=True)

    def filter_tokens(self, tokens: pd.DataFrame) -> pd.DataFrame:
        """
        Drop excluded words, stop words and words that are too short.

        Applying this to an already filtered table returns it unchanged.

        Args:
            tokens: Token table with a word column

        Returns:
            Filtered token table
        """
        words = tokens['word']
        keep = ~words.isin(self.exclude_words)
        keep &= ~words.isin(self.stop_words)
        keep &= ~words.isin(self.post_exclude_words)
        keep &= words.astype(str).str.len() >= self.min_word_length
        return tokens[keep].reset_index(drop=True)

    def singularize_words(self, words: pd.Series) -> pd.Series:
        """Map every word to its singular form, one lookup per distinct word."""
        if not self.singularize:
            return words
        if self._singularizer is None:
            self._singularizer = wordnet_singularizer()
        singular = lru_cache(maxsize=None)(self._singularizer)
        return words.map(singular)

    def correct_words(self, words: pd.Series) -> pd.Series:
        """Apply the manual word corrections."""
        return words.map(lambda word: self.word_corrections.get(word, word))

    def derive_year(self, dates: pd.Series) -> pd.Series:
        """Publication year of each row, with the configured year remapping."""
        years = pd.to_datetime(dates).dt.year.astype(int)
        return years.map(lambda year: self.year_remap.get(year, year))

    def normalize(self, lines: pd.DataFrame) -> pd.DataFrame:
        """
        Run the full normalization on the parsed corpus.

        Args:
            lines: DataFrame with columns title, line, text, date

        Returns:
            Token table with columns title, line, date, word, year
        """
        tokens = self.tokenize_lines(lines)
        logger.info(f"Tokenized {len(lines)} lines into {len(tokens)} words")
        if tokens.empty:
            raise EmptyAnalysisInputError("The corpus contains no words")

        tokens = tokens[~tokens['word'].isin(self.exclude_words)]
        tokens = tokens[~tokens['word'].isin(self.stop_words)].copy()
        logger.info(f"{len(tokens)} words left after removing excluded and stop words")

        tokens['word'] = self.correct_words(self.singularize_words(tokens['word']))
        tokens = self.filter_tokens(tokens)

        if tokens.empty:
            raise EmptyAnalysisInputError("No words left in the corpus after filtering")

        tokens['year'] = self.derive_year(tokens['date'])
        logger.info(f"Normalized corpus: {len(tokens)} words, {tokens['word'].nunique()} distinct, "
                    f"{tokens['title'].nunique()} articles")
        return tokens[TOKEN_COLUMNS]
