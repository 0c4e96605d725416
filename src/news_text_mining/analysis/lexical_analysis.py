"""
lexical_analysis.py
Word frequency, article volume and TF-IDF analyses over the normalized token table.

Functions:
- Word counts over the whole corpus (word cloud input)
- Number of articles per year
- TF-IDF per article, ranked per year

Example:
    from news_text_mining.analysis.lexical_analysis import count_words, compute_tf_idf
"""
import logging
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from ..errors import EmptyAnalysisInputError
from .utils import top_n_by_group

logger = logging.getLogger(__name__)


def _require_rows(tokens: pd.DataFrame, what: str):
    if tokens is None or tokens.empty:
        raise EmptyAnalysisInputError(f"Cannot compute {what}: the token table is empty")


def count_terms(tokens: pd.DataFrame, by: Union[str, List[str]]) -> pd.DataFrame:
    """
    Count words per group.

    Args:
        tokens: Token table
        by: Grouping column(s), 'word' is added automatically

    Returns:
        DataFrame with the grouping columns, word and n, sorted by n descending
    """
    _require_rows(tokens, "term counts")
    columns = [by] if isinstance(by, str) else list(by)
    counts = tokens.groupby(columns + ['word'], sort=False).size().reset_index(name='n')
    return counts.sort_values('n', ascending=False, kind='stable').reset_index(drop=True)


def count_words(tokens: pd.DataFrame) -> pd.DataFrame:
    """
    Count each word across the whole corpus.

    Returns:
        DataFrame (word, n) sorted by n descending, then alphabetically
    """
    _require_rows(tokens, "word counts")
    counts = tokens['word'].value_counts().rename_axis('word').reset_index(name='n')
    return counts.sort_values(['n', 'word'], ascending=[False, True]).reset_index(drop=True)


def top_words(counts: pd.DataFrame, max_words: int = 200, min_freq: int = 1) -> Dict[str, int]:
    """Most frequent words as a {word: count} mapping for the word cloud."""
    kept = counts[counts['n'] >= min_freq].head(max_words)
    return dict(zip(kept['word'], kept['n'].astype(int)))


def count_articles_by_year(tokens: pd.DataFrame) -> pd.DataFrame:
    """
    Count distinct articles per year.

    Returns:
        DataFrame (year, n) sorted by year
    """
    _require_rows(tokens, "articles per year")
    articles = tokens[['year', 'title']].drop_duplicates()
    counts = articles.groupby('year').size().reset_index(name='n')
    logger.info(f"{len(articles)} articles over {len(counts)} years")
    return counts.sort_values('year').reset_index(drop=True)


def compute_tf_idf(tokens: pd.DataFrame, document: str = 'title', group: str = 'year') -> pd.DataFrame:
    """
    Compute TF-IDF of every word in every document.

    The term frequency is the share of the document's words, the inverse
    document frequency is ln(number of documents / documents containing the word)
    over the whole corpus.

    Args:
        tokens: Token table
        document: Column identifying a document
        group: Extra column carried along (one value per document)

    Returns:
        DataFrame (group, document, word, n, tf, idf, tf_idf) sorted by n descending
    """
    _require_rows(tokens, "TF-IDF")
    counts = count_terms(tokens, [group, document])

    doc_totals = counts.groupby(document)['n'].transform('sum')
    counts['tf'] = counts['n'] / doc_totals

    num_documents = counts[document].nunique()
    doc_freq = counts.groupby('word')[document].transform('nunique')
    counts['idf'] = np.log(num_documents / doc_freq)
    counts['tf_idf'] = counts['tf'] * counts['idf']

    logger.info(f"TF-IDF computed for {counts['word'].nunique()} words in {num_documents} documents")
    return counts


def top_tf_idf_by_year(tf_idf: pd.DataFrame, n: int = 10, group: str = 'year') -> pd.DataFrame:
    """Top n TF-IDF rows per year, ties included."""
    _require_rows(tf_idf, "TF-IDF ranking")
    return top_n_by_group(tf_idf, group, 'tf_idf', n)
