"""
utils.py - text analysis helpers (stop words, grouped rankings)
"""
from functools import lru_cache

import pandas as pd
import stopwordsiso as stopwordsiso


@lru_cache(maxsize=16)
def get_stopwords(lang=("en",)):
    """
    Return a set of stop words for the given language(s) (tuple or str), via stopwordsiso.
    Any ISO 639-1 code known to stopwordsiso works: 'en', 'fr', 'de', ...
    """
    if isinstance(lang, str):
        langs = (lang,)
    else:
        langs = tuple(lang)
    stop = set()
    for l in langs:
        if not stopwordsiso.has_lang(l):
            raise ValueError(f"No stop word list available for language '{l}'")
        stop.update(stopwordsiso.stopwords(l))
    return frozenset(stop)


def top_n_by_group(df: pd.DataFrame, group: str, score: str, n: int = 10) -> pd.DataFrame:
    """
    Keep the n highest-scoring rows of each group. Rows tied with the n-th score
    are kept as well, so a group can return more than n rows.
    """
    ranks = df.groupby(group, observed=True)[score].rank(method='min', ascending=False)
    return df[ranks <= n].sort_values([group, score], ascending=[True, False]).reset_index(drop=True)
