from datetime import date

import pandas as pd
import pytest

from news_text_mining.errors import EmptyAnalysisInputError
from news_text_mining.preprocessing.data_loader import CorpusLoader
from news_text_mining.preprocessing.text_cleaner import TextCleaner, TOKEN_COLUMNS

from conftest import stub_singularizer


def _lines(rows):
    return pd.DataFrame(rows, columns=["title", "line", "text", "date"])


def test_tokenize_lowercases_and_strips_punctuation(cleaner) -> None:
    assert cleaner.tokenize("The Campus, officially opened!") == ["the", "campus", "officially", "opened"]
    assert cleaner.tokenize("Europe's capital (2022)") == ["europe's", "capital", "2022"]
    assert cleaner.tokenize("") == []
    assert cleaner.tokenize("steel ___ snake_case") == ["steel", "snake", "case"]


def test_scenario_survivors_and_order(scenario_file, scenario_cleaner) -> None:
    lines = CorpusLoader({}).load_corpus(str(scenario_file))

    tokens = scenario_cleaner.normalize(lines)

    assert list(tokens.columns) == TOKEN_COLUMNS
    assert list(tokens["word"]) == [
        "campus", "opens", "campus", "opened",
        "new", "restaurant", "new", "restaurant", "opened", "campus",
    ]
    assert set(tokens["year"]) == {2016}
    assert tokens["line"].is_monotonic_increasing


def test_domain_exclusions_are_removed(scenario_cleaner) -> None:
    lines = _lines([("t", 1, "Belval and Esch-sur-Alzette in Luxembourg", date(2017, 1, 1))])

    tokens = scenario_cleaner.normalize(lines)

    assert "belval" not in set(tokens["word"])
    assert "esch" not in set(tokens["word"])
    assert "alzette" not in set(tokens["word"])
    assert "luxembourg" not in set(tokens["word"])
    assert "sur" in set(tokens["word"])


def test_stopwordsiso_list_is_used_by_default(cleaner) -> None:
    lines = _lines([("t", 1, "The blast furnace and the steel smelter", date(2017, 1, 1))])

    words = set(cleaner.normalize(lines)["word"])

    assert {"the", "and"}.isdisjoint(words)
    assert {"furnace", "steel", "smelter"} <= words


def test_singularization_and_manual_fixes() -> None:
    cleaner = TextCleaner({}, stop_words=set(), singularizer=stub_singularizer)
    lines = _lines([("t", 1, "students was furnaces bu d", date(2016, 3, 3))])

    words = list(cleaner.normalize(lines)["word"])

    # was -> wa and bu, d are dropped as noise, furnaces is corrected
    assert words == ["student", "furnace"]


def test_corrected_word_is_checked_against_stop_words() -> None:
    cleaner = TextCleaner({"word_corrections": {"colour": "the"}},
                          stop_words={"the"}, singularizer=stub_singularizer)
    lines = _lines([("t", 1, "colour steel", date(2016, 3, 3))])

    assert list(cleaner.normalize(lines)["word"]) == ["steel"]


def test_year_remap_only_touches_2014(cleaner) -> None:
    lines = _lines([
        ("a", 1, "furnace", date(2014, 5, 1)),
        ("b", 2, "steel", date(2015, 5, 1)),
        ("c", 3, "tram", date(2019, 5, 1)),
    ])

    tokens = cleaner.normalize(lines)

    assert list(tokens["year"]) == [2015, 2015, 2019]
    assert list(pd.to_datetime(tokens["date"]).dt.year) == [2014, 2015, 2019]


def test_custom_year_remap_from_config() -> None:
    cleaner = TextCleaner({"year_remap": {"2019": 2020}}, stop_words=set(), singularizer=stub_singularizer)
    lines = _lines([("a", 1, "tram", date(2019, 5, 1)), ("b", 2, "tram", date(2014, 5, 1))])

    assert list(cleaner.normalize(lines)["year"]) == [2020, 2014]


def test_filters_are_idempotent(themed_tokens, cleaner) -> None:
    refiltered = cleaner.filter_tokens(themed_tokens)

    pd.testing.assert_frame_equal(refiltered, themed_tokens.reset_index(drop=True))


def test_min_word_length_filter() -> None:
    cleaner = TextCleaner({"min_word_length": 3}, stop_words=set(), singularizer=stub_singularizer)
    lines = _lines([("t", 1, "an ox and a tram", date(2018, 1, 1))])

    assert list(cleaner.normalize(lines)["word"]) == ["and", "tram"]


def test_singularization_can_be_disabled() -> None:
    cleaner = TextCleaner({"singularize": False}, stop_words=set())
    lines = _lines([("t", 1, "students", date(2018, 1, 1))])

    assert list(cleaner.normalize(lines)["word"]) == ["students"]


def test_everything_filtered_raises(cleaner) -> None:
    lines = _lines([("the", 1, "the and of", date(2018, 1, 1))])

    with pytest.raises(EmptyAnalysisInputError):
        cleaner.normalize(lines)


def test_corpus_without_words_raises(cleaner) -> None:
    lines = _lines([("", 1, "", date(2018, 1, 1)), ("", 2, "...", date(2018, 1, 1))])

    with pytest.raises(EmptyAnalysisInputError):
        cleaner.normalize(lines)


def test_wordnet_singularizer() -> None:
    nltk = pytest.importorskip("nltk")
    try:
        nltk.data.find("corpora/wordnet")
    except LookupError:
        pytest.skip("WordNet data is not installed")

    from news_text_mining.preprocessing.text_cleaner import wordnet_singularizer

    singularize = wordnet_singularizer()
    assert singularize("students") == "student"
    assert singularize("furnaces") == "furnace"
    assert singularize("campus") == "campus"
