import matplotlib

matplotlib.use("Agg")

from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

from news_text_mining.preprocessing.text_cleaner import TextCleaner

SCENARIO_CORPUS = """Title: Campus opens
DATE: 01.01.2016
The campus officially opened today.
Title: New restaurant
DATE: 15.06.2016
A new restaurant opened near campus.
"""

SCENARIO_STOP_WORDS = {"the", "a", "near", "today", "officially"}

# Six clearly separated themes, two articles each
THEMES = [
    ("Blast furnace restored", "14.03.2014", "furnace steel smelter furnace steel smelter furnace"),
    ("Steel heritage tour", "02.09.2015", "steel furnace smelter steel furnace smelter steel"),
    ("Restaurant opens in the square", "11.02.2016", "restaurant cuisine chef restaurant cuisine chef"),
    ("New chef in town", "20.05.2016", "chef restaurant cuisine chef restaurant cuisine"),
    ("Capital of culture 2022", "07.07.2017", "museum exhibition culture museum exhibition culture"),
    ("Exhibition in the museum", "19.10.2017", "exhibition museum culture exhibition museum culture"),
    ("Housing project approved", "03.01.2018", "housing apartment tram housing apartment tram"),
    ("Tram line extended", "28.04.2018", "tram housing apartment tram housing apartment"),
    ("Summer festival", "12.06.2019", "festival concert rockhal festival concert rockhal"),
    ("Concert season starts", "30.08.2019", "concert festival rockhal concert festival rockhal"),
    ("University welcomes students", "15.09.2020", "university lecture laboratory university lecture students"),
    ("Laboratory inaugurated", "01.12.2020", "laboratory university lecture laboratory university students"),
]


def build_corpus(themes=THEMES) -> str:
    parts = []
    for title, date, body in themes:
        parts.append(f"Title: {title}\nDATE: {date}\n{body}.\n{body}, again.\n")
    return "".join(parts)


def stub_singularizer(word: str) -> str:
    """Deterministic singularizer so tests need no WordNet download."""
    return {"students": "student", "articles": "article", "was": "wa"}.get(word, word)


@pytest.fixture
def write_corpus(tmp_path: Path) -> Callable[[str], Path]:
    def _write(content: str, name: str = "corpus.txt") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def scenario_file(write_corpus) -> Path:
    return write_corpus(SCENARIO_CORPUS)


@pytest.fixture
def themed_corpus_file(write_corpus) -> Path:
    return write_corpus(build_corpus())


@pytest.fixture
def cleaner() -> TextCleaner:
    return TextCleaner({}, singularizer=stub_singularizer)


@pytest.fixture
def scenario_cleaner() -> TextCleaner:
    return TextCleaner({}, stop_words=SCENARIO_STOP_WORDS, singularizer=stub_singularizer)


@pytest.fixture
def themed_tokens(themed_corpus_file, cleaner) -> pd.DataFrame:
    from news_text_mining.preprocessing.data_loader import CorpusLoader

    lines = CorpusLoader({}).load_corpus(str(themed_corpus_file))
    return cleaner.normalize(lines)
