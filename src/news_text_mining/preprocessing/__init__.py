from .text_cleaner import TextCleaner
from .data_loader import (
    CorpusLoader,
    iter_raw_lines,
    parse_article_date
)
