"""
Data loading utilities for the structured news corpus file.

The corpus is a single text file in which every article starts with a
``Title:`` line immediately followed by a ``DATE:`` line, then its body lines.
"""

import os
import logging
from datetime import date, datetime
from typing import Dict, Any, Iterator, Optional

import pandas as pd

from ..errors import MalformedCorpusError
from ..models import RawLine

logger = logging.getLogger(__name__)

TITLE_PREFIX = 'Title:'
DATE_PREFIX = 'DATE:'
DEFAULT_DATE_FORMAT = '%d.%m.%Y'
PREAMBLE_TITLE = ''
PREAMBLE_DATE = date(1900, 1, 1)


def parse_article_date(value: str, date_format: str = DEFAULT_DATE_FORMAT,
                       line_number: Optional[int] = None) -> date:
    """
    Parse a day.month.year date string.

    Args:
        value: Date string, e.g. ``27.05.2020`` or ``1.1.2016``
        date_format: strptime format of the date
        line_number: File line number, used in the error message

    Returns:
        Parsed date
    """
    try:
        return datetime.strptime(value.strip(), date_format).date()
    except ValueError as e:
        raise MalformedCorpusError(f"Cannot parse date '{value.strip()}'", line_number) from e


def iter_raw_lines(filepath: str, encoding: str = 'utf-8-sig',
                   date_format: str = DEFAULT_DATE_FORMAT,
                   preamble_policy: str = 'reject') -> Iterator[RawLine]:
    """
    Read the corpus file and yield one RawLine per record.

    Title lines and body lines each produce a record; the DATE: line belonging
    to a title is consumed together with it.

    Args:
        filepath: Path to the corpus file
        encoding: File encoding; the default also drops a UTF-8 byte order mark
        date_format: strptime format of the DATE: lines
        preamble_policy: 'reject' to fail on text before the first title,
            'default' to give it an empty title and the 1900-01-01 date

    Yields:
        RawLine records in file order
    """
    if preamble_policy not in ('reject', 'default'):
        raise ValueError(f"Unsupported preamble policy: {preamble_policy}")
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Corpus file not found: {filepath}")

    current_title = PREAMBLE_TITLE
    current_date = PREAMBLE_DATE
    seen_title = False
    record_count = 1
    file_line = 0

    with open(filepath, 'r', encoding=encoding) as file:
        for raw in file:
            file_line += 1
            this_line = raw.rstrip('\r\n')

            if this_line.startswith(TITLE_PREFIX):
                current_title = this_line[len(TITLE_PREFIX):].strip()
                this_line = current_title

                date_line = file.readline()
                file_line += 1
                if not date_line:
                    raise MalformedCorpusError(
                        f"Title '{current_title}' is not followed by a DATE: line", file_line)
                date_line = date_line.rstrip('\r\n')
                if not date_line.startswith(DATE_PREFIX):
                    raise MalformedCorpusError(
                        f"Expected a DATE: line after title '{current_title}'", file_line)
                current_date = parse_article_date(date_line[len(DATE_PREFIX):], date_format, file_line)
                seen_title = True

            elif not seen_title and this_line.strip() and preamble_policy == 'reject':
                raise MalformedCorpusError("Text found before the first Title: line", file_line)

            yield RawLine(title=current_title, line=record_count, text=this_line, date=current_date)
            record_count += 1


class CorpusLoader:
    """Class for loading the structured news corpus and saving derived tables."""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the CorpusLoader with configuration settings.

        Args:
            config: Dictionary containing data configuration
        """
        self.config = config
        self.corpus_file = config.get('corpus_file', os.path.join('Data', 'google_news_lines.txt'))
        self.processed_dir = config.get('processed_dir', 'results/tables')
        self.encoding = config.get('encoding', 'utf-8-sig')
        self.date_format = config.get('date_format', DEFAULT_DATE_FORMAT)
        self.preamble_policy = config.get('preamble_policy', 'reject')

    def load_corpus(self, filepath: Optional[str] = None) -> pd.DataFrame:
        """
        Parse the corpus file into a line table.

        Args:
            filepath: Path to the corpus file; defaults to the configured one

        Returns:
            DataFrame with columns title, line, text, date
        """
        filepath = filepath or self.corpus_file
        logger.info(f"Reading corpus file {filepath}")
        records = list(iter_raw_lines(filepath, encoding=self.encoding,
                                      date_format=self.date_format,
                                      preamble_policy=self.preamble_policy))
        df = pd.DataFrame(records, columns=['title', 'line', 'text', 'date'])
        logger.info(f"Parsed {len(df)} lines from {df['title'].nunique()} articles")
        return df

    def save_as_csv(self, df: pd.DataFrame, output_file: str) -> str:
        """
        Save a table to a CSV file in the processed directory.

        Args:
            df: Table to save
            output_file: Name of the output file

        Returns:
            Path to the saved file
        """
        if not os.path.exists(self.processed_dir):
            os.makedirs(self.processed_dir)

        output_path = os.path.join(self.processed_dir, output_file)
        df.to_csv(output_path, index=False)
        logger.info(f"Saved {len(df)} rows to {output_path}")

        return output_path
