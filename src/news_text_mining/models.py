"""Shared typed records for the text mining pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict

import pandas as pd


@dataclass(frozen=True)
class RawLine:
    """One record of the corpus file with its article context."""

    title: str
    line: int
    text: str
    date: date


@dataclass
class TopicModelResult:
    """Fitted topic model in tidy form.

    ``beta`` has one row per (topic, term) with the term weight, ``gamma`` one
    row per (document, topic) with the topic proportion. Topic ids are 1-based.
    """

    beta: pd.DataFrame
    gamma: pd.DataFrame
    num_topics: int
    algorithm: str
    labels: Dict[int, str] = field(default_factory=dict)
