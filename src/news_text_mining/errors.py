"""
Exceptions raised by the text mining pipeline.
"""


class TextMiningError(Exception):
    """Base class for all pipeline errors."""


class MalformedCorpusError(TextMiningError):
    """The corpus file does not follow the Title:/DATE: layout."""

    def __init__(self, message: str, line_number: int = None):
        if line_number is not None:
            message = f"{message} (file line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class EmptyAnalysisInputError(TextMiningError):
    """An analysis step received no rows, usually because every word was filtered out."""


class ModelFitFailureError(TextMiningError):
    """The topic model estimator could not be fitted."""
