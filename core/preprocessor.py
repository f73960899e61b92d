"""Text preprocessing and tokenization for description matching."""

from typing import Any, List
from abc import ABC, abstractmethod
import pandas as pd
import regex as re
import logging

_PUNCTUATION = re.compile(r'[^\w\s]')
_WHITESPACE = re.compile(r'\s+')

class BasePreprocessor(ABC):
    """Base class for preprocessors with common functionality."""

    @abstractmethod
    def process(self, value: Any) -> str:
        """Process a value into a standardized string format."""
        pass

    def _handle_null(self, value: Any) -> bool:
        """Check if value is null/empty."""
        try:
            return bool(pd.isna(value))
        except (TypeError, ValueError):
            # array-likes are never a single null cell
            return False

class CellPreprocessor(BasePreprocessor):
    """Coerces spreadsheet cell values to trimmed strings."""

    def __init__(self, strip: bool = True):
        self.strip = strip

    def process(self, value: Any) -> str:
        if self._handle_null(value):
            return ''

        # Whole floats come back from numeric cells as e.g. 12.0
        if isinstance(value, float) and value.is_integer():
            value = int(value)

        text = str(value)
        return text.strip() if self.strip else text

class DescriptionPreprocessor(BasePreprocessor):
    """Normalizes description text: lower-case, punctuation removed."""

    def process(self, value: Any) -> str:
        if self._handle_null(value):
            return ''

        text = str(value).lower()
        return _PUNCTUATION.sub('', text)

    def tokenize(self, value: Any) -> List[str]:
        """Split normalized text into terms, dropping empty tokens."""
        return [token for token in _WHITESPACE.split(self.process(value)) if token]

_description_preprocessor = DescriptionPreprocessor()

def tokenize(text: Any) -> List[str]:
    """
    Turn raw description text into a list of normalized terms.

    Letters, digits, underscores and whitespace survive; every other
    character is removed before splitting on whitespace runs.

    Args:
        text: Description text (null cell values yield no terms)

    Returns:
        List[str]: Terms in order of appearance
    """
    tokens = _description_preprocessor.tokenize(text)
    if not tokens:
        logging.getLogger(__name__).debug(f"No terms found in {text!r}")
    return tokens
