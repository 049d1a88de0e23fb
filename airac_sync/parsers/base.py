from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ..models.validation import ParseResult

# Lines starting with these are comments in every AIRAC text format
DEFAULT_COMMENT_PREFIXES = ('#', '//', ';')


def split_fields(line: str) -> List[str]:
    """
    Split a delimited line into trimmed fields.

    The delimiter is ';' when present, else a tab, else ','. Trailing
    delimiters are ignored.
    """
    if ';' in line:
        delimiter = ';'
    elif '\t' in line:
        delimiter = '\t'
    else:
        delimiter = ','
    return [part.strip() for part in line.rstrip(delimiter + ' ').split(delimiter)]


def format_frequency(raw: Optional[str]) -> Optional[str]:
    """
    Normalise a frequency to three decimals ("112.3" -> "112.300").

    Returns None if the value is not a positive number.
    """
    if raw is None:
        return None
    text = str(raw).strip().replace(',', '.')
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if value <= 0:
        return None
    return f"{value:.3f}"


def parse_optional_float(raw: Optional[str]) -> Optional[float]:
    """Parse a numeric field, None when blank or not a number."""
    if raw is None:
        return None
    text = str(raw).strip().replace(',', '.')
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


class ImportParser(ABC):
    """Base interface for AIRAC text file parsers."""

    # Override in subclasses when a format uses other comment markers
    COMMENT_PREFIXES: Sequence[str] = DEFAULT_COMMENT_PREFIXES

    @abstractmethod
    def parse(self, lines: Sequence[str], fir_id: Optional[str] = None, **kwargs: Any) -> ParseResult:
        """
        Parse file lines into candidate records.

        Args:
            lines: Trimmed, non-empty lines in file order
            fir_id: Scope the records belong to (None for global)

        Returns:
            ParseResult with the records and the skipped-line count
        """
        pass
