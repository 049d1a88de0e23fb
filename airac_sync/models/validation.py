"""
Parse results and line-level warnings.

Parsers never raise for a bad line: they record it here and move on, so a
single malformed row cannot block the rest of a file.
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')

# Number of skipped lines kept verbatim for display
MAX_REPORTED_LINES = 20


@dataclass
class SkippedLine:
    """A single line that was left out of the parse result."""

    text: str
    reason: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.text}"


@dataclass
class PartialParseWarning:
    """Non-fatal notice that some lines of a file were omitted."""

    skipped: int
    samples: List[SkippedLine] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.skipped == 1:
            return "1 line could not be parsed and was omitted"
        return f"{self.skipped} lines could not be parsed and were omitted"

    def __str__(self) -> str:
        return self.message


@dataclass
class ParseResult(Generic[T]):
    """Records produced by a parser plus what it had to skip."""

    records: List[T] = field(default_factory=list)
    skipped: int = 0
    skipped_lines: List[SkippedLine] = field(default_factory=list)

    def skip(self, text: str, reason: str) -> None:
        """Count a skipped line, keeping the first few for display."""
        self.skipped += 1
        if len(self.skipped_lines) < MAX_REPORTED_LINES:
            self.skipped_lines.append(SkippedLine(text, reason))

    @property
    def has_warnings(self) -> bool:
        return self.skipped > 0

    @property
    def warning(self) -> Optional[PartialParseWarning]:
        if not self.skipped:
            return None
        return PartialParseWarning(self.skipped, list(self.skipped_lines))

    def __len__(self) -> int:
        return len(self.records)

    def __str__(self) -> str:
        if self.has_warnings:
            return f"{len(self.records)} records (with {self.skipped} skipped lines)"
        return f"{len(self.records)} records"
