"""
Two-phase AIRAC import: preview, then confirm.

Both phases take the file, the scope and (for confirm) the accepted keys,
and recompute everything from them. Nothing is remembered between calls,
so a confirm may follow a preview of a different process, or no preview
at all.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..errors import InputError
from ..ingest.file_ingestor import FileIngestor
from ..models.diff import Diff, ImportKind
from ..models.validation import ParseResult, SkippedLine
from ..parsers.factory import ParserFactory
from ..storage.database_storage import AiracStorage
from .apply_engine import ApplyEngine, ApplyResult
from .diff_engine import DiffEngine
from .scope import ScopeResolver, ScopeToken
from .selection import Selection, SelectionFilter

logger = logging.getLogger(__name__)

Content = Union[bytes, bytearray, str]


@dataclass
class ImportPreview:
    """What a confirm with the same inputs would change."""

    diff: Diff
    parsed: int
    skipped: int = 0
    warnings: List[str] = field(default_factory=list)
    skipped_lines: List[SkippedLine] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        preview = self.diff.to_preview()
        preview['skipped'] = self.skipped
        preview['warnings'] = list(self.warnings)
        return preview


class AiracImporter:
    """
    Entry point for AIRAC file imports.

    Wires the ingestor, parsers, scope resolver, diff engine, selection
    filter and apply engine around one store.
    """

    def __init__(self, storage: AiracStorage, ingestor: Optional[FileIngestor] = None):
        self.storage = storage
        self.ingestor = ingestor or FileIngestor()
        self.scope_resolver = ScopeResolver(storage)
        self.diff_engine = DiffEngine()
        self.selection_filter = SelectionFilter()
        self.apply_engine = ApplyEngine(storage)

    def preview(self, kind: ImportKind, content: Content, fir_id: Optional[str] = None) -> ImportPreview:
        """
        Compute the changes a file would make, without writing anything.

        Args:
            kind: Type of file
            content: Raw upload (bytes) or decoded text
            fir_id: FIR id or ICAO code; None for the global scope

        Returns:
            ImportPreview with the diff and parse warnings

        Raises:
            InputError: If the file cannot be decoded or has no valid entries
            ScopeNotFoundError: If fir_id names no FIR
        """
        scope = self.scope_resolver.resolve_fir(fir_id)
        parsed = self._parse(kind, content, scope)
        diff = self._diff(kind, parsed, scope)

        warnings = [parsed.warning.message] if parsed.warning else []
        logger.info(f"Preview {diff}: {diff.total_changes} change(s) from {len(parsed)} records, {parsed.skipped} skipped")
        return ImportPreview(
            diff=diff,
            parsed=len(parsed),
            skipped=parsed.skipped,
            warnings=warnings,
            skipped_lines=list(parsed.skipped_lines),
        )

    def confirm(self, kind: ImportKind, content: Content, fir_id: Optional[str] = None,
                selection: Optional[Selection] = None) -> ApplyResult:
        """
        Recompute the diff for a file and apply the selected part of it.

        Args:
            kind: Type of file
            content: The same file that was previewed
            fir_id: FIR id or ICAO code; None for the global scope
            selection: Accepted keys; None applies the whole diff

        Returns:
            ApplyResult with the number of rows added, updated and deleted

        Raises:
            InputError: If the file cannot be decoded or has no valid entries
            ScopeNotFoundError: If fir_id names no FIR
            ApplyTransactionError: If the store rejected the writes
        """
        scope = self.scope_resolver.resolve_fir(fir_id)
        parsed = self._parse(kind, content, scope)
        diff = self._diff(kind, parsed, scope)
        narrowed = self.selection_filter.apply(diff, selection)

        if narrowed.is_empty:
            logger.info(f"Confirm {kind.value} [{scope}]: nothing selected, no writes")
            return ApplyResult(kind=kind, fir_id=scope.fir_id)
        return self.apply_engine.apply(narrowed)

    def _parse(self, kind: ImportKind, content: Content, scope: ScopeToken) -> ParseResult:
        parser = ParserFactory.get_parser(kind)
        lines = self.ingestor.read(content, parser.COMMENT_PREFIXES)

        extra = {}
        if kind is ImportKind.BOUNDARY:
            extra['navaids'] = self.storage.get_navaid_positions(scope.fir_id)

        result = parser.parse(lines, fir_id=scope.fir_id, **extra)
        if not result.records:
            raise InputError("No entries parsed from file",
                             details=f"{len(lines)} lines read, {result.skipped} skipped")
        return result

    def _diff(self, kind: ImportKind, parsed: ParseResult, scope: ScopeToken) -> Diff:
        if kind is ImportKind.BOUNDARY:
            persisted = self.storage.get_boundaries(scope.fir_id)
            return self.diff_engine.diff_boundaries(parsed.records, persisted, scope)
        if kind is ImportKind.AIRPORT:
            persisted = self.storage.get_airports(r.icao for r in parsed.records)
            return self.diff_engine.diff_airports(parsed.records, persisted, scope)

        navaid_type = kind.navaid_type
        persisted = self.storage.get_navaids(navaid_type, scope.fir_id)
        return self.diff_engine.diff_navaids(parsed.records, persisted, navaid_type, scope)
