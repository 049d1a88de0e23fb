#!/usr/bin/env python3

"""
Command-line AIRAC import.

    python -m airac_sync.cli VOR vor.txt --fir LPPC            # preview
    python -m airac_sync.cli VOR vor.txt --fir LPPC --confirm --all
    python -m airac_sync.cli FIX fix.txt --confirm --select ABLAN --keep OLDFX
"""

import sys
import argparse
import logging
import json
from pathlib import Path
from typing import List, Optional

from airac_sync import config
from airac_sync.errors import AiracImportError
from airac_sync.models.diff import ImportKind
from airac_sync.storage.database_storage import AiracStorage
from airac_sync.sync.importer import AiracImporter
from airac_sync.sync.selection import Selection

logger = logging.getLogger(__name__)


class Command:
    """Runs one preview or confirm from parsed arguments."""

    def __init__(self, args):
        self.args = args
        self.kind = ImportKind(args.kind)
        self.content = Path(args.file).read_bytes()
        self.importer = AiracImporter(AiracStorage(args.database, timeout=config.SQLITE_TIMEOUT))

    def run_preview(self) -> dict:
        preview = self.importer.preview(self.kind, self.content, fir_id=self.args.fir)
        output = {'preview': preview.to_dict()}
        if self.args.verbose and preview.skipped_lines:
            output['skippedLines'] = [str(line) for line in preview.skipped_lines]
        return output

    def run_confirm(self) -> dict:
        result = self.importer.confirm(self.kind, self.content, fir_id=self.args.fir, selection=self.selection())
        return result.to_dict()

    def selection(self) -> Selection:
        """Selection from --all, --select, --select-update and --keep."""
        delete = None
        if self.args.keep and self.kind.deletes:
            # --keep names deletions to reject; everything else computed is accepted
            computed = self.importer.preview(self.kind, self.content, fir_id=self.args.fir).diff.to_delete
            kept = {k.upper() for k in self.args.keep}
            delete = [key for key in computed if key.upper() not in kept]

        if self.args.all:
            return Selection(add=None, update=None, delete=delete)
        return Selection(add=self.args.select, update=self.args.select_update, delete=delete)

    def run(self) -> dict:
        if self.args.confirm:
            return self.run_confirm()
        return self.run_preview()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Preview and apply AIRAC data files')
    parser.add_argument('kind', help='File type', type=str.upper, choices=[k.value for k in ImportKind])
    parser.add_argument('file', help='AIRAC file to import')
    parser.add_argument('--fir', help='FIR id or ICAO code (omit for global scope)')
    parser.add_argument('-d', '--database', '--db', help='SQLite database file', default=config.get_safe_db_path())
    parser.add_argument('--confirm', help='Apply instead of previewing', action='store_true')
    parser.add_argument('--select', help='Keys to add', nargs='*', default=[], metavar='KEY')
    parser.add_argument('--select-update', help='Airport keys to update', nargs='*', default=[], metavar='KEY')
    parser.add_argument('--keep', help='Keys proposed for deletion that must be kept', nargs='*', default=[],
                        metavar='KEY')
    parser.add_argument('--all', help='Accept every computed change (with --confirm)', action='store_true')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.LOG_LEVEL),
        format=config.LOG_FORMAT
    )

    try:
        output = Command(args).run()
    except AiracImportError as e:
        logger.error(str(e))
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
