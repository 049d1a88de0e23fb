"""
AIRAC data reconciliation library.

This package refreshes a division's navigation data store from the files
published every AIRAC cycle, with a preview of every change before it is
written.

The main public API includes:
- AiracImporter: Two-phase preview/confirm import
- AiracStorage: SQLite store of FIRs, nav aids, boundaries and airports
- ImportKind: The accepted file types
- Selection: Keys accepted from a preview
"""

__version__ = '0.1.0'
__all__ = [
    'AiracImporter',
    'AiracStorage',
    'ImportKind',
    'Selection',
]

from .models.diff import ImportKind
from .storage.database_storage import AiracStorage
from .sync.importer import AiracImporter
from .sync.selection import Selection
