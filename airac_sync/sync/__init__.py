from .scope import ScopeToken, ScopeResolver, GLOBAL_SCOPE
from .diff_engine import DiffEngine
from .selection import Selection, SelectionFilter
from .apply_engine import ApplyEngine, ApplyResult
from .importer import AiracImporter, ImportPreview

__all__ = [
    'ScopeToken',
    'ScopeResolver',
    'GLOBAL_SCOPE',
    'DiffEngine',
    'Selection',
    'SelectionFilter',
    'ApplyEngine',
    'ApplyResult',
    'AiracImporter',
    'ImportPreview',
]
