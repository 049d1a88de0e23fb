from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .navaid import NavAidType


class ImportKind(Enum):
    """The file types accepted by the importer."""
    FIX = "FIX"
    VOR = "VOR"
    NDB = "NDB"
    BOUNDARY = "BOUNDARY"
    AIRPORT = "AIRPORT"

    @property
    def navaid_type(self) -> Optional[NavAidType]:
        """The nav-aid type for FIX/VOR/NDB imports, None otherwise."""
        try:
            return NavAidType(self.value)
        except ValueError:
            return None

    @property
    def deletes(self) -> bool:
        """Whether the import replaces its scope (airports never delete)."""
        return self is not ImportKind.AIRPORT

    @property
    def updates(self) -> bool:
        return self is ImportKind.AIRPORT


@dataclass
class Diff:
    """
    Changes needed to bring the store in line with a file.

    Each mapping goes from display key (ident, ICAO, STATION/FREQ) to the
    record involved: the candidate for to_add/to_update, the persisted
    record for to_delete. The three key sets are disjoint.
    """

    kind: ImportKind
    fir_id: Optional[str] = None
    to_add: Dict[str, Any] = field(default_factory=dict)
    to_update: Dict[str, Any] = field(default_factory=dict)
    to_delete: Dict[str, Any] = field(default_factory=dict)
    # Airports only: ICAO -> names of the differing fields
    changes: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.to_add or self.to_update or self.to_delete)

    @property
    def total_changes(self) -> int:
        return len(self.to_add) + len(self.to_update) + len(self.to_delete)

    def to_preview(self) -> Dict[str, Any]:
        """Render the diff with the key lists shown to staff."""
        preview: Dict[str, Any] = {'toAdd': sorted(self.to_add)}
        if self.kind.updates:
            preview['toUpdate'] = sorted(self.to_update)
            preview['changes'] = {k: list(v) for k, v in sorted(self.changes.items()) if k in self.to_update}
        if self.kind.deletes:
            preview['toDelete'] = sorted(self.to_delete)
        return preview

    def __str__(self) -> str:
        parts = [f"+{len(self.to_add)}"]
        if self.kind.updates:
            parts.append(f"~{len(self.to_update)}")
        if self.kind.deletes:
            parts.append(f"-{len(self.to_delete)}")
        scope = self.fir_id or "global"
        return f"{self.kind.value} diff [{scope}] {' '.join(parts)}"
