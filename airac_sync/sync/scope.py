import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import ScopeNotFoundError
from ..storage.database_storage import AiracStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeToken:
    """
    Resolved FIR that bounds a diff.

    The global token (fir_id None) covers the records that belong to no FIR.
    """

    fir_id: Optional[str] = None
    icao_code: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.fir_id is None

    def __str__(self) -> str:
        if self.is_global:
            return "global"
        return self.icao_code or self.fir_id


GLOBAL_SCOPE = ScopeToken()


class ScopeResolver:
    """Validates FIR references given by callers."""

    def __init__(self, storage: AiracStorage):
        self.storage = storage

    def resolve_fir(self, fir_id: Optional[str]) -> ScopeToken:
        """
        Resolve a FIR identifier or ICAO code.

        Args:
            fir_id: FIR id or ICAO code; None or blank selects the global scope

        Returns:
            ScopeToken for the FIR

        Raises:
            ScopeNotFoundError: If a non-blank value matches no FIR
        """
        if fir_id is None or not str(fir_id).strip():
            return GLOBAL_SCOPE

        value = str(fir_id).strip()
        fir = self.storage.get_fir(value) or self.storage.find_fir_by_icao(value)
        if fir is None:
            logger.info(f"Unknown FIR reference: {value}")
            raise ScopeNotFoundError(value)
        return ScopeToken(fir_id=fir['id'], icao_code=fir['icao_code'], name=fir['name'])
