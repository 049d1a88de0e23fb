from typing import Callable, Dict, List

from ..models.diff import ImportKind
from ..models.navaid import NavAidType
from .airport import AirportParser
from .base import ImportParser
from .boundary import BoundaryParser
from .navaid import NavAidParser


class ParserFactory:
    """Factory for creating parsers based on import kind."""

    _parsers: Dict[ImportKind, Callable[[], ImportParser]] = {}

    @classmethod
    def register_parser(cls, kind: ImportKind, builder: Callable[[], ImportParser]) -> None:
        """
        Register a parser for an import kind.

        Args:
            kind: Import kind handled by the parser
            builder: Parser class or zero-argument callable returning a parser
        """
        cls._parsers[kind] = builder

    @classmethod
    def get_parser(cls, kind: ImportKind) -> ImportParser:
        """
        Get a parser for an import kind.

        Raises:
            ValueError: If no parser is registered for the kind
        """
        builder = cls._parsers.get(kind)
        if builder is None:
            raise ValueError(f"No parser registered for import kind: {kind}")
        return builder()

    @classmethod
    def get_supported_kinds(cls) -> List[ImportKind]:
        return list(cls._parsers.keys())


ParserFactory.register_parser(ImportKind.FIX, lambda: NavAidParser(NavAidType.FIX))
ParserFactory.register_parser(ImportKind.VOR, lambda: NavAidParser(NavAidType.VOR))
ParserFactory.register_parser(ImportKind.NDB, lambda: NavAidParser(NavAidType.NDB))
ParserFactory.register_parser(ImportKind.BOUNDARY, BoundaryParser)
ParserFactory.register_parser(ImportKind.AIRPORT, AirportParser)
