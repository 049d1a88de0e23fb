"""
Turns uploaded bytes into text lines.

The ingestor knows nothing about the file grammars: it decodes, splits and
drops blank and comment lines. Which prefixes count as comments is decided
by each parser.
"""

import codecs
import logging
import re
from typing import Iterable, List, Optional, Sequence, Union

import chardet

from .. import config
from ..errors import EncodingError

logger = logging.getLogger(__name__)

UTF8_BOM = codecs.BOM_UTF8
UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)

LINE_SPLIT = re.compile(r'\r\n|\r|\n')


class FileIngestor:
    """Decode raw uploads and split them into meaningful lines."""

    def __init__(self,
                 max_bytes: Optional[int] = None,
                 fallback_encodings: Optional[Sequence[str]] = None,
                 min_confidence: Optional[float] = None):
        """
        Initialize the ingestor.

        Args:
            max_bytes: Largest accepted upload (defaults to config.MAX_UPLOAD_BYTES)
            fallback_encodings: Encodings tried when UTF-8 and detection fail
            min_confidence: Minimum chardet confidence to trust a detected encoding
        """
        self.max_bytes = max_bytes if max_bytes is not None else config.MAX_UPLOAD_BYTES
        self.fallback_encodings = list(fallback_encodings if fallback_encodings is not None
                                       else config.FALLBACK_ENCODINGS)
        self.min_confidence = (min_confidence if min_confidence is not None
                               else config.ENCODING_MIN_CONFIDENCE)

    def decode(self, raw: Union[bytes, bytearray, str]) -> str:
        """
        Decode uploaded content into text.

        Args:
            raw: Raw bytes, or text that was already decoded by the transport

        Returns:
            The decoded text

        Raises:
            EncodingError: If the content is too large or not text
        """
        if isinstance(raw, str):
            self._check_size(len(raw.encode('utf-8')))
            if '\x00' in raw:
                raise EncodingError("File content is not text (contains NUL characters)")
            return raw.lstrip('\ufeff')

        raw = bytes(raw)
        self._check_size(len(raw))

        if raw.startswith(UTF16_BOMS):
            try:
                text = raw.decode('utf-16').lstrip('\ufeff')
            except UnicodeDecodeError as e:
                raise EncodingError("File could not be decoded as UTF-16", details=str(e)) from e
            if '\x00' in text:
                raise EncodingError("File content is not text (contains NUL characters)")
            return text

        if b'\x00' in raw:
            raise EncodingError("File content is not text (contains NUL bytes)")

        if raw.startswith(UTF8_BOM):
            raw = raw[len(UTF8_BOM):]

        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError:
            pass

        for encoding in self._candidate_encodings(raw):
            try:
                text = raw.decode(encoding)
                logger.debug(f"Decoded upload using {encoding}")
                return text
            except (UnicodeDecodeError, LookupError):
                continue

        raise EncodingError("File could not be decoded as text",
                            details=f"tried utf-8, {', '.join(self._candidate_encodings(raw)) or 'no other encoding'}")

    def _check_size(self, size: int) -> None:
        if size > self.max_bytes:
            raise EncodingError(f"File is too large ({size} bytes, maximum is {self.max_bytes})")

    def _candidate_encodings(self, raw: bytes) -> List[str]:
        """Detected encoding first (when confident), then the configured fallbacks."""
        candidates = []
        result = chardet.detect(raw[:10000])
        encoding = result.get('encoding')
        confidence = result.get('confidence') or 0.0
        if encoding and confidence >= self.min_confidence:
            candidates.append(encoding.lower())
        for encoding in self.fallback_encodings:
            if encoding.lower() not in candidates:
                candidates.append(encoding.lower())
        return candidates

    def split_lines(self, text: str, comment_prefixes: Iterable[str] = ()) -> List[str]:
        """
        Split text into trimmed, non-empty lines in file order.

        Args:
            text: Decoded file content
            comment_prefixes: Line prefixes marking comments for this format

        Returns:
            List of lines with blanks and comments removed
        """
        prefixes = tuple(comment_prefixes)
        lines = []
        for line in LINE_SPLIT.split(text):
            line = line.strip()
            if not line:
                continue
            if prefixes and line.startswith(prefixes):
                continue
            lines.append(line)
        return lines

    def read(self, raw: Union[bytes, bytearray, str], comment_prefixes: Iterable[str] = ()) -> List[str]:
        """Decode and split in one step."""
        return self.split_lines(self.decode(raw), comment_prefixes)
