import pytest

from airac_sync.errors import EncodingError, InputError
from airac_sync.ingest import FileIngestor


class TestFileIngestor:
    """Decoding and line splitting of uploads."""

    @pytest.fixture
    def ingestor(self):
        return FileIngestor()

    def test_utf8_with_bom(self, ingestor):
        assert ingestor.decode(b'\xef\xbb\xbfABC;1\n') == 'ABC;1\n'

    def test_text_passes_through(self, ingestor):
        assert ingestor.decode('\ufeffABC') == 'ABC'

    def test_fallback_encoding(self):
        ingestor = FileIngestor(fallback_encodings=['cp1252'], min_confidence=1.01)
        assert ingestor.decode('CAFÉ;1'.encode('cp1252')) == 'CAFÉ;1'

    def test_undecodable_bytes(self):
        ingestor = FileIngestor(fallback_encodings=[], min_confidence=1.01)
        with pytest.raises(EncodingError):
            ingestor.decode(b'ABC\xff\xfe\xfa')

    def test_nul_bytes_rejected(self, ingestor):
        with pytest.raises(EncodingError, match="NUL"):
            ingestor.decode(b'ABC\x00DEF')

    def test_size_limit(self):
        ingestor = FileIngestor(max_bytes=10)
        with pytest.raises(InputError, match="too large"):
            ingestor.decode(b'x' * 11)

    def test_size_limit_applies_to_text(self):
        ingestor = FileIngestor(max_bytes=10)
        with pytest.raises(InputError, match="too large"):
            ingestor.decode("A" * 1000)

    def test_utf16_with_bom(self, ingestor):
        raw = "ABC;112.300\n".encode("utf-16")
        assert ingestor.decode(raw) == "ABC;112.300\n"

    def test_utf16_big_endian_with_bom(self, ingestor):
        raw = b"\xfe\xff" + "XYZ;1".encode("utf-16-be")
        assert ingestor.decode(raw) == "XYZ;1"

    def test_split_lines_handles_all_line_endings(self, ingestor):
        text = "A;1\r\nB;2\rC;3\n\n   \n  D;4  \n"
        assert ingestor.split_lines(text) == ['A;1', 'B;2', 'C;3', 'D;4']

    def test_split_lines_drops_comments(self, ingestor):
        text = "# header\n// note\n; old style\nA;1\n"
        assert ingestor.split_lines(text, ('#', '//', ';')) == ['A;1']

    def test_read(self, ingestor):
        assert ingestor.read(b'A;1\r\n# c\r\nB;2', ('#',)) == ['A;1', 'B;2']
