"""Tests for reading documents from disk."""

from pathlib import Path

import pytest

from tessera import DocumentReadError, TesseraError, read_document, read_source


class TestReadSource:
    def test_reads_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "a.hnmd"
        path.write_text("café ✨", encoding="utf-8")
        assert read_source(path) == "café ✨"

    def test_other_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "a.hnmd"
        path.write_bytes("café".encode("latin-1"))
        assert read_source(path, encoding="latin-1") == "café"

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.hnmd"
        with pytest.raises(DocumentReadError) as exc_info:
            read_source(missing)
        assert exc_info.value.path == str(missing)
        assert exc_info.value.reason == "file not found"
        assert str(exc_info.value) == f"{missing}: file not found"

    def test_bad_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "bin.hnmd"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(DocumentReadError, match="not valid utf-8 text"):
            read_source(path)

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentReadError):
            read_source(tmp_path)

    def test_is_a_tessera_error(self, tmp_path: Path) -> None:
        with pytest.raises(TesseraError):
            read_source(tmp_path / "missing.hnmd")

    def test_failure_is_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("ERROR", logger="tessera"):
            with pytest.raises(DocumentReadError):
                read_source(tmp_path / "missing.hnmd")
        assert any(r.name == "tessera.loader" for r in caplog.records)


class TestReadDocument:
    def test_source_file_set(self, tmp_path: Path) -> None:
        path = tmp_path / "page.hnmd"
        path.write_text("# Hi", encoding="utf-8")
        doc = read_document(path)
        assert doc.source_file == str(path)
        assert doc.source == "# Hi"
        assert str(doc.locate(2)) == f"{path}:1:3"

    def test_parse_errors_do_not_raise(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "bad.hnmd"
        path.write_text("</A>", encoding="utf-8")
        with caplog.at_level("INFO", logger="tessera"):
            doc = read_document(path)
        assert doc.error_count == 1
        assert any("1 error" in r.getMessage() for r in caplog.records)
