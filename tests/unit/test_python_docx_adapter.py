import io
from pathlib import Path

import docx
import pytest
from PIL import Image

from doccore.ingestion.exceptions import DocxConversionError
from doccore.office.python_docx_adapter import PythonDocxConverter


@pytest.fixture()
def letter_docx(tmp_path: Path) -> Path:
    document = docx.Document()
    document.add_heading("Tenancy Agreement", level=1)
    document.add_paragraph("Landlord: [Name]")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Rent"
    table.cell(0, 1).text = "950 EUR"
    table.cell(1, 0).text = "Deposit"
    table.cell(1, 1).text = "1900 EUR"
    document.add_paragraph("Signed on [Date]")
    path = tmp_path / "letter.docx"
    document.save(str(path))
    return path


class TestPythonDocxConverter:
    def test_paragraphs_and_tables_in_body_order(self, letter_docx: Path) -> None:
        conversion = PythonDocxConverter().convert(letter_docx)

        assert conversion.text.split("\n") == [
            "Tenancy Agreement",
            "Landlord: [Name]",
            "Rent\t950 EUR",
            "Deposit\t1900 EUR",
            "Signed on [Date]",
        ]
        assert conversion.warnings == []

    def test_inline_images_produce_warning(self, tmp_path: Path) -> None:
        buf = io.BytesIO()
        Image.new("RGB", (10, 10), "black").save(buf, format="PNG")
        buf.seek(0)
        document = docx.Document()
        document.add_paragraph("Logo below")
        document.add_picture(buf)
        path = tmp_path / "logo.docx"
        document.save(str(path))

        conversion = PythonDocxConverter().convert(path)

        assert "Logo below" in conversion.text
        assert conversion.warnings == ["Skipped 1 inline image(s)"]

    def test_legacy_doc_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "old.doc"
        path.write_bytes(b"\xd0\xcf\x11\xe0")
        with pytest.raises(DocxConversionError, match="legacy .doc"):
            PythonDocxConverter().convert(path)

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.docx"
        path.write_bytes(b"not a zip archive")
        with pytest.raises(DocxConversionError):
            PythonDocxConverter().convert(path)
