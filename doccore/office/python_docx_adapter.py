from pathlib import Path

import docx
from docx.table import Table
from docx.text.paragraph import Paragraph

from doccore.ingestion.exceptions import DocxConversionError
from doccore.office.base import BaseDocxConverter, DocxConversion


class PythonDocxConverter(BaseDocxConverter):
    """Extracts paragraph and table text with python-docx, in body order."""

    def convert(self, path: Path) -> DocxConversion:
        if path.suffix.lower() == ".doc":
            raise DocxConversionError(
                f"{path.name}: legacy .doc files are not supported, save as .docx"
            )
        try:
            document = docx.Document(str(path))
        except Exception as exc:
            raise DocxConversionError(f"python-docx could not open {path.name}: {exc}") from exc

        lines: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Paragraph):
                lines.append(block.text)
            elif isinstance(block, Table):
                lines.extend(self._table_lines(block))

        warnings: list[str] = []
        images = len(document.inline_shapes)
        if images:
            warnings.append(f"Skipped {images} inline image(s)")
        return DocxConversion(text="\n".join(lines), warnings=warnings)

    @staticmethod
    def _table_lines(table: Table) -> list[str]:
        return ["\t".join(cell.text for cell in row.cells) for row in table.rows]
