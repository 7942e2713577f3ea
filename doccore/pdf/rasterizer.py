from collections.abc import Iterator
from pathlib import Path

import pymupdf

from doccore.logging.logger import Log


class PdfRasterizer:
    """Renders PDF pages to PNG for OCR."""

    def __init__(self, scale: float = 2.0, max_pages: int = 20) -> None:
        self._scale = scale
        self._max_pages = max_pages

    def render_pages(self, path: Path) -> Iterator[tuple[int, bytes]]:
        """Yield ``(page_number, png_bytes)`` for up to ``max_pages`` pages.

        Pages that fail to render are logged and skipped.
        """
        matrix = pymupdf.Matrix(self._scale, self._scale)
        with pymupdf.open(stream=path.read_bytes(), filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            for index in range(min(doc.page_count, self._max_pages)):
                try:
                    pixmap = doc[index].get_pixmap(matrix=matrix)
                    png = pixmap.tobytes("png")
                except Exception as exc:
                    Log.warning(f"Rendering page {index + 1} of {path} failed: {exc}")
                    continue
                yield index + 1, png
