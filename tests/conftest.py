import io
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from doubles import InMemoryDocumentIndex


def build_pdf(pages: list[list[str]], title: str | None = None, author: str | None = None) -> bytes:
    """Render one PDF page per entry, each line drawn 14pt below the last."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    if title:
        c.setTitle(title)
    if author:
        c.setAuthor(author)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 14
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def make_pdf() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Single page with one known line of text."""
    return build_pdf([["Hello PDF World"]], title="Service Agreement", author="Vault Tests")


@pytest.fixture()
def three_page_pdf_bytes() -> bytes:
    return build_pdf([["Page one content"], ["Page two content"], ["Page three content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF whose only page is blank."""
    return build_pdf([[]])


@pytest.fixture()
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (60, 20), "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture()
def index() -> InMemoryDocumentIndex:
    return InMemoryDocumentIndex()
