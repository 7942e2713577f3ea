import base64
import re
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pymupdf

from doccore.logging.logger import Log
from doccore.pdf.content_stream import iter_operators
from doccore.pdf.exceptions import (
    InvalidColorError,
    InvalidSignatureImageError,
    PageOutOfRangeError,
    PdfWriteLockError,
    RectOutOfBoundsError,
    UnsupportedAnnotationError,
)
from doccore.pdf.models import AnnotationType, FieldRect, PdfAnnotationData, PdfInfo, Rect
from doccore.pdf.text_reconstructor import PageRange, PageText, reconstruct_text, render_pages
from doccore.vault.paths import VaultPaths, atomic_write_bytes

HIGHLIGHT_OPACITY = 0.3
UNDERLINE_OPACITY = 0.8
NOTE_MAX_FONT_SIZE = 12.0
FIELD_MAX_FONT_SIZE = 11.0
TEXT_FONT = "helv"
BOUNDS_TOLERANCE = 0.01

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
HEX_COLOR_RE = re.compile(r"#?([0-9a-fA-F]{6})")
PDF_DATE_RE = re.compile(
    r"D:(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?"
    r"(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz+\-])?(?P<tzh>\d{2})?'?(?P<tzm>\d{2})?'?"
)


@dataclass(eq=False)
class PdfWriteHandle:
    """Proof that the caller holds the single write slot for ``path``.

    Obtained from ``PdfDocumentService.open_for_write``; mutation methods
    refuse handles that are released or were issued by another service.
    """

    path: Path


def parse_hex_color(value: str) -> tuple[float, float, float]:
    """``"#ff8800"`` -> normalized RGB in 0..1."""
    match = HEX_COLOR_RE.fullmatch(value.strip())
    if match is None:
        raise InvalidColorError(f"Invalid colour '{value}', expected 6 hex digits")
    digits = match.group(1)
    return (
        int(digits[0:2], 16) / 255,
        int(digits[2:4], 16) / 255,
        int(digits[4:6], 16) / 255,
    )


def parse_pdf_date(raw: str | None) -> str | None:
    """Convert a PDF date string (``D:YYYYMMDDHHmmSS+HH'mm'``) to ISO 8601 UTC."""
    if not raw:
        return None
    match = PDF_DATE_RE.match(raw.strip())
    if match is None:
        return None
    parts = match.groupdict()
    try:
        moment = datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None
    if parts["tz"] in ("+", "-"):
        offset = timedelta(hours=int(parts["tzh"] or 0), minutes=int(parts["tzm"] or 0))
        moment = moment - offset if parts["tz"] == "+" else moment + offset
    return moment.isoformat().replace("+00:00", "Z")


def _empty_to_none(value: str | None) -> str | None:
    return value or None


class PdfDocumentService:
    """Metadata, text extraction and drawing operations over PDF files.

    Every mutation is a whole-file read-modify-write: the document is loaded
    into memory, validated, drawn on, serialized and then atomically swapped
    into place. Validation failures therefore never touch the file.
    """

    def __init__(self, vault_paths: VaultPaths) -> None:
        self._paths = vault_paths
        self._guard = threading.Lock()
        self._writers: dict[Path, PdfWriteHandle] = {}

    def resolve_path(self, path: str | Path) -> Path:
        return self._paths.resolve(path)

    # -- read side ---------------------------------------------------------

    def get_info(self, path: str | Path) -> PdfInfo:
        with self._open(self.resolve_path(path)) as doc:
            meta = doc.metadata or {}
            return PdfInfo(
                page_count=doc.page_count,
                title=_empty_to_none(meta.get("title")),
                author=_empty_to_none(meta.get("author")),
                subject=_empty_to_none(meta.get("subject")),
                creator=_empty_to_none(meta.get("creator")),
                creation_date=parse_pdf_date(meta.get("creationDate")),
                modification_date=parse_pdf_date(meta.get("modDate")),
            )

    def read_base64(self, path: str | Path) -> str:
        return base64.b64encode(self.resolve_path(path).read_bytes()).decode("ascii")

    def extract_text(self, path: str | Path, page_range: PageRange | None = None) -> str:
        """Extract bannered page text, optionally limited to ``page_range``.

        Raises:
            FileNotFoundError: if the file does not exist.
        """
        source = self.resolve_path(path)
        raw = source.read_bytes()
        try:
            doc = pymupdf.open(stream=raw, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            Log.warning(f"Cannot open {source} for text extraction: {exc}")
            return ""

        with doc:
            if doc.needs_pass and not doc.authenticate(""):
                Log.warning(f"Cannot extract text from {source}: password required")
                return ""
            total = doc.page_count
            start, end = page_range.clamp(total) if page_range else (0, total)
            pages = [self._page_text(doc, index) for index in range(start, end)]
        return render_pages(pages, total, page_range)

    def _page_text(self, doc: pymupdf.Document, index: int) -> PageText:
        try:
            page = doc[index]
            box = page.mediabox
        except Exception as exc:
            Log.warning(f"Cannot load page {index + 1}: {exc}")
            return PageText(number=index + 1, width=0, height=0, text="")
        try:
            content = b"\n".join(doc.xref_stream(xref) or b"" for xref in page.get_contents())
        except Exception as exc:
            Log.warning(f"Cannot read content stream of page {index + 1}: {exc}")
            content = b""
        text = reconstruct_text(iter_operators(content))
        return PageText(number=index + 1, width=box.width, height=box.height, text=text)

    # -- write side --------------------------------------------------------

    @contextmanager
    def open_for_write(self, path: str | Path) -> Iterator[PdfWriteHandle]:
        """Reserve the single write slot for ``path`` for the ``with`` block.

        Raises:
            PdfWriteLockError: if another handle for the same file is active.
        """
        key = self.resolve_path(path).resolve()
        handle = PdfWriteHandle(key)
        with self._guard:
            if key in self._writers:
                raise PdfWriteLockError(f"{key} is already open for writing")
            self._writers[key] = handle
        try:
            yield handle
        finally:
            with self._guard:
                self._writers.pop(key, None)

    def add_annotation(self, handle: PdfWriteHandle, annotation: PdfAnnotationData) -> None:
        with self._load_for_write(handle) as doc:
            page = self._page(doc, annotation.page)
            self._check_rect(page, annotation.rect, annotation.page)
            color = parse_hex_color(annotation.color)
            rect = annotation.rect
            to_page = page.transformation_matrix

            match annotation.type:
                case AnnotationType.HIGHLIGHT:
                    page.draw_rect(
                        self._to_page_rect(page, rect),
                        color=None,
                        fill=color,
                        fill_opacity=HIGHLIGHT_OPACITY,
                    )
                case AnnotationType.UNDERLINE:
                    page.draw_line(
                        pymupdf.Point(rect.x, rect.y) * to_page,
                        pymupdf.Point(rect.x + rect.width, rect.y) * to_page,
                        color=color,
                        width=1,
                        stroke_opacity=UNDERLINE_OPACITY,
                    )
                case AnnotationType.TEXT_NOTE | AnnotationType.TEXT_BOX:
                    if annotation.text:
                        size = self._font_size(rect, NOTE_MAX_FONT_SIZE, 0.8)
                        page.insert_text(
                            pymupdf.Point(rect.x + 2, rect.y + 2) * to_page,
                            annotation.text,
                            fontsize=size,
                            fontname=TEXT_FONT,
                            color=color,
                        )
                case AnnotationType.SIGNATURE:
                    raise UnsupportedAnnotationError(
                        "Signature annotations are images; use place_signature"
                    )

            self._save(doc, handle.path)
        Log.info(f"Added {annotation.type.value} annotation to page {annotation.page} of {handle.path}")

    def place_signature(
        self,
        handle: PdfWriteHandle,
        page_index: int,
        rect: Rect,
        png_base64: str,
    ) -> None:
        png_bytes = self._decode_png(png_base64)
        with self._load_for_write(handle) as doc:
            page = self._page(doc, page_index)
            self._check_rect(page, rect, page_index)
            page.insert_image(
                self._to_page_rect(page, rect),
                stream=png_bytes,
                keep_proportion=False,
            )
            self._save(doc, handle.path)
        Log.info(f"Placed signature on page {page_index} of {handle.path}")

    def fill_field(self, handle: PdfWriteHandle, field_rect: FieldRect, value: str) -> None:
        """Write ``value`` left-aligned and vertically centred in the field."""
        with self._load_for_write(handle) as doc:
            page = self._page(doc, field_rect.page)
            rect = field_rect.rect
            self._check_rect(page, rect, field_rect.page)
            size = self._font_size(rect, FIELD_MAX_FONT_SIZE, 0.75)
            baseline = pymupdf.Point(rect.x + 1, rect.y + (rect.height - size) / 2)
            page.insert_text(
                baseline * page.transformation_matrix,
                value,
                fontsize=size,
                fontname=TEXT_FONT,
                color=(0, 0, 0),
            )
            self._save(doc, handle.path)
        Log.info(f"Filled field on page {field_rect.page} of {handle.path}")

    def flatten(self, handle: PdfWriteHandle, output_path: str | Path | None = None) -> str:
        """Bake annotations and form widgets into page content and save a copy.

        Returns the output path, vault-relative when it lies inside the vault.
        """
        if output_path is not None:
            target = self.resolve_path(output_path)
        else:
            target = handle.path.with_name(f"{_strip_pdf_suffix(handle.path.name)} (signed).pdf")

        with self._load_for_write(handle) as doc:
            doc.bake()
            self._save(doc, target)
        Log.info(f"Flattened {handle.path} into {target}")
        return self._paths.relative(target)

    # -- sidecar notes -----------------------------------------------------

    def sidecar_path(self, pdf_path: str | Path) -> Path:
        absolute = self.resolve_path(pdf_path)
        if absolute.suffix.lower() == ".pdf":
            return absolute.with_suffix(".md")
        return absolute.with_name(absolute.name + ".md")

    def read_sidecar(self, pdf_path: str | Path) -> str | None:
        sidecar = self.sidecar_path(pdf_path)
        if not sidecar.exists():
            return None
        return sidecar.read_text(encoding="utf-8")

    def write_sidecar(self, pdf_path: str | Path, content: str) -> None:
        sidecar = self.sidecar_path(pdf_path)
        sidecar.parent.mkdir(parents=True, exist_ok=True)
        sidecar.write_text(content, encoding="utf-8")

    # -- helpers -----------------------------------------------------------

    def _open(self, path: Path) -> pymupdf.Document:
        doc = pymupdf.open(stream=path.read_bytes(), filetype="pdf")  # type: ignore[no-untyped-call]
        if doc.needs_pass:
            doc.authenticate("")
        return doc

    def _load_for_write(self, handle: PdfWriteHandle) -> pymupdf.Document:
        with self._guard:
            if self._writers.get(handle.path) is not handle:
                raise PdfWriteLockError(f"Write handle for {handle.path} is not active")
        return self._open(handle.path)

    def _save(self, doc: pymupdf.Document, target: Path) -> None:
        atomic_write_bytes(target, doc.tobytes(garbage=3, deflate=True))

    @staticmethod
    def _page(doc: pymupdf.Document, index: int) -> pymupdf.Page:
        if index < 0 or index >= doc.page_count:
            raise PageOutOfRangeError(
                f"Page {index} out of range (0-{doc.page_count - 1})"
            )
        return doc[index]

    @staticmethod
    def _check_rect(page: pymupdf.Page, rect: Rect, index: int) -> None:
        box = page.mediabox
        fits = (
            rect.width >= 0
            and rect.height >= 0
            and rect.x >= box.x0 - BOUNDS_TOLERANCE
            and rect.y >= box.y0 - BOUNDS_TOLERANCE
            and rect.x + rect.width <= box.x1 + BOUNDS_TOLERANCE
            and rect.y + rect.height <= box.y1 + BOUNDS_TOLERANCE
        )
        if not fits:
            raise RectOutOfBoundsError(
                f"Rectangle {rect} does not fit page {index} "
                f"({round(box.width)}x{round(box.height)})"
            )

    @staticmethod
    def _to_page_rect(page: pymupdf.Page, rect: Rect) -> pymupdf.Rect:
        pdf_rect = pymupdf.Rect(rect.x, rect.y, rect.x + rect.width, rect.y + rect.height)
        return pdf_rect * page.transformation_matrix

    @staticmethod
    def _font_size(rect: Rect, cap: float, ratio: float) -> float:
        size = min(cap, rect.height * ratio)
        if size <= 0:
            raise RectOutOfBoundsError(f"Rectangle {rect} is too small for text")
        return size

    @staticmethod
    def _decode_png(png_base64: str) -> bytes:
        payload = png_base64.split(",", 1)[1] if png_base64.startswith("data:") else png_base64
        try:
            data = base64.b64decode(payload, validate=True)
        except ValueError as exc:
            raise InvalidSignatureImageError(f"Signature is not valid base64: {exc}") from exc
        if not data.startswith(PNG_SIGNATURE):
            raise InvalidSignatureImageError("Signature image is not a PNG")
        return data


def _strip_pdf_suffix(name: str) -> str:
    return name[:-4] if name.lower().endswith(".pdf") else name
