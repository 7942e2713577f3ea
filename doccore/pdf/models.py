from dataclasses import dataclass
from enum import Enum


class AnnotationType(Enum):
    HIGHLIGHT = "highlight"
    UNDERLINE = "underline"
    TEXT_NOTE = "text-note"
    TEXT_BOX = "text-box"
    SIGNATURE = "signature"


class AnnotationAuthor(Enum):
    USER = "user"
    CLAUDE = "claude"


@dataclass(frozen=True)
class Rect:
    """Rectangle in PDF user space (origin at the bottom-left of the page)."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class FieldRect:
    """A fill-in target: page index (0-based) plus its rectangle."""

    page: int
    rect: Rect


@dataclass(frozen=True)
class PdfAnnotationData:
    id: str
    type: AnnotationType
    page: int
    rect: Rect
    color: str
    author: AnnotationAuthor = AnnotationAuthor.USER
    text: str | None = None


@dataclass(frozen=True)
class PdfInfo:
    """Document metadata, read fresh on every request."""

    page_count: int
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    creation_date: str | None = None
    modification_date: str | None = None
