from collections.abc import Iterable
from dataclasses import dataclass

from doccore.pdf.content_stream import ContentOperator, OperatorKind

NO_TEXT_PLACEHOLDER = "[No extractable text]"

# Vertical moves at or below this size stay on the current line.
LINE_BREAK_DY = 1.0


@dataclass(frozen=True)
class PageRange:
    """1-based inclusive page window."""

    start: int
    end: int

    def clamp(self, total_pages: int) -> tuple[int, int]:
        """Return the 0-based ``[start_idx, end_idx)`` slice within the document."""
        start_idx = max(0, self.start - 1)
        end_idx = min(total_pages, self.end)
        return start_idx, max(start_idx, end_idx)


@dataclass(frozen=True)
class PageText:
    number: int
    width: float
    height: float
    text: str


def reconstruct_text(operators: Iterable[ContentOperator]) -> str:
    """Join shown strings into lines, breaking on any vertical text movement.

    Missing a break merges two semantic lines, so the rule errs towards
    breaking: ``T*``, ``BT`` and every ``Td``/``TD`` with ``|dy| > 1`` start
    a new line.
    """
    lines: list[str] = []
    current = ""

    def flush() -> None:
        nonlocal current
        stripped = current.strip()
        if stripped:
            lines.append(stripped)
        current = ""

    for op in sorted(operators, key=lambda o: o.offset):
        match op.kind:
            case OperatorKind.SHOW_TEXT:
                current += op.text.replace("\x00", "")
            case OperatorKind.NEW_LINE | OperatorKind.BEGIN_TEXT:
                flush()
            case OperatorKind.MOVE_TEXT:
                if abs(op.dy) > LINE_BREAK_DY:
                    flush()
    flush()
    return "\n".join(lines)


def page_banner(number: int, width: float, height: float) -> str:
    return f"--- Page {number} ({round(width)}x{round(height)}) ---"


def render_pages(
    pages: Iterable[PageText],
    total_pages: int,
    page_range: PageRange | None = None,
) -> str:
    """Format extracted pages with banners and the optional range note."""
    parts = [
        f"{page_banner(p.number, p.width, p.height)}\n{p.text or NO_TEXT_PLACEHOLDER}"
        for p in pages
    ]
    if page_range is not None and page_range.end > total_pages:
        _, end_idx = page_range.clamp(total_pages)
        parts.append(f"\n[Showing pages {page_range.start}-{end_idx} of {total_pages}]")
    return "\n\n".join(parts)
