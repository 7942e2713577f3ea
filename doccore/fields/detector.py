import re
from dataclasses import dataclass

from doccore.fields.models import DetectedField, FieldType

PAGE_BANNER_RE = re.compile(r"---\s*Page\s+(\d+).*?---")


@dataclass(frozen=True)
class FieldPattern:
    pattern: re.Pattern[str]
    type: FieldType
    label: str


def _bracket(body: str) -> re.Pattern[str]:
    return re.compile(rf"\[{body}\]", re.IGNORECASE)


# Most specific first: on overlapping matches the earlier entry wins.
FIELD_PATTERNS: tuple[FieldPattern, ...] = (
    FieldPattern(_bracket(r"company\s*name"), FieldType.COMPANY, "Company Name"),
    FieldPattern(_bracket(r"company"), FieldType.COMPANY, "Company"),
    FieldPattern(_bracket(r"address"), FieldType.ADDRESS, "Address"),
    FieldPattern(_bracket(r"city,?\s*state,?\s*zip"), FieldType.ADDRESS, "City, State, ZIP"),
    FieldPattern(_bracket(r"date"), FieldType.DATE, "Date"),
    FieldPattern(_bracket(r"effective\s*date"), FieldType.DATE, "Effective Date"),
    FieldPattern(_bracket(r"name"), FieldType.NAME, "Name"),
    FieldPattern(_bracket(r"signatory\s*name"), FieldType.NAME, "Signatory Name"),
    FieldPattern(_bracket(r"printed?\s*name"), FieldType.NAME, "Printed Name"),
    FieldPattern(_bracket(r"title"), FieldType.TITLE, "Title"),
    FieldPattern(_bracket(r"signature"), FieldType.SIGNATURE, "Signature"),
    FieldPattern(_bracket(r"insert[^\[\]]*"), FieldType.GENERIC, "Insert Field"),
    FieldPattern(re.compile(r"_{5,}"), FieldType.GENERIC, "Fill-in Field"),
    FieldPattern(re.compile(r"\[\s*\]"), FieldType.GENERIC, "Checkbox/Field"),
    FieldPattern(re.compile(r"\[___+\]"), FieldType.GENERIC, "Blank Field"),
)


def _split_pages(text: str) -> list[tuple[int, str]]:
    """Return ``(page_index, block)`` pairs; text before any banner is page 0."""
    parts = PAGE_BANNER_RE.split(text)
    blocks = [(0, parts[0])]
    for number, block in zip(parts[1::2], parts[2::2]):
        blocks.append((int(number) - 1, block))
    return blocks


def _overlaps(span: tuple[int, int], claimed: list[tuple[int, int]]) -> bool:
    start, end = span
    return any(start < c_end and c_start < end for c_start, c_end in claimed)


def detect_fields(text: str) -> list[DetectedField]:
    """Find fill-in markers in bannered text, in page, line and table order."""
    fields: list[DetectedField] = []
    for page, block in _split_pages(text):
        if not block.strip():
            continue
        for line_number, line in enumerate(block.split("\n")):
            claimed: list[tuple[int, int]] = []
            for entry in FIELD_PATTERNS:
                match = entry.pattern.search(line)
                if match is None or _overlaps(match.span(), claimed):
                    continue
                claimed.append(match.span())
                fields.append(
                    DetectedField(
                        id=f"field-{len(fields) + 1}",
                        label=entry.label,
                        page=page,
                        line_number=line_number,
                        matched_text=match.group(0),
                        suggested_type=entry.type,
                    )
                )
    return fields
