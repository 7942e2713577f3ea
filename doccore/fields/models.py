from dataclasses import dataclass
from enum import Enum


class FieldType(Enum):
    COMPANY = "company"
    ADDRESS = "address"
    DATE = "date"
    NAME = "name"
    TITLE = "title"
    SIGNATURE = "signature"
    GENERIC = "generic"


@dataclass(frozen=True)
class DetectedField:
    """A blank-to-fill marker found in extracted text.

    ``page`` is 0-based; ``line_number`` indexes the page block split on
    newlines (the banner's trailing newline makes the first text line 1).
    """

    id: str
    label: str
    page: int
    line_number: int
    matched_text: str
    suggested_type: FieldType
