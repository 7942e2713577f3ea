from doccore.fields.detector import FIELD_PATTERNS, detect_fields
from doccore.fields.models import DetectedField, FieldType

__all__ = ["FIELD_PATTERNS", "DetectedField", "FieldType", "detect_fields"]
