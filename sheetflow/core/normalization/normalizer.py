"""
Normalizer: rewrites free-text fields into canonical form before validation.
"""

from enum import Enum
from typing import Mapping

from sheetflow.core.errors import ContractError
from sheetflow.core.models import Record

STYLES = ("trim", "lower", "capitalize")


def canonical_text(value: str, style: str) -> str:
    """
    Rewrite one text value.

    Styles:
    - trim: strip surrounding whitespace
    - lower: trim, then lower-case
    - capitalize: trim, lower-case, then upper-case the first character

    Applying the same style twice gives the same result as applying it once.

    Args:
        value: Raw text
        style: One of STYLES

    Returns:
        Canonical text
    """
    text = value.strip()
    if style == "trim":
        return text
    text = text.lower()
    if style == "lower" or not text:
        return text
    first = text[0].upper()
    # Some characters expand when upper-cased (e.g. "ß" -> "SS")
    if len(first) != 1:
        return text
    return first + text[1:]


class Normalizer:
    """
    Applies a per-field normalization map to records.

    Numeric, date and status fields are never touched: only string values of
    the mapped fields are rewritten.
    """

    def __init__(self, normalization: Mapping[str, str], model: type[Record] | None = None):
        """
        Args:
            normalization: Field name -> style ("trim", "lower" or "capitalize")
            model: Entity model the field names must belong to

        Raises:
            ContractError: On an unknown style or undeclared field
        """
        for field_name, style in normalization.items():
            if style not in STYLES:
                raise ContractError(f"Unknown normalization style '{style}' for field '{field_name}'")
            if model is not None and field_name not in model.model_fields:
                raise ContractError(f"Normalization targets field '{field_name}' not declared by {model.__name__}")
        self.normalization = dict(normalization)
        self.model = model

    def normalize(self, record: Record | None) -> Record | None:
        """
        Return a normalized copy of the record (None for a None record).
        """
        if record is None:
            return None

        changes = {}
        for field_name, style in self.normalization.items():
            value = getattr(record, field_name, None)
            if not isinstance(value, str) or isinstance(value, Enum):
                continue
            canonical = canonical_text(value, style)
            if canonical != value:
                changes[field_name] = canonical
        return record.normalized_copy(**changes)

    def normalize_batch(self, records: list[Record]) -> list[Record]:
        return [self.normalize(record) for record in records]
