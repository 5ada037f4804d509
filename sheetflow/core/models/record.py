"""
Record base model shared by every entity type.

Records are immutable pydantic models. The only legitimate ways to obtain a
changed record are the explicit copy functions (normalized_copy, with_status
and the entity transitions built on them); none of them can touch the
identifier.
"""

import json
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .status import STATUS_METADATA, parse_status


class Record(BaseModel):
    """
    Base class for pipeline records.

    Subclasses declare an ``id`` field, a ``status`` field and the class-level
    metadata below.

    Attributes:
        entity_name: Registry name of the entity type
        status_enum: Closed status set used to resolve raw status cells
        default_status: Status assigned when the source leaves it blank
        format_fields: Fields (or derived properties) rendered by format()
    """

    model_config = ConfigDict(frozen=True)

    entity_name: ClassVar[str] = "record"
    status_enum: ClassVar[type[Enum] | None] = None
    default_status: ClassVar[Enum | None] = None
    format_fields: ClassVar[tuple[str, ...]] = ("id", "status")

    @model_validator(mode="before")
    @classmethod
    def blank_cells_to_none(cls, data: Any) -> Any:
        """Treat blank text cells as absent values."""
        if isinstance(data, dict):
            return {
                key: (None if isinstance(value, str) and not value.strip() else value)
                for key, value in data.items()
            }
        return data

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def resolve_status(cls, value: Any) -> Any:
        if cls.status_enum is not None:
            value = parse_status(cls.status_enum, value)
        if value is None:
            return cls.default_status
        return value

    @property
    def record_id(self) -> Any:
        """Identifier of the record (None when the source did not assign one)."""
        return getattr(self, "id", None)

    @classmethod
    def declares(cls, name: str) -> bool:
        """Whether ``name`` is a declared field or derived property of this entity."""
        return name in cls.model_fields or isinstance(getattr(cls, name, None), property)

    def snapshot(self) -> dict[str, Any]:
        """Return the declared field values as a plain mapping (no copying of values)."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def normalized_copy(self, **changes: Any) -> "Record":
        """
        Return a copy with rewritten field values.

        Args:
            **changes: Field values to replace

        Returns:
            New record with the same identifier

        Raises:
            ValueError: If the identifier or an undeclared field is targeted
        """
        if "id" in changes:
            raise ValueError("Record identifier cannot be changed")
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown fields for {self.entity_name}: {sorted(unknown)}")
        return self.model_copy(update=changes)

    def with_status(self, status: Any) -> "Record":
        """Return a copy carrying a new status (resolved against the status enum)."""
        if self.status_enum is not None:
            status = parse_status(self.status_enum, status)
        return self.normalized_copy(status=status)

    def to_row(self) -> dict[str, Any]:
        """
        Flatten the record for tabular sinks.

        UUIDs become strings and status members become their value; dates and
        numbers are passed through unchanged.
        """
        row = {}
        for name, value in self.snapshot().items():
            if isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, Enum):
                value = value.value
            row[name] = value
        return row

    def format(self) -> str:
        """Render the record's key fields as a JSON-style string."""
        rendered = {}
        for name in self.format_fields:
            value = getattr(self, name, None)
            if isinstance(value, Enum):
                info = STATUS_METADATA.get(type(value), {}).get(value)
                value = info.label if info else value.value
            rendered[name] = value
        return json.dumps(rendered, default=str, ensure_ascii=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record) or type(other) is not type(self):
            return NotImplemented
        if self.record_id is None and other.record_id is None:
            return self is other
        return self.record_id == other.record_id

    def __hash__(self) -> int:
        if self.record_id is None:
            return id(self)
        return hash((type(self).__name__, self.record_id))


class UUIDRecord(Record):
    """Record whose identifier is a UUID generated when the source has none."""

    id: UUID = Field(default_factory=uuid4)

    @field_validator("id", mode="before")
    @classmethod
    def assign_missing_id(cls, value: Any) -> Any:
        if value is None:
            return uuid4()
        return value
