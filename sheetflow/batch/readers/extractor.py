"""
RecordExtractor - turns raw row mappings into entity records.
"""

from typing import Any, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from sheetflow.core.errors import ExtractionError
from sheetflow.core.models import Record
from sheetflow.observability.logger import get_logger

logger = get_logger(__name__)


class RecordExtractor:
    """
    Builds records through pydantic lax validation ("12" becomes 12,
    "2026-05-01" becomes a date). Unknown columns are ignored.
    """

    def __init__(self, model: type[Record]):
        """
        Args:
            model: Entity model to build
        """
        self.model = model

    def extract(self, row: Mapping[str, Any], row_number: int | None = None) -> Record:
        """
        Build one record.

        Args:
            row: Column name -> raw cell value
            row_number: 1-based position in the source, for error context

        Returns:
            Record instance

        Raises:
            ExtractionError: If a cell cannot be converted to its field type
        """
        try:
            return self.model.model_validate(dict(row))
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'row'}: {error['msg']}"
                for error in e.errors()
            )
            raise ExtractionError(f"cannot build {self.model.__name__}: {problems}", row_number) from e

    def extract_all(self, rows: Iterable[Mapping[str, Any]]) -> tuple[list[Record], int]:
        """
        Build records from rows, skipping the ones that fail.

        Args:
            rows: Raw rows in source order

        Returns:
            Tuple of (records, number of skipped rows)
        """
        records = []
        skipped = 0
        for row_number, row in enumerate(rows, start=1):
            try:
                records.append(self.extract(row, row_number))
            except ExtractionError as e:
                skipped += 1
                logger.error(
                    f"Skipping row: {e}",
                    extra={"entity": self.model.entity_name, "row_number": row_number},
                )
        return records, skipped
