"""
In-memory record source.
"""

from typing import Any, Iterable, Mapping

from sheetflow.core.errors import ExtractionError
from sheetflow.core.models import Record
from sheetflow.observability.logger import get_logger

from .base import RecordSource
from .extractor import RecordExtractor

logger = get_logger(__name__)


class InMemorySource(RecordSource):
    """
    Serves records (or raw row mappings) held in memory.

    Record instances, and None entries, are passed through untouched; mappings
    go through the RecordExtractor.
    """

    def __init__(self, model: type[Record], items: Iterable[Record | Mapping[str, Any] | None]):
        super().__init__()
        self.extractor = RecordExtractor(model)
        self.items = list(items)

    def read_all(self) -> list[Record]:
        records = []
        self.skipped_rows = 0
        for row_number, item in enumerate(self.items, start=1):
            if item is None or isinstance(item, Record):
                records.append(item)
                continue
            try:
                records.append(self.extractor.extract(item, row_number))
            except ExtractionError as e:
                self.skipped_rows += 1
                logger.error(f"Skipping row: {e}", extra={"row_number": row_number})
        return records
