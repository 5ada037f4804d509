"""
Record sink interface.
"""

from abc import ABC, abstractmethod

from sheetflow.core.models import Record


class RecordSink(ABC):
    """Persists accepted records."""

    @abstractmethod
    def write_all(self, records: list[Record]) -> int:
        """
        Write every record.

        Args:
            records: Accepted records in pipeline order

        Returns:
            Number of records written

        Raises:
            SinkError: If the destination is unwritable
        """
        pass
