"""
Record source interface.
"""

from abc import ABC, abstractmethod

from sheetflow.core.models import Record


class RecordSource(ABC):
    """
    Produces raw records from storage.

    Rows that cannot become records are skipped, logged and counted in
    ``skipped_rows`` (reset on every read_all call).
    """

    def __init__(self):
        self.skipped_rows = 0

    @abstractmethod
    def read_all(self) -> list[Record]:
        """
        Read every record from the source.

        Returns:
            Records in source order

        Raises:
            SourceError: If the storage is unreachable or unreadable
        """
        pass
