"""
In-memory record sink.
"""

from sheetflow.core.models import Record

from .base import RecordSink


class InMemorySink(RecordSink):
    """Keeps the records of the latest write and counts write calls."""

    def __init__(self):
        self.records: list[Record] = []
        self.write_calls = 0

    def write_all(self, records: list[Record]) -> int:
        self.write_calls += 1
        self.records = list(records)
        return len(self.records)
