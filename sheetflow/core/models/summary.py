"""
Summary models: derived, non-persistent aggregates over a snapshot of valid records.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .record import Record


class GroupStats(BaseModel):
    """
    Statistics for one group of records sharing a grouping key.

    Attributes:
        key: Grouping key value
        count: Number of records in the group
        means: Mean per numeric field (0.0 when no record has the field)
        extrema: Record with the largest value per field (None when absent)
        histogram: Bucket label -> count, non-empty buckets only, in bucket order
    """

    model_config = ConfigDict(frozen=True)

    key: Any
    count: int = 0
    means: dict[str, float] = Field(default_factory=dict)
    extrema: dict[str, Record | None] = Field(default_factory=dict)
    histogram: dict[str, int] = Field(default_factory=dict)


class Summary(BaseModel):
    """
    Overall statistics for one pipeline run.

    Attributes:
        entity: Entity type summarized
        total_count: Number of records summarized
        means: Mean per numeric field, absent values ignored, 0.0 on empty input
        sum_field: Integer field summed into ``total``
        total: Integer sum of ``sum_field`` (absent values count as 0)
        groups: Set of grouping-key values present
        status_counts: Status -> count, zero-count statuses absent
        group_stats: Grouping-key value -> GroupStats
        histogram: Range histogram over the whole snapshot
        top_records: Top-N records by the ranking field
    """

    model_config = ConfigDict(frozen=True)

    entity: str
    total_count: int = 0
    means: dict[str, float] = Field(default_factory=dict)
    sum_field: str | None = None
    total: int = 0
    groups: frozenset[Any] = Field(default_factory=frozenset)
    status_counts: dict[Any, int] = Field(default_factory=dict)
    group_stats: dict[Any, GroupStats] = Field(default_factory=dict)
    histogram: dict[str, int] = Field(default_factory=dict)
    top_records: list[Record] = Field(default_factory=list)

    def mean(self, field_name: str) -> float:
        """Mean of a summarized field (0.0 when it was not summarized)."""
        return self.means.get(field_name, 0.0)
