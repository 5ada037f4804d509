"""
Grouping, ranking and summary statistics over accepted records.
"""

from .aggregator import (
    at_least,
    count_by_status,
    filter_records,
    group_by,
    group_statistics,
    histogram,
    matches,
    maximum,
    mean,
    summarize,
    top_n,
    total,
)
from .buckets import AMOUNT_BUCKETS, DISCOUNT_BUCKETS, SALARY_BUCKETS, Bucket, bucket_for

__all__ = [
    "group_by",
    "count_by_status",
    "mean",
    "total",
    "histogram",
    "top_n",
    "maximum",
    "at_least",
    "matches",
    "filter_records",
    "group_statistics",
    "summarize",
    "Bucket",
    "bucket_for",
    "AMOUNT_BUCKETS",
    "SALARY_BUCKETS",
    "DISCOUNT_BUCKETS",
]
