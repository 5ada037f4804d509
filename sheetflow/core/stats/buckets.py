"""
Fixed histogram buckets.

Each bucket is a half-open range [lower, upper). A missing bound is unbounded.
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Bucket:
    label: str
    lower: float | None = None
    upper: float | None = None

    def contains(self, value: float) -> bool:
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value >= self.upper:
            return False
        return True


def bucket_for(value: float, buckets: Iterable[Bucket]) -> Bucket | None:
    """Return the first bucket containing value, None if no bucket does."""
    for bucket in buckets:
        if bucket.contains(value):
            return bucket
    return None


AMOUNT_BUCKETS = (
    Bucket("<100", upper=100),
    Bucket("100–499", 100, 500),
    Bucket("500–999", 500, 1000),
    Bucket("≥1000", lower=1000),
)

SALARY_BUCKETS = (
    Bucket("<30,000", upper=30_000),
    Bucket("30,000–49,999", 30_000, 50_000),
    Bucket("50,000–79,999", 50_000, 80_000),
    Bucket("80,000–119,999", 80_000, 120_000),
    Bucket("≥120,000", lower=120_000),
)

DISCOUNT_BUCKETS = (
    Bucket("<10", upper=10),
    Bucket("10–24", 10, 25),
    Bucket("25–49", 25, 50),
    Bucket("≥50", lower=50),
)
