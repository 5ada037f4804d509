"""
Aggregator: null-safe statistics over a snapshot of records.

All functions only read the records they are given. Field names may refer to
declared fields or to derived properties (e.g. Employee.age).
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from sheetflow.core.errors import ContractError
from sheetflow.core.models import GroupStats, Record, Summary

from .buckets import Bucket, bucket_for

if TYPE_CHECKING:
    from sheetflow.core.profiles import EntityProfile

Predicate = Callable[[Record], bool]


def _require_declared(record: Record, field_name: str) -> None:
    if not type(record).declares(field_name):
        raise ContractError(f"{type(record).__name__} does not declare '{field_name}'")


def _numbers(records: Iterable[Record], field_name: str) -> list[int | float]:
    values = []
    for record in records:
        _require_declared(record, field_name)
        value = getattr(record, field_name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ContractError(f"Field '{field_name}' is not numeric: {value!r}")
        values.append(value)
    return values


def group_by(records: Iterable[Record], key: str) -> dict[Any, list[Record]]:
    """
    Partition records by a grouping key.

    Records lacking the key are excluded; insertion order is preserved within
    each group and across groups (first appearance).

    Raises:
        ContractError: If the key is undeclared or holds an unsupported type
    """
    groups: dict[Any, list[Record]] = {}
    for record in records:
        _require_declared(record, key)
        value = getattr(record, key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, str | int | Enum):
            raise ContractError(f"Unsupported grouping key type for '{key}': {type(value).__name__}")
        groups.setdefault(value, []).append(record)
    return groups


def count_by_status(records: Iterable[Record], field_name: str = "status") -> dict[Any, int]:
    """Count records per status value; zero-count statuses are absent."""
    counts: dict[Any, int] = {}
    for record in records:
        value = getattr(record, field_name, None)
        if value is None:
            continue
        counts[value] = counts.get(value, 0) + 1
    return counts


def mean(records: Iterable[Record], field_name: str) -> float:
    """Arithmetic mean over records where the field is present, 0.0 when none are."""
    values = _numbers(records, field_name)
    if not values:
        return 0.0
    return sum(values) / len(values)


def total(records: Iterable[Record], field_name: str) -> int:
    """
    Integer sum of a field, absent values counting as 0.

    Raises:
        ContractError: If a present value is not an integer
    """
    result = 0
    for value in _numbers(records, field_name):
        if not isinstance(value, int):
            raise ContractError(f"Field '{field_name}' is not an integer field: {value!r}")
        result += value
    return result


def histogram(records: Iterable[Record], field_name: str, buckets: Sequence[Bucket]) -> dict[str, int]:
    """
    Count records per bucket, in bucket order.

    Records missing the field (or outside every bucket) are excluded, and
    empty buckets are absent.
    """
    counts = {bucket.label: 0 for bucket in buckets}
    for value in _numbers(records, field_name):
        bucket = bucket_for(value, buckets)
        if bucket is not None:
            counts[bucket.label] += 1
    return {label: count for label, count in counts.items() if count}


def top_n(
    records: Iterable[Record],
    field_name: str,
    n: int,
    secondary: str | None = None,
) -> list[Record]:
    """
    Highest-ranked records by a field, descending.

    Records missing the field are excluded. Ties keep their original order,
    unless ``secondary`` names a field to break them (ascending, absent last).
    """
    if n <= 0:
        return []
    candidates = []
    for record in records:
        _require_declared(record, field_name)
        if getattr(record, field_name) is not None:
            candidates.append(record)

    if secondary is not None:
        candidates.sort(key=lambda r: (getattr(r, secondary) is None, _sortable(getattr(r, secondary))))
    # sort is stable, so ties keep the order established above
    candidates.sort(key=lambda r: getattr(r, field_name), reverse=True)
    return candidates[:n]


def _sortable(value: Any) -> Any:
    if value is None:
        return 0
    if isinstance(value, Enum):
        return value.value
    return value


def maximum(records: Iterable[Record], field_name: str) -> Record | None:
    """Record with the largest value of a field (first on ties), None if none has it."""
    best = None
    best_value = None
    for record in records:
        _require_declared(record, field_name)
        value = getattr(record, field_name)
        if value is None:
            continue
        if best is None or value > best_value:
            best, best_value = record, value
    return best


def at_least(field_name: str, threshold: Any) -> Predicate | None:
    """Predicate: field >= threshold. None (no filter) when threshold is None."""
    if threshold is None:
        return None

    def predicate(record: Record) -> bool:
        value = getattr(record, field_name, None)
        return value is not None and value >= threshold

    return predicate


def matches(field_name: str, expected: Any, ignore_case: bool = False) -> Predicate | None:
    """Predicate: field == expected. None (no filter) when expected is None."""
    if expected is None:
        return None
    wanted = _plain(expected)

    def predicate(record: Record) -> bool:
        value = _plain(getattr(record, field_name, None))
        if ignore_case and isinstance(value, str) and isinstance(wanted, str):
            return value.casefold() == wanted.casefold()
        return value == wanted

    return predicate


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def filter_records(records: Iterable[Record], *predicates: Predicate | None) -> list[Record]:
    """Keep records satisfying every supplied predicate; None predicates always hold."""
    active = [predicate for predicate in predicates if predicate is not None]
    return [record for record in records if all(predicate(record) for predicate in active)]


def group_statistics(
    records: Iterable[Record],
    key: str,
    mean_fields: Sequence[str] = (),
    extrema_fields: Sequence[str] = (),
    histogram_field: str | None = None,
    buckets: Sequence[Bucket] = (),
) -> dict[Any, GroupStats]:
    """
    Per-group count, means, extrema and histogram.

    Returns:
        Grouping-key value -> GroupStats, in first-appearance order
    """
    stats = {}
    for group_key, members in group_by(records, key).items():
        stats[group_key] = GroupStats(
            key=group_key,
            count=len(members),
            means={field_name: mean(members, field_name) for field_name in mean_fields},
            extrema={field_name: maximum(members, field_name) for field_name in extrema_fields},
            histogram=histogram(members, histogram_field, buckets) if histogram_field else {},
        )
    return stats


def summarize(records: Sequence[Record], profile: "EntityProfile", top: int = 5) -> Summary:
    """
    Compute the overall Summary of a snapshot of records.

    Args:
        records: Accepted records (read only)
        profile: Entity profile naming the fields to aggregate
        top: Number of top-ranked records to keep

    Returns:
        Summary; on empty input the count is 0 and every mean is 0.0
    """
    records = list(records)
    groups = group_by(records, profile.group_key) if profile.group_key else {}
    return Summary(
        entity=profile.name,
        total_count=len(records),
        means={field_name: mean(records, field_name) for field_name in profile.mean_fields},
        sum_field=profile.sum_field,
        total=total(records, profile.sum_field) if profile.sum_field else 0,
        groups=frozenset(groups),
        status_counts=count_by_status(records, profile.status_field),
        group_stats=group_statistics(
            records,
            profile.group_key,
            profile.mean_fields,
            profile.extrema_fields,
            profile.histogram_field,
            profile.buckets,
        ) if profile.group_key else {},
        histogram=histogram(records, profile.histogram_field, profile.buckets) if profile.histogram_field else {},
        top_records=top_n(records, profile.rank_field, top) if profile.rank_field else [],
    )
