"""
Entity profiles.

A profile binds everything the pipeline needs to know about one entity type:
its model, rule set, normalization map, the fields the aggregator works on and
the tabular column types used by file sources and sinks.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping

from sheetflow.core.errors import ContractError
from sheetflow.core.models import Employee, Event, Promotion, Record, Reservation
from sheetflow.core.normalization import Normalizer
from sheetflow.core.rules import (
    RuleEngine,
    employee_rules,
    event_rules,
    promotion_rules,
    reservation_rules,
)
from sheetflow.core.stats.buckets import AMOUNT_BUCKETS, DISCOUNT_BUCKETS, SALARY_BUCKETS, Bucket


@dataclass(frozen=True)
class EntityProfile:
    """
    Static description of one entity type.

    Attributes:
        name: Registry name (event, employee, ...)
        model: Record model class
        rule_factory: Returns the built-in rule set
        normalization: Field -> normalization style
        group_key: Field the aggregator groups by
        status_field: Field holding the status
        mean_fields: Numeric fields averaged in summaries
        sum_field: Integer field summed in summaries
        histogram_field: Numeric field bucketed in summaries
        buckets: Histogram buckets for histogram_field
        extrema_fields: Fields whose maximum record is reported per group
        rank_field: Field ranking the top-N records
        columns: Column -> logical type (int, float, string, date, timestamp)
    """

    name: str
    model: type[Record]
    rule_factory: Callable[[], list[dict[str, Any]]]
    normalization: Mapping[str, str] = field(default_factory=dict)
    group_key: str | None = None
    status_field: str = "status"
    mean_fields: tuple[str, ...] = ()
    sum_field: str | None = None
    histogram_field: str | None = None
    buckets: tuple[Bucket, ...] = ()
    extrema_fields: tuple[str, ...] = ()
    rank_field: str | None = None
    columns: Mapping[str, str] = field(default_factory=dict)

    def build_rules(self) -> list[dict[str, Any]]:
        return self.rule_factory()

    def rule_engine(
        self,
        rules: list[dict[str, Any]] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> RuleEngine:
        """
        Build a rule engine for this entity.

        Args:
            rules: Replacement rule set (e.g. loaded from YAML); built-in rules when None
            clock: Validation clock

        Raises:
            ContractError: If the rules do not match the model
        """
        return RuleEngine(self.build_rules() if rules is None else rules, model=self.model, clock=clock)

    def normalizer(self) -> Normalizer:
        return Normalizer(self.normalization, model=self.model)


EVENT_PROFILE = EntityProfile(
    name="event",
    model=Event,
    rule_factory=event_rules,
    normalization={"title": "capitalize", "location": "capitalize", "description": "trim"},
    group_key="location",
    mean_fields=("price_per_hour",),
    sum_field="capacity",
    histogram_field="price_per_hour",
    buckets=AMOUNT_BUCKETS,
    extrema_fields=("price_per_hour", "capacity"),
    rank_field="price_per_hour",
    columns={
        "id": "int",
        "title": "string",
        "description": "string",
        "capacity": "int",
        "price_per_hour": "float",
        "location": "string",
        "date": "date",
        "status": "string",
    },
)

EMPLOYEE_PROFILE = EntityProfile(
    name="employee",
    model=Employee,
    rule_factory=employee_rules,
    normalization={
        "first_name": "capitalize",
        "last_name": "capitalize",
        "department": "capitalize",
        "email": "lower",
    },
    group_key="department",
    mean_fields=("salary", "age"),
    sum_field="years_of_service",
    histogram_field="salary",
    buckets=SALARY_BUCKETS,
    extrema_fields=("salary", "age"),
    rank_field="salary",
    columns={
        "id": "int",
        "first_name": "string",
        "last_name": "string",
        "email": "string",
        "department": "string",
        "salary": "float",
        "birth_date": "date",
        "hire_date": "date",
        "status": "string",
    },
)

RESERVATION_PROFILE = EntityProfile(
    name="reservation",
    model=Reservation,
    rule_factory=reservation_rules,
    group_key="status",
    mean_fields=("amount", "duration_hours"),
    sum_field="duration_hours",
    histogram_field="amount",
    buckets=AMOUNT_BUCKETS,
    extrema_fields=("amount", "duration_hours"),
    rank_field="amount",
    columns={
        "id": "string",
        "user_id": "int",
        "venue_id": "int",
        "start_time": "timestamp",
        "end_time": "timestamp",
        "amount": "float",
        "status": "string",
    },
)

PROMOTION_PROFILE = EntityProfile(
    name="promotion",
    model=Promotion,
    rule_factory=promotion_rules,
    normalization={
        "name": "trim",
        "description": "trim",
        "promotion_type": "trim",
        "promo_code": "trim",
        "applies_to": "trim",
    },
    group_key="applies_to",
    mean_fields=("discount_value",),
    sum_field="max_uses",
    histogram_field="discount_value",
    buckets=DISCOUNT_BUCKETS,
    extrema_fields=("discount_value",),
    rank_field="discount_value",
    columns={
        "id": "string",
        "name": "string",
        "description": "string",
        "promotion_type": "string",
        "discount_value": "float",
        "start_date": "date",
        "end_date": "date",
        "promo_code": "string",
        "max_uses": "int",
        "remaining_uses": "int",
        "applies_to": "string",
        "status": "string",
    },
)

PROFILES: dict[str, EntityProfile] = {
    profile.name: profile
    for profile in (EVENT_PROFILE, EMPLOYEE_PROFILE, RESERVATION_PROFILE, PROMOTION_PROFILE)
}


def get_profile(name: str) -> EntityProfile:
    """
    Look up an entity profile by name (case-insensitive).

    Raises:
        ContractError: If no profile has that name
    """
    try:
        return PROFILES[name.strip().lower()]
    except KeyError:
        raise ContractError(f"Unknown entity '{name}'. Known entities: {', '.join(PROFILES)}") from None
