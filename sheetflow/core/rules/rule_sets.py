"""
Built-in rule sets, one per entity type.

Each function returns a fresh list of rule dictionaries in evaluation order.
"""

from typing import Any

from sheetflow.core.models import EmployeeStatus, EventStatus, PromotionStatus, ReservationStatus

from .rule_config import RuleConfigBuilder


def event_rules() -> list[dict[str, Any]]:
    return (
        RuleConfigBuilder()
        .add_required_field("title")
        .add_min_length("title", 5)
        .add_required_field("capacity")
        .add_positive("capacity")
        .add_ceiling("capacity", 1000)
        .add_required_field("price_per_hour", label="Price per hour")
        .add_positive("price_per_hour", label="Price per hour")
        .add_required_field("location")
        .add_required_field("date", label="Event date")
        .add_not_in_past("date", label="Event date")
        .add_required_field("status")
        .add_one_of("status", enum=EventStatus)
        .build()
    )


def employee_rules() -> list[dict[str, Any]]:
    return (
        RuleConfigBuilder()
        .add_required_field("id", label="Employee id")
        .add_type_check("id", "int", label="Employee id")
        .add_positive("id", label="Employee id")
        .add_required_field("first_name")
        .add_min_length("first_name", 2)
        .add_required_field("last_name")
        .add_min_length("last_name", 2)
        .add_required_field("email")
        .add_email("email", message="Email must be a valid email address")
        .add_required_field("department")
        .add_required_field("salary")
        .add_positive("salary")
        .add_ceiling("salary", 1_000_000)
        .add_required_field("birth_date")
        .add_age_window("birth_date", min_years=16, max_years=100)
        .add_required_field("hire_date")
        .add_not_in_future("hire_date")
        .add_min_gap_after("hire_date", "birth_date", 16, short_circuit=False)
        .add_one_of("status", enum=EmployeeStatus)
        .build()
    )


def reservation_rules() -> list[dict[str, Any]]:
    return (
        RuleConfigBuilder()
        .add_required_field("user_id", label="User id")
        .add_positive("user_id", label="User id")
        .add_required_field("venue_id", label="Venue id")
        .add_positive("venue_id", label="Venue id")
        .add_required_field("start_time")
        .add_interval("start_time", "end_time")
        .add_not_in_past("start_time", short_circuit=False)
        .add_required_field("end_time")
        .add_required_field("amount")
        .add_positive("amount")
        .add_ceiling("amount", 10_000)
        .add_one_of(
            "status",
            enum=ReservationStatus,
            excluded=[ReservationStatus.CANCELLED],
            excluded_message="Cancelled reservations cannot be processed",
        )
        .build()
    )


def remaining_uses_within_budget(value: Any, record: dict[str, Any]) -> None:
    """Reject a remaining-use count larger than the promotion's use budget."""
    max_uses = record.get("max_uses")
    if value is not None and max_uses is not None and value > max_uses:
        raise ValueError(f"{value} remaining, {max_uses} allowed")


def promotion_rules() -> list[dict[str, Any]]:
    return (
        RuleConfigBuilder()
        .add_required_field("name")
        .add_required_field("promotion_type", label="Promotion type")
        .add_required_field("discount_value", label="Discount value")
        .add_positive("discount_value", label="Discount value")
        .add_required_field("start_date")
        .add_required_field("end_date")
        .add_interval("start_date", "end_date", allow_equal=True, short_circuit=False)
        .add_range("max_uses", min_value=0, label="Max uses")
        .add_range("remaining_uses", min_value=0, label="Remaining uses")
        .add_custom(
            "remaining_uses",
            remaining_uses_within_budget,
            error_message="Remaining uses cannot exceed max uses",
            reads=["max_uses"],
        )
        .add_one_of("status", enum=PromotionStatus)
        .build()
    )
