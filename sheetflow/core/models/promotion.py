"""
Promotion model: a discount campaign with an optional use budget.
"""

from datetime import date
from typing import Any, ClassVar

from pydantic import model_validator

from .record import UUIDRecord
from .status import PromotionStatus


class Promotion(UUIDRecord):
    """
    A promotional discount.

    Attributes:
        id: UUID, generated when the source has none
        name: Campaign name
        description: Free-text description
        promotion_type: Kind of discount (percentage, fixed, ...)
        discount_value: Discount amount or percentage
        start_date: First day the promotion applies
        end_date: Last day the promotion applies
        promo_code: Code customers enter
        max_uses: Use budget (None for unlimited)
        remaining_uses: Uses left (defaults to max_uses)
        applies_to: What the promotion applies to (grouping key)
        status: PromotionStatus member (ACTIVE when absent)
    """

    entity_name: ClassVar[str] = "promotion"
    status_enum: ClassVar[type[PromotionStatus]] = PromotionStatus
    default_status: ClassVar[PromotionStatus] = PromotionStatus.ACTIVE
    format_fields: ClassVar[tuple[str, ...]] = (
        "id", "name", "promo_code", "discount_value", "remaining_uses", "status"
    )

    name: str | None = None
    description: str | None = None
    promotion_type: str | None = None
    discount_value: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    promo_code: str | None = None
    max_uses: int | None = None
    remaining_uses: int | None = None
    applies_to: str | None = None
    status: PromotionStatus | str | None = PromotionStatus.ACTIVE

    @model_validator(mode="before")
    @classmethod
    def default_remaining_uses(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("remaining_uses") in (None, ""):
            return {**data, "remaining_uses": data.get("max_uses")}
        return data

    def is_redeemable(self, today: date | None = None) -> bool:
        """
        Check whether the promotion can be used on a given day.

        Args:
            today: Day of use (defaults to the current date)

        Returns:
            True when active, inside its date window and with uses left
        """
        today = today or date.today()
        if self.status != PromotionStatus.ACTIVE:
            return False
        if self.start_date is not None and today < self.start_date:
            return False
        if self.end_date is not None and today > self.end_date:
            return False
        if self.max_uses is not None and (self.remaining_uses or 0) <= 0:
            return False
        return True

    def register_use(self) -> "Promotion":
        """Consume one use when the promotion has a bounded budget left."""
        if self.max_uses is None or not self.remaining_uses or self.remaining_uses <= 0:
            return self
        return self.normalized_copy(remaining_uses=self.remaining_uses - 1)

    def deactivate(self) -> "Promotion":
        return self.with_status(PromotionStatus.INACTIVE)
