from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from app.salonpos.core.error_catalog import AppError, ErrorCatalog
from app.salonpos.core.money import ZERO, money_sum, percent_of, round_money, to_decimal
from app.salonpos.schemas.checkout import AvailableDiscount, LineItem
from app.salonpos.services.catalog import CustomerProfile

LOYALTY_OFFER_ID = "loyalty:points"


def calculate_discount_amount(
    applied_to: str,
    items: Sequence[LineItem],
    calculation_type: str,
    calculation_value: Decimal,
    applied_item_id: str | None = None,
) -> Decimal:
    """Monetary size of an already-authorized discount.

    Subtotal scope works off the gross sum of every line and is not capped.
    Item scope works off the target line's gross; flat values are capped at it.
    """
    value = to_decimal(calculation_value)
    if value < 0:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "calculation_value must not be negative"},
        )
    if applied_to == "subtotal":
        if calculation_type == "percentage":
            return round_money(percent_of(money_sum(item.gross_amount for item in items), value))
        return round_money(value)

    if applied_to != "item":
        raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"message": "unsupported discount scope"})
    if not applied_item_id:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "applied_item_id is required for item discounts"},
        )
    item = next((line for line in items if line.id == applied_item_id), None)
    if item is None:
        raise AppError(ErrorCatalog.ITEM_NOT_FOUND, details={"item_id": applied_item_id})
    if calculation_type == "percentage":
        return round_money(percent_of(item.gross_amount, value))
    return round_money(min(value, item.gross_amount))


def _format_value(discount_type: str, value: Decimal) -> str:
    if discount_type == "percentage":
        return f"{value.normalize():f}% off"
    return f"₹{round_money(value)} off"


def build_available_discounts(profile: CustomerProfile | None) -> list[AvailableDiscount]:
    """Offers surfaced to the cashier at session start; none are auto-applied."""
    if profile is None:
        return []
    offers: list[AvailableDiscount] = []

    for membership in profile.memberships:
        for benefit in membership.benefits:
            offers.append(
                AvailableDiscount(
                    id=f"membership:{membership.id}:{benefit.id}",
                    type="membership",
                    name=f"{membership.plan_name} - {benefit.benefit_type}",
                    description=_format_value(benefit.discount_type, benefit.discount_value),
                    discount_type=benefit.discount_type,
                    value=benefit.discount_value,
                    applicable_to=benefit.applicable_services or "services",
                )
            )

    for package in profile.packages:
        for credit in package.credits:
            if credit.remaining_credits <= 0:
                continue
            description = f"{credit.remaining_credits} credits remaining"
            if credit.service_name:
                description = f"{description} for {credit.service_name}"
            offers.append(
                AvailableDiscount(
                    id=f"package:{package.id}:{credit.id}",
                    type="package",
                    name=f"{package.package_name} Credit",
                    description=description,
                    discount_type="flat",
                    value=ZERO,
                    applicable_to=[credit.service_id] if credit.service_id else "services",
                )
            )

    customer = profile.info
    if customer.loyalty_points > 0 and customer.loyalty_point_value > 0:
        loyalty_value = round_money(customer.loyalty_points * customer.loyalty_point_value)
        offers.append(
            AvailableDiscount(
                id=LOYALTY_OFFER_ID,
                type="loyalty",
                name="Loyalty Points",
                description=f"{customer.loyalty_points} points (₹{loyalty_value} value)",
                discount_type="flat",
                value=loyalty_value,
                applicable_to="all",
            )
        )
    return offers
