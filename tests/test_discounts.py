from datetime import datetime
from decimal import Decimal

import pytest

from app.salonpos.core.error_catalog import AppError
from app.salonpos.schemas.checkout import (
    CustomerInfo,
    MembershipBenefitInfo,
    MembershipInfo,
    PackageCreditInfo,
    PackageInfo,
)
from app.salonpos.services.catalog import CatalogItem, CustomerProfile
from app.salonpos.services.discounts import (
    LOYALTY_OFFER_ID,
    build_available_discounts,
    calculate_discount_amount,
)
from app.salonpos.services.pricing import price_line_item


def _line(line_id: str, price: str):
    item = CatalogItem(
        item_type="service",
        reference_id=f"ref-{line_id}",
        name=f"Service {line_id}",
        default_price=Decimal(price),
        tax_rate=Decimal("18"),
    )
    return price_line_item(item, 1, False, line_id=line_id)


def test_subtotal_percentage_uses_gross_sum():
    items = [_line("a", "1000"), _line("b", "500")]

    assert calculate_discount_amount("subtotal", items, "percentage", Decimal("10")) == Decimal("150.00")


def test_subtotal_flat_is_not_capped():
    items = [_line("a", "100")]

    assert calculate_discount_amount("subtotal", items, "flat", Decimal("250")) == Decimal("250.00")


def test_item_flat_discount_is_capped_at_item_gross():
    items = [_line("a", "300"), _line("b", "500")]

    assert calculate_discount_amount("item", items, "flat", Decimal("1000"), "a") == Decimal("300.00")
    assert calculate_discount_amount("item", items, "flat", Decimal("120"), "a") == Decimal("120.00")


def test_item_percentage_uses_target_gross_only():
    items = [_line("a", "300"), _line("b", "500")]

    assert calculate_discount_amount("item", items, "percentage", Decimal("12.5"), "b") == Decimal("62.50")


def test_item_discount_requires_a_known_item():
    items = [_line("a", "300")]

    with pytest.raises(AppError) as missing:
        calculate_discount_amount("item", items, "flat", Decimal("10"), "zzz")
    assert missing.value.code == "ITEM_NOT_FOUND"

    with pytest.raises(AppError) as unset:
        calculate_discount_amount("item", items, "flat", Decimal("10"))
    assert unset.value.code == "VALIDATION_ERROR"


def _profile(loyalty_points: int = 200, point_value: str = "0.25") -> CustomerProfile:
    return CustomerProfile(
        info=CustomerInfo(
            id="cust-1",
            name="Priya",
            phone="9876543210",
            loyalty_points=loyalty_points,
            loyalty_point_value=Decimal(point_value),
        ),
        memberships=[
            MembershipInfo(
                id="m1",
                plan_name="Gold",
                status="active",
                expiry_date=datetime(2027, 1, 1),
                benefits=[
                    MembershipBenefitInfo(
                        id="b1",
                        benefit_type="service_discount",
                        discount_type="percentage",
                        discount_value=Decimal("10.00"),
                    ),
                    MembershipBenefitInfo(
                        id="b2",
                        benefit_type="flat_off",
                        discount_type="flat",
                        discount_value=Decimal("75"),
                        applicable_services=["svc-9"],
                    ),
                ],
            )
        ],
        packages=[
            PackageInfo(
                id="p1",
                package_name="Spa Pack",
                package_type="service_package",
                status="active",
                credits=[
                    PackageCreditInfo(
                        id="c1",
                        service_id="svc-1",
                        service_name="Haircut",
                        total_credits=5,
                        used_credits=2,
                        remaining_credits=3,
                    ),
                    PackageCreditInfo(id="c2", total_credits=1, used_credits=1, remaining_credits=0),
                ],
            )
        ],
    )


def test_offers_are_built_from_memberships_packages_and_loyalty():
    offers = {offer.id: offer for offer in build_available_discounts(_profile())}

    assert set(offers) == {"membership:m1:b1", "membership:m1:b2", "package:p1:c1", LOYALTY_OFFER_ID}
    assert offers["membership:m1:b1"].name == "Gold - service_discount"
    assert offers["membership:m1:b1"].description == "10% off"
    assert offers["membership:m1:b1"].applicable_to == "services"
    assert offers["membership:m1:b2"].description == "₹75.00 off"
    assert offers["membership:m1:b2"].applicable_to == ["svc-9"]
    assert offers["package:p1:c1"].description == "3 credits remaining for Haircut"
    assert offers["package:p1:c1"].applicable_to == ["svc-1"]
    assert offers[LOYALTY_OFFER_ID].value == Decimal("50.00")
    assert not any(offer.is_auto_applied for offer in offers.values())


def test_loyalty_offer_needs_points_and_point_value():
    assert LOYALTY_OFFER_ID not in {offer.id for offer in build_available_discounts(_profile(loyalty_points=0))}
    assert LOYALTY_OFFER_ID not in {offer.id for offer in build_available_discounts(_profile(point_value="0"))}
    assert build_available_discounts(None) == []


def test_negative_values_are_rejected():
    items = [_line("a", "300")]

    for applied_to, item_id in (("subtotal", None), ("item", "a")):
        with pytest.raises(AppError) as exc:
            calculate_discount_amount(applied_to, items, "flat", Decimal("-50"), item_id)
        assert exc.value.code == "VALIDATION_ERROR"
