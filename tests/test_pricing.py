from decimal import Decimal

from app.salonpos.services.catalog import CatalogItem
from app.salonpos.services.pricing import price_line_item, resolve_commission, resolve_unit_price


def _service(**overrides) -> CatalogItem:
    fields = {
        "item_type": "service",
        "reference_id": "svc-1",
        "name": "Haircut",
        "default_price": Decimal("1000"),
        "tax_rate": Decimal("18"),
        "commission_type": "percentage",
        "commission_rate": Decimal("10"),
    }
    fields.update(overrides)
    return CatalogItem(**fields)


def test_intra_state_line_splits_tax_evenly():
    line = price_line_item(_service(), 1, False)

    assert line.gross_amount == Decimal("1000.00")
    assert line.cgst_amount == Decimal("90.00")
    assert line.sgst_amount == Decimal("90.00")
    assert line.igst_amount == Decimal("0")
    assert line.total_tax == Decimal("180.00")
    assert line.net_amount == Decimal("1180.00")
    assert line.cgst_rate == Decimal("9")
    assert line.commission_amount == Decimal("100.00")


def test_inter_state_line_routes_all_tax_to_igst():
    line = price_line_item(_service(), 2, True)

    assert line.gross_amount == Decimal("2000.00")
    assert line.igst_rate == Decimal("18")
    assert line.igst_amount == Decimal("360.00")
    assert line.cgst_amount == Decimal("0")
    assert line.sgst_amount == Decimal("0")
    assert line.total_tax == Decimal("360.00")


def test_odd_tax_keeps_line_invariants_after_rounding():
    line = price_line_item(_service(default_price=Decimal("99.99"), tax_rate=Decimal("5")), 1, False)

    assert line.total_tax == Decimal("5.00")
    assert line.cgst_amount + line.sgst_amount + line.igst_amount == line.total_tax
    assert line.taxable_amount + line.total_tax == line.net_amount


def test_branch_overrides_win_over_catalog_defaults():
    item = _service(
        branch_price=Decimal("800"),
        branch_commission_type="flat",
        branch_commission_rate=Decimal("50"),
    )

    assert resolve_unit_price(item) == Decimal("800")
    assert resolve_commission(item) == ("flat", Decimal("50"))
    line = price_line_item(item, 3, False)
    assert line.unit_price == Decimal("800.00")
    assert line.commission_amount == Decimal("150.00")


def test_missing_commission_rule_yields_zero():
    line = price_line_item(_service(commission_type=None, commission_rate=None), 1, False)

    assert line.commission_amount == Decimal("0.00")


def test_staff_attribution_is_carried_on_the_line():
    line = price_line_item(_service(), 1, False, stylist_id="st-1", stylist_name="Asha", line_id="line-1")

    assert line.id == "line-1"
    assert line.stylist_id == "st-1"
    assert line.stylist_name == "Asha"
