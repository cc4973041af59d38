from __future__ import annotations

import uuid
from decimal import Decimal

from app.salonpos.core.money import ZERO, percent_of, round_money, to_decimal
from app.salonpos.schemas.checkout import LineItem
from app.salonpos.services.catalog import CatalogItem

TWO = Decimal("2")


def resolve_unit_price(item: CatalogItem) -> Decimal:
    if item.branch_price:
        return to_decimal(item.branch_price)
    return to_decimal(item.default_price)


def resolve_commission(item: CatalogItem) -> tuple[str | None, Decimal | None]:
    commission_type = item.branch_commission_type or item.commission_type
    commission_rate = item.branch_commission_rate if item.branch_commission_rate else item.commission_rate
    return commission_type, commission_rate


def commission_amount(commission_type: str | None, rate: Decimal | None, gross: Decimal, quantity: int) -> Decimal:
    if rate is None:
        return Decimal("0")
    if commission_type == "percentage":
        return percent_of(gross, rate)
    if commission_type == "flat":
        return to_decimal(rate) * quantity
    return Decimal("0")


def price_line_item(
    item: CatalogItem,
    quantity: int,
    is_igst: bool,
    *,
    stylist_id: str | None = None,
    stylist_name: str | None = None,
    assistant_id: str | None = None,
    assistant_name: str | None = None,
    line_id: str | None = None,
) -> LineItem:
    """Price one catalog reference into a finalized line item.

    Gross, tax and commission are computed at full precision and rounded only
    when written into the line. The tax total is rounded once and the state
    half is derived from it, so ``cgst + sgst + igst == total_tax`` and
    ``taxable + total_tax == net`` hold exactly on the rounded values.
    """
    unit_price = resolve_unit_price(item)
    tax_rate = to_decimal(item.tax_rate)
    gross = unit_price * quantity
    tax = percent_of(gross, tax_rate)

    gross_amount = round_money(gross)
    total_tax = round_money(tax)
    if is_igst:
        cgst_rate = sgst_rate = ZERO
        cgst_amount = sgst_amount = ZERO
        igst_rate = tax_rate
        igst_amount = total_tax
    else:
        cgst_rate = sgst_rate = tax_rate / TWO
        cgst_amount = round_money(tax / TWO)
        sgst_amount = total_tax - cgst_amount
        igst_rate = ZERO
        igst_amount = ZERO

    commission_type, commission_rate = resolve_commission(item)
    commission = commission_amount(commission_type, commission_rate, gross, quantity)

    return LineItem(
        id=line_id or str(uuid.uuid4()),
        item_type=item.item_type,
        reference_id=item.reference_id,
        reference_sku=item.sku,
        name=item.name,
        description=item.description,
        unit_price=round_money(unit_price),
        quantity=quantity,
        gross_amount=gross_amount,
        discount_amount=ZERO,
        tax_rate=tax_rate,
        taxable_amount=gross_amount,
        cgst_rate=cgst_rate,
        cgst_amount=cgst_amount,
        sgst_rate=sgst_rate,
        sgst_amount=sgst_amount,
        igst_rate=igst_rate,
        igst_amount=igst_amount,
        total_tax=total_tax,
        net_amount=gross_amount + total_tax,
        hsn_sac_code=item.hsn_sac_code,
        stylist_id=stylist_id,
        stylist_name=stylist_name,
        assistant_id=assistant_id,
        assistant_name=assistant_name,
        commission_type=commission_type,
        commission_rate=commission_rate,
        commission_amount=round_money(commission),
    )
