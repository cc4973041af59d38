from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from app.salonpos.core.money import money_sum, round_money, round_whole, to_decimal
from app.salonpos.schemas.checkout import AppliedDiscount, LineItem, PaymentEntry, Totals


def calculate_totals(
    items: Iterable[LineItem],
    discounts: Iterable[AppliedDiscount],
    payments: Iterable[PaymentEntry],
    tip_amount: Decimal | int | str = 0,
) -> Totals:
    """Fold a session's collections into a fresh totals snapshot.

    Pure summation, so input order never matters. Every field is rounded to
    cents except the grand total, which is rounded to a whole unit because it
    is the amount actually collected.
    """
    items = list(items)
    tip = to_decimal(tip_amount)

    subtotal = money_sum(item.gross_amount for item in items)
    discount_total = money_sum(discount.amount for discount in discounts)
    taxable_amount = subtotal - discount_total
    cgst_amount = money_sum(item.cgst_amount for item in items)
    sgst_amount = money_sum(item.sgst_amount for item in items)
    igst_amount = money_sum(item.igst_amount for item in items)
    tax_total = cgst_amount + sgst_amount + igst_amount

    grand_total = round_whole(taxable_amount + tax_total + tip)
    amount_paid = money_sum(payment.amount for payment in payments)
    amount_due = max(grand_total - amount_paid, Decimal("0"))

    return Totals(
        subtotal=round_money(subtotal),
        discount_total=round_money(discount_total),
        taxable_amount=round_money(taxable_amount),
        cgst_amount=round_money(cgst_amount),
        sgst_amount=round_money(sgst_amount),
        igst_amount=round_money(igst_amount),
        tax_total=round_money(tax_total),
        tip_amount=round_money(tip),
        grand_total=grand_total,
        amount_paid=round_money(amount_paid),
        amount_due=round_money(amount_due),
    )
