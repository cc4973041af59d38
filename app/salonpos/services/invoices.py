"""Handoff from a completed checkout session to a permanent invoice."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError

from app.salonpos.core.error_catalog import AppError, ErrorCatalog
from app.salonpos.core.money import money_sum, round_money
from app.salonpos.db.models import Invoice, InvoiceItem, InvoicePayment
from app.salonpos.repos.invoices import InvoiceRepository
from app.salonpos.services.catalog import CatalogLookup
from app.salonpos.services.pricing import resolve_unit_price


INVOICE_NUMBER_PREFIX = "INV"


@dataclass(frozen=True)
class InvoiceItemInput:
    item_type: str
    reference_id: str
    quantity: int
    stylist_id: str | None = None
    assistant_id: str | None = None


@dataclass(frozen=True)
class InvoicePaymentInput:
    payment_method: str
    amount: Decimal
    card_last_four: str | None = None
    card_type: str | None = None
    upi_id: str | None = None
    transaction_id: str | None = None


@dataclass(frozen=True)
class InvoiceRequest:
    branch_id: str
    customer_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    appointment_id: str | None = None
    items: list[InvoiceItemInput] = field(default_factory=list)
    payments: list[InvoicePaymentInput] = field(default_factory=list)


class InvoiceFinalizer(Protocol):
    def finalize(self, request: InvoiceRequest, *, tenant_id: str, user_id: str | None) -> str: ...


def next_invoice_number(last_number: str | None, prefix: str) -> str:
    sequence = 1
    if last_number:
        sequence = int(last_number.rsplit("-", 1)[-1]) + 1
    return f"{prefix}-{sequence:04d}"


class SqlInvoiceFinalizer:
    """Writes invoice header, lines and payments in a single commit.

    Lines are re-priced from the catalog rather than trusted from the session
    snapshot. Numbers follow ``INV-<YYYYMM>-<seq>`` per branch and month.
    """

    def __init__(self, db, catalog: CatalogLookup, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.repo = InvoiceRepository(db)
        self.catalog = catalog
        self._clock = clock

    def finalize(self, request: InvoiceRequest, *, tenant_id: str, user_id: str | None) -> str:
        items = [self._build_item(tenant_id, request.branch_id, line) for line in request.items]
        payments = [
            InvoicePayment(
                tenant_id=tenant_id,
                payment_method=payment.payment_method,
                amount=round_money(payment.amount),
                card_last_four=payment.card_last_four,
                card_type=payment.card_type,
                upi_id=payment.upi_id,
                transaction_id=payment.transaction_id,
            )
            for payment in request.payments
        ]
        prefix = f"{INVOICE_NUMBER_PREFIX}-{self._clock():%Y%m}"
        last_number = self.repo.last_invoice_number(branch_id=request.branch_id, prefix=prefix)
        invoice = Invoice(
            tenant_id=tenant_id,
            branch_id=request.branch_id,
            invoice_number=next_invoice_number(last_number, prefix),
            customer_id=request.customer_id,
            customer_name=request.customer_name,
            customer_phone=request.customer_phone,
            appointment_id=request.appointment_id,
            status="finalized",
            subtotal=money_sum(item.gross_amount for item in items),
            amount_paid=money_sum(payment.amount for payment in payments),
            created_by_user_id=user_id,
        )
        try:
            invoice = self.repo.create(invoice, items, payments)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return str(invoice.id)

    def _build_item(self, tenant_id: str, branch_id: str, line: InvoiceItemInput) -> InvoiceItem:
        item = self.catalog.get_item(tenant_id, branch_id, line.item_type, line.reference_id)
        if item is None:
            error = ErrorCatalog.PRODUCT_NOT_FOUND if line.item_type == "product" else ErrorCatalog.SERVICE_NOT_FOUND
            raise AppError(error, details={"reference_id": line.reference_id})
        unit_price = resolve_unit_price(item)
        return InvoiceItem(
            tenant_id=tenant_id,
            item_type=line.item_type,
            reference_id=line.reference_id,
            name=item.name,
            quantity=line.quantity,
            unit_price=round_money(unit_price),
            gross_amount=round_money(unit_price * line.quantity),
            stylist_id=line.stylist_id,
            assistant_id=line.assistant_id,
        )
