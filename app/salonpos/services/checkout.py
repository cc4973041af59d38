"""Checkout session lifecycle.

A session lives only in the session store. Every mutation is a
read-modify-write of the full snapshot: load, change, recompute totals, write
back with a bumped version and a fresh TTL window. Completion first claims the
session with a versioned write that marks it completed, then hands it to the
invoice finalizer and deletes it only once the invoice exists. A failed
finalize reopens the session.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable

from pydantic import ValidationError

from app.salonpos.core.error_catalog import AppError, ErrorCatalog
from app.salonpos.core.logging import log_checkout_event
from app.salonpos.core.metrics import metrics
from app.salonpos.core.money import round_money, to_decimal
from app.salonpos.schemas.checkout import (
    AppliedDiscount,
    CheckoutSession,
    CompleteCheckoutResponse,
    LineItem,
    PaymentEntry,
    PaymentEntryCreate,
    SessionStatus,
)
from app.salonpos.services.catalog import CatalogLookup, CustomerProfile
from app.salonpos.services.discounts import build_available_discounts, calculate_discount_amount
from app.salonpos.services.invoices import InvoiceFinalizer, InvoiceItemInput, InvoicePaymentInput, InvoiceRequest
from app.salonpos.services.pricing import price_line_item
from app.salonpos.services.session_store import SessionStore
from app.salonpos.services.totals import calculate_totals


logger = logging.getLogger(__name__)

PRICEABLE_ITEM_TYPES = ("service", "product")


class CheckoutService:
    def __init__(
        self,
        *,
        store: SessionStore,
        catalog: CatalogLookup,
        finalizer: InvoiceFinalizer,
        ttl_seconds: int = 1800,
        key_prefix: str = "checkout:session:",
        payment_tolerance: Decimal = Decimal("0.01"),
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.catalog = catalog
        self.finalizer = finalizer
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self.payment_tolerance = to_decimal(payment_tolerance)
        self._clock = clock

    def session_key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    # --- store plumbing -----------------------------------------------------

    def _load(self, session_id: str, tenant_id: str) -> CheckoutSession:
        payload = self.store.get(self.session_key(session_id))
        if payload is None:
            raise AppError(ErrorCatalog.SESSION_NOT_FOUND, details={"session_id": session_id})
        session = CheckoutSession.model_validate_json(payload)
        # foreign-tenant sessions are reported exactly like missing ones
        if session.tenant_id != str(tenant_id):
            raise AppError(ErrorCatalog.SESSION_NOT_FOUND, details={"session_id": session_id})
        return session

    def _load_active(self, session_id: str, tenant_id: str) -> CheckoutSession:
        session = self._load(session_id, tenant_id)
        if session.status != SessionStatus.ACTIVE:
            raise AppError(
                ErrorCatalog.CHECKOUT_SESSION_CLOSED,
                details={"session_id": session_id, "status": session.status.value},
            )
        return session

    def _write(self, session: CheckoutSession, *, expected_version: int | None) -> CheckoutSession:
        now = self._clock()
        updated = session.model_copy(
            update={
                "version": (expected_version or 0) + 1,
                "expires_at": now + timedelta(seconds=self.ttl_seconds),
            }
        )
        try:
            self.store.put(
                self.session_key(updated.id),
                updated.model_dump_json(),
                self.ttl_seconds,
                version=updated.version,
                expected_version=expected_version,
            )
        except AppError as exc:
            if exc.error == ErrorCatalog.CHECKOUT_SESSION_CONFLICT:
                metrics.increment_session_conflict()
                log_checkout_event(
                    logger,
                    "checkout.conflict",
                    session_id=updated.id,
                    tenant_id=updated.tenant_id,
                    expected_version=expected_version,
                )
            raise
        return updated

    def _recompute(
        self,
        session: CheckoutSession,
        *,
        line_items: list[LineItem] | None = None,
        applied_discounts: list[AppliedDiscount] | None = None,
        payments: list[PaymentEntry] | None = None,
        tip_amount: Decimal | None = None,
    ) -> CheckoutSession:
        line_items = session.line_items if line_items is None else line_items
        applied_discounts = session.applied_discounts if applied_discounts is None else applied_discounts
        payments = session.payments if payments is None else payments
        tip = session.totals.tip_amount if tip_amount is None else tip_amount
        return session.model_copy(
            update={
                "line_items": line_items,
                "applied_discounts": applied_discounts,
                "payments": payments,
                "totals": calculate_totals(line_items, applied_discounts, payments, tip),
            }
        )

    # --- lifecycle ----------------------------------------------------------

    def start_checkout(
        self,
        *,
        tenant_id: str,
        branch_id: str,
        appointment_id: str | None = None,
        customer_id: str | None = None,
        is_igst: bool = False,
        user_id: str | None = None,
    ) -> CheckoutSession:
        if appointment_id and customer_id:
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"message": "provide either appointment_id or customer_id, not both"},
            )
        tenant_id = str(tenant_id)
        branch_id = str(branch_id)
        profile: CustomerProfile | None = None
        line_items: list[LineItem] = []
        origin = "walk_in"

        if appointment_id:
            origin = "appointment"
            appointment = self.catalog.get_appointment(tenant_id, branch_id, str(appointment_id))
            if appointment is None:
                raise AppError(ErrorCatalog.APPOINTMENT_NOT_FOUND, details={"appointment_id": str(appointment_id)})
            profile = appointment.customer
            for line in appointment.services:
                line_items.append(
                    price_line_item(
                        line.item,
                        line.quantity,
                        is_igst,
                        stylist_id=line.stylist_id,
                        stylist_name=self._staff_name(tenant_id, line.stylist_id),
                    )
                )
        elif customer_id:
            origin = "customer"
            profile = self.catalog.get_customer(tenant_id, str(customer_id))
            if profile is None:
                raise AppError(ErrorCatalog.CUSTOMER_NOT_FOUND, details={"customer_id": str(customer_id)})

        now = self._clock()
        session = CheckoutSession(
            id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            branch_id=branch_id,
            appointment_id=str(appointment_id) if appointment_id else None,
            customer=profile.info if profile else None,
            line_items=line_items,
            totals=calculate_totals(line_items, [], []),
            available_discounts=build_available_discounts(profile),
            active_memberships=profile.memberships if profile else [],
            active_packages=profile.packages if profile else [],
            is_igst=is_igst,
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )
        session = self._write(session, expected_version=None)
        metrics.increment_checkout_started(origin)
        log_checkout_event(
            logger,
            "checkout.start",
            session_id=session.id,
            tenant_id=tenant_id,
            branch_id=branch_id,
            user_id=user_id,
            origin=origin,
            items=len(session.line_items),
        )
        return session

    def get_session(self, session_id: str, tenant_id: str) -> CheckoutSession:
        return self._load(session_id, tenant_id)

    def add_item(
        self,
        session_id: str,
        tenant_id: str,
        *,
        item_type: str,
        reference_id: str,
        quantity: int = 1,
        stylist_id: str | None = None,
        assistant_id: str | None = None,
    ) -> CheckoutSession:
        session = self._load_active(session_id, tenant_id)
        if item_type not in PRICEABLE_ITEM_TYPES:
            raise AppError(ErrorCatalog.UNSUPPORTED_ITEM_TYPE, details={"item_type": item_type})
        item = self.catalog.get_item(session.tenant_id, session.branch_id, item_type, str(reference_id))
        if item is None:
            error = ErrorCatalog.SERVICE_NOT_FOUND if item_type == "service" else ErrorCatalog.PRODUCT_NOT_FOUND
            raise AppError(error, details={"reference_id": str(reference_id)})
        stylist_id = str(stylist_id) if stylist_id else None
        assistant_id = str(assistant_id) if assistant_id else None
        line = price_line_item(
            item,
            quantity,
            session.is_igst,
            stylist_id=stylist_id,
            stylist_name=self._staff_name(session.tenant_id, stylist_id),
            assistant_id=assistant_id,
            assistant_name=self._staff_name(session.tenant_id, assistant_id),
        )
        updated = self._recompute(session, line_items=[*session.line_items, line])
        return self._write(updated, expected_version=session.version)

    def remove_item(self, session_id: str, tenant_id: str, item_id: str) -> CheckoutSession:
        session = self._load_active(session_id, tenant_id)
        if session.find_item(item_id) is None:
            raise AppError(ErrorCatalog.ITEM_NOT_FOUND, details={"item_id": item_id})
        updated = self._recompute(
            session,
            line_items=[item for item in session.line_items if item.id != item_id],
            applied_discounts=[
                discount for discount in session.applied_discounts if discount.applied_item_id != item_id
            ],
        )
        return self._write(updated, expected_version=session.version)

    def apply_discount(
        self,
        session_id: str,
        tenant_id: str,
        *,
        discount_type: str,
        calculation_type: str,
        calculation_value: Decimal,
        applied_to: str,
        applied_item_id: str | None = None,
        discount_source: str | None = None,
        reason: str | None = None,
    ) -> CheckoutSession:
        session = self._load_active(session_id, tenant_id)
        amount = calculate_discount_amount(
            applied_to,
            session.line_items,
            calculation_type,
            calculation_value,
            applied_item_id,
        )
        source_name = reason or discount_type
        if applied_to == "item":
            source_name = f"{discount_type} on {session.find_item(applied_item_id).name}"
        else:
            applied_item_id = None
        discount = AppliedDiscount(
            id=str(uuid.uuid4()),
            discount_type=discount_type,
            discount_source=discount_source,
            source_name=source_name,
            calculation_type=calculation_type,
            calculation_value=to_decimal(calculation_value),
            amount=amount,
            applied_to=applied_to,
            applied_item_id=applied_item_id,
            reason=reason,
        )
        updated = self._recompute(session, applied_discounts=[*session.applied_discounts, discount])
        return self._write(updated, expected_version=session.version)

    def remove_discount(self, session_id: str, tenant_id: str, discount_id: str) -> CheckoutSession:
        session = self._load_active(session_id, tenant_id)
        remaining = [discount for discount in session.applied_discounts if discount.id != discount_id]
        if len(remaining) == len(session.applied_discounts):
            raise AppError(ErrorCatalog.DISCOUNT_NOT_FOUND, details={"discount_id": discount_id})
        updated = self._recompute(session, applied_discounts=remaining)
        return self._write(updated, expected_version=session.version)

    def process_payment(
        self,
        session_id: str,
        tenant_id: str,
        payments: Iterable[PaymentEntryCreate | dict],
    ) -> CheckoutSession:
        session = self._load_active(session_id, tenant_id)
        entries = self._payment_entries(payments)
        updated = self._recompute(session, payments=[*session.payments, *entries])
        return self._write(updated, expected_version=session.version)

    def complete_checkout(
        self,
        session_id: str,
        tenant_id: str,
        *,
        user_id: str | None = None,
        tip_amount: Decimal | int | str = 0,
        send_receipt: bool = False,
        receipt_method: str | None = None,
    ) -> CompleteCheckoutResponse:
        session = self._load_active(session_id, tenant_id)
        tip = round_money(tip_amount)
        priced = self._recompute(session, tip_amount=tip) if tip > 0 else session

        if priced.totals.amount_due > self.payment_tolerance:
            self._reject_completion(priced, ErrorCatalog.PAYMENT_INCOMPLETE, amount_due=priced.totals.amount_due)
        if not priced.line_items:
            self._reject_completion(priced, ErrorCatalog.NO_ITEMS)

        # claim the session so concurrent writers and completers see it closed
        claimed = self._write(
            priced.model_copy(update={"status": SessionStatus.COMPLETED}),
            expected_version=session.version,
        )
        request = self._invoice_request(claimed)
        try:
            invoice_id = self.finalizer.finalize(request, tenant_id=claimed.tenant_id, user_id=user_id)
        except Exception as exc:
            log_checkout_event(
                logger,
                "checkout.finalize_failed",
                session_id=claimed.id,
                tenant_id=claimed.tenant_id,
                error=exc.__class__.__name__,
            )
            self._release(session, claimed)
            raise

        self.store.delete(self.session_key(claimed.id), expected_version=claimed.version)
        receipt_requested = bool(send_receipt and receipt_method)
        metrics.increment_checkout_completed()
        log_checkout_event(
            logger,
            "checkout.complete",
            session_id=claimed.id,
            tenant_id=claimed.tenant_id,
            user_id=user_id,
            invoice_id=invoice_id,
            grand_total=claimed.totals.grand_total,
            receipt_method=receipt_method if receipt_requested else None,
        )
        return CompleteCheckoutResponse(
            session=claimed,
            invoice_id=invoice_id,
            receipt_requested=receipt_requested,
            receipt_method=receipt_method if receipt_requested else None,
        )

    # --- helpers ------------------------------------------------------------

    def _release(self, original: CheckoutSession, claimed: CheckoutSession) -> None:
        """Reopen a claimed session without the completion-time tip."""
        try:
            self._write(original, expected_version=claimed.version)
        except AppError as exc:
            log_checkout_event(
                logger,
                "checkout.release_failed",
                session_id=claimed.id,
                tenant_id=claimed.tenant_id,
                error=exc.code,
            )

    def _staff_name(self, tenant_id: str, staff_id: str | None) -> str | None:
        if not staff_id:
            return None
        return self.catalog.get_staff_name(tenant_id, staff_id)

    def _reject_completion(self, session: CheckoutSession, error, **details) -> None:
        metrics.increment_completion_rejected(error.code)
        raise AppError(error, details={"session_id": session.id, **details})

    @staticmethod
    def _payment_entries(payments: Iterable[PaymentEntryCreate | dict]) -> list[PaymentEntry]:
        try:
            requested = [
                payment if isinstance(payment, PaymentEntryCreate) else PaymentEntryCreate.model_validate(payment)
                for payment in payments
            ]
        except ValidationError as exc:
            raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"errors": exc.errors()}) from exc
        if not requested:
            raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"message": "at least one payment is required"})
        return [
            PaymentEntry(
                id=str(uuid.uuid4()),
                payment_method=payment.payment_method,
                amount=round_money(payment.amount),
                card_last_four=payment.card_last_four,
                card_type=payment.card_type,
                upi_id=payment.upi_id,
                transaction_id=payment.transaction_id,
            )
            for payment in requested
        ]

    @staticmethod
    def _invoice_request(session: CheckoutSession) -> InvoiceRequest:
        customer = session.customer
        return InvoiceRequest(
            branch_id=session.branch_id,
            customer_id=customer.id if customer else None,
            customer_name=customer.name if customer else None,
            customer_phone=customer.phone if customer else None,
            appointment_id=session.appointment_id,
            items=[
                InvoiceItemInput(
                    item_type=item.item_type,
                    reference_id=item.reference_id,
                    quantity=item.quantity,
                    stylist_id=item.stylist_id,
                    assistant_id=item.assistant_id,
                )
                for item in session.line_items
            ],
            payments=[
                InvoicePaymentInput(
                    payment_method=payment.payment_method,
                    amount=payment.amount,
                    card_last_four=payment.card_last_four,
                    card_type=payment.card_type,
                    upi_id=payment.upi_id,
                    transaction_id=payment.transaction_id,
                )
                for payment in session.payments
            ],
        )
