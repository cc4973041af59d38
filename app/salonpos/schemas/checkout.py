from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.salonpos.core.money import ZERO

ItemType = Literal["service", "product", "combo", "package"]
DiscountType = Literal["membership", "package", "coupon", "loyalty", "manual"]
CalculationType = Literal["percentage", "flat"]
DiscountScope = Literal["subtotal", "item"]
PaymentMethod = Literal["cash", "card", "upi", "wallet", "loyalty"]
CardType = Literal["visa", "mastercard", "rupay", "amex"]
ReceiptMethod = Literal["whatsapp", "email", "print"]


class SessionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


# --- session snapshot -------------------------------------------------------


class CustomerInfo(BaseModel):
    id: str
    name: str
    phone: str
    email: str | None = None
    wallet_balance: Decimal = ZERO
    loyalty_points: int = 0
    loyalty_point_value: Decimal = ZERO


class MembershipBenefitInfo(BaseModel):
    id: str
    benefit_type: str
    discount_type: CalculationType = "percentage"
    discount_value: Decimal = ZERO
    applicable_services: list[str] = Field(default_factory=list)


class MembershipInfo(BaseModel):
    id: str
    plan_name: str
    status: str
    expiry_date: datetime | None = None
    benefits: list[MembershipBenefitInfo] = Field(default_factory=list)


class PackageCreditInfo(BaseModel):
    id: str
    service_id: str | None = None
    service_name: str | None = None
    total_credits: int
    used_credits: int
    remaining_credits: int


class PackageInfo(BaseModel):
    id: str
    package_name: str
    package_type: str
    status: str
    expiry_date: datetime | None = None
    credits: list[PackageCreditInfo] = Field(default_factory=list)


class AvailableDiscount(BaseModel):
    id: str
    type: Literal["membership", "package", "coupon", "loyalty"]
    name: str
    description: str
    discount_type: CalculationType
    value: Decimal
    max_discount: Decimal | None = None
    applicable_to: Literal["all", "services", "products"] | list[str]
    is_auto_applied: bool = False


class LineItem(BaseModel):
    id: str
    item_type: ItemType
    reference_id: str
    reference_sku: str | None = None
    name: str
    description: str | None = None
    unit_price: Decimal
    quantity: int
    gross_amount: Decimal
    discount_amount: Decimal = ZERO
    tax_rate: Decimal
    taxable_amount: Decimal
    cgst_rate: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    sgst_rate: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    igst_rate: Decimal = ZERO
    igst_amount: Decimal = ZERO
    total_tax: Decimal
    net_amount: Decimal
    hsn_sac_code: str | None = None
    stylist_id: str | None = None
    stylist_name: str | None = None
    assistant_id: str | None = None
    assistant_name: str | None = None
    commission_type: str | None = None
    commission_rate: Decimal | None = None
    commission_amount: Decimal = ZERO


class AppliedDiscount(BaseModel):
    id: str
    discount_type: DiscountType
    discount_source: str | None = None
    source_name: str
    calculation_type: CalculationType
    calculation_value: Decimal
    amount: Decimal
    applied_to: DiscountScope
    applied_item_id: str | None = None
    reason: str | None = None


class PaymentEntry(BaseModel):
    id: str
    payment_method: PaymentMethod
    amount: Decimal
    card_last_four: str | None = None
    card_type: str | None = None
    upi_id: str | None = None
    transaction_id: str | None = None


class Totals(BaseModel):
    subtotal: Decimal = ZERO
    discount_total: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    igst_amount: Decimal = ZERO
    tax_total: Decimal = ZERO
    tip_amount: Decimal = ZERO
    grand_total: Decimal = ZERO
    amount_paid: Decimal = ZERO
    amount_due: Decimal = ZERO


class CheckoutSession(BaseModel):
    id: str
    tenant_id: str
    branch_id: str
    appointment_id: str | None = None
    customer: CustomerInfo | None = None
    line_items: list[LineItem] = Field(default_factory=list)
    applied_discounts: list[AppliedDiscount] = Field(default_factory=list)
    payments: list[PaymentEntry] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    available_discounts: list[AvailableDiscount] = Field(default_factory=list)
    active_memberships: list[MembershipInfo] = Field(default_factory=list)
    active_packages: list[PackageInfo] = Field(default_factory=list)
    is_igst: bool = False
    status: SessionStatus = SessionStatus.ACTIVE
    version: int = 0
    created_at: datetime
    expires_at: datetime

    def find_item(self, item_id: str) -> LineItem | None:
        return next((item for item in self.line_items if item.id == item_id), None)


# --- requests ---------------------------------------------------------------


class StartCheckoutRequest(BaseModel):
    branch_id: UUID
    appointment_id: UUID | None = None
    customer_id: UUID | None = None
    is_igst: bool = False

    @model_validator(mode="after")
    def _single_origin(self) -> "StartCheckoutRequest":
        if self.appointment_id is not None and self.customer_id is not None:
            raise ValueError("provide either appointment_id or customer_id, not both")
        return self


class AddItemRequest(BaseModel):
    session_id: str
    item_type: ItemType
    reference_id: UUID
    quantity: int = Field(default=1, ge=1)
    stylist_id: UUID | None = None
    assistant_id: UUID | None = None


class RemoveItemRequest(BaseModel):
    session_id: str
    item_id: str


class ApplyDiscountRequest(BaseModel):
    session_id: str
    discount_type: DiscountType
    discount_source: str | None = None
    calculation_type: CalculationType
    calculation_value: Decimal = Field(ge=0)
    applied_to: DiscountScope
    applied_item_id: str | None = None
    reason: str | None = Field(default=None, max_length=255)


class RemoveDiscountRequest(BaseModel):
    session_id: str
    discount_id: str


class PaymentEntryCreate(BaseModel):
    payment_method: PaymentMethod
    amount: Decimal = Field(ge=Decimal("0.01"))
    card_last_four: str | None = Field(default=None, min_length=4, max_length=4)
    card_type: CardType | None = None
    upi_id: str | None = Field(default=None, max_length=100)
    transaction_id: str | None = Field(default=None, max_length=100)


class ProcessPaymentRequest(BaseModel):
    session_id: str
    payments: list[PaymentEntryCreate] = Field(min_length=1)


class CompleteCheckoutRequest(BaseModel):
    session_id: str
    tip_amount: Decimal = Field(default=ZERO, ge=0)
    send_receipt: bool = False
    receipt_method: ReceiptMethod | None = None


# --- responses --------------------------------------------------------------


class CompleteCheckoutResponse(BaseModel):
    session: CheckoutSession
    invoice_id: str
    receipt_requested: bool = False
    receipt_method: ReceiptMethod | None = None
