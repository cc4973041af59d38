import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator, CHAR


class GUID(TypeDecorator):
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


MONEY = Numeric(12, 2)
RATE = Numeric(7, 4)


class Base(DeclarativeBase):
    pass


class CheckoutSessionRecord(Base):
    """Physical row behind one session-store key; the payload is the full JSON snapshot."""

    __tablename__ = "checkout_sessions"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class Service(Base):
    __tablename__ = "services"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    tax_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    hsn_sac_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    commission_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    commission_value: Mapped[Decimal | None] = mapped_column(RATE, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    branch_prices = relationship("ServiceBranchPrice", back_populates="service")


class ServiceBranchPrice(Base):
    __tablename__ = "service_branch_prices"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    service_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("services.id"), index=True, nullable=False)
    branch_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    price: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    commission_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    commission_value: Mapped[Decimal | None] = mapped_column(RATE, nullable=True)

    service = relationship("Service", back_populates="branch_prices")

    __table_args__ = (UniqueConstraint("service_id", "branch_id", name="uq_service_branch_price"),)


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_selling_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    tax_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False, default=Decimal("0"))
    hsn_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class ProductBranchSetting(Base):
    __tablename__ = "product_branch_settings"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("products.id"), index=True, nullable=False)
    branch_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    selling_price_override: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)

    __table_args__ = (UniqueConstraint("product_id", "branch_id", name="uq_product_branch_setting"),)


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    wallet_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    loyalty_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class LoyaltyConfig(Base):
    __tablename__ = "loyalty_configs"

    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True)
    redemption_value_per_point: Mapped[Decimal | None] = mapped_column(RATE, nullable=True)


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    branch_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    customer_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), ForeignKey("customers.id"), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    services = relationship("AppointmentService", back_populates="appointment")


class AppointmentService(Base):
    __tablename__ = "appointment_services"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    appointment_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("appointments.id"), index=True, nullable=False
    )
    service_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("services.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    stylist_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    appointment = relationship("Appointment", back_populates="services")


class MembershipPlan(Base):
    __tablename__ = "membership_plans"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class MembershipBenefit(Base):
    __tablename__ = "membership_benefits"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    plan_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("membership_plans.id"), index=True, nullable=False)
    benefit_type: Mapped[str] = mapped_column(String(50), nullable=False)
    discount_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    discount_value: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    service_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    priority_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class CustomerMembership(Base):
    __tablename__ = "customer_memberships"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    customer_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("customers.id"), index=True, nullable=False)
    plan_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("membership_plans.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    current_expiry_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    plan = relationship("MembershipPlan")


class CustomerPackage(Base):
    __tablename__ = "customer_packages"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    customer_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("customers.id"), index=True, nullable=False)
    package_name: Mapped[str] = mapped_column(String(255), nullable=False)
    package_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    expiry_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    credits = relationship("PackageCredit", back_populates="customer_package")


class PackageCredit(Base):
    __tablename__ = "package_credits"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    customer_package_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("customer_packages.id"), index=True, nullable=False
    )
    service_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), ForeignKey("services.id"), nullable=True)
    initial_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    remaining_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    customer_package = relationship("CustomerPackage", back_populates="credits")


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    branch_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    customer_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="finalized")
    subtotal: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    amount_paid: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("branch_id", "invoice_number", name="uq_invoice_branch_number"),)


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("invoices.id"), index=True, nullable=False)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    item_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reference_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    gross_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    stylist_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)
    assistant_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True)


class InvoicePayment(Base):
    __tablename__ = "invoice_payments"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("invoices.id"), index=True, nullable=False)
    tenant_id: Mapped[uuid.UUID] = mapped_column(GUID(), index=True, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    card_last_four: Mapped[str | None] = mapped_column(String(4), nullable=True)
    card_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    upi_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
