"""checkout engine

Revision ID: 0001_checkout_engine
Revises:
Create Date: 2026-02-20 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_checkout_engine"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def _money():
    return sa.Numeric(12, 2)


def _rate():
    return sa.Numeric(7, 4)


def upgrade() -> None:
    op.create_table(
        "checkout_sessions",
        sa.Column("key", sa.String(length=255), primary_key=True),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_checkout_sessions_expires_at", "checkout_sessions", ["expires_at"])

    op.create_table(
        "services",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sku", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("base_price", _money(), nullable=False),
        sa.Column("tax_rate", _rate(), nullable=False),
        sa.Column("hsn_sac_code", sa.String(length=20), nullable=True),
        sa.Column("commission_type", sa.String(length=20), nullable=True),
        sa.Column("commission_value", _rate(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_services_tenant_id", "services", ["tenant_id"])
    op.create_table(
        "service_branch_prices",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("service_id", GUID(), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("branch_id", GUID(), nullable=False),
        sa.Column("price", _money(), nullable=True),
        sa.Column("commission_type", sa.String(length=20), nullable=True),
        sa.Column("commission_value", _rate(), nullable=True),
        sa.UniqueConstraint("service_id", "branch_id", name="uq_service_branch_price"),
    )
    op.create_index("ix_service_branch_prices_service_id", "service_branch_prices", ["service_id"])
    op.create_index("ix_service_branch_prices_branch_id", "service_branch_prices", ["branch_id"])

    op.create_table(
        "products",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sku", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("default_selling_price", _money(), nullable=False),
        sa.Column("tax_rate", _rate(), nullable=False),
        sa.Column("hsn_code", sa.String(length=20), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_products_tenant_id", "products", ["tenant_id"])
    op.create_table(
        "product_branch_settings",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("product_id", GUID(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("branch_id", GUID(), nullable=False),
        sa.Column("selling_price_override", _money(), nullable=True),
        sa.UniqueConstraint("product_id", "branch_id", name="uq_product_branch_setting"),
    )
    op.create_index("ix_product_branch_settings_product_id", "product_branch_settings", ["product_id"])
    op.create_index("ix_product_branch_settings_branch_id", "product_branch_settings", ["branch_id"])

    op.create_table(
        "staff",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_staff_tenant_id", "staff", ["tenant_id"])

    op.create_table(
        "customers",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("wallet_balance", _money(), nullable=False),
        sa.Column("loyalty_points", sa.Integer(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_customers_tenant_id", "customers", ["tenant_id"])
    op.create_table(
        "loyalty_configs",
        sa.Column("tenant_id", GUID(), primary_key=True),
        sa.Column("redemption_value_per_point", _rate(), nullable=True),
    )

    op.create_table(
        "appointments",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("branch_id", GUID(), nullable=False),
        sa.Column("customer_id", GUID(), sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_appointments_tenant_id", "appointments", ["tenant_id"])
    op.create_index("ix_appointments_branch_id", "appointments", ["branch_id"])
    op.create_table(
        "appointment_services",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("appointment_id", GUID(), sa.ForeignKey("appointments.id"), nullable=False),
        sa.Column("service_id", GUID(), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("stylist_id", GUID(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_appointment_services_appointment_id", "appointment_services", ["appointment_id"])

    op.create_table(
        "membership_plans",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_membership_plans_tenant_id", "membership_plans", ["tenant_id"])
    op.create_table(
        "membership_benefits",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("plan_id", GUID(), sa.ForeignKey("membership_plans.id"), nullable=False),
        sa.Column("benefit_type", sa.String(length=50), nullable=False),
        sa.Column("discount_type", sa.String(length=20), nullable=True),
        sa.Column("discount_value", _money(), nullable=True),
        sa.Column("service_id", GUID(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("priority_level", sa.Integer(), nullable=False),
    )
    op.create_index("ix_membership_benefits_plan_id", "membership_benefits", ["plan_id"])
    op.create_table(
        "customer_memberships",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("customer_id", GUID(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("plan_id", GUID(), sa.ForeignKey("membership_plans.id"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("current_expiry_date", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_customer_memberships_tenant_id", "customer_memberships", ["tenant_id"])
    op.create_index("ix_customer_memberships_customer_id", "customer_memberships", ["customer_id"])
    op.create_table(
        "customer_packages",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("customer_id", GUID(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("package_name", sa.String(length=255), nullable=False),
        sa.Column("package_type", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("expiry_date", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_customer_packages_tenant_id", "customer_packages", ["tenant_id"])
    op.create_index("ix_customer_packages_customer_id", "customer_packages", ["customer_id"])
    op.create_table(
        "package_credits",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("customer_package_id", GUID(), sa.ForeignKey("customer_packages.id"), nullable=False),
        sa.Column("service_id", GUID(), sa.ForeignKey("services.id"), nullable=True),
        sa.Column("initial_credits", sa.Integer(), nullable=False),
        sa.Column("remaining_credits", sa.Integer(), nullable=False),
    )
    op.create_index("ix_package_credits_customer_package_id", "package_credits", ["customer_package_id"])

    op.create_table(
        "invoices",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("branch_id", GUID(), nullable=False),
        sa.Column("invoice_number", sa.String(length=64), nullable=False),
        sa.Column("customer_id", GUID(), nullable=True),
        sa.Column("customer_name", sa.String(length=255), nullable=True),
        sa.Column("customer_phone", sa.String(length=32), nullable=True),
        sa.Column("appointment_id", GUID(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("subtotal", _money(), nullable=False),
        sa.Column("amount_paid", _money(), nullable=False),
        sa.Column("created_by_user_id", GUID(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("branch_id", "invoice_number", name="uq_invoice_branch_number"),
    )
    op.create_index("ix_invoices_tenant_id", "invoices", ["tenant_id"])
    op.create_index("ix_invoices_branch_id", "invoices", ["branch_id"])
    op.create_table(
        "invoice_items",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("invoice_id", GUID(), sa.ForeignKey("invoices.id"), nullable=False),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("item_type", sa.String(length=20), nullable=False),
        sa.Column("reference_id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", _money(), nullable=False),
        sa.Column("gross_amount", _money(), nullable=False),
        sa.Column("stylist_id", GUID(), nullable=True),
        sa.Column("assistant_id", GUID(), nullable=True),
    )
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])
    op.create_index("ix_invoice_items_tenant_id", "invoice_items", ["tenant_id"])
    op.create_table(
        "invoice_payments",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("invoice_id", GUID(), sa.ForeignKey("invoices.id"), nullable=False),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("amount", _money(), nullable=False),
        sa.Column("card_last_four", sa.String(length=4), nullable=True),
        sa.Column("card_type", sa.String(length=20), nullable=True),
        sa.Column("upi_id", sa.String(length=100), nullable=True),
        sa.Column("transaction_id", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_invoice_payments_invoice_id", "invoice_payments", ["invoice_id"])
    op.create_index("ix_invoice_payments_tenant_id", "invoice_payments", ["tenant_id"])


def downgrade() -> None:
    for table in (
        "invoice_payments",
        "invoice_items",
        "invoices",
        "package_credits",
        "customer_packages",
        "customer_memberships",
        "membership_benefits",
        "membership_plans",
        "appointment_services",
        "appointments",
        "loyalty_configs",
        "customers",
        "staff",
        "product_branch_settings",
        "products",
        "service_branch_prices",
        "services",
        "checkout_sessions",
    ):
        op.drop_table(table)
