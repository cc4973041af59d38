from __future__ import annotations

from sqlalchemy import select

from app.salonpos.db.models import (
    Appointment,
    AppointmentService,
    Customer,
    CustomerMembership,
    CustomerPackage,
    LoyaltyConfig,
    MembershipBenefit,
    PackageCredit,
    Product,
    ProductBranchSetting,
    Service,
    ServiceBranchPrice,
    Staff,
)

ACTIVE_MEMBERSHIP_STATUSES = ("active", "frozen")
ACTIVE_PACKAGE_STATUSES = ("active", "pending")


class CatalogRepository:
    def __init__(self, db):
        self.db = db

    def get_service(self, *, tenant_id: str, service_id: str) -> Service | None:
        query = select(Service).where(
            Service.id == service_id,
            Service.tenant_id == tenant_id,
            Service.deleted_at.is_(None),
        )
        return self.db.execute(query).scalars().first()

    def get_service_branch_price(self, *, service_id: str, branch_id: str) -> ServiceBranchPrice | None:
        query = select(ServiceBranchPrice).where(
            ServiceBranchPrice.service_id == service_id,
            ServiceBranchPrice.branch_id == branch_id,
        )
        return self.db.execute(query).scalars().first()

    def get_product(self, *, tenant_id: str, product_id: str) -> Product | None:
        query = select(Product).where(
            Product.id == product_id,
            Product.tenant_id == tenant_id,
            Product.deleted_at.is_(None),
        )
        return self.db.execute(query).scalars().first()

    def get_product_branch_setting(self, *, product_id: str, branch_id: str) -> ProductBranchSetting | None:
        query = select(ProductBranchSetting).where(
            ProductBranchSetting.product_id == product_id,
            ProductBranchSetting.branch_id == branch_id,
        )
        return self.db.execute(query).scalars().first()

    def get_staff(self, *, tenant_id: str, staff_id: str) -> Staff | None:
        query = select(Staff).where(Staff.id == staff_id, Staff.tenant_id == tenant_id)
        return self.db.execute(query).scalars().first()

    def get_appointment(self, *, tenant_id: str, appointment_id: str) -> Appointment | None:
        query = select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.tenant_id == tenant_id,
            Appointment.deleted_at.is_(None),
        )
        return self.db.execute(query).scalars().first()

    def list_appointment_services(self, appointment_id: str) -> list[AppointmentService]:
        return (
            self.db.execute(
                select(AppointmentService)
                .where(AppointmentService.appointment_id == appointment_id)
                .order_by(AppointmentService.position)
            )
            .scalars()
            .all()
        )

    def get_customer(self, *, tenant_id: str, customer_id: str) -> Customer | None:
        query = select(Customer).where(
            Customer.id == customer_id,
            Customer.tenant_id == tenant_id,
            Customer.deleted_at.is_(None),
        )
        return self.db.execute(query).scalars().first()

    def get_loyalty_config(self, tenant_id: str) -> LoyaltyConfig | None:
        return self.db.execute(select(LoyaltyConfig).where(LoyaltyConfig.tenant_id == tenant_id)).scalars().first()

    def list_customer_memberships(self, *, tenant_id: str, customer_id: str) -> list[CustomerMembership]:
        return (
            self.db.execute(
                select(CustomerMembership)
                .where(
                    CustomerMembership.tenant_id == tenant_id,
                    CustomerMembership.customer_id == customer_id,
                    CustomerMembership.status.in_(ACTIVE_MEMBERSHIP_STATUSES),
                )
                .order_by(CustomerMembership.current_expiry_date)
            )
            .scalars()
            .all()
        )

    def list_active_benefits(self, plan_id) -> list[MembershipBenefit]:
        return (
            self.db.execute(
                select(MembershipBenefit)
                .where(MembershipBenefit.plan_id == plan_id, MembershipBenefit.is_active.is_(True))
                .order_by(MembershipBenefit.priority_level.desc())
            )
            .scalars()
            .all()
        )

    def list_customer_packages(self, *, tenant_id: str, customer_id: str) -> list[CustomerPackage]:
        return (
            self.db.execute(
                select(CustomerPackage)
                .where(
                    CustomerPackage.tenant_id == tenant_id,
                    CustomerPackage.customer_id == customer_id,
                    CustomerPackage.status.in_(ACTIVE_PACKAGE_STATUSES),
                )
                .order_by(CustomerPackage.expiry_date)
            )
            .scalars()
            .all()
        )

    def list_package_credits(self, customer_package_id) -> list[PackageCredit]:
        return (
            self.db.execute(select(PackageCredit).where(PackageCredit.customer_package_id == customer_package_id))
            .scalars()
            .all()
        )

    def service_names(self, service_ids: list) -> dict[str, str]:
        if not service_ids:
            return {}
        rows = self.db.execute(select(Service.id, Service.name).where(Service.id.in_(service_ids))).all()
        return {str(row.id): row.name for row in rows}
