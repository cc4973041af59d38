"""Read-only catalog facts consumed by the checkout engine.

``CatalogLookup`` is the narrow interface the checkout service depends on;
``SqlCatalogLookup`` answers it from the local catalog tables. Results are
snapshots: the checkout engine never writes catalog data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

from app.salonpos.core.money import ZERO, to_decimal
from app.salonpos.repos.catalog import CatalogRepository
from app.salonpos.schemas.checkout import (
    CustomerInfo,
    MembershipBenefitInfo,
    MembershipInfo,
    PackageCreditInfo,
    PackageInfo,
)


@dataclass(frozen=True)
class CatalogItem:
    item_type: str
    reference_id: str
    name: str
    default_price: Decimal
    tax_rate: Decimal
    sku: str | None = None
    description: str | None = None
    hsn_sac_code: str | None = None
    branch_price: Decimal | None = None
    commission_type: str | None = None
    commission_rate: Decimal | None = None
    branch_commission_type: str | None = None
    branch_commission_rate: Decimal | None = None


@dataclass(frozen=True)
class CustomerProfile:
    info: CustomerInfo
    memberships: list[MembershipInfo] = field(default_factory=list)
    packages: list[PackageInfo] = field(default_factory=list)


@dataclass(frozen=True)
class AppointmentServiceLine:
    item: CatalogItem
    quantity: int = 1
    stylist_id: str | None = None


@dataclass(frozen=True)
class AppointmentSnapshot:
    id: str
    customer: CustomerProfile | None
    services: list[AppointmentServiceLine] = field(default_factory=list)


class CatalogLookup(Protocol):
    def get_item(self, tenant_id: str, branch_id: str, item_type: str, reference_id: str) -> CatalogItem | None: ...

    def get_appointment(self, tenant_id: str, branch_id: str, appointment_id: str) -> AppointmentSnapshot | None: ...

    def get_customer(self, tenant_id: str, customer_id: str) -> CustomerProfile | None: ...

    def get_staff_name(self, tenant_id: str, staff_id: str) -> str | None: ...


def _optional_decimal(value) -> Decimal | None:
    return to_decimal(value) if value is not None else None


class SqlCatalogLookup:
    def __init__(self, db):
        self.repo = CatalogRepository(db)

    def get_item(self, tenant_id: str, branch_id: str, item_type: str, reference_id: str) -> CatalogItem | None:
        if item_type == "service":
            return self._service_item(tenant_id, branch_id, reference_id)
        if item_type == "product":
            return self._product_item(tenant_id, branch_id, reference_id)
        return None

    def _service_item(self, tenant_id: str, branch_id: str, service_id: str) -> CatalogItem | None:
        service = self.repo.get_service(tenant_id=tenant_id, service_id=service_id)
        if service is None:
            return None
        branch_price = self.repo.get_service_branch_price(service_id=service_id, branch_id=branch_id)
        return CatalogItem(
            item_type="service",
            reference_id=str(service.id),
            name=service.name,
            sku=service.sku,
            description=service.description,
            default_price=to_decimal(service.base_price),
            tax_rate=to_decimal(service.tax_rate),
            hsn_sac_code=service.hsn_sac_code,
            branch_price=_optional_decimal(branch_price.price) if branch_price else None,
            commission_type=service.commission_type,
            commission_rate=_optional_decimal(service.commission_value),
            branch_commission_type=branch_price.commission_type if branch_price else None,
            branch_commission_rate=_optional_decimal(branch_price.commission_value) if branch_price else None,
        )

    def _product_item(self, tenant_id: str, branch_id: str, product_id: str) -> CatalogItem | None:
        product = self.repo.get_product(tenant_id=tenant_id, product_id=product_id)
        if product is None:
            return None
        setting = self.repo.get_product_branch_setting(product_id=product_id, branch_id=branch_id)
        return CatalogItem(
            item_type="product",
            reference_id=str(product.id),
            name=product.name,
            sku=product.sku,
            description=product.description,
            default_price=to_decimal(product.default_selling_price),
            tax_rate=to_decimal(product.tax_rate),
            hsn_sac_code=product.hsn_code,
            branch_price=_optional_decimal(setting.selling_price_override) if setting else None,
        )

    def get_appointment(self, tenant_id: str, branch_id: str, appointment_id: str) -> AppointmentSnapshot | None:
        appointment = self.repo.get_appointment(tenant_id=tenant_id, appointment_id=appointment_id)
        if appointment is None:
            return None
        customer = None
        if appointment.customer_id is not None:
            customer = self.get_customer(tenant_id, str(appointment.customer_id))
        lines = []
        for row in self.repo.list_appointment_services(str(appointment.id)):
            item = self._service_item(tenant_id, branch_id, str(row.service_id))
            if item is None:
                # service retired after booking; nothing left to price
                continue
            lines.append(
                AppointmentServiceLine(
                    item=item,
                    quantity=row.quantity or 1,
                    stylist_id=str(row.stylist_id) if row.stylist_id else None,
                )
            )
        return AppointmentSnapshot(id=str(appointment.id), customer=customer, services=lines)

    def get_customer(self, tenant_id: str, customer_id: str) -> CustomerProfile | None:
        customer = self.repo.get_customer(tenant_id=tenant_id, customer_id=customer_id)
        if customer is None:
            return None
        loyalty_config = self.repo.get_loyalty_config(tenant_id)
        point_value = ZERO
        if loyalty_config is not None and loyalty_config.redemption_value_per_point:
            point_value = to_decimal(loyalty_config.redemption_value_per_point)
        info = CustomerInfo(
            id=str(customer.id),
            name=customer.name,
            phone=customer.phone,
            email=customer.email or None,
            wallet_balance=to_decimal(customer.wallet_balance),
            loyalty_points=customer.loyalty_points or 0,
            loyalty_point_value=point_value,
        )
        return CustomerProfile(
            info=info,
            memberships=self._memberships(tenant_id, customer_id),
            packages=self._packages(tenant_id, customer_id),
        )

    def _memberships(self, tenant_id: str, customer_id: str) -> list[MembershipInfo]:
        memberships = []
        for membership in self.repo.list_customer_memberships(tenant_id=tenant_id, customer_id=customer_id):
            benefits = [
                MembershipBenefitInfo(
                    id=str(benefit.id),
                    benefit_type=benefit.benefit_type,
                    discount_type=benefit.discount_type or "percentage",
                    discount_value=to_decimal(benefit.discount_value or 0),
                    applicable_services=[str(benefit.service_id)] if benefit.service_id else [],
                )
                for benefit in self.repo.list_active_benefits(membership.plan_id)
            ]
            memberships.append(
                MembershipInfo(
                    id=str(membership.id),
                    plan_name=membership.plan.name,
                    status=membership.status,
                    expiry_date=membership.current_expiry_date,
                    benefits=benefits,
                )
            )
        return memberships

    def _packages(self, tenant_id: str, customer_id: str) -> list[PackageInfo]:
        packages = self.repo.list_customer_packages(tenant_id=tenant_id, customer_id=customer_id)
        credits_by_package = {package.id: self.repo.list_package_credits(package.id) for package in packages}
        service_ids = {
            credit.service_id
            for credits in credits_by_package.values()
            for credit in credits
            if credit.service_id is not None
        }
        names = self.repo.service_names(list(service_ids))
        result = []
        for package in packages:
            credits = [
                PackageCreditInfo(
                    id=str(credit.id),
                    service_id=str(credit.service_id) if credit.service_id else None,
                    service_name=names.get(str(credit.service_id)) if credit.service_id else None,
                    total_credits=credit.initial_credits,
                    used_credits=credit.initial_credits - credit.remaining_credits,
                    remaining_credits=credit.remaining_credits,
                )
                for credit in credits_by_package[package.id]
            ]
            result.append(
                PackageInfo(
                    id=str(package.id),
                    package_name=package.package_name,
                    package_type=package.package_type,
                    status=package.status,
                    expiry_date=package.expiry_date,
                    credits=credits,
                )
            )
        return result

    def get_staff_name(self, tenant_id: str, staff_id: str) -> str | None:
        staff = self.repo.get_staff(tenant_id=tenant_id, staff_id=staff_id)
        return staff.name if staff else None
