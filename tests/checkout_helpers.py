from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal

from app.salonpos.core.security import create_staff_access_token
from app.salonpos.db.models import (
    Appointment,
    AppointmentService,
    Customer,
    CustomerMembership,
    CustomerPackage,
    LoyaltyConfig,
    MembershipBenefit,
    MembershipPlan,
    PackageCredit,
    Product,
    Service,
    ServiceBranchPrice,
    Staff,
)


@dataclass
class SeededTenant:
    tenant_id: str
    branch_id: str
    user_id: str
    service_id: str
    product_id: str
    stylist_id: str


def auth_headers(tenant: SeededTenant, role: str = "RECEPTIONIST", tenant_id: str | None = None) -> dict:
    token = create_staff_access_token(
        user_id=tenant.user_id,
        tenant_id=tenant_id or tenant.tenant_id,
        branch_id=tenant.branch_id,
        role=role,
    )
    return {"Authorization": f"Bearer {token}"}


def seed_tenant(db_session, *, service_price: str = "1000.00", tax_rate: str = "18") -> SeededTenant:
    tenant_id = uuid.uuid4()
    branch_id = uuid.uuid4()
    service = Service(
        id=uuid.uuid4(),
        tenant_id=tenant_id,
        name="Haircut",
        sku="SVC-CUT",
        base_price=Decimal(service_price),
        tax_rate=Decimal(tax_rate),
        hsn_sac_code="999721",
        commission_type="percentage",
        commission_value=Decimal("10"),
    )
    product = Product(
        id=uuid.uuid4(),
        tenant_id=tenant_id,
        name="Shampoo",
        sku="PRD-SHAMPOO",
        default_selling_price=Decimal("250.00"),
        tax_rate=Decimal("18"),
        hsn_code="3305",
    )
    stylist = Staff(id=uuid.uuid4(), tenant_id=tenant_id, name="Asha")
    db_session.add_all([service, product, stylist])
    db_session.commit()
    return SeededTenant(
        tenant_id=str(tenant_id),
        branch_id=str(branch_id),
        user_id=str(uuid.uuid4()),
        service_id=str(service.id),
        product_id=str(product.id),
        stylist_id=str(stylist.id),
    )


def set_branch_price(db_session, tenant: SeededTenant, price: str) -> None:
    db_session.add(
        ServiceBranchPrice(
            id=uuid.uuid4(),
            service_id=uuid.UUID(tenant.service_id),
            branch_id=uuid.UUID(tenant.branch_id),
            price=Decimal(price),
        )
    )
    db_session.commit()


def seed_customer(db_session, tenant: SeededTenant, *, loyalty_points: int = 200) -> str:
    tenant_uuid = uuid.UUID(tenant.tenant_id)
    customer = Customer(
        id=uuid.uuid4(),
        tenant_id=tenant_uuid,
        name="Priya",
        phone="9876543210",
        email="priya@example.com",
        wallet_balance=Decimal("150.00"),
        loyalty_points=loyalty_points,
    )
    plan = MembershipPlan(id=uuid.uuid4(), tenant_id=tenant_uuid, name="Gold")
    benefit = MembershipBenefit(
        id=uuid.uuid4(),
        plan_id=plan.id,
        benefit_type="service_discount",
        discount_type="percentage",
        discount_value=Decimal("10"),
        is_active=True,
        priority_level=1,
    )
    membership = CustomerMembership(
        id=uuid.uuid4(),
        tenant_id=tenant_uuid,
        customer_id=customer.id,
        plan_id=plan.id,
        status="active",
    )
    package = CustomerPackage(
        id=uuid.uuid4(),
        tenant_id=tenant_uuid,
        customer_id=customer.id,
        package_name="Spa Pack",
        package_type="service_package",
        status="active",
    )
    credit = PackageCredit(
        id=uuid.uuid4(),
        customer_package_id=package.id,
        service_id=uuid.UUID(tenant.service_id),
        initial_credits=5,
        remaining_credits=3,
    )
    loyalty = LoyaltyConfig(tenant_id=tenant_uuid, redemption_value_per_point=Decimal("0.25"))
    db_session.add_all([customer, plan, benefit, membership, package, credit, loyalty])
    db_session.commit()
    return str(customer.id)


def seed_appointment(db_session, tenant: SeededTenant, customer_id: str | None = None) -> str:
    appointment = Appointment(
        id=uuid.uuid4(),
        tenant_id=uuid.UUID(tenant.tenant_id),
        branch_id=uuid.UUID(tenant.branch_id),
        customer_id=uuid.UUID(customer_id) if customer_id else None,
    )
    line = AppointmentService(
        id=uuid.uuid4(),
        appointment_id=appointment.id,
        service_id=uuid.UUID(tenant.service_id),
        quantity=1,
        stylist_id=uuid.UUID(tenant.stylist_id),
        position=0,
    )
    db_session.add_all([appointment, line])
    db_session.commit()
    return str(appointment.id)


def start_session(client, tenant: SeededTenant, **extra) -> dict:
    response = client.post(
        "/salonpos/checkout/start",
        headers=auth_headers(tenant),
        json={"branch_id": tenant.branch_id, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


def add_service(client, tenant: SeededTenant, session_id: str, quantity: int = 1) -> dict:
    response = client.post(
        "/salonpos/checkout/add-item",
        headers=auth_headers(tenant),
        json={
            "session_id": session_id,
            "item_type": "service",
            "reference_id": tenant.service_id,
            "quantity": quantity,
        },
    )
    assert response.status_code == 200, response.text
    return response.json()


def pay(client, tenant: SeededTenant, session_id: str, amount: str, method: str = "cash"):
    return client.post(
        "/salonpos/checkout/process-payment",
        headers=auth_headers(tenant),
        json={"session_id": session_id, "payments": [{"payment_method": method, "amount": amount}]},
    )
