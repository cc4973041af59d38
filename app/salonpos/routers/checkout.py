from fastapi import APIRouter, Depends

from app.salonpos.core.deps import get_checkout_service, require_permission
from app.salonpos.core.permissions import BILLS_READ, BILLS_WRITE
from app.salonpos.schemas.checkout import (
    AddItemRequest,
    ApplyDiscountRequest,
    CheckoutSession,
    CompleteCheckoutRequest,
    CompleteCheckoutResponse,
    ProcessPaymentRequest,
    RemoveDiscountRequest,
    RemoveItemRequest,
    StartCheckoutRequest,
)
from app.salonpos.services.checkout import CheckoutService


router = APIRouter()


@router.post("/start", response_model=CheckoutSession, status_code=201)
def start_checkout(
    payload: StartCheckoutRequest,
    context=Depends(require_permission(BILLS_WRITE)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.start_checkout(
        tenant_id=context.tenant_id,
        branch_id=str(payload.branch_id),
        appointment_id=str(payload.appointment_id) if payload.appointment_id else None,
        customer_id=str(payload.customer_id) if payload.customer_id else None,
        is_igst=payload.is_igst,
        user_id=context.user_id,
    )


@router.get("/{session_id}", response_model=CheckoutSession)
def get_checkout_session(
    session_id: str,
    context=Depends(require_permission(BILLS_READ)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.get_session(session_id, context.tenant_id)


@router.post("/add-item", response_model=CheckoutSession)
def add_item(
    payload: AddItemRequest,
    context=Depends(require_permission(BILLS_WRITE)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.add_item(
        payload.session_id,
        context.tenant_id,
        item_type=payload.item_type,
        reference_id=str(payload.reference_id),
        quantity=payload.quantity,
        stylist_id=str(payload.stylist_id) if payload.stylist_id else None,
        assistant_id=str(payload.assistant_id) if payload.assistant_id else None,
    )


@router.post("/remove-item", response_model=CheckoutSession)
def remove_item(
    payload: RemoveItemRequest,
    context=Depends(require_permission(BILLS_WRITE)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.remove_item(payload.session_id, context.tenant_id, payload.item_id)


@router.post("/apply-discount", response_model=CheckoutSession)
def apply_discount(
    payload: ApplyDiscountRequest,
    context=Depends(require_permission(BILLS_WRITE)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.apply_discount(
        payload.session_id,
        context.tenant_id,
        discount_type=payload.discount_type,
        calculation_type=payload.calculation_type,
        calculation_value=payload.calculation_value,
        applied_to=payload.applied_to,
        applied_item_id=payload.applied_item_id,
        discount_source=payload.discount_source,
        reason=payload.reason,
    )


@router.post("/remove-discount", response_model=CheckoutSession)
def remove_discount(
    payload: RemoveDiscountRequest,
    context=Depends(require_permission(BILLS_WRITE)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.remove_discount(payload.session_id, context.tenant_id, payload.discount_id)


@router.post("/process-payment", response_model=CheckoutSession)
def process_payment(
    payload: ProcessPaymentRequest,
    context=Depends(require_permission(BILLS_WRITE)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.process_payment(payload.session_id, context.tenant_id, payload.payments)


@router.post("/complete", response_model=CompleteCheckoutResponse)
def complete_checkout(
    payload: CompleteCheckoutRequest,
    context=Depends(require_permission(BILLS_WRITE)),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.complete_checkout(
        payload.session_id,
        context.tenant_id,
        user_id=context.user_id,
        tip_amount=payload.tip_amount,
        send_receipt=payload.send_receipt,
        receipt_method=payload.receipt_method,
    )
