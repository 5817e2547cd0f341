"""
Payment endpoints.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from innkeeper.api.deps import get_payment_service, require_permission, unwrap_result
from innkeeper.schemas.common import MessageResponse, SuccessResponse
from innkeeper.schemas.payment import (
    LedgerSummaryResponse,
    PaymentCreate,
    PaymentResponse,
    PaymentUpdate,
    RefundRequest,
    ReservationPaymentsResponse,
)
from innkeeper.services.common import CAN_MANAGE_PAYMENTS, CallerIdentity
from innkeeper.services.payment import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])

manage_payments = require_permission(CAN_MANAGE_PAYMENTS)


@router.post(
    "",
    response_model=SuccessResponse[PaymentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment",
)
def create_payment(
    payload: PaymentCreate,
    identity: CallerIdentity = Depends(manage_payments),
    service: PaymentService = Depends(get_payment_service),
):
    result = service.create_payment(payload, actor_id=identity.user_id)
    payment = unwrap_result(result)
    return SuccessResponse.create(result.message, PaymentResponse.model_validate(payment))


@router.get(
    "/pending",
    response_model=SuccessResponse[List[PaymentResponse]],
    summary="Payments awaiting settlement",
)
def list_pending_payments(
    identity: CallerIdentity = Depends(manage_payments),
    service: PaymentService = Depends(get_payment_service),
):
    payments = unwrap_result(service.list_pending())
    return SuccessResponse.create("OK", [PaymentResponse.model_validate(p) for p in payments])


@router.get(
    "/reservation/{reservation_id}",
    response_model=SuccessResponse[ReservationPaymentsResponse],
    summary="Payments of a reservation with its balance",
)
def list_reservation_payments(
    reservation_id: UUID,
    identity: CallerIdentity = Depends(manage_payments),
    service: PaymentService = Depends(get_payment_service),
):
    data = unwrap_result(service.list_for_reservation(reservation_id))
    return SuccessResponse.create(
        "OK",
        ReservationPaymentsResponse(
            payments=[PaymentResponse.model_validate(p) for p in data["payments"]],
            summary=LedgerSummaryResponse(**data["summary"]),
        ),
    )


@router.get("/{payment_id}", response_model=SuccessResponse[PaymentResponse])
def get_payment(
    payment_id: UUID,
    identity: CallerIdentity = Depends(manage_payments),
    service: PaymentService = Depends(get_payment_service),
):
    payment = unwrap_result(service.get_payment(payment_id))
    return SuccessResponse.create("OK", PaymentResponse.model_validate(payment))


@router.put("/{payment_id}", response_model=SuccessResponse[PaymentResponse])
def update_payment(
    payment_id: UUID,
    payload: PaymentUpdate,
    identity: CallerIdentity = Depends(manage_payments),
    service: PaymentService = Depends(get_payment_service),
):
    result = service.update_payment(payment_id, payload, actor_id=identity.user_id)
    payment = unwrap_result(result)
    return SuccessResponse.create(result.message, PaymentResponse.model_validate(payment))


@router.delete("/{payment_id}", response_model=MessageResponse)
def delete_payment(
    payment_id: UUID,
    identity: CallerIdentity = Depends(manage_payments),
    service: PaymentService = Depends(get_payment_service),
):
    result = service.delete_payment(payment_id, actor_id=identity.user_id)
    unwrap_result(result)
    return MessageResponse(message=result.message)


@router.post("/{payment_id}/refund", response_model=SuccessResponse[PaymentResponse])
def refund_payment(
    payment_id: UUID,
    payload: RefundRequest,
    identity: CallerIdentity = Depends(manage_payments),
    service: PaymentService = Depends(get_payment_service),
):
    result = service.refund_payment(payment_id, payload, actor_id=identity.user_id)
    payment = unwrap_result(result)
    return SuccessResponse.create(result.message, PaymentResponse.model_validate(payment))
