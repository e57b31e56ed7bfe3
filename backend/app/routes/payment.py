"""
Payment Routes — Razorpay-backed project renewal.
Handles: order initiation and checkout confirmation.
"""
from fastapi import APIRouter, Depends, Request

from app.dependencies import client_ip, get_current_user_id, get_renewal_service
from app.schemas.schemas import (
    RenewalInitiateRequest, RenewalInitiateResponse,
    RenewalConfirmRequest, RenewalConfirmResponse,
)
from app.services.renewal_service import RenewalService
from app.utils.rate_limiter import rate_limit

router = APIRouter(prefix="/api/projects", tags=["Renewal"])


@router.post("/{project_id}/renew/initiate", response_model=RenewalInitiateResponse)
def initiate_renewal_payment(
    project_id: str,
    payload: RenewalInitiateRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: RenewalService = Depends(get_renewal_service),
    _throttle: bool = Depends(rate_limit(requests=5, window=60, scope="renewal-initiate")),
):
    """Open a payment order for renewing a project's domain."""
    return service.initiate_payment(project_id, payload.duration, user_id, client_ip=client_ip(request))


@router.post("/{project_id}/renew/confirm", response_model=RenewalConfirmResponse)
def confirm_renewal(
    project_id: str,
    payload: RenewalConfirmRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: RenewalService = Depends(get_renewal_service),
):
    """Apply a paid renewal (checkout callback). Inspect `fileError` for post-commit warnings."""
    return service.confirm_renewal(
        project_id,
        payment_id=payload.payment_id,
        order_id=payload.order_id,
        signature=payload.signature,
        duration=payload.duration,
        user_id=user_id,
        document_format=payload.document_format,
        client_ip=client_ip(request),
    )
