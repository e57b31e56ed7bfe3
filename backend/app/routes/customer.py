"""
Customer Routes — Customer records and delete policy.
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_current_user_id, get_customer_service
from app.schemas.schemas import CustomerCreateRequest, CustomerRead, CustomerUpdateRequest
from app.services.customer_service import CustomerService

router = APIRouter(prefix="/api/customers", tags=["Customers"])


@router.post("", response_model=CustomerRead, status_code=201)
def create_customer(
    payload: CustomerCreateRequest,
    _user_id: str = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
):
    return service.create(payload)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: str,
    _user_id: str = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
):
    return service.get(customer_id)


@router.patch("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: str,
    payload: CustomerUpdateRequest,
    _user_id: str = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
):
    return service.update(customer_id, payload)


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: str,
    action: str = "soft",
    _user_id: str = Depends(get_current_user_id),
    service: CustomerService = Depends(get_customer_service),
):
    """Soft delete deactivates; hard delete also removes the customer's projects."""
    message = service.delete(customer_id, action)
    return {"success": True, "message": message}
