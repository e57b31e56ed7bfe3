"""
Pydantic Schemas — Request & Response models for API validation.
Wire format is camelCase; request bodies also accept the provider's native field names.
"""
from datetime import datetime
from typing import Any, Optional, Dict, List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, StrictStr, StrictBool
from pydantic.alias_generators import to_camel

ProjectStatus = Literal["pending", "in-progress", "completed", "on-hold"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ──────────────── Shared References ────────────────

class CustomerRef(CamelModel):
    id: str
    name: str
    email: str


class UserRef(CamelModel):
    id: str
    username: str
    fullname: str


# ──────────────── Customers ────────────────

class CustomerCreateRequest(BaseModel):
    name: Optional[StrictStr] = None
    email: Optional[StrictStr] = None
    phone: Optional[StrictStr] = None
    address: Optional[StrictStr] = None
    company: Optional[StrictStr] = None
    notes: Optional[StrictStr] = None


class CustomerUpdateRequest(CustomerCreateRequest):
    pass


class CustomerRead(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ──────────────── Projects ────────────────

class ProjectCreateRequest(BaseModel):
    title: Optional[StrictStr] = None
    description: Optional[StrictStr] = Field(None, max_length=1000)
    customer: Optional[StrictStr] = Field(None, validation_alias=AliasChoices("customer", "customerId"))
    domain_name: Optional[StrictStr] = Field(None, validation_alias=AliasChoices("domainName", "domain_name"))
    domain_start_date: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("domainStartDate", "domain_start_date")
    )
    domain_end_date: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("domainEndDate", "domain_end_date")
    )
    start_date: Optional[datetime] = Field(None, validation_alias=AliasChoices("startDate", "start_date"))
    end_date: Optional[datetime] = Field(None, validation_alias=AliasChoices("endDate", "end_date"))
    status: Optional[ProjectStatus] = None
    budget: Optional[StrictInt] = Field(None, ge=0)
    renewal_price: Optional[StrictInt] = Field(
        None, ge=0, validation_alias=AliasChoices("renewalPrice", "renewal_price")
    )
    file_format: Optional[StrictStr] = Field(None, validation_alias=AliasChoices("fileFormat", "file_format"))


class ProjectUpdateRequest(ProjectCreateRequest):
    is_active: Optional[StrictBool] = Field(None, validation_alias=AliasChoices("isActive", "is_active"))


class RenewalRecordRead(CamelModel):
    renewed_at: datetime
    new_end_date: datetime
    renewed_by: str
    payment_id: str
    amount: int


class ProjectRead(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    customer: Optional[CustomerRef] = None
    created_by: Optional[UserRef] = None
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[int] = None
    domain_name: Optional[str] = None
    domain_start_date: Optional[datetime] = None
    domain_end_date: Optional[datetime] = None
    is_active: bool
    file_path: Optional[str] = None
    renewal_price: int
    renewal_history: List[RenewalRecordRead] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectFileResponse(CamelModel):
    """Project plus the outcome of its document side effects."""
    project: ProjectRead
    file_path: Optional[str] = None
    file_error: Optional[str] = None


class ExpiringProjectRead(CamelModel):
    id: str
    title: str
    domain_end_date: datetime
    is_active: bool
    renewal_history: List[RenewalRecordRead] = []


# ──────────────── Renewal Payments ────────────────

class RenewalInitiateRequest(BaseModel):
    # Type checked by the service, after the project lookup
    duration: Optional[Any] = Field(None, description="Renewal duration in whole years")


class RenewalInitiateResponse(CamelModel):
    order_id: str
    amount: int          # Paise
    currency: str
    key_id: str


class RenewalConfirmRequest(BaseModel):
    # Any JSON type; the service rejects non-strings after the project lookup
    payment_id: Optional[Any] = Field(
        None, validation_alias=AliasChoices("paymentId", "razorpay_payment_id", "payment_id")
    )
    order_id: Optional[Any] = Field(
        None, validation_alias=AliasChoices("orderId", "razorpay_order_id", "order_id")
    )
    signature: Optional[Any] = Field(
        None, validation_alias=AliasChoices("signature", "razorpay_signature")
    )
    duration: Optional[Any] = None
    document_format: Optional[Any] = Field(
        None, validation_alias=AliasChoices("documentFormat", "fileFormat", "document_format")
    )


class RenewalConfirmResponse(ProjectFileResponse):
    pass


# ──────────────── Admin / Audit ────────────────

class AuditLogEntry(BaseModel):
    id: int
    project_id: str
    action: str
    payload: Optional[Dict] = None
    payload_hash: Optional[str] = None
    timestamp: datetime
    log_metadata: Optional[Dict] = None

    class Config:
        from_attributes = True


# ──────────────── Generic ────────────────

class ErrorResponse(BaseModel):
    detail: str
    error_code: Optional[str] = None
