"""Customer-facing API schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class StatusDisplayModel(BaseModel):
    status: str
    text: str


class ReminderDisplayModel(BaseModel):
    days_diff: Optional[int] = None
    bucket: str
    text: str


class CustomerModel(BaseModel):
    name: str
    serial_tangki: str = ""
    serial_kolektor: str = ""
    address: str = ""
    phone: str = ""
    services: Dict[int, str]
    last_service: Optional[date] = None
    next_service: Optional[date] = None
    contact_status: Optional[str] = None
    contact_date: Optional[date] = None
    contact_notes: Optional[str] = None
    next_reminder: Optional[date] = None
    row_index: int
    record_key: str
    priority: str
    contact_display: StatusDisplayModel
    reminder: ReminderDisplayModel
    service_status: StatusDisplayModel


class RefreshResponse(BaseModel):
    success: bool = True
    records: List[CustomerModel]
    loaded_at: Optional[datetime] = None
    missing_columns: List[str] = Field(default_factory=list)


class CustomerListResponse(BaseModel):
    items: List[CustomerModel]
    total: int
    search: str
    filter_by: str
    sort_by: str
    today: date


class CustomerTarget(BaseModel):
    """Natural key of the row to update; the tank serial wins when both are given."""

    name: Optional[str] = None
    serial_tangki: Optional[str] = None


class AddCustomerRequest(BaseModel):
    name: str = ""
    phone: str = ""
    address: str = ""
    serial_tangki: str = ""
    serial_kolektor: str = ""
    services: Dict[int, str] = Field(default_factory=dict, description="Initial service dates keyed by slot 1-15.")
    next_reminder: Optional[str] = Field(default=None, description="Optional reminder date override (YYYY-MM-DD).")


class AddCustomerResponse(BaseModel):
    success: bool = True
    row_position: int


class UpdateServiceRequest(BaseModel):
    target: CustomerTarget
    service_date: str = Field(..., description="Service date (YYYY-MM-DD).")
    slot_column: Optional[str] = Field(
        default=None,
        description="Slot picked in the UI; the first empty slot is always the one written.",
    )


class UpdateServiceResponse(BaseModel):
    success: bool = True
    updated_slot: str


class UpdateContactRequest(BaseModel):
    target: CustomerTarget
    status: str = Field(..., description="not_contacted, contacted or overdue")
    notes: Optional[str] = None
    contact_date: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


class CallCustomerRequest(BaseModel):
    phone: str


class CallCustomerResponse(BaseModel):
    success: bool = True
    url: str


class CustomerStatsResponse(BaseModel):
    totalCustomers: int
    overdueServices: int
    dueThisMonth: int
    contacted: int
    notContacted: int
    contactOverdue: int


class RemindersResponse(BaseModel):
    as_of: date
    count: int
    items: List[CustomerModel]
    last_check_at: Optional[datetime] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str
