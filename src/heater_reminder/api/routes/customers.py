"""Customer list and mutation endpoints."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, Request, status

from ...models.domain import CustomerRecord, RowMatch
from ...schemas.customers import (
    AddCustomerRequest,
    AddCustomerResponse,
    CallCustomerRequest,
    CallCustomerResponse,
    CustomerListResponse,
    CustomerModel,
    CustomerStatsResponse,
    CustomerTarget,
    RefreshResponse,
    RemindersResponse,
    SuccessResponse,
    UpdateContactRequest,
    UpdateServiceRequest,
    UpdateServiceResponse,
)
from ...services.classifier import calculate_priority, contact_status_display, reminder_display, service_status
from ...services.customers import (
    NewCustomer,
    add_customer,
    compute_customer_stats,
    get_customer_book,
    update_contact_status,
    update_service,
)
from ...services.listing import apply_view
from ...services.messaging import open_message_link
from ...services.reminders import pending_reminders

router = APIRouter(prefix="/customers", tags=["customers"])


def to_customer_model(record: CustomerRecord, today: date) -> CustomerModel:
    return CustomerModel(
        name=record.name,
        serial_tangki=record.serial_tangki,
        serial_kolektor=record.serial_kolektor,
        address=record.address,
        phone=record.phone,
        services=dict(record.services),
        last_service=record.last_service,
        next_service=record.next_service,
        contact_status=record.contact_status,
        contact_date=record.contact_date,
        contact_notes=record.contact_notes,
        next_reminder=record.next_reminder,
        row_index=record.row_index,
        record_key=record.record_key,
        priority=calculate_priority(record, today),
        contact_display=contact_status_display(record, today),
        reminder=reminder_display(record, today),
        service_status=service_status(record, today),
    )


def _match(target: CustomerTarget) -> RowMatch:
    return RowMatch(name=target.name, serial_tangki=target.serial_tangki)


@router.post("/refresh", response_model=RefreshResponse, status_code=status.HTTP_200_OK)
def refresh_customers() -> RefreshResponse:
    book = get_customer_book()
    records = book.refresh()
    today = date.today()
    warning = book.schema_warning
    return RefreshResponse(
        records=[to_customer_model(record, today) for record in records],
        loaded_at=book.loaded_at,
        missing_columns=list(warning.missing) if warning else [],
    )


@router.get("", response_model=CustomerListResponse, status_code=status.HTTP_200_OK)
def list_customers(
    search: str = Query(default="", description="Case-insensitive match on name, address or phone"),
    filter_by: str = Query(default="all", description="all, overdue, upcoming, contacted, not_contacted, contact_overdue"),
    sort_by: str = Query(default="nextService", description="priority, nextService, name, contactStatus"),
    today: Optional[date] = Query(default=None, description="Reference date; defaults to the server date"),
) -> CustomerListResponse:
    effective_today = today or date.today()
    records = get_customer_book().ensure_loaded()
    view = apply_view(records, search, filter_by, sort_by, effective_today)
    return CustomerListResponse(
        items=[to_customer_model(record, effective_today) for record in view],
        total=len(view),
        search=search,
        filter_by=filter_by,
        sort_by=sort_by,
        today=effective_today,
    )


@router.get("/stats", response_model=CustomerStatsResponse, status_code=status.HTTP_200_OK)
def get_customer_stats(today: Optional[date] = Query(default=None)) -> CustomerStatsResponse:
    records = get_customer_book().ensure_loaded()
    return CustomerStatsResponse(**compute_customer_stats(records, today or date.today()))


@router.get("/reminders", response_model=RemindersResponse, status_code=status.HTTP_200_OK)
def get_reminders(request: Request, today: Optional[date] = Query(default=None)) -> RemindersResponse:
    scheduler = getattr(request.app.state, "reminder_scheduler", None)
    last_check = scheduler.last_check if scheduler is not None else None
    if today is None and last_check is not None:
        # Serve the scheduler's last result; an explicit date forces a recomputation.
        effective_today = last_check.as_of
        pending = last_check.pending
    else:
        effective_today = today or date.today()
        pending = pending_reminders(get_customer_book().ensure_loaded(), effective_today)
    return RemindersResponse(
        as_of=effective_today,
        count=len(pending),
        items=[to_customer_model(record, effective_today) for record in pending],
        last_check_at=last_check.checked_at if last_check else None,
    )


@router.post("", response_model=AddCustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(payload: AddCustomerRequest) -> AddCustomerResponse:
    position = add_customer(
        get_customer_book(),
        NewCustomer(
            name=payload.name,
            phone=payload.phone,
            address=payload.address,
            serial_tangki=payload.serial_tangki,
            serial_kolektor=payload.serial_kolektor,
            services=dict(payload.services),
            next_reminder=payload.next_reminder,
        ),
    )
    return AddCustomerResponse(row_position=position)


@router.post("/service", response_model=UpdateServiceResponse, status_code=status.HTTP_200_OK)
def record_service(payload: UpdateServiceRequest) -> UpdateServiceResponse:
    updated = update_service(
        get_customer_book(),
        _match(payload.target),
        payload.service_date,
        slot_column=payload.slot_column,
    )
    return UpdateServiceResponse(updated_slot=updated)


@router.post("/contact-status", response_model=SuccessResponse, status_code=status.HTTP_200_OK)
def set_contact_status(payload: UpdateContactRequest) -> SuccessResponse:
    update_contact_status(
        get_customer_book(),
        _match(payload.target),
        payload.status,
        notes=payload.notes,
        contact_date=payload.contact_date,
    )
    return SuccessResponse()


@router.post("/call", response_model=CallCustomerResponse, status_code=status.HTTP_200_OK)
def call_customer(payload: CallCustomerRequest) -> CallCustomerResponse:
    return CallCustomerResponse(url=open_message_link(payload.phone))
