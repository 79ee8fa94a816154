"""Service routes for scheduling services and viewing their attendance."""
from fastapi import APIRouter, Depends, Form
from sqlmodel import Session

from attendance_tracker.core.database import get_session
from attendance_tracker.models import AttendanceRecord, Service
from attendance_tracker.services.attendance import get_service_attendance
from attendance_tracker.services.directory import add_service, get_service, list_services

router = APIRouter(prefix="/services", tags=["services"])


@router.post("", status_code=201, response_model=Service)
async def create_service(
    name: str = Form(""),
    description: str = Form(""),
    service_date: str = Form(""),
    session: Session = Depends(get_session),
):
    """
    Create a new service.

    Name and an ISO date (YYYY-MM-DD) are required. Only one service may be
    held per date; a second one on the same date fails with 500 like any
    other store error.
    """
    return add_service(session, name, service_date, description)


@router.get("", response_model=list[Service])
async def services(session: Session = Depends(get_session)):
    """List services, most recent date first."""
    return list_services(session)


@router.get("/{service_id}", response_model=Service)
async def service_detail(service_id: str, session: Session = Depends(get_session)):
    """Fetch one service, 404 if unknown."""
    return get_service(session, service_id)


@router.get("/{service_id}/attendance", response_model=list[AttendanceRecord])
async def service_attendance(service_id: str, session: Session = Depends(get_session)):
    """
    List the attendance records of one service.

    Always returns a list; an unknown service simply has no records.
    """
    return get_service_attendance(session, service_id)
