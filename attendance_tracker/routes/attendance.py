"""Attendance routes for marking attendance and browsing history."""
from fastapi import APIRouter, Depends, Form, Query
from sqlmodel import Session

from attendance_tracker.core.config import settings
from attendance_tracker.core.database import get_session
from attendance_tracker.models import AttendanceRecordDetail
from attendance_tracker.services.attendance import (
    attendance_trend,
    get_attendance_records,
    group_records_by_service,
    mark_attendance,
    toggle_attendance,
    trend_change,
)

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/mark")
async def mark(
    member_id: str = Form(""),
    service_id: str = Form(""),
    session: Session = Depends(get_session),
):
    """
    Mark a member as attending a service.

    Returns ``{"success": true}``. Fails with 409 if attendance was already
    marked, 404 if the service is unknown and 400 if either id is missing.
    """
    mark_attendance(session, member_id, service_id)
    return {"success": True}


@router.post("/toggle")
async def toggle(
    member_id: str = Form(""),
    service_id: str = Form(""),
    session: Session = Depends(get_session),
):
    """
    Toggle a member's attendance for a service.

    Used by the live attendance table: removes the record if present,
    creates it otherwise. ``attended`` reports the resulting state.
    """
    attended = toggle_attendance(session, member_id, service_id)
    return {"success": True, "attended": attended}


@router.get("/records", response_model=list[AttendanceRecordDetail])
async def records(session: Session = Depends(get_session)):
    """All attendance records with service and member names, newest first."""
    return get_attendance_records(session)


@router.get("/records/grouped", response_model=dict[str, list[AttendanceRecordDetail]])
async def records_grouped(session: Session = Depends(get_session)):
    """Attendance records keyed by service name, names sorted alphabetically."""
    return group_records_by_service(get_attendance_records(session))


@router.get("/trend")
async def trend(
    limit: int = Query(default=settings.trend_points),
    session: Session = Depends(get_session),
):
    """
    Attendance counts for the most recent service dates.

    Points are in ascending date order. ``change`` and ``percent_change``
    compare the last point with the first.
    """
    points = attendance_trend(session, limit)
    change, percent_change = trend_change(points)
    return {
        "points": [point.model_dump(mode="json") for point in points],
        "change": change,
        "percent_change": percent_change,
    }
