"""Attendance marking, toggling and history queries.

The one-record-per-(member, service) rule lives in the store as a composite
unique constraint. Inserts are attempted directly and a constraint violation
is translated into a DuplicateError, so two concurrent requests cannot both
record the same attendance.
"""
import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, func, select

from attendance_tracker.core.config import settings
from attendance_tracker.core.errors import (
    DuplicateError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from attendance_tracker.models import (
    AttendanceRecord,
    AttendanceRecordDetail,
    AttendanceTrendPoint,
    Member,
    Service,
)
from attendance_tracker.services.directory import parse_id

logger = logging.getLogger(__name__)

ALREADY_MARKED = "Attendance already marked for this member for this service"
UNKNOWN_SERVICE = "Unknown Service"
UNKNOWN_MEMBER = "Unknown Member"


def _strip_id(value: UUID | str | None) -> UUID | str | None:
    return value.strip() if isinstance(value, str) else value


def _require_ids(member_id: UUID | str | None, service_id: UUID | str | None) -> tuple[UUID, UUID]:
    member_id, service_id = _strip_id(member_id), _strip_id(service_id)
    if not member_id or not service_id:
        raise ValidationError("Member and service are required")
    return parse_id(member_id, "member"), parse_id(service_id, "service")


def _fetch_service(session: Session, service_id: UUID) -> Service:
    try:
        service = session.get(Service, service_id)
    except SQLAlchemyError as e:
        logger.error(f"Service lookup failed for {service_id}: {e}")
        raise StoreError(f"Failed to fetch service details: {e}") from e
    if service is None:
        raise NotFoundError("Failed to fetch service details: service not found")
    return service


def _find_record(session: Session, member_id: UUID, service_id: UUID) -> AttendanceRecord | None:
    statement = (
        select(AttendanceRecord)
        .where(AttendanceRecord.member_id == member_id)
        .where(AttendanceRecord.service_id == service_id)
    )
    return session.exec(statement).first()


def _insert_record(session: Session, member_id: UUID, service: Service) -> AttendanceRecord:
    """Insert a record, copying the service's current date into it."""
    service_id = service.id
    record = AttendanceRecord(
        member_id=member_id,
        service_id=service_id,
        service_date=service.service_date,
    )
    session.add(record)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        # Unique violation and foreign key violation both land here
        if _find_record(session, member_id, service_id) is not None:
            logger.info(f"Attendance already recorded: member={member_id} service={service_id}")
            raise DuplicateError(ALREADY_MARKED) from e
        logger.error(f"Failed to mark attendance for member={member_id} service={service_id}: {e}")
        raise StoreError(f"Failed to mark attendance: {e.orig}") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to mark attendance for member={member_id} service={service_id}: {e}")
        raise StoreError(f"Failed to mark attendance: {e}") from e

    session.refresh(record)
    return record


def mark_attendance(
    session: Session,
    member_id: UUID | str | None,
    service_id: UUID | str | None,
) -> AttendanceRecord:
    """
    Record that a member attended a service.

    Raises ValidationError for missing ids, NotFoundError when the service
    does not exist, DuplicateError when attendance is already recorded and
    StoreError when the insert fails. Nothing is written on failure.
    """
    member_uuid, service_uuid = _require_ids(member_id, service_id)
    service = _fetch_service(session, service_uuid)

    record = _insert_record(session, member_uuid, service)
    logger.info(f"Marked attendance: member={member_uuid} service={service_uuid}")
    return record


def toggle_attendance(
    session: Session,
    member_id: UUID | str | None,
    service_id: UUID | str | None,
) -> bool:
    """
    Flip whether a member attended a service.

    Deletes the record when one exists, otherwise creates it. Returns True
    if the member is now marked as attending, False if unmarked.
    """
    member_uuid, service_uuid = _require_ids(member_id, service_id)
    service = _fetch_service(session, service_uuid)

    try:
        existing = _find_record(session, member_uuid, service_uuid)
    except SQLAlchemyError as e:
        logger.error(f"Attendance lookup failed: {e}")
        raise StoreError(f"Failed to fetch attendance: {e}") from e

    if existing is None:
        _insert_record(session, member_uuid, service)
        logger.info(f"Toggled attendance on: member={member_uuid} service={service_uuid}")
        return True

    session.delete(existing)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to unmark attendance for member={member_uuid} service={service_uuid}: {e}")
        raise StoreError(f"Failed to unmark attendance: {e}") from e

    logger.info(f"Toggled attendance off: member={member_uuid} service={service_uuid}")
    return False


def get_service_attendance(session: Session, service_id: UUID | str | None) -> list[AttendanceRecord]:
    """Return all attendance records for a service, or an empty list."""
    if not service_id:
        return []
    try:
        service_uuid = parse_id(service_id, "service")
    except ValidationError:
        return []

    statement = select(AttendanceRecord).where(AttendanceRecord.service_id == service_uuid)
    try:
        return list(session.exec(statement).all())
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch attendance for service {service_uuid}: {e}")
        raise StoreError(f"Failed to fetch attendance records: {e}") from e


def get_attendance_records(session: Session) -> list[AttendanceRecordDetail]:
    """
    Return every attendance record with its service and member names.

    Records are ordered by service date, most recent first. Outer joins keep
    a record visible even if its service or member row is gone; the missing
    name is replaced with a placeholder.
    """
    statement = (
        select(AttendanceRecord, Service.name, Member.full_name)
        .join(Service, AttendanceRecord.service_id == Service.id, isouter=True)
        .join(Member, AttendanceRecord.member_id == Member.id, isouter=True)
        .order_by(col(AttendanceRecord.service_date).desc())
    )
    try:
        rows = session.exec(statement).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch attendance records: {e}")
        raise StoreError(f"Failed to fetch attendance records: {e}") from e

    return [
        AttendanceRecordDetail(
            id=record.id,
            member_id=record.member_id,
            service_id=record.service_id,
            service_date=record.service_date,
            service_name=service_name or UNKNOWN_SERVICE,
            member_name=member_name or UNKNOWN_MEMBER,
        )
        for record, service_name, member_name in rows
    ]


def group_records_by_service(
    records: list[AttendanceRecordDetail],
) -> dict[str, list[AttendanceRecordDetail]]:
    """Group records by service name, with names in lexicographic order."""
    grouped: dict[str, list[AttendanceRecordDetail]] = defaultdict(list)
    for record in records:
        grouped[record.service_name or UNKNOWN_SERVICE].append(record)
    return {name: grouped[name] for name in sorted(grouped)}


def attendance_trend(session: Session, limit: int | None = None) -> list[AttendanceTrendPoint]:
    """
    Count attendance per service date.

    Returns the ``limit`` most recent dates (``settings.trend_points`` by
    default) in ascending date order, ready to plot.
    """
    limit = settings.trend_points if limit is None else limit
    if limit < 1:
        raise ValidationError("Trend limit must be at least 1")

    statement = (
        select(AttendanceRecord.service_date, func.count(AttendanceRecord.id))
        .group_by(AttendanceRecord.service_date)
        .order_by(col(AttendanceRecord.service_date).desc())
        .limit(limit)
    )
    try:
        rows = session.exec(statement).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to compute attendance trend: {e}")
        raise StoreError(f"Failed to fetch attendance records: {e}") from e

    return [
        AttendanceTrendPoint(service_date=service_date, attendance=count)
        for service_date, count in reversed(rows)
    ]


def trend_change(points: list[AttendanceTrendPoint]) -> tuple[int, float]:
    """Absolute and percentage change from the first point to the last."""
    if len(points) < 2:
        return 0, 0.0
    first = points[0].attendance
    change = points[-1].attendance - first
    percent = round(change / first * 100, 1) if first > 0 else 0.0
    return change, percent
