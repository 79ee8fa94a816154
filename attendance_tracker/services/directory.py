"""Member and service directory: creation and listing."""
import logging
from datetime import date
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from attendance_tracker.core.errors import NotFoundError, StoreError, ValidationError
from attendance_tracker.models import Member, Service

logger = logging.getLogger(__name__)


def parse_id(value: UUID | str, label: str) -> UUID:
    """Coerce a form value into a UUID, rejecting malformed input."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError as e:
        raise ValidationError(f"Invalid {label} id: {value}") from e


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_service_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(f"Invalid service date: {value}") from e


def add_member(
    session: Session,
    full_name: str | None,
    phone_number: str | None = None,
    email: str | None = None,
) -> Member:
    """
    Register a new member.

    Only the full name is required. Blank phone and email values are stored
    as NULL. Members may share a name.
    """
    full_name = _blank_to_none(full_name)
    if not full_name:
        raise ValidationError("Full name is required")

    member = Member(
        full_name=full_name,
        phone_number=_blank_to_none(phone_number),
        email=_blank_to_none(email),
    )
    session.add(member)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to add member {full_name!r}: {e}")
        raise StoreError(f"Failed to add member: {e}") from e

    session.refresh(member)
    logger.info(f"Added member {member.id} ({member.full_name})")
    return member


def add_service(
    session: Session,
    name: str | None,
    service_date: date | str | None,
    description: str | None = None,
) -> Service:
    """
    Create a new service.

    The store rejects a second service on the same date. That rejection is
    reported as a StoreError like any other insert failure, with a message
    naming the conflicting date.
    """
    name = _blank_to_none(name)
    if isinstance(service_date, str):
        service_date = _blank_to_none(service_date)
    if not name or not service_date:
        raise ValidationError("Service name and date are required")

    parsed_date = _parse_service_date(service_date)

    service = Service(
        name=name,
        description=_blank_to_none(description),
        service_date=parsed_date,
    )
    session.add(service)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to add service {name!r} on {parsed_date}: {e}")
        try:
            taken = session.exec(
                select(Service.id).where(Service.service_date == parsed_date)
            ).first()
        except SQLAlchemyError as lookup_error:
            logger.error(f"Date conflict lookup failed for {parsed_date}: {lookup_error}")
            taken = None
        if taken is not None:
            raise StoreError(
                f"Failed to add service: a service already exists on {parsed_date.isoformat()}"
            ) from e
        raise StoreError(f"Failed to add service: {e}") from e

    session.refresh(service)
    logger.info(f"Added service {service.id} ({service.name}) on {service.service_date}")
    return service


def list_members(session: Session, initial: str | None = None) -> list[Member]:
    """List members alphabetically, optionally only names starting with ``initial``."""
    statement = select(Member).order_by(Member.full_name)
    initial = _blank_to_none(initial)
    if initial:
        letter = initial[0]
        if letter in ("\\", "%", "_"):
            letter = "\\" + letter
        statement = statement.where(
            col(Member.full_name).ilike(f"{letter}%", escape="\\")
        )
    try:
        return list(session.exec(statement).all())
    except SQLAlchemyError as e:
        logger.error(f"Failed to list members: {e}")
        raise StoreError(f"Failed to fetch members: {e}") from e


def list_services(session: Session) -> list[Service]:
    """List services, most recent date first."""
    statement = select(Service).order_by(col(Service.service_date).desc())
    try:
        return list(session.exec(statement).all())
    except SQLAlchemyError as e:
        logger.error(f"Failed to list services: {e}")
        raise StoreError(f"Failed to fetch services: {e}") from e


def get_member(session: Session, member_id: UUID | str) -> Member:
    member_uuid = parse_id(member_id, "member")
    try:
        member = session.get(Member, member_uuid)
    except SQLAlchemyError as e:
        logger.error(f"Member lookup failed for {member_uuid}: {e}")
        raise StoreError(f"Failed to fetch member: {e}") from e
    if member is None:
        raise NotFoundError("Member not found")
    return member


def get_service(session: Session, service_id: UUID | str) -> Service:
    service_uuid = parse_id(service_id, "service")
    try:
        service = session.get(Service, service_uuid)
    except SQLAlchemyError as e:
        logger.error(f"Service lookup failed for {service_uuid}: {e}")
        raise StoreError(f"Failed to fetch service: {e}") from e
    if service is None:
        raise NotFoundError("Service not found")
    return service
