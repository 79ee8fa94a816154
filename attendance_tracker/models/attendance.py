"""Attendance record model and its read-only projections.

This module defines the AttendanceRecord table, which joins a Member to a
Service, together with the non-table models returned by the history and
trend queries.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from attendance_tracker.models.member import Member
    from attendance_tracker.models.service import Service


class AttendanceRecord(SQLModel, table=True):
    """A record that a member attended a service.

    At most one record may exist per (member, service) pair. The composite
    unique constraint makes a second insert fail in the store, so the check
    holds under concurrent requests.

    ``service_date`` is a point-in-time copy of the service's date taken
    when the record is created. It is never resynced if the service's date
    changes later.

    Attributes:
        id: Unique identifier (UUID).
        member_id: Foreign key to the attending Member.
        service_id: Foreign key to the attended Service.
        service_date: Date of the service at the time of marking.
        member: Reference to the Member object.
        service: Reference to the Service object.
    """
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("member_id", "service_id", name="uq_attendance_member_service"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    member_id: UUID = Field(foreign_key="members.id", ondelete="CASCADE", index=True)
    service_id: UUID = Field(foreign_key="services.id", ondelete="CASCADE", index=True)
    service_date: date = Field(index=True)

    # Relationships
    member: Optional["Member"] = Relationship(back_populates="attendance_records")
    service: Optional["Service"] = Relationship(back_populates="attendance_records")


class AttendanceRecordDetail(SQLModel):
    """An attendance record enriched with the service and member names."""
    id: UUID
    member_id: UUID
    service_id: UUID
    service_date: date
    service_name: str
    member_name: str


class AttendanceTrendPoint(SQLModel):
    """Number of members recorded on one service date."""
    service_date: date
    attendance: int
