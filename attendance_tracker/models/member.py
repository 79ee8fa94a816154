"""Member model for people whose attendance is tracked.

This module defines the Member model which represents a person registered
with the organization. Members are created from the admin workflow and
selected when marking attendance for a service.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from attendance_tracker.models.attendance import AttendanceRecord


class Member(SQLModel, table=True):
    """A person tracked for attendance purposes.

    Two members may share a name; the UUID is the only identity. Deleting a
    member removes all of their attendance records, both through the
    ``ON DELETE CASCADE`` foreign key and the ORM relationship cascade.

    Attributes:
        id: Unique identifier (UUID).
        created_at: When the member was registered.
        full_name: Display name, required and non-empty.
        phone_number: Optional contact number.
        email: Optional contact email.
        attendance_records: Services this member attended.
    """
    __tablename__ = "members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    full_name: str = Field(index=True)
    phone_number: str | None = None
    email: str | None = None

    # Relationship
    attendance_records: list["AttendanceRecord"] = Relationship(
        back_populates="member", cascade_delete=True
    )
