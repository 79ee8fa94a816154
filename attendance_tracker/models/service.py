"""Service model for dated events at which attendance is taken."""

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from attendance_tracker.models.attendance import AttendanceRecord


class Service(SQLModel, table=True):
    """A named event held on a single calendar date.

    No two services may share a date; the store enforces this with a unique
    index on ``service_date``.

    Attributes:
        id: Unique identifier (UUID).
        created_at: When the service was created.
        name: Display name, e.g. "Sunday Service".
        description: Optional free text.
        service_date: The day the service is held (unique).
        attendance_records: Members recorded as attending.
    """
    __tablename__ = "services"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    name: str
    description: str | None = None
    service_date: date = Field(index=True, unique=True)

    # Relationship
    attendance_records: list["AttendanceRecord"] = Relationship(
        back_populates="service", cascade_delete=True
    )
