from attendance_tracker.models.attendance import (
    AttendanceRecord,
    AttendanceRecordDetail,
    AttendanceTrendPoint,
)
from attendance_tracker.models.member import Member
from attendance_tracker.models.service import Service

__all__ = [
    "Member",
    "Service",
    "AttendanceRecord",
    "AttendanceRecordDetail",
    "AttendanceTrendPoint",
]
