from enum import Enum

from ..extensions import db


class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class CourseStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    DROPPED = "dropped"
    COMPLETED = "completed"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


def enum_column(enum_cls, name):
    """Enum column persisted by value ("active"), not by member name."""
    return db.Enum(enum_cls, name=name, native_enum=False, length=16,
                   values_callable=lambda e: [m.value for m in e])
