from ..extensions import db
from .enums import Role, CourseStatus, EnrollmentStatus, AttendanceStatus
from .people import Student, Teacher
from .course import Course
from .enrollment import CourseEnrollment, Grade, Attendance
from .user import User, UserRole

__all__ = [
    "Role", "CourseStatus", "EnrollmentStatus", "AttendanceStatus",
    "Student", "Teacher", "Course", "CourseEnrollment", "Grade", "Attendance",
    "User", "UserRole",
]
