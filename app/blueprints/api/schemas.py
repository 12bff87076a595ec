"""Request payloads accepted by the JSON API.

Only shape and type are checked here. Ranges, lengths and uniqueness are
enforced by the services so the web forms get the same messages.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LoginIn(Payload):
    email: str
    password: str


class RegisterIn(Payload):
    email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    role: str = "student"
    phone: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[str] = None
    student_no: Optional[str] = None
    employee_no: Optional[str] = None
    department: Optional[str] = None
    title: Optional[str] = None
    year: Optional[int] = None


class PasswordIn(Payload):
    old_password: str
    new_password: str
    confirm_password: str


class CourseIn(Payload):
    code: str
    name: str
    credits: int
    teacher_id: int
    description: Optional[str] = None


class CourseUpdateIn(Payload):
    name: str
    credits: int
    status: str
    description: Optional[str] = None
    teacher_id: Optional[int] = None


class EnrollIn(Payload):
    student_id: int
    comments: Optional[str] = None


class AddStudentsIn(Payload):
    student_ids: List[int]


class PersonIn(Payload):
    first_name: str
    last_name: str
    email: str
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[str] = None
    department: Optional[str] = None


class PersonUpdateIn(Payload):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[str] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None


class StudentIn(PersonIn):
    student_no: Optional[str] = None
    year: Optional[int] = None


class StudentUpdateIn(PersonUpdateIn):
    student_no: Optional[str] = None
    year: Optional[int] = None


class TeacherIn(PersonIn):
    employee_no: Optional[str] = None
    title: Optional[str] = None
    hire_date: Optional[str] = None


class TeacherUpdateIn(PersonUpdateIn):
    employee_no: Optional[str] = None
    title: Optional[str] = None


class GradeIn(Payload):
    course_id: int
    student_id: int
    exam_type: str
    score: float
    comments: Optional[str] = None


class GradeUpdateIn(Payload):
    exam_type: str
    score: float
    comments: Optional[str] = None


class AttendanceIn(Payload):
    course_id: int
    student_id: int
    day: str = Field(alias="date")
    status: str = "present"
    notes: Optional[str] = None


class AttendanceUpdateIn(Payload):
    day: str = Field(alias="date")
    status: str
    notes: Optional[str] = None


class BulkEntryIn(Payload):
    student_id: int
    status: str = "present"
    notes: Optional[str] = None


class BulkAttendanceIn(Payload):
    course_id: int
    day: str = Field(alias="date")
    entries: List[BulkEntryIn]
