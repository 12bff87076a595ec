"""Role-derived visibility and mutation rules.

A user may hold several roles; every check below grants access when ANY
of the actor's roles allows it.

| Resource                        | Admin    | Teacher              | Student              |
|---------------------------------|----------|----------------------|----------------------|
| attendance / grade record       | read all | own records          | own records          |
| course roster / enrollment mgmt | full     | owned courses        | own enrollments view |
| student / teacher directory     | full     | read-only            | own profile only     |
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..errors import Forbidden, NotFound
from ..models import Role


@dataclass(frozen=True)
class Actor:
    """Who is calling: user id, role set and the linked profile ids."""

    user_id: int
    roles: FrozenSet[Role] = field(default_factory=frozenset)
    student_id: Optional[int] = None
    teacher_id: Optional[int] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(
            user_id=user.id,
            roles=frozenset(user.roles),
            student_id=user.student.id if user.student else None,
            teacher_id=user.teacher.id if user.teacher else None,
        )

    def has(self, *roles: Role) -> bool:
        return any(r in self.roles for r in roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def acting_teacher_id(self) -> Optional[int]:
        return self.teacher_id if Role.TEACHER in self.roles else None

    @property
    def acting_student_id(self) -> Optional[int]:
        return self.student_id if Role.STUDENT in self.roles else None


def require_role(actor: Actor, *roles: Role) -> None:
    if not actor.has(*roles):
        raise Forbidden()


def owns_course(actor: Actor, course) -> bool:
    tid = actor.acting_teacher_id
    return tid is not None and course.teacher_id == tid


def require_course_manager(actor: Actor, course) -> None:
    """Roster and enrollment management: Admin, or the owning Teacher."""
    if actor.is_admin or owns_course(actor, course):
        return
    raise Forbidden("You are not authorized to manage this course")


def require_course_owner(actor: Actor, course) -> int:
    """Grade/attendance writes: only the owning Teacher. Returns the teacher id."""
    if actor.acting_teacher_id is None:
        raise Forbidden("Only teachers can record grades and attendance")
    if not owns_course(actor, course):
        raise Forbidden("You do not teach this course")
    return actor.acting_teacher_id


def require_record_owner(actor: Actor, record) -> None:
    """Update/delete of a grade or attendance row: the Teacher who wrote it."""
    tid = actor.acting_teacher_id
    if tid is None or record.teacher_id != tid:
        raise Forbidden("This record belongs to another teacher")


def can_read_record(actor: Actor, record) -> bool:
    if actor.is_admin:
        return True
    tid = actor.acting_teacher_id
    if tid is not None and record.teacher_id == tid:
        return True
    sid = actor.acting_student_id
    return sid is not None and record.student_id == sid


def require_record_reader(actor: Actor, record) -> None:
    if not can_read_record(actor, record):
        raise Forbidden()


def require_directory_reader(actor: Actor) -> None:
    require_role(actor, Role.ADMIN, Role.TEACHER)


def require_student_viewer(actor: Actor, student_id: int) -> None:
    """Directory readers, or the student looking at themselves."""
    if actor.has(Role.ADMIN, Role.TEACHER) or actor.acting_student_id == student_id:
        return
    raise Forbidden()


def sees_whole_record_of(actor: Actor, student_id: int) -> bool:
    """Admin, or the student themselves. Teachers only see their own rows."""
    return actor.is_admin or actor.acting_student_id == student_id


def require_student_profile(actor: Actor) -> int:
    if Role.STUDENT not in actor.roles:
        raise Forbidden()
    if actor.student_id is None:
        raise NotFound("Student profile not found")
    return actor.student_id


def require_teacher_profile(actor: Actor) -> int:
    if Role.TEACHER not in actor.roles:
        raise Forbidden()
    if actor.teacher_id is None:
        raise NotFound("Teacher profile not found")
    return actor.teacher_id
