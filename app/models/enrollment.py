from ..dates import utcnow
from ..extensions import db
from .enums import AttendanceStatus, EnrollmentStatus, enum_column


class CourseEnrollment(db.Model):
    __tablename__ = "course_enrollment"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    status = db.Column(enum_column(EnrollmentStatus, "enrollment_status"), nullable=False,
                       default=EnrollmentStatus.ACTIVE)
    enrolled_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    comments = db.Column(db.String(500))
    # one row per pair for life; a drop keeps the row
    __table_args__ = (
        db.UniqueConstraint("student_id", "course_id", name="uq_student_course"),
    )

    student = db.relationship("Student", back_populates="enrollments")
    course = db.relationship("Course", back_populates="enrollments")

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student.name,
            "student_no": self.student.student_no,
            "course_id": self.course_id,
            "course_name": self.course.name,
            "course_code": self.course.code,
            "status": self.status.value,
            "enrolled_at": self.enrolled_at.isoformat() if self.enrolled_at else None,
            "comments": self.comments,
        }


class Grade(db.Model):
    __tablename__ = "grade"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False)
    exam_type = db.Column(db.String(100), nullable=False)   # Midterm/Final/Quiz
    score = db.Column(db.Float, nullable=False)
    comments = db.Column(db.String(500))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False,
                           default=utcnow, onupdate=utcnow)
    __table_args__ = (
        db.CheckConstraint("score >= 0 AND score <= 100", name="ck_score_0_100"),
    )

    student = db.relationship("Student", back_populates="grades")
    course = db.relationship("Course", back_populates="grades")
    teacher = db.relationship("Teacher", back_populates="grades")

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student.name,
            "student_no": self.student.student_no,
            "course_id": self.course_id,
            "course_name": self.course.name,
            "course_code": self.course.code,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher.name,
            "exam_type": self.exam_type,
            "score": self.score,
            "comments": self.comments,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Attendance(db.Model):
    __tablename__ = "attendance"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False)
    day = db.Column(db.Date, nullable=False)               # canonical UTC day
    status = db.Column(enum_column(AttendanceStatus, "attendance_status"), nullable=False,
                       default=AttendanceStatus.PRESENT)
    notes = db.Column(db.String(500))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    __table_args__ = (
        db.UniqueConstraint("student_id", "course_id", "day", name="uq_attendance_day"),
    )

    student = db.relationship("Student", back_populates="attendances")
    course = db.relationship("Course", back_populates="attendances")
    teacher = db.relationship("Teacher", back_populates="attendances")

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student.name,
            "student_no": self.student.student_no,
            "course_id": self.course_id,
            "course_name": self.course.name,
            "course_code": self.course.code,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher.name,
            "date": self.day.isoformat(),
            "status": self.status.value,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
