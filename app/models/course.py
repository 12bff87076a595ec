from ..dates import utcnow
from ..extensions import db
from .enums import CourseStatus, EnrollmentStatus, enum_column


class Course(db.Model):
    __tablename__ = "course"
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(500))
    credits = db.Column(db.Integer, nullable=False, default=2)
    status = db.Column(enum_column(CourseStatus, "course_status"), nullable=False,
                       default=CourseStatus.NOT_STARTED)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False,
                           default=utcnow, onupdate=utcnow)
    __table_args__ = (
        db.CheckConstraint("credits >= 1 AND credits <= 10", name="ck_credits_1_10"),
    )

    teacher = db.relationship("Teacher", back_populates="courses")
    enrollments = db.relationship("CourseEnrollment", back_populates="course",
                                  cascade="all, delete-orphan")
    grades = db.relationship("Grade", back_populates="course",
                             cascade="all, delete-orphan")
    attendances = db.relationship("Attendance", back_populates="course",
                                  cascade="all, delete-orphan")

    @property
    def active_count(self):
        return sum(1 for e in self.enrollments if e.status == EnrollmentStatus.ACTIVE)

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "credits": self.credits,
            "status": self.status.value,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher.name,
            "enrolled_students": self.active_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
