from ..dates import utcnow
from ..extensions import db


class Student(db.Model):
    __tablename__ = "student"
    id = db.Column(db.Integer, primary_key=True)
    student_no = db.Column(db.String(32), unique=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), unique=True, nullable=False)
    department = db.Column(db.String(100))
    year = db.Column(db.Integer)            # year of study
    enrolled_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    user = db.relationship("User", back_populates="student")
    enrollments = db.relationship("CourseEnrollment", back_populates="student")
    grades = db.relationship("Grade", back_populates="student")
    attendances = db.relationship("Attendance", back_populates="student")

    @property
    def name(self):
        return self.user.full_name

    def to_dict(self, include_user=True):
        d = {
            "id": self.id,
            "student_no": self.student_no,
            "department": self.department,
            "year": self.year,
            "enrolled_at": self.enrolled_at.isoformat() if self.enrolled_at else None,
            "is_active": self.is_active,
        }
        if include_user:
            d.update(user_id=self.user_id, name=self.name, email=self.user.email,
                     phone=self.user.phone)
        return d


class Teacher(db.Model):
    __tablename__ = "teacher"
    id = db.Column(db.Integer, primary_key=True)
    employee_no = db.Column(db.String(32), unique=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), unique=True, nullable=False)
    department = db.Column(db.String(100))
    title = db.Column(db.String(100))
    hire_date = db.Column(db.Date)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    user = db.relationship("User", back_populates="teacher")
    courses = db.relationship("Course", back_populates="teacher")
    grades = db.relationship("Grade", back_populates="teacher")
    attendances = db.relationship("Attendance", back_populates="teacher")

    @property
    def name(self):
        return self.user.full_name

    def to_dict(self, include_user=True):
        d = {
            "id": self.id,
            "employee_no": self.employee_no,
            "department": self.department,
            "title": self.title,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "is_active": self.is_active,
        }
        if include_user:
            d.update(user_id=self.user_id, name=self.name, email=self.user.email,
                     phone=self.user.phone)
        return d
