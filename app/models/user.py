from flask_login import UserMixin
from ..dates import utcnow
from ..extensions import db
from .enums import Role, enum_column


class User(UserMixin, db.Model):
    __tablename__ = "user"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(256), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(32))
    address = db.Column(db.String(200))
    birth_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False,
                           default=utcnow, onupdate=utcnow)

    role_rows = db.relationship("UserRole", back_populates="user",
                                cascade="all, delete-orphan")
    student = db.relationship("Student", back_populates="user", uselist=False)
    teacher = db.relationship("Teacher", back_populates="user", uselist=False)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self):
        # admins always; otherwise at least one profile still active
        if Role.ADMIN in self.roles:
            return True
        profiles = [p for p in (self.student, self.teacher) if p is not None]
        return not profiles or any(p.is_active for p in profiles)

    @property
    def roles(self):
        return frozenset(r.role for r in self.role_rows)

    def has_role(self, *roles):
        held = self.roles
        return any(Role(r) in held for r in roles)

    def add_role(self, role):
        role = Role(role)
        if role not in self.roles:
            self.role_rows.append(UserRole(role=role))

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "address": self.address,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "roles": sorted(r.value for r in self.roles),
            "student": self.student.to_dict(include_user=False) if self.student else None,
            "teacher": self.teacher.to_dict(include_user=False) if self.teacher else None,
        }


class UserRole(db.Model):
    __tablename__ = "user_role"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    role = db.Column(enum_column(Role, "role"), nullable=False)
    __table_args__ = (
        db.UniqueConstraint("user_id", "role", name="uq_user_role"),
    )

    user = db.relationship("User", back_populates="role_rows")
