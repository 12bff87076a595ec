import logging
from datetime import date

from werkzeug.security import check_password_hash, generate_password_hash

from ..dates import canonical_day
from ..errors import AuthenticationError, Conflict, ValidationError
from ..models import Role, Student, Teacher, User
from .common import optional_int, optional_text, require_non_empty, unit_of_work
from .numbers import (employee_number_taken, next_employee_number, next_student_number,
                      student_number_taken)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
SELF_SERVICE_ROLES = (Role.STUDENT, Role.TEACHER)


def parse_date(value, field_name="Date"):
    if value in (None, ""):
        return None
    try:
        return canonical_day(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD)") from None


def require_password(password, confirm=None):
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if confirm is not None and password != confirm:
        raise ValidationError("Passwords do not match")
    return password


def email_taken(email):
    return User.query.filter(User.email == email).first() is not None


def new_user(*, email, password, first_name, last_name, phone=None, address=None,
             birth_date=None, roles=()):
    """Build an unsaved User; the caller adds the profile and commits."""
    email = require_non_empty(email, "Email", 256).lower()
    if "@" not in email:
        raise ValidationError("Email is not valid")
    if email_taken(email):
        raise Conflict("User with this email already exists")
    user = User(
        email=email,
        password_hash=generate_password_hash(require_password(password)),
        first_name=require_non_empty(first_name, "First name", 100),
        last_name=require_non_empty(last_name, "Last name", 100),
        phone=optional_text(phone, "Phone", 32),
        address=optional_text(address, "Address", 200),
        birth_date=parse_date(birth_date, "Birth date"),
    )
    for role in roles:
        user.add_role(role)
    return user


def register(*, email, password, confirm_password, first_name, last_name, role,
             phone=None, address=None, birth_date=None, student_no=None,
             employee_no=None, department=None, title=None, year=None):
    """Self-registration as a Student or a Teacher."""
    try:
        role = Role(str(role).strip().lower())
    except ValueError:
        raise ValidationError("Role must be student or teacher") from None
    if role not in SELF_SERVICE_ROLES:
        raise ValidationError("Role must be student or teacher")
    require_password(password, confirm_password)

    user = new_user(email=email, password=password, first_name=first_name,
                    last_name=last_name, phone=phone, address=address,
                    birth_date=birth_date, roles=[role])
    department = optional_text(department, "Department", 100)
    if role == Role.STUDENT:
        student_no = optional_text(student_no, "Student number", 32)
        # a taken number is replaced rather than refused
        if not student_no or student_number_taken(student_no):
            student_no = next_student_number()
        user.student = Student(student_no=student_no, department=department,
                               year=optional_int(year, "Year", 1, 8))
    else:
        employee_no = optional_text(employee_no, "Employee number", 32)
        if employee_no and employee_number_taken(employee_no):
            raise Conflict("Employee number already exists")
        user.teacher = Teacher(employee_no=employee_no or next_employee_number(),
                               department=department,
                               title=optional_text(title, "Title", 100),
                               hire_date=date.today())
    with unit_of_work("User with this email already exists") as session:
        session.add(user)
    logger.info("Registered %s as %s", user.email, role.value)
    return user


def authenticate(email, password):
    email = (email or "").strip().lower()
    user = User.query.filter_by(email=email).one_or_none()
    if user is None or not check_password_hash(user.password_hash, password or ""):
        logger.debug("Failed login for %s", email)
        raise AuthenticationError()
    if not user.is_active:
        raise AuthenticationError("This account has been deactivated")
    return user


def change_password(user, old, new, confirm):
    if not check_password_hash(user.password_hash, old or ""):
        raise ValidationError("Current password is incorrect")
    require_password(new, confirm)
    with unit_of_work("Password could not be changed"):
        user.password_hash = generate_password_hash(new)


def create_admin(email, password, first_name="System", last_name="Admin"):
    user = new_user(email=email, password=password, first_name=first_name,
                    last_name=last_name, roles=[Role.ADMIN])
    with unit_of_work("User with this email already exists") as session:
        session.add(user)
    logger.info("Created admin %s", user.email)
    return user
