from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from app.extensions import db
from app.models import Course, CourseStatus, Role, Student, Teacher, User
from app.services.access import Actor

PASSWORD = "secret123"


def _user(email, *roles, first_name="Test", last_name="User"):
    user = User(email=email, password_hash=generate_password_hash(PASSWORD),
                first_name=first_name, last_name=last_name)
    for role in roles:
        user.add_role(role)
    return user


@pytest.fixture
def app():
    app = create_app("config.TestingConfig")
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seed(app):
    """An admin, two teachers with one course each, and seven students."""
    with app.app_context():
        admin = _user("admin@example.com", Role.ADMIN, first_name="Ada", last_name="Admin")
        t1 = _user("t1@example.com", Role.TEACHER, first_name="Tom", last_name="Teach")
        t1.teacher = Teacher(employee_no="TCH20240001", department="CS")
        t2 = _user("t2@example.com", Role.TEACHER, first_name="Tina", last_name="Other")
        t2.teacher = Teacher(employee_no="TCH20240002", department="Math")
        students = []
        for i in range(1, 8):
            u = _user(f"s{i}@example.com", Role.STUDENT, first_name=f"Stu{i}", last_name="Dent")
            u.student = Student(student_no=f"STU2024000{i}", department="CS", year=1)
            students.append(u)
        db.session.add_all([admin, t1, t2, *students])
        db.session.flush()
        c1 = Course(code="CS101", name="Intro", credits=3, teacher_id=t1.teacher.id,
                    status=CourseStatus.IN_PROGRESS)
        c2 = Course(code="MA201", name="Algebra", credits=4, teacher_id=t2.teacher.id,
                    status=CourseStatus.IN_PROGRESS)
        db.session.add_all([c1, c2])
        db.session.commit()
        return SimpleNamespace(
            admin=admin.id,
            teacher_user=t1.id, teacher=t1.teacher.id,
            other_teacher_user=t2.id, other_teacher=t2.teacher.id,
            student_users=[u.id for u in students],
            students=[u.student.id for u in students],
            course=c1.id, other_course=c2.id,
        )


@pytest.fixture
def actor_of(ctx):
    def build(user_id):
        return Actor.from_user(db.session.get(User, user_id))
    return build


@pytest.fixture
def login(client):
    def do(email, password=PASSWORD):
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp
    return do
