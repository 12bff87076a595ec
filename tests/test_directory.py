import pytest

from app.errors import Conflict, Forbidden, NotFound, ValidationError
from app.extensions import db
from app.models import Course, CourseStatus, Student, User
from app.services import directory, enrollment


def test_create_course_validates_credits_and_code(seed, actor_of):
    admin = actor_of(seed.admin)
    for credits in (0, 11, "x"):
        with pytest.raises(ValidationError):
            directory.create_course(admin, code="CS300", name="Systems", credits=credits,
                                    teacher_id=seed.teacher)
    with pytest.raises(Conflict):
        directory.create_course(admin, code="CS101", name="Again", credits=3,
                                teacher_id=seed.teacher)
    with pytest.raises(NotFound):
        directory.create_course(admin, code="CS300", name="Systems", credits=3,
                                teacher_id=9999)
    course = directory.create_course(admin, code="CS300", name="Systems", credits=10,
                                     teacher_id=seed.teacher)
    assert course.status == CourseStatus.NOT_STARTED


def test_only_admin_creates_or_deletes_courses(seed, actor_of):
    teacher = actor_of(seed.teacher_user)
    with pytest.raises(Forbidden):
        directory.create_course(teacher, code="CS300", name="Systems", credits=3,
                                teacher_id=seed.teacher)
    with pytest.raises(Forbidden):
        directory.delete_course(teacher, seed.course)


def test_teacher_updates_own_course_but_cannot_reassign(seed, actor_of):
    teacher = actor_of(seed.teacher_user)
    course = directory.update_course(teacher, seed.course, name="Intro II", credits=4,
                                     status="completed")
    assert course.status == CourseStatus.COMPLETED
    with pytest.raises(Forbidden):
        directory.update_course(teacher, seed.course, name="Intro II", credits=4,
                                status="completed", teacher_id=seed.other_teacher)
    with pytest.raises(Forbidden):
        directory.update_course(teacher, seed.other_course, name="Mine", credits=4,
                                status="completed")


def test_delete_course_cascades(seed, actor_of):
    admin = actor_of(seed.admin)
    enrollment.create_enrollment(admin, seed.course, seed.students[0])
    directory.delete_course(admin, seed.course)
    assert db.session.get(Course, seed.course) is None
    assert enrollment.find_enrollment(seed.students[0], seed.course) is None


def test_create_student_generates_number_and_rejects_taken(seed, actor_of):
    admin = actor_of(seed.admin)
    student = directory.create_student(admin, first_name="Nia", last_name="New",
                                       email="Nia@Example.com")
    assert student.student_no.startswith("STU")
    assert student.user.email == "nia@example.com"
    with pytest.raises(Conflict):
        directory.create_student(admin, first_name="Dup", last_name="Num",
                                 email="dup@example.com", student_no="STU20240001")
    with pytest.raises(Conflict):
        directory.create_student(admin, first_name="Dup", last_name="Mail",
                                 email="s1@example.com")


def test_student_cannot_browse_directory(seed, actor_of):
    student = actor_of(seed.student_users[0])
    with pytest.raises(Forbidden):
        directory.list_students(student)
    assert directory.get_student(student, seed.students[0]).id == seed.students[0]
    with pytest.raises(Forbidden):
        directory.get_student(student, seed.students[1])


def test_list_students_search_sort_and_page(seed, actor_of):
    teacher = actor_of(seed.teacher_user)
    page = directory.list_students(teacher, per_page=3)
    assert page.total == 7 and page.pages == 3 and len(page.items) == 3
    page = directory.list_students(teacher, q="Stu7")
    assert [s.student_no for s in page.items] == ["STU20240007"]
    page = directory.list_students(teacher, sort="student_no", order="desc", per_page=1)
    assert page.items[0].student_no == "STU20240007"


def test_deactivated_student_is_hidden_and_cannot_log_in(seed, actor_of):
    from app.errors import AuthenticationError
    from app.services import accounts
    admin = actor_of(seed.admin)
    directory.deactivate_student(admin, seed.students[0])
    assert db.session.get(Student, seed.students[0]) is not None
    page = directory.list_students(admin)
    assert seed.students[0] not in [s.id for s in page.items]
    page = directory.list_students(admin, include_inactive=True)
    assert seed.students[0] in [s.id for s in page.items]
    with pytest.raises(AuthenticationError):
        accounts.authenticate("s1@example.com", "secret123")


def test_update_teacher_profile(seed, actor_of):
    admin = actor_of(seed.admin)
    teacher = directory.update_teacher(admin, seed.teacher, title="Professor",
                                       first_name="Thomas")
    assert teacher.title == "Professor"
    assert db.session.get(User, seed.teacher_user).first_name == "Thomas"
    with pytest.raises(Conflict):
        directory.update_teacher(admin, seed.teacher, employee_no="TCH20240002")
    with pytest.raises(Forbidden):
        directory.update_teacher(actor_of(seed.teacher_user), seed.teacher, title="Dean")
