import pytest

from app.errors import Forbidden, ValidationError
from app.models import Grade
from app.services import enrollment, grades


@pytest.fixture
def enrolled(seed, actor_of):
    enrollment.add_students(actor_of(seed.admin), seed.course, seed.students[:2])
    return seed


@pytest.mark.parametrize("score", [-0.1, 100.01, "abc", None, float("nan")])
def test_score_out_of_range_is_rejected(enrolled, actor_of, score):
    with pytest.raises(ValidationError):
        grades.record_grade(actor_of(enrolled.teacher_user), enrolled.course,
                            enrolled.students[0], "Midterm", score)
    assert Grade.query.count() == 0


@pytest.mark.parametrize("score", [0, 100, 72.5])
def test_boundary_scores_accepted(enrolled, actor_of, score):
    g = grades.record_grade(actor_of(enrolled.teacher_user), enrolled.course,
                            enrolled.students[0], "Quiz", score)
    assert g.score == float(score)


def test_requires_owner_and_enrollment(enrolled, actor_of):
    with pytest.raises(Forbidden):
        grades.record_grade(actor_of(enrolled.other_teacher_user), enrolled.course,
                            enrolled.students[0], "Final", 80)
    with pytest.raises(Forbidden):
        grades.record_grade(actor_of(enrolled.admin), enrolled.course,
                            enrolled.students[0], "Final", 80)
    with pytest.raises(ValidationError):
        grades.record_grade(actor_of(enrolled.teacher_user), enrolled.course,
                            enrolled.students[5], "Final", 80)


def test_update_and_delete_by_author_only(enrolled, actor_of):
    teacher = actor_of(enrolled.teacher_user)
    g = grades.record_grade(teacher, enrolled.course, enrolled.students[0], "Final", 60)
    with pytest.raises(Forbidden):
        grades.update_grade(actor_of(enrolled.other_teacher_user), g.id, "Final", 99)
    assert grades.update_grade(teacher, g.id, "Final", 65).score == 65
    with pytest.raises(ValidationError):
        grades.update_grade(teacher, g.id, "Final", 101)
    with pytest.raises(Forbidden):
        grades.delete_grade(actor_of(enrolled.admin), g.id)
    grades.delete_grade(teacher, g.id)
    assert Grade.query.count() == 0


def test_student_sees_own_grades_only(enrolled, actor_of):
    teacher = actor_of(enrolled.teacher_user)
    mine = grades.record_grade(teacher, enrolled.course, enrolled.students[0], "Quiz", 90)
    grades.record_grade(teacher, enrolled.course, enrolled.students[1], "Quiz", 50)
    student = actor_of(enrolled.student_users[0])

    assert [g.id for g in grades.my_grades(student)] == [mine.id]
    assert [g.id for g in grades.my_grades(student, enrolled.course)] == [mine.id]
    with pytest.raises(Forbidden):
        grades.my_grades(student, enrolled.other_course)
    with pytest.raises(Forbidden):
        grades.get_grade(actor_of(enrolled.student_users[1]), mine.id)
    with pytest.raises(Forbidden):
        grades.student_grades(actor_of(enrolled.student_users[1]), enrolled.students[0])


def test_course_average(enrolled, actor_of):
    teacher = actor_of(enrolled.teacher_user)
    grades.record_grade(teacher, enrolled.course, enrolled.students[0], "Quiz", 90)
    grades.record_grade(teacher, enrolled.course, enrolled.students[1], "Quiz", 75)
    items = grades.course_grades(teacher, enrolled.course)
    assert grades.course_averages(items) == {enrolled.course: 82.5}
    with pytest.raises(Forbidden):
        grades.course_grades(actor_of(enrolled.other_teacher_user), enrolled.course)


def test_other_teacher_sees_only_own_grades_of_student(enrolled, actor_of):
    teacher = actor_of(enrolled.teacher_user)
    grades.record_grade(teacher, enrolled.course, enrolled.students[0], "Quiz", 90)
    other = actor_of(enrolled.other_teacher_user)

    assert grades.student_grades(other, enrolled.students[0]) == []
    assert len(grades.student_grades(teacher, enrolled.students[0])) == 1
    assert len(grades.student_grades(actor_of(enrolled.admin), enrolled.students[0])) == 1
    own = grades.student_grades(actor_of(enrolled.student_users[0]), enrolled.students[0])
    assert len(own) == 1


def test_ownership_checked_before_student_lookup(enrolled, actor_of):
    with pytest.raises(Forbidden):
        grades.record_grade(actor_of(enrolled.other_teacher_user), enrolled.course,
                            9999, "Final", 80)
