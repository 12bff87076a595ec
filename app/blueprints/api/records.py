from flask import jsonify, request
from flask_login import login_required

from ...services import attendance, grades
from ...services.attendance import AttendanceEntry
from . import bp
from .common import actor, listing, parse
from .schemas import (AttendanceIn, AttendanceUpdateIn, BulkAttendanceIn, GradeIn,
                      GradeUpdateIn)


# ---------- Grades ----------

@bp.get("/grades")
@login_required
def list_grades():
    return listing(grades.list_grades(actor()))


@bp.post("/grades")
@login_required
def create_grade():
    data = parse(GradeIn)
    grade = grades.record_grade(actor(), data.course_id, data.student_id,
                                data.exam_type, data.score, data.comments)
    return jsonify(grade.to_dict()), 201


@bp.get("/grades/<int:grade_id>")
@login_required
def get_grade(grade_id):
    return jsonify(grades.get_grade(actor(), grade_id).to_dict())


@bp.put("/grades/<int:grade_id>")
@login_required
def update_grade(grade_id):
    data = parse(GradeUpdateIn)
    grade = grades.update_grade(actor(), grade_id, data.exam_type, data.score, data.comments)
    return jsonify(grade.to_dict())


@bp.delete("/grades/<int:grade_id>")
@login_required
def delete_grade(grade_id):
    grades.delete_grade(actor(), grade_id)
    return jsonify({"message": "Grade deleted"})


@bp.get("/grades/course/<int:course_id>")
@login_required
def course_grades(course_id):
    return listing(grades.course_grades(actor(), course_id))


@bp.get("/grades/my-grades")
@bp.get("/grades/my-grades/<int:course_id>")
@login_required
def my_grades(course_id=None):
    return listing(grades.my_grades(actor(), course_id))


# ---------- Attendance ----------

@bp.get("/attendance")
@login_required
def list_attendance():
    return listing(attendance.list_attendance(actor()))


@bp.post("/attendance")
@login_required
def create_attendance():
    data = parse(AttendanceIn)
    record = attendance.record_attendance(actor(), data.course_id, data.student_id,
                                          data.day, data.status, data.notes)
    return jsonify(record.to_dict()), 201


@bp.post("/attendance/bulk")
@login_required
def bulk_attendance():
    data = parse(BulkAttendanceIn)
    entries = [AttendanceEntry(student_id=e.student_id, status=e.status, notes=e.notes)
               for e in data.entries]
    rows = attendance.record_bulk_attendance(actor(), data.course_id, data.day, entries)
    written = {r.student_id for r in rows}
    return jsonify({"recorded": len(rows),
                    "skipped": len({e.student_id for e in entries} - written),
                    "items": [r.to_dict() for r in rows]}), 201


@bp.get("/attendance/<int:attendance_id>")
@login_required
def get_attendance(attendance_id):
    return jsonify(attendance.get_attendance(actor(), attendance_id).to_dict())


@bp.put("/attendance/<int:attendance_id>")
@login_required
def update_attendance(attendance_id):
    data = parse(AttendanceUpdateIn)
    record = attendance.update_attendance(actor(), attendance_id, data.day, data.status,
                                          data.notes)
    return jsonify(record.to_dict())


@bp.delete("/attendance/<int:attendance_id>")
@login_required
def delete_attendance(attendance_id):
    attendance.delete_attendance(actor(), attendance_id)
    return jsonify({"message": "Attendance record deleted"})


@bp.get("/attendance/course/<int:course_id>")
@login_required
def course_attendance(course_id):
    day = request.args.get("date") or None
    return listing(attendance.course_attendance(actor(), course_id, day))


@bp.get("/attendance/my-attendance")
@login_required
def my_attendance():
    course_id = request.args.get("course_id", type=int)
    return listing(attendance.my_attendance(actor(), course_id))
