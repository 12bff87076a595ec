def test_requires_login(client, seed):
    resp = client.get("/api/courses")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"


def test_bad_credentials(client, seed):
    resp = client.post("/api/auth/login", json={"email": "t1@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "unauthorized", "message": "Invalid email or password"}


def test_register_then_profile(client, seed):
    resp = client.post("/api/auth/register", json={
        "email": "new@example.com", "password": "secret1", "confirm_password": "secret1",
        "first_name": "New", "last_name": "Student", "role": "student",
    })
    assert resp.status_code == 201
    body = client.get("/api/auth/profile").get_json()
    assert body["roles"] == ["student"]
    assert body["student"]["student_no"].startswith("STU")
    assert client.get("/api/auth/roles").get_json() == {"roles": ["student"]}


def test_malformed_payload_is_validation_error(client, seed, login):
    login("admin@example.com")
    resp = client.post("/api/courses", json={"code": "CS300", "credits": "many"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation"
    resp = client.post("/api/courses", json={"code": "CS300", "name": "Sys", "credits": 11,
                                             "teacher_id": seed.teacher})
    assert resp.status_code == 400
    assert "Credits" in resp.get_json()["message"]


def test_student_cannot_create_course(client, seed, login):
    login("s1@example.com")
    resp = client.post("/api/courses", json={"code": "CS300", "name": "Sys", "credits": 3,
                                             "teacher_id": seed.teacher})
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"


def test_missing_course_is_404(client, seed, login):
    login("admin@example.com")
    resp = client.get("/api/courses/9999")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Course not found"


def test_enroll_grade_and_attendance_flow(client, seed, login):
    login("admin@example.com")
    resp = client.post(f"/api/courses/{seed.course}/add-students",
                       json={"student_ids": seed.students[:5]})
    assert resp.status_code == 201
    assert len(resp.get_json()) == 5
    resp = client.post(f"/api/courses/{seed.course}/enroll",
                       json={"student_id": seed.students[0]})
    assert resp.status_code == 409
    client.post("/api/auth/logout")

    login("t1@example.com")
    resp = client.post("/api/grades", json={"course_id": seed.course,
                                            "student_id": seed.students[0],
                                            "exam_type": "Midterm", "score": 101})
    assert resp.status_code == 400
    resp = client.post("/api/grades", json={"course_id": seed.course,
                                            "student_id": seed.students[0],
                                            "exam_type": "Midterm", "score": 88.5})
    assert resp.status_code == 201
    assert resp.get_json()["teacher_id"] == seed.teacher

    entries = [{"student_id": s, "status": "present"} for s in seed.students]
    resp = client.post("/api/attendance/bulk", json={"course_id": seed.course,
                                                     "date": "2024-05-01", "entries": entries})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["recorded"] == 5 and body["skipped"] == 2
    assert {r["date"] for r in body["items"]} == {"2024-05-01"}

    resp = client.post("/api/attendance", json={"course_id": seed.course,
                                                "student_id": seed.students[0],
                                                "date": "2024-05-01T10:00:00Z"})
    assert resp.status_code == 409

    resp = client.get(f"/api/attendance/course/{seed.course}?date=2024-05-01")
    assert len(resp.get_json()) == 5
    client.post("/api/auth/logout")

    login("s1@example.com")
    grades = client.get("/api/grades/my-grades").get_json()
    assert [g["score"] for g in grades] == [88.5]
    records = client.get("/api/attendance/my-attendance").get_json()
    assert [r["status"] for r in records] == ["present"]
    resp = client.get(f"/api/grades/my-grades/{seed.other_course}")
    assert resp.status_code == 403
    courses = client.get("/api/courses/my-courses").get_json()
    assert [c["course_code"] for c in courses] == ["CS101"]


def test_student_directory_paging(client, seed, login):
    login("t1@example.com")
    body = client.get("/api/students?per_page=2&sort=student_no&order=desc").get_json()
    assert body["total"] == 7
    assert body["pages"] == 4
    assert [s["student_no"] for s in body["items"]] == ["STU20240007", "STU20240006"]


def test_soft_delete_student(client, seed, login):
    login("admin@example.com")
    resp = client.delete(f"/api/students/{seed.students[0]}")
    assert resp.status_code == 200
    assert resp.get_json()["is_active"] is False
    assert client.get(f"/api/students/{seed.students[0]}").status_code == 200


def test_web_login_redirects_by_role(client, seed):
    resp = client.post("/auth/login", data={"email": "t1@example.com", "password": "secret123"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/teacher/courses")
    assert client.get("/admin/courses").status_code == 403
    assert client.get("/teacher/courses").status_code == 200
