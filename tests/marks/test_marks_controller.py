from __future__ import annotations

from dataclasses import replace

import pytest

from src.school_results.school_results.container import Container
from src.school_results.school_results.main import create_app
from src.school_results.school_results.marks.service import MarksService
from src.school_results.school_results.students.model import StudentRef
from src.school_results.school_results.teachers.model import Teacher


class FakeMarksRepo:
    def __init__(self):
        self.rows = {}

    def get_by_id(self, mark_id):
        return self.rows.get(mark_id)

    def find_by_key(self, key):
        return next((r for r in self.rows.values() if r.key == key), None)

    def list_for_student(self, student_id, *, year, term=None):
        return [r for r in self.rows.values() if r.student_id == student_id and r.year == year and term in (None, r.term)]

    def list_for_students(self, student_ids, *, term, year, subject=None, exam_type=None, approved_only=False):
        return [
            r
            for r in self.rows.values()
            if r.student_id in set(student_ids)
            and r.term == term
            and r.year == year
            and subject in (None, r.subject)
            and exam_type in (None, r.exam_type)
            and (r.is_approved or not approved_only)
        ]

    def create(self, record):
        saved = replace(record, mark_id=f"m{len(self.rows) + 1}")
        self.rows[saved.mark_id] = saved
        return saved

    def update(self, record):
        if record.mark_id not in self.rows:
            return False
        self.rows[record.mark_id] = record
        return True


class FakeStudentsRepo:
    def __init__(self):
        self._rows = [
            StudentRef("s1", "Amina Otieno", "001", "3 East", year=2024),
            StudentRef("s2", "Brian Kamau", "002", "3 East", year=2024),
        ]

    def get_by_id(self, student_id):
        return next((s for s in self._rows if s.student_id == student_id), None)

    def list_by_class(self, class_name, *, year):
        return [s for s in self._rows if s.class_name == class_name]


class FakeTeachersRepo:
    def get_by_id(self, teacher_id):
        if teacher_id == "tch-001":
            return Teacher("tch-001", "Grace Njeri", subjects=("Mathematics",), assigned_forms=("3 East",))
        return None


@pytest.fixture
def app(monkeypatch, fixed_now):
    monkeypatch.setenv("APP_ENV", "testing")
    marks_repo = FakeMarksRepo()
    students_repo = FakeStudentsRepo()
    teachers_repo = FakeTeachersRepo()
    container = Container(
        conn=None,
        marks_repo=marks_repo,
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        marks_service=MarksService(marks_repo, students_repo, teachers_repo, clock=lambda: fixed_now),
    )
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


PAYLOAD = {
    "student_id": "s1",
    "subject": "Mathematics",
    "class_name": "3 East",
    "term": 1,
    "year": 2024,
    "opening": 80,
    "midterm": 70,
    "final": 90,
}


def test_grading_bands_are_public(client):
    resp = client.get("/api/grading/bands")

    assert resp.status_code == 200
    bands = resp.get_json()
    assert len(bands) == 12
    assert bands[0]["letter"] == "A"
    assert bands[-1]["letter"] == "E"


def test_login_required(client):
    resp = client.post("/api/marks", json=PAYLOAD)

    assert resp.status_code == 401
    assert resp.get_json()["error_code"] == "AUTHORIZATION"


def test_unknown_role_is_forbidden(client):
    _login(client, "x", "janitor")
    assert client.post("/api/marks", json=PAYLOAD).status_code == 403


def test_enter_then_update_marks(client):
    _login(client, "tch-001", "teacher")

    created = client.post("/api/marks", json=PAYLOAD)
    assert created.status_code == 201
    body = created.get_json()
    assert body["success"] is True
    assert body["data"]["total"] == 85.5
    assert body["data"]["grade"] == "A"
    assert body["data"]["teacher_id"] == "tch-001"
    assert body["data"]["exam_type"] == "End of Term"

    updated = client.post("/api/marks", json={**PAYLOAD, "final": 50})
    assert updated.status_code == 200
    assert updated.get_json()["data"]["total"] == 57.5


def test_student_cannot_enter_marks(client):
    _login(client, "s1", "student")
    assert client.post("/api/marks", json=PAYLOAD).status_code == 403


def test_invalid_marks_are_a_bad_request(client):
    _login(client, "tch-001", "teacher")

    assert client.post("/api/marks", json={**PAYLOAD, "term": "first"}).status_code == 400
    resp = client.post("/api/marks", json={**PAYLOAD, "final": 120})
    assert resp.status_code == 400
    assert resp.get_json()["error_code"] == "VALIDATION"


@pytest.mark.parametrize(
    "field, value",
    [("term", 1.7), ("term", True), ("year", 2024.9), ("year", "twenty")],
)
def test_non_integral_term_or_year_is_a_bad_request(client, field, value):
    _login(client, "tch-001", "teacher")

    resp = client.post("/api/marks", json={**PAYLOAD, field: value})

    assert resp.status_code == 400
    assert resp.get_json()["error_code"] == "VALIDATION"


def test_whole_float_term_is_accepted(client):
    _login(client, "tch-001", "teacher")
    assert client.post("/api/marks", json={**PAYLOAD, "term": 1.0}).status_code == 201


def test_approve_and_rank(client):
    _login(client, "tch-001", "teacher")
    mark_id = client.post("/api/marks", json=PAYLOAD).get_json()["data"]["mark_id"]

    assert client.post(f"/api/marks/{mark_id}/approve").status_code == 403

    _login(client, "p-1", "principal")
    approved = client.post(f"/api/marks/{mark_id}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["data"]["is_approved"] is True

    perf = client.get("/api/classes/3%20East/performance?term=1&year=2024")
    assert perf.status_code == 200
    data = perf.get_json()["data"]
    assert data["class_mean"] == 85.5
    assert [r["position"] for r in data["rankings"]] == [1, None]


def test_performance_requires_term_and_year(client):
    _login(client, "p-1", "principal")

    resp = client.get("/api/classes/3%20East/performance?term=1")

    assert resp.status_code == 400
    assert "year" in resp.get_json()["message"]


def test_performance_for_unknown_class(client):
    _login(client, "p-1", "principal")
    assert client.get("/api/classes/9%20Z/performance?term=1&year=2024").status_code == 404


def test_performance_csv_export(client):
    _login(client, "tch-001", "teacher")
    mark_id = client.post("/api/marks", json=PAYLOAD).get_json()["data"]["mark_id"]
    _login(client, "p-1", "principal")
    client.post(f"/api/marks/{mark_id}/approve")

    resp = client.get("/api/classes/3%20East/performance.csv?term=1&year=2024")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "performance_3_East_T1_2024.csv" in resp.headers["Content-Disposition"]
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0] == "position,admission_no,full_name,total_marks,mean_score,grade"
    assert lines[1] == "1,001,Amina Otieno,85.50,85.50,A"
    assert lines[2] == "-,002,Brian Kamau,-,-,-"


def test_report_card_and_trend_routes(client):
    _login(client, "p-1", "principal")
    client.post("/api/marks", json={**PAYLOAD, "teacher_id": "tch-001"})

    card = client.get("/api/students/s1/report-card?term=1&year=2024")
    assert card.status_code == 200
    assert card.get_json()["data"]["mean_score"] is None

    trend = client.get("/api/students/s1/trend?year=2024")
    assert trend.status_code == 200
    assert trend.get_json()["data"]["trend"] is None

    marks = client.get("/api/students/s1/marks?year=2024")
    assert marks.status_code == 200
    assert len(marks.get_json()["data"]) == 1
