from __future__ import annotations

import csv
import io
from functools import wraps

from flask import Flask, Response, current_app, g, jsonify, request, session

from ..core.actor import Actor
from ..core.constants import DEFAULT_EXAM_TYPE
from ..core.enums import ErrorCode, Role
from ..core.result import OperationResult
from ..grading.grade_table import GRADE_TABLE, classify
from ..container import Container
from .model import MarkEntryRequest
from .service import MARKS_ENTERED

_STATUS = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.AUTHORIZATION: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INSUFFICIENT_DATA: 422,
    ErrorCode.INTERNAL: 500,
}


def _respond(result: OperationResult, *, created: bool = False):
    if result.success:
        return jsonify(result.to_dict()), 201 if created else 200
    return jsonify(result.to_dict()), _STATUS.get(result.error_code, 500)


def _default_exam_type() -> str:
    return current_app.config.get("DEFAULT_EXAM_TYPE") or DEFAULT_EXAM_TYPE


def _bad_request(message: str):
    return _respond(OperationResult.fail(message, ErrorCode.VALIDATION))


def _int_arg(name: str, *, required: bool = True):
    raw = (request.args.get(name) or "").strip()
    if not raw:
        if required:
            raise ValueError(f"Query parameter '{name}' is required")
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Query parameter '{name}' must be an integer")


def _int_field(payload: dict, name: str) -> int:
    value = payload.get(name)
    if value is None or value == "":
        return 0
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"{name} must be a whole number")
    return int(value)


def _score(payload: dict, name: str):
    value = payload.get(name)
    if value is None or value == "":
        return None
    return value


def register(app: Flask, container: Container) -> None:
    service = container.marks_service

    def actor_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify(OperationResult.fail("Login required", ErrorCode.AUTHORIZATION).to_dict()), 401
            try:
                g.actor = Actor(user_id=str(session["user_id"]), role=Role(session.get("role")))
            except ValueError:
                return _respond(OperationResult.fail("Unknown role", ErrorCode.AUTHORIZATION))
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/grading/bands", methods=["GET"], endpoint="grading_bands")
    def grading_bands():
        return jsonify([band.to_dict() for band in GRADE_TABLE])

    @app.route("/api/marks", methods=["POST"], endpoint="enter_marks")
    @actor_required
    def enter_marks():
        payload = request.get_json(silent=True) or {}
        try:
            entry = MarkEntryRequest(
                student_id=str(payload.get("student_id") or ""),
                subject=str(payload.get("subject") or ""),
                teacher_id=str(payload.get("teacher_id") or g.actor.user_id),
                class_name=str(payload.get("class_name") or ""),
                term=_int_field(payload, "term"),
                year=_int_field(payload, "year"),
                opening=_score(payload, "opening"),
                midterm=_score(payload, "midterm"),
                final=_score(payload, "final"),
                exam_type=payload.get("exam_type") or _default_exam_type(),
                comments=payload.get("comments"),
            )
        except (TypeError, ValueError):
            return _bad_request("Term and year must be integers")

        result = service.enter_marks(entry, actor=g.actor)
        created = result.success and result.message == MARKS_ENTERED
        return _respond(result, created=created)

    @app.route("/api/marks/<mark_id>/approve", methods=["POST"], endpoint="approve_marks")
    @actor_required
    def approve_marks(mark_id: str):
        return _respond(service.approve_marks(mark_id, actor=g.actor))

    @app.route("/api/students/<student_id>/marks", methods=["GET"], endpoint="student_marks")
    @actor_required
    def student_marks(student_id: str):
        try:
            year = _int_arg("year")
            term = _int_arg("term", required=False)
        except ValueError as e:
            return _bad_request(str(e))
        return _respond(service.get_student_marks(student_id, year, term))

    @app.route("/api/classes/<class_name>/marks", methods=["GET"], endpoint="class_marks")
    @actor_required
    def class_marks(class_name: str):
        try:
            term = _int_arg("term")
            year = _int_arg("year")
        except ValueError as e:
            return _bad_request(str(e))
        subject = request.args.get("subject", "")
        exam_type = request.args.get("exam_type") or _default_exam_type()
        return _respond(service.get_class_marks(class_name, subject, term, year, exam_type))

    @app.route("/api/classes/<class_name>/performance", methods=["GET"], endpoint="class_performance")
    @actor_required
    def class_performance(class_name: str):
        try:
            term = _int_arg("term")
            year = _int_arg("year")
        except ValueError as e:
            return _bad_request(str(e))
        return _respond(service.class_performance(class_name, term, year))

    @app.route("/api/classes/<class_name>/performance.csv", methods=["GET"], endpoint="class_performance_csv")
    @actor_required
    def class_performance_csv(class_name: str):
        try:
            term = _int_arg("term")
            year = _int_arg("year")
        except ValueError as e:
            return _bad_request(str(e))

        result = service.class_performance(class_name, term, year)
        if not result.success:
            return _respond(result)

        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["position", "admission_no", "full_name", "total_marks", "mean_score", "grade"],
        )
        writer.writeheader()
        for sp in result.data.rankings:
            writer.writerow(
                {
                    "position": sp.position if sp.position is not None else "-",
                    "admission_no": sp.admission_no,
                    "full_name": sp.full_name,
                    "total_marks": f"{sp.total_marks:.2f}" if sp.has_marks else "-",
                    "mean_score": f"{sp.mean_score:.2f}" if sp.has_marks else "-",
                    "grade": classify(sp.mean_score).letter if sp.has_marks else "-",
                }
            )

        filename = f"performance_{class_name}_T{term}_{year}.csv".replace(" ", "_")
        return Response(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/students/<student_id>/trend", methods=["GET"], endpoint="student_trend")
    @actor_required
    def student_trend(student_id: str):
        try:
            year = _int_arg("year")
        except ValueError as e:
            return _bad_request(str(e))
        return _respond(service.performance_trend(student_id, year))

    @app.route("/api/students/<student_id>/report-card", methods=["GET"], endpoint="report_card")
    @actor_required
    def report_card(student_id: str):
        try:
            term = _int_arg("term")
            year = _int_arg("year")
        except ValueError as e:
            return _bad_request(str(e))
        return _respond(service.report_card(student_id, term, year))
