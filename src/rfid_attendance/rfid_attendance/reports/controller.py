from __future__ import annotations

import logging
import unicodedata
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any
from urllib.parse import quote

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..common.validators import require_choice
from ..core.constants import DEFAULT_SESSION_LIST_LIMIT, REFRESH_INTERVAL_SECONDS
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .export import course_filename, session_filename
from .rollup import SORT_KEYS, SORT_ORDERS

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    """Dataclass/enum/datetime tree -> JSON-friendly values."""
    if is_dataclass(value):
        return _plain(asdict(value))
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _attachment(filename: str) -> str:
    """Content-Disposition value that stays latin-1 safe for non-ASCII names.

    Same scheme as Werkzeug's send_file: an ASCII fallback plus RFC 5987 ``filename*``.
    """
    simple = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    simple = simple.replace('"', "").replace("\\", "")
    if simple == filename:
        return f'attachment; filename="{filename}"'
    quoted = quote(filename, safe="!#$&+-.^_`|~")
    return f"attachment; filename=\"{simple or 'report.csv'}\"; filename*=UTF-8''{quoted}"


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _csv_response(text: str, *, filename: str):
        # Nothing to export: no body, so browsers do not save an empty file.
        if not text:
            return "", 204
        return app.response_class(
            text.encode("utf-8"),
            mimetype="text/csv",
            headers={"Content-Disposition": _attachment(filename)},
        )

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"success": False, "message": str(e)}), 404

    @app.errorhandler(ValidationError)
    def _invalid(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error on %s", request.path)
        return jsonify({"success": False, "message": "Internal error while building the report"}), 500

    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    def api_dashboard():
        stats = container.dashboard_service.stats()
        active = container.dashboard_service.active_sessions()
        return jsonify(
            {
                "stats": _plain(stats),
                "active_sessions": _plain(active),
                "refresh_seconds": REFRESH_INTERVAL_SECONDS,
            }
        )

    @app.route("/api/classrooms/status", methods=["GET"], endpoint="api_classroom_status")
    def api_classroom_status():
        rooms = container.dashboard_service.classroom_status()
        return jsonify(
            {
                "classrooms": _plain(rooms),
                "occupied": sum(1 for r in rooms if r.is_occupied),
                "available": sum(1 for r in rooms if not r.is_occupied),
            }
        )

    @app.route("/api/sessions", methods=["GET"], endpoint="api_sessions")
    def api_sessions():
        raw_limit = request.args.get("limit")
        limit = DEFAULT_SESSION_LIST_LIMIT
        if raw_limit:
            try:
                limit = int(raw_limit)
            except ValueError:
                raise ValidationError("limit must be a positive integer") from None

        sessions = service.recent_sessions(limit=limit)
        return jsonify({"sessions": _plain(sessions), "count": len(sessions)})

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    def api_attendance():
        sort_key = request.args.get("sort") or None
        if sort_key:
            require_choice(sort_key, "sort", SORT_KEYS)
        order = request.args.get("order") or None
        if order:
            require_choice(order, "order", SORT_ORDERS)

        overview = service.course_overview(sort_key=sort_key, descending=None if order is None else order == "desc")
        return jsonify(_plain(overview))

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="api_attendance_csv")
    def api_attendance_csv():
        return _csv_response(service.all_courses_csv(), filename=course_filename())

    @app.route("/api/attendance/<path:subject>/report.csv", methods=["GET"], endpoint="api_course_csv")
    def api_course_csv(subject: str):
        return _csv_response(service.course_csv(subject), filename=course_filename(subject))

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="api_session")
    def api_session(session_id: str):
        report = service.session_report(session_id)
        roster = report.roster
        return jsonify(
            {
                "session": _plain(report.session),
                "present": _plain(roster.present),
                "late": _plain(roster.late),
                "absent": _plain(roster.absent),
                "stats": {
                    "enrolled": roster.enrolled_count,
                    "present": roster.present_count,
                    "late": roster.late_count,
                    "absent": roster.absent_count,
                    "on_time_rate": roster.on_time_rate,
                },
                "warnings": {
                    "orphan_scans": len(roster.orphans),
                    "duplicate_scans": len(roster.duplicates),
                },
                "refresh_seconds": REFRESH_INTERVAL_SECONDS,
            }
        )

    @app.route("/api/sessions/<session_id>/report.csv", methods=["GET"], endpoint="api_session_csv")
    def api_session_csv(session_id: str):
        session, text = service.session_csv(session_id)
        return _csv_response(text, filename=session_filename(session))
