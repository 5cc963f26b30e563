from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import json_endpoint
from ..common.validators import optional_str, require_object
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="save_attendance")
    @json_endpoint("Failed to save attendance records")
    def save_attendance():
        body = require_object(request.get_json(silent=True) or {}, "Request body")
        raw_records = body.get("attendanceRecords")
        session_info = body.get("sessionInfo")

        if not raw_records or not session_info:
            raise ValidationError("Missing required fields: attendanceRecords and sessionInfo")
        require_object(session_info, "sessionInfo")
        if not session_info.get("date") or not session_info.get("attendance_type"):
            raise ValidationError("Missing required session info: date and attendance_type")

        entries = container.attendance_service.parse_entries(raw_records)
        saved = container.attendance_service.save_session(
            entries,
            date=session_info["date"],
            session_type=session_info["attendance_type"],
            event_id=optional_str(session_info.get("event_id")),
            recorded_by=optional_str(session_info.get("recorded_by")),
        )
        return jsonify(
            {
                "message": "Attendance records saved successfully",
                "data": {
                    "recordCount": len(saved),
                    "records": [r.to_dict() for r in saved],
                },
            }
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @json_endpoint("Failed to fetch attendance records")
    def list_attendance():
        records = container.attendance_service.list_records(
            member_id=request.args.get("member_id") or None,
            date=request.args.get("date") or None,
            session_type=request.args.get("type") or None,
            event_id=request.args.get("event_id") or None,
        )
        return jsonify(
            {
                "data": [r.to_dict() for r in records],
                "message": f"Found {len(records)} attendance records",
            }
        )

    @app.route("/api/members/<member_id>/attendance-summary", methods=["GET"], endpoint="member_attendance_summary")
    @json_endpoint("Failed to fetch member attendance")
    def member_attendance_summary(member_id: str):
        summary = container.attendance_service.member_summary(
            member_id,
            session_type=request.args.get("type") or None,
        )
        return jsonify({"data": summary.to_dict()})
