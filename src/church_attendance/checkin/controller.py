from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import json_endpoint
from ..common.validators import require_object
from ..container import Container
from .qr import render_qr_png


def register(app: Flask, container: Container) -> None:
    service = container.checkin_service

    @app.route("/api/attendance/qr-session", methods=["POST"], endpoint="create_qr_session")
    @json_endpoint()
    def create_qr_session():
        body = require_object(request.get_json(silent=True) or {}, "Request body")
        created = service.create_session(
            date=body.get("date"),
            session_type=body.get("attendance_type"),
            recorded_by=body.get("recorded_by"),
            event_id=body.get("event_id"),
            department_id=body.get("department_id"),
            session_name=body.get("session_name"),
            expires_at=service.parse_expires_at(body.get("expires_at")),
        )
        return jsonify({"data": created.to_dict(), "message": "QR attendance session created successfully"})

    @app.route("/api/attendance/qr-session", methods=["GET"], endpoint="get_qr_session")
    @json_endpoint()
    def get_qr_session():
        session = service.get_active_session(request.args.get("session_id") or "")
        return jsonify(
            {
                "data": {
                    "session_id": session.id,
                    "date": session.date,
                    "attendance_type": session.session_type,
                    "session_name": session.session_name,
                    "department_id": session.department_id,
                    "event_id": session.event_id,
                    "check_ins": session.check_ins,
                    "expires_at": session.expires_at.isoformat(),
                    "is_active": session.is_active,
                }
            }
        )

    @app.route("/api/attendance/qr-session/<session_id>/qr.png", methods=["GET"], endpoint="qr_session_image")
    @json_endpoint()
    def qr_session_image(session_id: str):
        """Printable QR code for an open session."""

        session = service.get_active_session(session_id)
        png = render_qr_png(service.check_in_url(session.id))
        return app.response_class(png, mimetype="image/png")

    @app.route("/api/attendance/qr-checkin", methods=["POST"], endpoint="qr_checkin")
    @json_endpoint()
    def qr_checkin():
        body = require_object(request.get_json(silent=True) or {}, "Request body")
        result = service.check_in(
            body.get("session_id") or "",
            member_id=body.get("member_id"),
            phone_number=body.get("phone_number"),
            member_number=body.get("member_number"),
        )
        return jsonify({"data": result.to_dict(), "message": result.message})

    @app.route("/api/attendance/qr-checkin", methods=["GET"], endpoint="qr_checkin_stats")
    @json_endpoint()
    def qr_checkin_stats():
        return jsonify({"data": service.session_stats(request.args.get("session_id") or "")})
