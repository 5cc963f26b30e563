from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.responses import json_endpoint
from ..container import Container
from ..core.constants import DEFAULT_PERIOD

CSV_FIELDS = ["date", "attendance_type", "present", "absent", "total", "percentage"]


def register(app: Flask, container: Container) -> None:
    def _build_from_args():
        return container.stats_service.build_statistics(
            period=request.args.get("period") or DEFAULT_PERIOD,
            department_id=request.args.get("department_id") or None,
            session_type=request.args.get("type") or None,
        )

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @json_endpoint("Failed to fetch attendance data")
    def attendance_stats():
        stats = _build_from_args()
        return jsonify({"data": stats.to_dict()})

    @app.route("/api/attendance/stats.csv", methods=["GET"], endpoint="attendance_stats_csv")
    @json_endpoint("Failed to fetch attendance data")
    def attendance_stats_csv():
        """Per-session breakdown of the selected period as a CSV download."""

        stats = _build_from_args()

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in stats.date_stats:
            d = row.to_dict()
            d["percentage"] = f"{row.percentage:.2f}"
            writer.writerow(d)

        filename = f"attendance_{stats.period.value}_{stats.start_date}_{stats.end_date}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
