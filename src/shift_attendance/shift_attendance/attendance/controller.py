from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body, token_required
from ..container import Container
from ..core.enums import PunchStatus
from ..core.exceptions import ValidationError


def _location(data: dict):
    lat, lng = data.get("latitude"), data.get("longitude")
    if lat in (None, "") or lng in (None, ""):
        return None
    return f"{lat},{lng}"


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @token_required
    def mark():
        data = json_body()
        employee_id = data.get("employee_id")
        try:
            employee_id = int(employee_id)
        except (TypeError, ValueError):
            raise ValidationError("employee_id is required.") from None

        result = container.attendance_service.mark(
            employee_id,
            data.get("timestamp"),
            data.get("date"),
            _location(data),
        )
        status_code = 201 if result.status == PunchStatus.CHECKED_IN else 200
        return jsonify({"success": True, **result.to_dict()}), status_code

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_edit")
    @token_required
    def edit(attendance_id: int):
        data = json_body()
        record = container.attendance_service.edit_record(
            attendance_id,
            in_time=data.get("in_time"),
            out_time=data.get("out_time"),
            ot_hours=data.get("ot_hours"),
            remark=(data.get("remark") or "").strip() or None,
        )
        return jsonify(
            {
                "success": True,
                "attendance_id": record.attendance_id,
                "in_time": record.in_time.isoformat() if record.in_time else None,
                "out_time": record.out_time.isoformat() if record.out_time else None,
                "delay_by_minutes": record.delay_by_minutes,
                "extra_time_minutes": record.extra_time_minutes,
                "total_working_hours_decimal": record.total_working_hours_decimal,
                "ot_hours_decimal": record.ot_hours_decimal,
                "is_edited": record.is_edited,
                "edit_remark": record.edit_remark,
            }
        )

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @token_required
    def report():
        start_raw = request.args.get("startDate")
        end_raw = request.args.get("endDate")
        if not start_raw or not end_raw:
            raise ValidationError("startDate and endDate are required.")
        try:
            start = parse_iso_date(start_raw)
            end = parse_iso_date(end_raw)
        except ValueError:
            raise ValidationError("Dates must be YYYY-MM-DD.") from None

        data = container.report_service.build_detailed_report(
            start,
            end,
            employee_type=request.args.get("employeeType") or None,
            search=request.args.get("search") or None,
        )
        return jsonify({"success": True, "rows": data.rows, "summary": data.summary})
