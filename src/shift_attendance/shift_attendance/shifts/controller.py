from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, token_required
from ..container import Container
from .model import Shift


def _to_json(shift: Shift) -> dict:
    return {
        "id": shift.shift_id,
        "shift_name": shift.shift_name,
        "employee_type": shift.employee_type,
        "start_time": shift.start_time.strftime("%H:%M"),
        "end_time": shift.end_time.strftime("%H:%M"),
        "grace_before": shift.grace_before_minutes,
        "grace_after": shift.grace_after_minutes,
        "presence_time": shift.presence_time_seconds,
        "presence_count": shift.presence_count,
        "presence_window": shift.presence_window_seconds,
        "is_overnight": shift.is_overnight,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts", methods=["GET"], endpoint="shifts_list")
    @token_required
    def list_shifts():
        shifts = container.shift_service.list_shifts(request.args.get("employeeType") or None)
        return jsonify({"success": True, "shifts": [_to_json(s) for s in shifts]})

    @app.route("/api/shifts", methods=["POST"], endpoint="shifts_create")
    @token_required
    def create_shift():
        shift = container.shift_service.create(json_body())
        return jsonify({"success": True, "shift": _to_json(shift)}), 201

    @app.route("/api/shifts/<int:shift_id>", methods=["PUT"], endpoint="shifts_update")
    @token_required
    def update_shift(shift_id: int):
        shift = container.shift_service.update(shift_id, json_body())
        return jsonify({"success": True, "shift": _to_json(shift)})

    @app.route("/api/shifts/<int:shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    @token_required
    def delete_shift(shift_id: int):
        container.shift_service.delete(shift_id)
        return jsonify({"success": True})
