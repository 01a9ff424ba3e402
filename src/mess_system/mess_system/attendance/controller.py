from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.web import (
    admin_required,
    current_tenant_id,
    current_user_id,
    date_arg,
    json_body,
    login_required,
    staff_required,
    to_payload,
)
from ..core.enums import MealType
from ..core.exceptions import ValidationError
from ..container import Container


def _meal_arg(value) -> MealType:
    try:
        return MealType(value)
    except ValueError:
        raise ValidationError("meal must be Breakfast or Dinner")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status():
        """Today's marks for the current user plus which windows are open now."""
        today = date.today()
        user_id = current_user_id()
        tenant_id = current_tenant_id()
        meals = {}
        for meal in MealType:
            meals[meal.value] = {
                "open": container.attendance_service.is_open(meal, tenant_id),
                "marked": container.attendance_service.get_mark(user_id, today, meal) is not None,
            }
        return jsonify({"success": True, "date": today.isoformat(), "meals": meals})

    @app.route("/api/attendance/me", methods=["GET"], endpoint="my_attendance")
    @login_required
    def my_attendance():
        marks = container.attendance_service.list_for_user(current_tenant_id(), current_user_id())
        return jsonify({"success": True, "count": len(marks), "marks": to_payload(marks)})

    @app.route("/api/attendance/toggle", methods=["POST"], endpoint="toggle_own_attendance")
    @login_required
    def toggle_own_attendance():
        data = json_body()
        user_id = current_user_id()
        result = container.attendance_service.toggle(
            user_id,
            date.today(),
            _meal_arg(data.get("meal")),
            user_id,
            tenant_id=current_tenant_id(),
            enforce_window=True,
        )
        return jsonify({"success": True, "result": to_payload(result)})

    @app.route("/api/admin/attendance/toggle", methods=["POST"], endpoint="toggle_attendance")
    @admin_required
    def toggle_attendance():
        data = json_body()
        result = container.attendance_service.toggle(
            str(data.get("user_id", "")),
            date_arg(data.get("date")),
            _meal_arg(data.get("meal")),
            current_user_id(),
            tenant_id=current_tenant_id(),
        )
        return jsonify({"success": True, "result": to_payload(result)})

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @staff_required
    def list_attendance():
        day = date_arg(request.args.get("date") or date.today().isoformat())
        meal = request.args.get("meal")
        marks = container.attendance_service.list_for_date(
            current_tenant_id(),
            day,
            _meal_arg(meal) if meal else None,
        )
        return jsonify({"success": True, "date": day.isoformat(), "count": len(marks), "marks": to_payload(marks)})
