from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_tenant_id, current_user_id, date_arg, json_body, login_required, to_payload
from ..core.enums import MealType
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/menus/<day>", methods=["GET"], endpoint="get_menu")
    @login_required
    def get_menu(day: str):
        menu_date = date_arg(day)
        menu = container.menu_service.get_menu_for_date(menu_date, current_tenant_id())
        dishes = to_payload(menu.dishes) if menu else {}
        return jsonify({"success": True, "date": menu_date.isoformat(), "dishes": dishes})

    @app.route("/api/menus/<day>/<meal>", methods=["PUT"], endpoint="set_menu")
    @admin_required
    def set_menu(day: str, meal: str):
        try:
            meal_type = MealType(meal)
        except ValueError:
            raise ValidationError("meal must be Breakfast or Dinner")

        data = json_body()
        notification = container.menu_service.set_menu(
            date_arg(day),
            meal_type,
            data.get("dish", ""),
            current_user_id(),
            current_tenant_id(),
        )
        return jsonify({"success": True, "notification": to_payload(notification) if notification else None})
