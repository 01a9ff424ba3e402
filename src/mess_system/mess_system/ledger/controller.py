from __future__ import annotations

from datetime import date

from flask import Flask, jsonify

from ..common.web import admin_required, current_tenant_id, current_user_id, date_arg, json_body, login_required, to_payload
from ..core.enums import MealScope
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _statement(user_id: str, tenant_id: str) -> dict:
        today = date.today()
        ledger = container.ledger_service
        return {
            "balance": to_payload(ledger.balance_for(user_id, tenant_id)),
            "summary": to_payload(ledger.account_summary(user_id)),
            "current_bill": to_payload(ledger.current_bill(user_id, today, tenant_id)),
            "previous_month": to_payload(ledger.previous_month_bill(user_id, today, tenant_id)),
            "history": to_payload(ledger.running_history(user_id, tenant_id)),
        }

    @app.route("/api/bills/me", methods=["GET"], endpoint="my_bill")
    @login_required
    def my_bill():
        return jsonify({"success": True, **_statement(current_user_id(), current_tenant_id())})

    @app.route("/api/users/<user_id>/ledger", methods=["GET"], endpoint="user_ledger")
    @admin_required
    def user_ledger(user_id: str):
        user = container.user_service.get_by_id(user_id)
        if not user or user.tenant_id != current_tenant_id():
            raise NotFoundError("User not found")
        return jsonify({"success": True, **_statement(user_id, user.tenant_id)})

    @app.route("/api/ledger/misc", methods=["POST"], endpoint="add_misc_charge")
    @admin_required
    def add_misc_charge():
        data = json_body()
        try:
            scope = MealScope(data.get("scope", ""))
        except ValueError:
            raise ValidationError("scope must be Breakfast, Dinner or Both")

        result = container.ledger_service.add_misc_charge(
            data.get("description", ""),
            data.get("amount"),
            date_arg(data.get("date")),
            scope,
            current_user_id(),
            current_tenant_id(),
        )
        return jsonify({"success": True, "share": to_payload(result.share), "user_ids": list(result.user_ids)}), 201

    @app.route("/api/ledger/payments", methods=["POST"], endpoint="add_payment")
    @admin_required
    def add_payment():
        data = json_body()
        entry = container.ledger_service.add_payment(
            str(data.get("user_id", "")),
            data.get("amount"),
            current_user_id(),
            tenant_id=current_tenant_id(),
        )
        return jsonify({"success": True, "entry": to_payload(entry)}), 201
