from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import current_tenant_id, current_user_id, json_body, staff_required, to_payload
from ..core.enums import CashTransactionType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cash", methods=["GET"], endpoint="cash_drawer")
    @staff_required
    def cash_drawer():
        tenant_id = current_tenant_id()
        return jsonify(
            {
                "success": True,
                "totals": to_payload(container.cash_service.totals(tenant_id)),
                "transactions": to_payload(container.cash_service.list_for_tenant(tenant_id)),
            }
        )

    @app.route("/api/cash", methods=["POST"], endpoint="add_cash_transaction")
    @staff_required
    def add_cash_transaction():
        """Admins record any type; a cook only records cash handed back."""
        data = json_body()
        try:
            tx_type = CashTransactionType(data.get("type", ""))
        except ValueError:
            raise ValidationError("type must be given, returned or adjustment")
        if session.get("role") == Role.COOK.value and tx_type != CashTransactionType.RETURNED:
            raise AuthorizationError("Cooks can only record returned cash.")

        tx = container.cash_service.add_transaction(
            tx_type,
            data.get("amount"),
            current_user_id(),
            current_tenant_id(),
            data.get("reason"),
        )
        return jsonify({"success": True, "transaction": to_payload(tx)}), 201
