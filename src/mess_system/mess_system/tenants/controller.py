from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_tenant_id, current_user_id, json_body, login_required, to_payload
from ..core.exceptions import NotFoundError
from ..container import Container
from .json_tenant_repository import settings_to_row


def register(app: Flask, container: Container) -> None:
    @app.route("/api/tenant", methods=["GET"], endpoint="current_tenant")
    @login_required
    def current_tenant():
        tenant = container.tenant_service.get(current_tenant_id())
        if not tenant:
            raise NotFoundError("Tenant not found")
        return jsonify(
            {
                "success": True,
                "tenant": {
                    "id": tenant.tenant_id,
                    "name": tenant.name,
                    "ownerId": tenant.owner_id,
                    "settings": settings_to_row(tenant.settings) if tenant.settings else None,
                },
            }
        )

    @app.route("/api/tenant/settings", methods=["PUT"], endpoint="update_tenant_settings")
    @admin_required
    def update_tenant_settings():
        settings = container.tenant_service.update_settings(current_tenant_id(), json_body(), current_user_id())
        return jsonify({"success": True, "settings": to_payload(settings_to_row(settings))})
