from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_tenant_id, to_payload
from ..core.constants import SYSTEM_TENANT
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/history", methods=["GET"], endpoint="history")
    @admin_required
    def history():
        """Tenant history; super admins may ask for ``scope=all`` or ``scope=system``."""
        limit_s = request.args.get("limit")
        try:
            limit = int(limit_s) if limit_s else None
        except ValueError:
            raise ValidationError("limit must be a number")

        scope = request.args.get("scope", "tenant")
        if scope != "tenant" and not session.get("is_super_admin"):
            raise AuthorizationError("Super admin access required.")

        if scope == "all":
            entries = container.audit_log.list_all(limit=limit)
        elif scope == "system":
            entries = container.audit_log.list_for_tenant(SYSTEM_TENANT, limit=limit)
        else:
            entries = container.audit_log.list_for_tenant(current_tenant_id(), limit=limit)
        return jsonify({"success": True, "entries": to_payload(entries)})
