from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_tenant_id, current_user_id, json_body, login_required, to_payload
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="my_notifications")
    @login_required
    def my_notifications():
        user_id = current_user_id()
        items = container.notification_service.list_for_user(user_id, current_tenant_id())
        return jsonify(
            {
                "success": True,
                "unread": container.notification_service.unread_count(user_id, current_tenant_id()),
                "notifications": to_payload(items),
            }
        )

    @app.route("/api/notifications/<notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: str):
        user_id = current_user_id()
        mine = container.notification_service.list_for_user(user_id, current_tenant_id())
        if not any(n.notification_id == notification_id for n in mine):
            raise NotFoundError("Notification not found")
        container.notification_service.mark_read(notification_id, user_id)
        return jsonify({"success": True})

    @app.route("/api/notifications", methods=["POST"], endpoint="send_notification")
    @admin_required
    def send_notification():
        data = json_body()
        tenant_id = current_tenant_id()
        recipient_ids = data.get("recipient_ids") or []
        if not isinstance(recipient_ids, list):
            raise ValidationError("recipient_ids must be a list")
        for user_id in recipient_ids:
            user = container.user_service.get_by_id(str(user_id))
            if not user or user.tenant_id != tenant_id:
                raise ValidationError(f"Unknown recipient: {user_id}")

        notification = container.notification_service.send(
            data.get("content", ""),
            [str(u) for u in recipient_ids],
            current_user_id(),
            tenant_id,
        )
        return jsonify({"success": True, "notification": to_payload(notification)}), 201
