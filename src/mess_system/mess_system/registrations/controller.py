from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, json_body, super_admin_required, to_payload
from ..core.enums import RequestStatus
from ..core.exceptions import NotFoundError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/registrations", methods=["POST"], endpoint="submit_registration")
    def submit_registration():
        data = json_body()
        req = container.registration_service.submit(
            name=data.get("name", ""),
            age=data.get("age"),
            profession=data.get("profession", ""),
            contact_number=data.get("contact_number", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
        )
        return jsonify({"success": True, "request": to_payload(req)}), 201

    @app.route("/api/registrations", methods=["GET"], endpoint="list_registrations")
    @super_admin_required
    def list_registrations():
        if request.args.get("status", RequestStatus.PENDING.value) == "all":
            requests_ = container.registration_service.list_all()
        else:
            requests_ = container.registration_service.list_pending()
        return jsonify({"success": True, "requests": to_payload(requests_)})

    @app.route("/api/registrations/<request_id>", methods=["GET"], endpoint="get_registration")
    @super_admin_required
    def get_registration(request_id: str):
        req = container.registration_service.get(request_id)
        if not req:
            raise NotFoundError("Registration request not found")
        return jsonify({"success": True, "request": to_payload(req)})

    @app.route("/api/registrations/<request_id>/approve", methods=["POST"], endpoint="approve_registration")
    @super_admin_required
    def approve_registration(request_id: str):
        result = container.registration_service.approve(request_id, current_user_id())
        return jsonify(
            {
                "success": True,
                "request": to_payload(result.request),
                "tenant": {"id": result.tenant.tenant_id, "name": result.tenant.name},
                "admin": to_payload(result.admin),
            }
        )

    @app.route("/api/registrations/<request_id>/reject", methods=["POST"], endpoint="reject_registration")
    @super_admin_required
    def reject_registration(request_id: str):
        req = container.registration_service.reject(request_id, current_user_id())
        return jsonify({"success": True, "request": to_payload(req)})
