from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import (
    admin_required,
    current_tenant_id,
    current_user_id,
    json_body,
    login_required,
    to_payload,
)
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _tenant_user(user_id: str):
        user = container.user_service.get_by_id(user_id)
        if not user or user.tenant_id != current_tenant_id():
            raise NotFoundError("User not found")
        return user

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me", True))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        session["tenant_id"] = s_user.tenant_id
        session["is_super_admin"] = s_user.is_super_admin

        return jsonify({"success": True, "user": to_payload(s_user)})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.user_service.get_by_id(current_user_id())
        if not user:
            session.clear()
            raise NotFoundError("User not found")
        return jsonify({"success": True, "user": to_payload(user)})

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        role_s = request.args.get("role")
        try:
            role = Role(role_s) if role_s else None
        except ValueError:
            raise ValidationError("Invalid role")
        users = container.user_service.list_for_tenant(current_tenant_id(), role=role)
        return jsonify({"success": True, "users": to_payload(users)})

    @app.route("/api/users", methods=["POST"], endpoint="add_user")
    @admin_required
    def add_user():
        data = json_body()
        try:
            role = Role(data.get("role", ""))
        except ValueError:
            raise ValidationError("Invalid role")

        user = container.user_service.add(
            role=role,
            name=data.get("name", ""),
            password=data.get("password", ""),
            actor_id=current_user_id(),
            tenant_id=current_tenant_id(),
            arrears=data.get("arrears", "0"),
            security_fee=data.get("security_fee", "0"),
            include_in_billing=data.get("include_in_billing"),
        )
        return jsonify({"success": True, "user": to_payload(user)}), 201

    @app.route("/api/users/<user_id>", methods=["PATCH"], endpoint="update_user")
    @admin_required
    def update_user(user_id: str):
        _tenant_user(user_id)
        changes = json_body()
        if "is_super_admin" in changes and not session.get("is_super_admin"):
            raise AuthorizationError("Only a super admin can grant or revoke super admin.")
        user = container.user_service.update(user_id, changes, current_user_id())
        return jsonify({"success": True, "user": to_payload(user)})

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: str):
        _tenant_user(user_id)
        container.user_service.delete(user_id, current_user_id())
        return jsonify({"success": True})
