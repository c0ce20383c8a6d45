from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_role
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/policy", methods=["GET"], endpoint="api_get_policy")
    @admin_required
    def get_policy():
        policy = container.config_resolver.resolve(request.args.get("product_line") or None)
        return jsonify({"success": True, "policy": asdict(policy)})

    @app.route("/api/policy", methods=["PUT"], endpoint="api_update_policy")
    @admin_required
    def update_policy():
        document = request.get_json(silent=True)
        if not isinstance(document, dict):
            raise ValidationError("Configuration must be a JSON object")
        validation = container.policy_service.update(
            current_role=current_role(),
            document=document,
            product_line=request.args.get("product_line") or None,
            updated_by=str(session.get("name") or session["user_id"]),
        )
        return jsonify({"success": True, "warnings": validation.warnings})

    @app.route("/api/policy/reset", methods=["POST"], endpoint="api_reset_policy")
    @admin_required
    def reset_policy():
        container.policy_service.reset_to_defaults(
            current_role=current_role(),
            product_line=request.args.get("product_line") or None,
        )
        return jsonify({"success": True})
