"""Registrants JSON API."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from securefeedback.core.db.pool import PoolManager
from securefeedback.core.db.storage import ErrorKind
from securefeedback.domains.registrants.mappers import map_created, map_registrant
from securefeedback.domains.registrants.schemas.registrant_schemas import (
    RegistrationRequest,
    validation_messages,
)
from securefeedback.domains.registrants.services import registrant_service

registrant_api_bp = Blueprint("registrants_api", __name__)

MSG_VALIDATION = "Error de validación"
MSG_CREATED = "Usuario registrado exitosamente"
MSG_DUPLICATE = "El correo electrónico ya está registrado"
MSG_CREATE_FAILED = "Error interno del servidor. Intente nuevamente."
MSG_LIST_FAILED = "Error interno del servidor"


def _pool_manager() -> PoolManager:
    return current_app.extensions["pool_manager"]


def _submitted_fields() -> dict:
    if request.is_json:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}
    return request.form.to_dict()


@registrant_api_bp.post("")
def create_registrant():
    try:
        data = RegistrationRequest.model_validate(_submitted_fields())
    except ValidationError as exc:
        return (
            jsonify(
                {
                    "success": False,
                    "message": MSG_VALIDATION,
                    "errors": validation_messages(exc),
                }
            ),
            400,
        )

    result = registrant_service.create_registrant(_pool_manager(), data.sanitized())
    if not result.ok:
        if result.error.kind is ErrorKind.DUPLICATE:
            return jsonify({"success": False, "message": MSG_DUPLICATE}), 409
        current_app.logger.error("Error registering user: %s", result.error)
        return jsonify({"success": False, "message": MSG_CREATE_FAILED}), 500

    return (
        jsonify({"success": True, "message": MSG_CREATED, "data": map_created(result.value)}),
        201,
    )


@registrant_api_bp.get("")
def list_registrants():
    result = registrant_service.list_registrants(_pool_manager())
    if not result.ok:
        current_app.logger.error("Error listing users: %s", result.error)
        return jsonify({"success": False, "message": MSG_LIST_FAILED}), 500
    rows = [map_registrant(r) for r in result.value]
    return jsonify({"success": True, "count": len(rows), "data": rows})
