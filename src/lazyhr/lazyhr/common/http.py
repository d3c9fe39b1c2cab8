from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.enums import ValidationReason
from ..core.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    OperationTimeoutError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_BIGINT_MIN = -(2**63)
_BIGINT_MAX = 2**63 - 1

_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (NotFoundError, 404),
    (ValidationError, 400),
    (ConflictError, 409),
    (ForbiddenError, 403),
    (OperationTimeoutError, 503),
)


def http_status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def ok(data: Any = None, message: str = "", status: int = 200):
    return jsonify({"status": "success", "message": message, "data": data}), status


def decimal_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def _param(name: str) -> Any:
    body = request.get_json(silent=True) or {}
    if name in body:
        return body[name]
    return request.args.get(name, request.form.get(name))


def int_param(name: str, *, required: bool = True, default: Optional[int] = None) -> Optional[int]:
    raw = _param(name)
    if raw is None or raw == "":
        if required:
            raise ValidationError(ValidationReason.INVALID_VALUE, f"{name} is required")
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{name} must be an integer")
    # Ids and timestamps are stored as signed BIGINT.
    if not _BIGINT_MIN <= value <= _BIGINT_MAX:
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{name} is out of range")
    return value


def date_param(name: str) -> date:
    """Required ``YYYY-MM-DD`` parameter."""
    raw = str_param(name)
    if not raw:
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{name} is required")
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(ValidationReason.INVALID_VALUE, f"{name} must be a YYYY-MM-DD date")


def str_param(name: str) -> Optional[str]:
    raw = _param(name)
    return None if raw is None else str(raw)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = http_status_for(error)
        logger.info("%s %s -> %s %s", request.method, request.path, status, error.code)
        return jsonify({"status": "error", "error": error.to_dict()}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        body = {"code": (error.name or "HTTP_ERROR").upper().replace(" ", "_"), "message": error.description}
        return jsonify({"status": "error", "error": body}), error.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"status": "error", "error": {"code": "INTERNAL", "message": "Internal server error"}}), 500
