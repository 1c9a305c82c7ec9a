"""JSON helpers shared by the controllers."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any

from flask import jsonify, request

from ..core.exceptions import (
    AlreadyProcessed,
    DomainError,
    NotFound,
    QuotaExceeded,
    StorageFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."


def serialize(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def error_response(e: Exception):
    """Map a raised exception to (json, status) for the API layer."""
    if isinstance(e, QuotaExceeded):
        return jsonify({"error": str(e), "requested": e.requested, "available": e.available}), 400
    if isinstance(e, AlreadyProcessed):
        return jsonify({"error": str(e), "status": e.current}), 409
    if isinstance(e, NotFound):
        return jsonify({"error": str(e)}), 404
    if isinstance(e, ValidationError):
        return jsonify({"error": str(e)}), 400
    if isinstance(e, StorageFailure):
        logger.error("Storage failure: %s", e)
        return jsonify({"error": GENERIC_ERROR}), 503
    if isinstance(e, DomainError):
        return jsonify({"error": str(e)}), 400

    logger.exception("Unhandled error in %s %s", request.method, request.path)
    return jsonify({"error": GENERIC_ERROR}), 500
