# backend/fitlog/routes/common.py
from typing import Any, Optional, Type

from flask import jsonify, request
from pydantic import BaseModel, ValidationError

from ..errors import KIND_ABORTED, KIND_NOT_FOUND, KIND_PERMISSION_DENIED, FailureEvent

_STATUS_BY_KIND = {
    KIND_PERMISSION_DENIED: 403,
    KIND_NOT_FOUND: 404,
}


class BadPayload(Exception):
    def __init__(self, errors):
        super().__init__("invalid payload")
        self.errors = errors

    def response(self):
        return jsonify({"message": "invalid payload", "errors": self.errors}), 400


def parse_body(schema: Type[BaseModel]) -> Any:
    data = request.get_json(silent=True) or {}
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise BadPayload(e.errors(include_url=False, include_context=False)) from e


def safe_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def failure_response(action: str, failure: Optional[FailureEvent] = None, **extra):
    kind = failure.kind if failure else None
    status = _STATUS_BY_KIND.get(kind, 500)
    body = {"message": f"{action} failed", "error": kind}
    body.update(extra)
    return jsonify(body), status


def failure_from_exception(action: str, exc: Exception):
    """For the operations that re-raise after reporting."""
    kind = getattr(exc, "kind", KIND_ABORTED)
    status = _STATUS_BY_KIND.get(kind, 500)
    return jsonify({"message": f"{action} failed", "error": kind}), status
