# blog_api/utils/response_utils.py
"""
Result object returned by every public service method, plus the helpers the
route layer uses to turn results and errors into JSON responses.

Services never raise to the routes: they hand back a ``ServiceResult`` whose
``status`` is the HTTP status the route should answer with.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from flask import jsonify


@dataclass
class ServiceResult:
    success: bool
    status: int = 200
    data: Any = None
    error: Optional[str] = None
    pagination: Optional[Dict[str, int]] = None

    @classmethod
    def ok(cls, data: Any = None, status: int = 200, pagination: Optional[Dict[str, int]] = None) -> "ServiceResult":
        return cls(success=True, status=status, data=data, pagination=pagination)

    @classmethod
    def fail(cls, message: str, status: int = 400) -> "ServiceResult":
        return cls(success=False, status=status, error=message)


def success_response(data: Any = None, status: int = 200, pagination: Optional[Dict[str, int]] = None):
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return jsonify(body), status


def error_response(message: str, status: int = 400, details: Any = None):
    error: Dict[str, Any] = {"message": message}
    if details is not None:
        error["details"] = details
    return jsonify({"success": False, "error": error}), status


def validation_error(messages: Any):
    return error_response("Validation failed", 400, details=messages)


def unauthorized(message: str = "Unauthorized"):
    return error_response(message, 401)


def not_found(message: str = "Not found"):
    return error_response(message, 404)


def server_error(message: str = "Internal server error"):
    return error_response(message, 500)


def result_response(result: ServiceResult, dump=None):
    """
    Convert a ``ServiceResult`` into a Flask response.

    ``dump`` serialises ``result.data`` on success (typically a marshmallow
    ``Schema().dump``); it is skipped when the result carries no data.
    """
    if not result.success:
        return error_response(result.error or "Request failed", result.status)
    data = result.data
    if dump is not None and data is not None:
        data = dump(data)
    return success_response(data, result.status, result.pagination)
