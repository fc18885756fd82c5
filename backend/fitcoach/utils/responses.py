"""
Standardized JSON response utilities for API endpoints.

Every route answers with the same envelope:

    {"success": true, "message": "...", "data": ...}
    {"success": false, "error": {"code": "...", "message": "...", "details": ...}}
"""

from typing import Any, Dict, Optional, Union
from flask import jsonify, Response
from http import HTTPStatus


def success_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = HTTPStatus.OK
) -> tuple[Response, int]:
    """
    Generate a standardized success response.

    Args:
        data: Response payload (dict, list, or any JSON-serializable data)
        message: Success message to include in response
        status_code: HTTP status code (default: 200 OK)

    Returns:
        Tuple of (JSON response, status code)

    Example:
        >>> return success_response({"student": student_dict}, "Student created", 201)
    """
    response_body = {
        "success": True,
        "message": message,
    }

    if data is not None:
        response_body["data"] = data

    return jsonify(response_body), status_code


def error_response(
    code: str,
    message: str,
    details: Optional[Union[str, Dict[str, Any]]] = None,
    status_code: int = HTTPStatus.BAD_REQUEST
) -> tuple[Response, int]:
    """
    Generate a standardized error response.

    Args:
        code: Error code identifier (e.g., "NOT_FOUND", "BAD_REQUEST")
        message: Human-readable error message
        details: Additional error details (string or dict with field-level errors)
        status_code: HTTP status code (default: 400 Bad Request)
    """
    error_body = {
        "code": code,
        "message": message,
    }

    if details is not None:
        error_body["details"] = details

    return jsonify({"success": False, "error": error_body}), status_code


def ok(data: Any = None, message: str = "Success") -> tuple[Response, int]:
    """200 OK response."""
    return success_response(data, message, HTTPStatus.OK)


def created(data: Any = None, message: str = "Resource created") -> tuple[Response, int]:
    """201 Created response."""
    return success_response(data, message, HTTPStatus.CREATED)


def bad_request(message: str, details: Optional[Union[str, Dict[str, Any]]] = None) -> tuple[Response, int]:
    """400 Bad Request error response."""
    return error_response("BAD_REQUEST", message, details, HTTPStatus.BAD_REQUEST)


def unauthorized(message: str = "Authentication required", details: Optional[str] = None) -> tuple[Response, int]:
    """401 Unauthorized error response."""
    return error_response("UNAUTHORIZED", message, details, HTTPStatus.UNAUTHORIZED)


def forbidden(message: str = "Access denied", details: Optional[str] = None) -> tuple[Response, int]:
    """403 Forbidden error response."""
    return error_response("FORBIDDEN", message, details, HTTPStatus.FORBIDDEN)


def not_found(resource: str = "Resource", details: Optional[str] = None) -> tuple[Response, int]:
    """
    404 Not Found error response.

    Args:
        resource: Name of resource that was not found ("Student" -> "Student not found")
    """
    return error_response("NOT_FOUND", f"{resource} not found", details, HTTPStatus.NOT_FOUND)


def conflict(message: str, details: Optional[Union[str, Dict[str, Any]]] = None) -> tuple[Response, int]:
    """409 Conflict error response."""
    return error_response("CONFLICT", message, details, HTTPStatus.CONFLICT)


def internal_error(message: str = "Internal server error", details: Optional[str] = None) -> tuple[Response, int]:
    """500 Internal Server Error response (avoid exposing sensitive info in details)."""
    return error_response("INTERNAL_ERROR", message, details, HTTPStatus.INTERNAL_SERVER_ERROR)


def service_error(error: str) -> tuple[Response, int]:
    """
    Translate a service-layer error string into the matching envelope.

    Services return `(result, error)` tuples with plain-text errors; the
    wording decides the status: "... not found" -> 404, "... already ..." -> 409,
    "Failed ..." -> 500, anything else is a client error -> 400.
    """
    lowered = error.lower()
    if 'not found' in lowered:
        return error_response("NOT_FOUND", error, None, HTTPStatus.NOT_FOUND)
    if 'already' in lowered:
        return conflict(error)
    if lowered.startswith('failed'):
        return internal_error(error)
    return bad_request(error)
