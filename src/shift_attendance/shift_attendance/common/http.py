from __future__ import annotations

import hmac
from functools import wraps
from typing import Any, Dict

from flask import current_app, jsonify, request

from ..core.exceptions import AuthenticationError, ValidationError


def token_required(view):
    """Bearer-token guard. An empty ``API_TOKEN`` leaves the API open."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("API_TOKEN") or ""
        if expected:
            header = request.headers.get("Authorization", "")
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not hmac.compare_digest(token.strip(), expected):
                raise AuthenticationError("Missing or invalid API token.")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def error_response(message: str, status_code: int):
    return jsonify({"success": False, "error": message}), status_code
