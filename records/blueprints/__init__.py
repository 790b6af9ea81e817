from flask import request

from ..errors import ValidationError


def json_body():
    """Request JSON as a dict; a missing body is an empty dict."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload
