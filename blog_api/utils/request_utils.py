# blog_api/utils/request_utils.py
from flask import request
from marshmallow import ValidationError


def json_body() -> dict:
    """The request's JSON object; a missing or non-object body is a validation error."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError({"_body": ["Request body must be a JSON object."]})
    return body
