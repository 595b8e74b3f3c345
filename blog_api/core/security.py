# blog_api/core/security.py
from functools import wraps
from typing import Optional

from flask import request, g

from blog_api.utils.response_utils import unauthorized

BEARER_PREFIX = "Bearer "


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


def bearer_token_required(f):
    """
    Reject the request with 401 when there is no ``Authorization: Bearer <token>``
    header. The token itself is verified by the service layer; the raw value is
    left on ``g.id_token``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token is None:
            return unauthorized("No authorization header")

        g.id_token = token
        return f(*args, **kwargs)

    return decorated_function
