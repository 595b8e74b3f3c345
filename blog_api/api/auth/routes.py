# blog_api/api/auth/routes.py

import logging
from flask import Blueprint, current_app, g
from marshmallow import ValidationError

from blog_api.api.auth.schemas import LoginSchema, SignupSchema, UserProfileSchema, AuthSessionSchema
from blog_api.core.security import bearer_token_required
from blog_api.utils.request_utils import json_body
from blog_api.utils.response_utils import (
    result_response, error_response, validation_error, server_error
)

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Email/password login. Returns the profile, the identity token and a custom session token."""
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(json_body())
        result = auth_service.login(data['email'], data['password'])
        return result_response(result, AuthSessionSchema().dump)
    except ValidationError as err:
        return validation_error(err.messages)
    except Exception as e:
        logging.error(f"Unexpected error during login: {e}", exc_info=True)
        return server_error()


@auth_bp.route('/signup', methods=['POST'])
def signup():
    auth_service = current_app.services['auth']
    try:
        data = SignupSchema().load(json_body())
        result = auth_service.signup(data['email'], data['password'], data.get('display_name'))
        return result_response(result, AuthSessionSchema().dump)
    except ValidationError as err:
        return validation_error(err.messages)
    except Exception as e:
        logging.error(f"Unexpected error during signup: {e}", exc_info=True)
        return server_error()


@auth_bp.route('/logout', methods=['POST'])
@bearer_token_required
def logout():
    """Revokes every session of the caller (all devices), not only the current one."""
    auth_service = current_app.services['auth']
    verified = auth_service.verify_token(g.id_token)
    if not verified.success:
        return error_response(verified.error, verified.status)

    return result_response(auth_service.logout(verified.data['user'].uid))


@auth_bp.route('/verify', methods=['GET'])
@bearer_token_required
def verify():
    auth_service = current_app.services['auth']
    result = auth_service.verify_token(g.id_token)
    return result_response(result, lambda data: {"user": UserProfileSchema().dump(data['user'])})
