# blog_api/api/auth/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE


class LoginSchema(Schema):
    """Body of POST /api/auth/login."""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=1), load_only=True)


class SignupSchema(Schema):
    """Body of POST /api/auth/signup. Firebase Auth requires passwords of at least 6 characters."""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=6), load_only=True)
    display_name = fields.Str(data_key="displayName", load_default=None, validate=validate.Length(max=100))


class UserProfileSchema(Schema):
    """Profile mirror as returned to clients."""
    uid = fields.Str()
    email = fields.Str()
    display_name = fields.Str(data_key="displayName", allow_none=True)
    email_verified = fields.Bool(data_key="emailVerified")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
    last_login_at = fields.DateTime(data_key="lastLoginAt", allow_none=True)


class AuthSessionSchema(Schema):
    """``data`` of a successful login / signup."""
    user = fields.Nested(UserProfileSchema)
    id_token = fields.Str(data_key="idToken", attribute="idToken")
    custom_token = fields.Str(data_key="customToken", attribute="customToken")
