# blog_api/api/auth/services.py
import logging
from typing import Any, Dict, Optional

from firebase_admin import auth as firebase_auth

from blog_api.repositories.auth_repository import AuthRepository
from blog_api.services.identity_toolkit_service import IdentityProviderError
from blog_api.utils.response_utils import ServiceResult


class AuthService:
    """
    Login / signup / logout and token verification.

    Firebase Auth owns credentials and tokens; the 'users' document is a mirror
    that must exist for a token to be accepted (see ``verify_token``).
    Every method returns a ``ServiceResult`` and never raises.
    """

    def __init__(self, auth_repository: AuthRepository):
        self.auth_repository = auth_repository

    @staticmethod
    def _provider_failure(error: IdentityProviderError, rejected_status: int) -> ServiceResult:
        """A rejection by the provider maps to *rejected_status*; an unreachable or broken provider is a 500."""
        if error.status_code is None or error.status_code >= 500:
            logging.error(f"Identity provider unavailable: {error.message}")
            return ServiceResult.fail(error.message, 500)
        return ServiceResult.fail(error.message, rejected_status)

    def _issue_session(self, decoded_token: Dict[str, Any], id_token: str, profile) -> Dict[str, Any]:
        custom_token = self.auth_repository.generate_custom_token(decoded_token['uid'])
        return {
            "user": profile,
            "idToken": id_token,
            "customToken": custom_token
        }

    def login(self, email: str, password: str) -> ServiceResult:
        try:
            # 1. Check the password with the identity provider and verify the token it returns
            auth_data = self.auth_repository.authenticate_user(email, password)
            id_token = auth_data['idToken']
            decoded_token = self.auth_repository.verify_id_token(id_token)
            uid = decoded_token['uid']

            # 2. Load the profile mirror, creating it on the first login
            profile = self.auth_repository.get_user_profile(uid)
            if profile is None:
                profile = self.auth_repository.create_user_profile(
                    uid=uid,
                    email=decoded_token.get('email') or email,
                    display_name=decoded_token.get('name'),
                    email_verified=bool(decoded_token.get('email_verified', False))
                )
                logging.info(f"Profile created on first login (uid: {uid})")
            else:
                profile = self.auth_repository.update_last_login(
                    uid, email_verified=bool(decoded_token.get('email_verified', profile.email_verified))
                )

            # 3. Custom token for the client-side session
            return ServiceResult.ok(self._issue_session(decoded_token, id_token, profile))
        except IdentityProviderError as e:
            return self._provider_failure(e, 401)
        except firebase_auth.InvalidIdTokenError as e:
            logging.warning(f"Token returned at login failed verification: {e}")
            return ServiceResult.fail("Invalid token", 401)
        except Exception as e:
            logging.error(f"Login failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Login failed", 500)

    def signup(self, email: str, password: str, display_name: Optional[str] = None) -> ServiceResult:
        try:
            auth_data = self.auth_repository.create_user(email, password, display_name)
            id_token = auth_data['idToken']
            decoded_token = self.auth_repository.verify_id_token(id_token)

            # No existence check: a second signup for the same email is rejected upstream.
            profile = self.auth_repository.create_user_profile(
                uid=decoded_token['uid'],
                email=decoded_token.get('email') or email,
                display_name=decoded_token.get('name') or display_name,
                email_verified=bool(decoded_token.get('email_verified', False))
            )
            logging.info(f"User signed up (uid: {decoded_token['uid']})")
            return ServiceResult.ok(self._issue_session(decoded_token, id_token, profile), 201)
        except IdentityProviderError as e:
            return self._provider_failure(e, 400)
        except Exception as e:
            logging.error(f"Signup failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Signup failed", 500)

    def logout(self, uid: str) -> ServiceResult:
        """Revokes every refresh token of *uid*, ending all of that user's sessions."""
        try:
            self.auth_repository.revoke_session(uid)
            return ServiceResult.ok()
        except firebase_auth.UserNotFoundError:
            return ServiceResult.fail("User not found", 404)
        except Exception as e:
            logging.error(f"Logout failed (uid: {uid}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Logout failed", 500)

    def verify_token(self, id_token: str) -> ServiceResult:
        """
        Verify an identity token and require a matching profile document.
        A cryptographically valid token with no profile is still unauthorized.
        """
        try:
            decoded_token = self.auth_repository.verify_id_token(id_token)
        except firebase_auth.RevokedIdTokenError:
            return ServiceResult.fail("Token has been revoked", 401)
        except firebase_auth.ExpiredIdTokenError:
            return ServiceResult.fail("Token has expired", 401)
        except (firebase_auth.InvalidIdTokenError, ValueError) as e:
            logging.info(f"Token verification failed: {e}")
            return ServiceResult.fail("Invalid token", 401)
        except firebase_auth.UserDisabledError:
            return ServiceResult.fail("User account is disabled", 401)
        except firebase_auth.UserNotFoundError:
            return ServiceResult.fail("User not found", 401)
        except Exception as e:
            logging.error(f"Token verification error: {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Token verification failed", 500)

        try:
            profile = self.auth_repository.get_user_profile(decoded_token['uid'])
        except Exception as e:
            logging.error(f"Profile lookup failed (uid: {decoded_token.get('uid')}): {e}", exc_info=True)
            return ServiceResult.fail(str(e) or "Token verification failed", 500)

        if profile is None:
            return ServiceResult.fail("User profile not found", 401)
        return ServiceResult.ok({"user": profile})
