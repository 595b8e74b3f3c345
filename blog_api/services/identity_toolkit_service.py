# blog_api/services/identity_toolkit_service.py

import logging
from typing import Any, Dict, Optional

import requests


class IdentityProviderError(Exception):
    """Raised when the Identity Toolkit rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class IdentityToolkitClient:
    """
    Email/password sign-in and sign-up against the Firebase Identity Toolkit
    REST API. The Admin SDK cannot check passwords, so these two calls go over
    HTTP with the project's web API key.
    """

    def __init__(self, api_key: Optional[str], base_url: str = "https://identitytoolkit.googleapis.com/v1",
                 timeout: float = 10, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, endpoint: str, payload: Dict[str, Any], default_error: str) -> Dict[str, Any]:
        if not self.api_key:
            raise IdentityProviderError("Firebase API key not configured")

        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logging.error(f"Identity Toolkit request failed ({endpoint}): {e}", exc_info=True)
            raise IdentityProviderError(default_error) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = (data.get("error") or {}).get("message") or default_error
            logging.warning(f"Identity Toolkit rejected {endpoint}: {response.status_code} {message}")
            raise IdentityProviderError(message, response.status_code)

        return data

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """Returns the provider payload (``idToken``, ``refreshToken``, ``localId``, ...)."""
        return self._post(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
            "Authentication failed"
        )

    def sign_up(self, email: str, password: str, display_name: Optional[str] = None) -> Dict[str, Any]:
        payload = {"email": email, "password": password, "returnSecureToken": True}
        if display_name:
            payload["displayName"] = display_name
        return self._post("accounts:signUp", payload, "User creation failed")
