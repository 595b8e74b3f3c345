# blog_api/repositories/auth_repository.py
"""
Everything the auth service needs from the outside world: the Identity
Toolkit for passwords, the Admin SDK auth client for token work, and the
'users' collection that mirrors profile metadata.
"""

import logging
from typing import Any, Dict, Optional

from blog_api.models.user import UserProfile, USER_FIELD_NAMES
from blog_api.repositories.base_repository import BaseFirestoreRepository
from blog_api.services.identity_toolkit_service import IdentityToolkitClient
from blog_api.utils.datetime_utils import DateTimeUtils


class AuthRepository(BaseFirestoreRepository):

    def __init__(self, db, auth_client, identity_client: IdentityToolkitClient):
        super().__init__(db, 'users')
        self.auth_client = auth_client
        self.identity_client = identity_client

    # --- identity provider ---

    def authenticate_user(self, email: str, password: str) -> Dict[str, Any]:
        return self.identity_client.sign_in_with_password(email, password)

    def create_user(self, email: str, password: str, display_name: Optional[str] = None) -> Dict[str, Any]:
        return self.identity_client.sign_up(email, password, display_name)

    def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        """Decoded claims. Tokens issued before the last revocation are rejected."""
        return self.auth_client.verify_id_token(id_token, check_revoked=True)

    def generate_custom_token(self, uid: str) -> str:
        token = self.auth_client.create_custom_token(uid)
        if isinstance(token, bytes):
            token = token.decode('utf-8')
        return token

    def revoke_session(self, uid: str) -> None:
        self.auth_client.revoke_refresh_tokens(uid)
        logging.info(f"Refresh tokens revoked (uid: {uid})")

    # --- profile mirror ---

    def create_user_profile(self, uid: str, email: str, display_name: Optional[str],
                            email_verified: bool) -> UserProfile:
        now = DateTimeUtils.now()
        profile = UserProfile(
            uid=uid,
            email=email,
            display_name=display_name,
            email_verified=email_verified,
            created_at=now,
            updated_at=now,
            last_login_at=now
        )
        _, data = self.create(profile.to_firestore(), doc_id=uid)
        return UserProfile.from_firestore(data)

    def get_user_profile(self, uid: str) -> Optional[UserProfile]:
        data = self.get_by_id(uid)
        if data is None:
            return None
        return UserProfile.from_firestore(data)

    def update_user_profile(self, uid: str, **updates) -> UserProfile:
        """Keyword names are UserProfile attributes; ``updatedAt`` is always bumped."""
        fields = {USER_FIELD_NAMES[attr]: value for attr, value in updates.items() if attr in USER_FIELD_NAMES}
        fields['updatedAt'] = DateTimeUtils.now()
        return UserProfile.from_firestore(self.update(uid, fields))

    def update_last_login(self, uid: str, **mirrored) -> UserProfile:
        """Stamp lastLoginAt, optionally refreshing mirrored identity fields in the same write."""
        return self.update_user_profile(uid, last_login_at=DateTimeUtils.now(), **mirrored)
