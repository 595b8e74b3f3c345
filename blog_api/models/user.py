# blog_api/models/user.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any

from blog_api.utils.datetime_utils import DateTimeUtils

USER_FIELD_NAMES: Dict[str, str] = {
    'uid': 'uid',
    'email': 'email',
    'display_name': 'displayName',
    'email_verified': 'emailVerified',
    'created_at': 'createdAt',
    'updated_at': 'updatedAt',
    'last_login_at': 'lastLoginAt',
}


@dataclass
class UserProfile:
    """
    Document structure of the Firestore 'users' collection.
    The document id is the Firebase Auth uid; Firebase Auth stays the source of
    truth for credentials, this is only a metadata mirror.
    """
    uid: str
    email: str
    display_name: Optional[str] = None
    email_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def to_firestore(self) -> Dict[str, Any]:
        data = {
            name: getattr(self, attr)
            for attr, name in USER_FIELD_NAMES.items()
            if getattr(self, attr) is not None
        }
        return DateTimeUtils.for_firestore(data)

    @classmethod
    def from_firestore(cls, data: Dict[str, Any]) -> "UserProfile":
        data = DateTimeUtils.from_firestore(data or {})
        kwargs = {attr: data[name] for attr, name in USER_FIELD_NAMES.items() if name in data}
        kwargs.setdefault('uid', "")
        kwargs.setdefault('email', "")
        return cls(**kwargs)
