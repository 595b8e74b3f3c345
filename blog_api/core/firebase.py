# blog_api/core/firebase.py
"""
Construction of the Firebase clients the services depend on.

The clients are built once by ``create_app`` and handed to the repositories
through their constructors; nothing in the project reaches for a global
Firestore/Auth handle on its own. Tests build ``FirebaseClients`` around
in-memory doubles instead.
"""

import os
import logging
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore, auth as firebase_auth


class FirebaseClients:
    """Firestore client and Firebase Auth client bound to the same firebase-admin app."""

    def __init__(self, db: Any, auth: Any):
        self.db = db
        self.auth = auth

    @classmethod
    def from_config(cls, config) -> "FirebaseClients":
        app = _get_or_initialize_app(config)
        return cls(db=firestore.client(app), auth=firebase_auth.Client(app))


def _build_credential(config) -> credentials.Certificate:
    cred_path = config.get('FIREBASE_CREDENTIALS_PATH')
    if cred_path:
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase credential file not found: {cred_path}")
        return credentials.Certificate(cred_path)

    project_id = config.get('FIREBASE_PROJECT_ID')
    client_email = config.get('FIREBASE_CLIENT_EMAIL')
    private_key = config.get('FIREBASE_PRIVATE_KEY')
    if project_id and client_email and private_key:
        return credentials.Certificate({
            "type": "service_account",
            "project_id": project_id,
            "client_email": client_email,
            # Keys pasted into .env keep their newlines escaped.
            "private_key": private_key.replace('\\n', '\n'),
            "token_uri": "https://oauth2.googleapis.com/token",
        })

    raise ValueError(
        "Firebase credentials are not configured: set FIREBASE_CREDENTIALS_PATH "
        "or FIREBASE_PROJECT_ID / FIREBASE_CLIENT_EMAIL / FIREBASE_PRIVATE_KEY."
    )


def _get_or_initialize_app(config) -> firebase_admin.App:
    if firebase_admin._apps:
        return firebase_admin.get_app()

    cred = _build_credential(config)
    options = {}
    if config.get('FIREBASE_PROJECT_ID'):
        options['projectId'] = config['FIREBASE_PROJECT_ID']
    app = firebase_admin.initialize_app(cred, options or None)
    logging.info("Firebase Admin SDK initialized")
    return app
