# blog_api/conftest.py
"""
Shared pytest fixtures.

The app under test runs against in-memory stand-ins for Firestore, the
firebase-admin auth client and the Identity Toolkit REST client, so the suite
needs neither credentials nor network access.
"""

import copy
import itertools
import uuid

import pytest
from firebase_admin import auth as firebase_auth, firestore
from google.api_core.exceptions import NotFound

from blog_api import create_app
from blog_api.core.firebase import FirebaseClients
from blog_api.services.identity_toolkit_service import IdentityProviderError


# =====================================================================================
# In-memory Firestore
# =====================================================================================

class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeAggregateResult:
    def __init__(self, value):
        self.value = value


class FakeAggregateQuery:
    def __init__(self, query):
        self._query = query

    def get(self):
        return [[FakeAggregateResult(len(self._query.get()))]]


class FakeDocumentReference:
    def __init__(self, store, collection_name, doc_id):
        self._store = store
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def _docs(self):
        return self._store.data.setdefault(self._collection_name, {})

    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id))

    def set(self, data):
        self._docs[self.id] = copy.deepcopy(data)

    def update(self, updates):
        if self.id not in self._docs:
            raise NotFound(f"No document to update: {self._collection_name}/{self.id}")
        doc = self._docs[self.id]
        for key, value in updates.items():
            if isinstance(value, firestore.Increment):
                doc[key] = doc.get(key, 0) + value.value
            else:
                doc[key] = copy.deepcopy(value)

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, collection_name, filters=(), orders=(), offset=0, limit=None):
        self._store = store
        self._collection_name = collection_name
        self._filters = filters
        self._orders = orders
        self._offset = offset
        self._limit = limit

    def _copy(self, **changes):
        state = dict(filters=self._filters, orders=self._orders, offset=self._offset, limit=self._limit)
        state.update(changes)
        return FakeQuery(self._store, self._collection_name, **state)

    def where(self, field, op, value):
        return self._copy(filters=self._filters + ((field, op, value),))

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return self._copy(orders=self._orders + ((field, direction),))

    def offset(self, count):
        return self._copy(offset=count)

    def limit(self, count):
        return self._copy(limit=count)

    def count(self):
        return FakeAggregateQuery(self._copy(offset=0, limit=None))

    @staticmethod
    def _matches(data, field, op, value):
        if op == '==':
            return field in data and data[field] == value
        if op == 'array_contains':
            return value in data.get(field, [])
        if op == 'array_contains_any':
            return any(v in data.get(field, []) for v in value)
        if op == 'in':
            return data.get(field) in value
        raise NotImplementedError(f"Unsupported operator in fake: {op}")

    def stream(self):
        docs = self._store.data.get(self._collection_name, {})
        rows = [
            (doc_id, data) for doc_id, data in docs.items()
            if all(self._matches(data, f, op, v) for f, op, v in self._filters)
        ]
        # Like Firestore, ordering on a field drops documents that lack it.
        for field, _ in self._orders:
            rows = [row for row in rows if field in row[1]]
        for field, direction in reversed(self._orders):
            rows.sort(key=lambda row: row[1][field], reverse=direction == firestore.Query.DESCENDING)

        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        for doc_id, data in rows:
            yield FakeSnapshot(doc_id, copy.deepcopy(data))

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, store, collection_name):
        super().__init__(store, collection_name)

    def document(self, doc_id=None):
        return FakeDocumentReference(self._store, self._collection_name, doc_id or uuid.uuid4().hex[:20])


class FakeWriteBatch:
    def __init__(self, store):
        self._store = store
        self._ops = []

    def set(self, ref, data):
        self._ops.append(lambda: ref.set(data))

    def update(self, ref, data):
        self._ops.append(lambda: ref.update(data))

    def delete(self, ref):
        self._ops.append(ref.delete)

    def commit(self):
        for op in self._ops:
            op()
        self._store.commits += 1


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.commits = 0

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeWriteBatch(self)


# =====================================================================================
# Firebase Auth / Identity Toolkit
# =====================================================================================

class FakeAuthClient:
    """
    Opaque tokens mapped to claims. Each uid carries a revocation generation;
    tokens minted before the latest ``revoke_refresh_tokens`` fail verification
    with ``check_revoked=True``.
    """

    def __init__(self):
        self.claims = {}
        self.generations = {}
        self.expired = set()
        self.disabled = set()
        self.deleted = set()
        self._serial = itertools.count(1)

    def register(self, uid):
        self.generations.setdefault(uid, 0)

    def issue_token(self, uid, email, name=None, email_verified=False):
        token = f"id-token-{uid}-{next(self._serial)}"
        self.claims[token] = {
            "uid": uid,
            "email": email,
            "name": name,
            "email_verified": email_verified,
            "_generation": self.generations.get(uid, 0),
        }
        return token

    def verify_id_token(self, id_token, check_revoked=False):
        if id_token in self.expired:
            raise firebase_auth.ExpiredIdTokenError("Token expired", None)
        claims = self.claims.get(id_token)
        if claims is None:
            raise firebase_auth.InvalidIdTokenError("Could not verify token")
        # With check_revoked the user record is fetched, which surfaces disabled and deleted accounts.
        if check_revoked and claims["uid"] in self.deleted:
            raise firebase_auth.UserNotFoundError("No user record found for the given identifier.")
        if check_revoked and claims["uid"] in self.disabled:
            raise firebase_auth.UserDisabledError("The user record is disabled.")
        if check_revoked and claims["_generation"] < self.generations.get(claims["uid"], 0):
            raise firebase_auth.RevokedIdTokenError("The Firebase ID token has been revoked.")
        return {k: v for k, v in claims.items() if not k.startswith("_") and v is not None}

    def create_custom_token(self, uid):
        return f"custom-token-{uid}".encode("utf-8")

    def revoke_refresh_tokens(self, uid):
        if uid not in self.generations:
            raise firebase_auth.UserNotFoundError(f"No user record found for the given identifier ({uid}).")
        self.generations[uid] += 1


class FakeIdentityClient:
    def __init__(self, auth_client):
        self.auth_client = auth_client
        self.accounts = {}
        self._serial = itertools.count(1)

    def sign_up(self, email, password, display_name=None):
        if email in self.accounts:
            raise IdentityProviderError("EMAIL_EXISTS", 400)
        uid = f"uid-{next(self._serial)}"
        self.accounts[email] = {"uid": uid, "password": password, "display_name": display_name}
        self.auth_client.register(uid)
        token = self.auth_client.issue_token(uid, email, display_name)
        return {"idToken": token, "localId": uid, "email": email}

    def sign_in_with_password(self, email, password):
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise IdentityProviderError("INVALID_LOGIN_CREDENTIALS", 400)
        token = self.auth_client.issue_token(account["uid"], email, account["display_name"])
        return {"idToken": token, "localId": account["uid"], "email": email}


# =====================================================================================
# Fixtures
# =====================================================================================

@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def fake_auth():
    return FakeAuthClient()


@pytest.fixture
def fake_identity(fake_auth):
    return FakeIdentityClient(fake_auth)


@pytest.fixture
def app(fake_db, fake_auth, fake_identity):
    clients = FirebaseClients(db=fake_db, auth=fake_auth)
    return create_app('testing', clients=clients, identity_client=fake_identity)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_service(app):
    return app.services['auth']


@pytest.fixture
def post_service(app):
    return app.services['posts']


@pytest.fixture
def signup(auth_service):
    """Sign a user up and return ``(id_token, profile)``."""
    def _signup(email, password="secret123", display_name=None):
        result = auth_service.signup(email, password, display_name)
        assert result.success, result.error
        return result.data["idToken"], result.data["user"]
    return _signup


@pytest.fixture
def author(signup):
    return signup("author@example.com", display_name="Author")


@pytest.fixture
def other_user(signup):
    return signup("other@example.com", display_name="Other")


@pytest.fixture
def auth_header():
    def _header(token):
        return {"Authorization": f"Bearer {token}"}
    return _header
