"""Pytest configuration and fixtures for the storefront triggers.

Firestore, Auth, Storage and the Algolia index are replaced by in-memory fakes that keep
the platform semantics the handlers rely on: batches are all-or-nothing, `update` on a
missing document raises NotFound, `SERVER_TIMESTAMP` / `Increment` are resolved on write.
HTTP tests run against app.main:app through httpx's ASGITransport with
`dependency_overrides[get_clients]` pointing at the fakes.
"""

import base64
import os
import threading
from datetime import datetime, timezone
from types import SimpleNamespace

# Settings are read when app.main is imported
os.environ.setdefault("FIREBASE_PROJECT_ID", "storefront-test")
os.environ.setdefault("FIREBASE_STORAGE_BUCKET", "storefront-test.appspot.com")
os.environ.setdefault("ALGOLIA_APP_ID", "TESTAPPID")
os.environ.setdefault("ALGOLIA_API_KEY", "test-admin-key")
os.environ.setdefault("ALGOLIA_SEARCH_KEY", "test-search-key")
os.environ.setdefault("ROLES_SYNC_ENABLED", "false")

import pytest
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as fb_exceptions
from google.api_core.exceptions import NotFound, ServiceUnavailable
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.transforms import Increment
from httpx import ASGITransport, AsyncClient

from app.core.clients import Clients, get_clients
from app.main import app


# ---------- Firestore ----------

def _write_result():
    return SimpleNamespace(update_time=datetime.now(timezone.utc))


def _resolve(current, value):
    if value is SERVER_TIMESTAMP:
        return datetime.now(timezone.utc)
    if isinstance(value, Increment):
        return (current or 0) + value.value
    return value


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, db, path):
        self._db = db
        self.path = path

    @property
    def id(self):
        return self.path.rsplit("/", 1)[-1]

    def get(self):
        return FakeSnapshot(self.id, self._db.docs.get(self.path))

    def set(self, data, merge=False):
        with self._db.lock:
            self._db.apply_set(self.path, data, merge)
        return _write_result()

    def update(self, data):
        with self._db.lock:
            self._db.check_exists(self.path)
            self._db.apply_set(self.path, data, merge=True)
        return _write_result()

    def delete(self):
        with self._db.lock:
            self._db.docs.pop(self.path, None)
        return _write_result()


class FakeCollection:
    def __init__(self, db, name):
        self._db = db
        self.name = name

    def document(self, doc_id):
        return FakeDocumentRef(self._db, f"{self.name}/{doc_id}")


class FakeBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, ref, data, merge=False):
        self._ops.append(("set", ref.path, data, merge))

    def update(self, ref, data):
        self._ops.append(("update", ref.path, data, True))

    def delete(self, ref):
        self._ops.append(("delete", ref.path, None, False))

    def commit(self):
        with self._db.lock:
            if self._db.fail_commits:
                raise ServiceUnavailable("injected commit failure")
            # validate everything before touching state: all or nothing
            for op, path, _, _ in self._ops:
                if op == "update":
                    self._db.check_exists(path)
            for op, path, data, merge in self._ops:
                if op == "delete":
                    self._db.docs.pop(path, None)
                else:
                    self._db.apply_set(path, data, merge)
        return [_write_result() for _ in self._ops]


class FakeFirestore:
    def __init__(self):
        self.docs = {}
        self.fail_commits = False
        self.lock = threading.RLock()

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)

    def check_exists(self, path):
        if path not in self.docs:
            raise NotFound(f"No document to update: {path}")

    def apply_set(self, path, data, merge):
        current = dict(self.docs.get(path) or {}) if merge else {}
        for key, value in data.items():
            current[key] = _resolve(current.get(key), value)
        self.docs[path] = current

    def seed(self, path, data):
        self.docs[path] = dict(data)


# ---------- Auth ----------

class FakeAuth:
    def __init__(self):
        self.users = {}
        self.tokens = {}
        self.fail_claims = False
        self._seq = 0

    def add_user(self, uid, email, custom_claims=None, email_verified=False):
        user = SimpleNamespace(uid=uid, email=email, email_verified=email_verified,
                               custom_claims=custom_claims, password=None)
        self.users[uid] = user
        return user

    def create_user(self, email=None, email_verified=False, password=None):
        if any(u.email == email for u in self.users.values()):
            raise firebase_auth.EmailAlreadyExistsError(
                "The user with the provided email already exists", None, None)
        self._seq += 1
        user = self.add_user(f"uid-{self._seq}", email, email_verified=email_verified)
        user.password = password
        return user

    def get_user(self, uid):
        if uid not in self.users:
            raise firebase_auth.UserNotFoundError(f"No user record found for the given identifier: {uid}")
        return self.users[uid]

    def get_user_by_email(self, email):
        for user in self.users.values():
            if user.email == email:
                return user
        raise firebase_auth.UserNotFoundError(f"No user record found for the provided email: {email}.")

    def set_custom_user_claims(self, uid, custom_claims):
        if self.fail_claims:
            raise fb_exceptions.UnavailableError("injected claims failure")
        self.get_user(uid).custom_claims = dict(custom_claims)

    def delete_user(self, uid):
        self.get_user(uid)
        del self.users[uid]

    def list_users(self):
        users = list(self.users.values())
        return SimpleNamespace(iterate_all=lambda: iter(users))

    def verify_id_token(self, id_token, check_revoked=False):
        if id_token not in self.tokens:
            raise firebase_auth.InvalidIdTokenError("Invalid ID token")
        return self.tokens[id_token]


# ---------- Storage ----------

class FakeBlob:
    def __init__(self, bucket, path):
        self._bucket = bucket
        self.name = path

    def delete(self):
        with self._bucket.lock:
            if self.name in self._bucket.failing:
                raise ServiceUnavailable(f"injected delete failure for {self.name}")
            if self.name not in self._bucket.blobs:
                raise NotFound(f"No such object: {self.name}")
            self._bucket.blobs.remove(self.name)
            self._bucket.deleted.append(self.name)


class FakeBucket:
    def __init__(self, paths=()):
        self.blobs = set(paths)
        self.failing = set()
        self.deleted = []
        self.lock = threading.Lock()

    def blob(self, path):
        return FakeBlob(self, path)


# ---------- Search index ----------

class FakeSearchIndex:
    def __init__(self):
        self.records = {}

    def save_object(self, obj):
        self.records[obj["objectID"]] = dict(obj)
        return SimpleNamespace(raw_responses=[{"objectID": obj["objectID"]}])

    def delete_object(self, object_id):
        self.records.pop(object_id, None)
        return SimpleNamespace(raw_responses=[{"objectID": object_id}])


# ---------- Event payload helpers ----------

def to_value(value):
    """Plain Python value -> Firestore REST typed value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": value.isoformat().replace("+00:00", "Z")}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, list):
        return {"arrayValue": {"values": [to_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": to_fields(value)}}
    return {"stringValue": value}


def to_fields(data):
    return {k: to_value(v) for k, v in data.items()}


def document_json(path, data):
    return {
        "name": f"projects/storefront-test/databases/(default)/documents/{path}",
        "fields": to_fields(data),
        "createTime": "2024-05-01T10:00:00.123456789Z",
        "updateTime": "2024-05-01T10:00:00.123456789Z",
    }


def ce_headers(event_type, subject=None, event_id="evt-1"):
    headers = {
        "ce-id": event_id,
        "ce-type": event_type,
        "ce-source": "//firestore.googleapis.com/projects/storefront-test/databases/(default)",
        "ce-specversion": "1.0",
        "content-type": "application/json",
    }
    if subject:
        headers["ce-subject"] = subject
    return headers


# ---------- Fixtures ----------

@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def fake_auth():
    return FakeAuth()


@pytest.fixture
def fake_bucket():
    return FakeBucket()


@pytest.fixture
def fake_index():
    return FakeSearchIndex()


@pytest.fixture
def clients(fake_db, fake_auth, fake_bucket, fake_index):
    return Clients(db=fake_db, auth=fake_auth, bucket=fake_bucket, search_index=fake_index)


@pytest.fixture
async def client(clients):
    """Async HTTP client against the FastAPI app (ASGI) with fake clients injected."""
    app.dependency_overrides[get_clients] = lambda: clients
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
