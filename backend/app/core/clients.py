# app/core/clients.py
"""
Process-wide service clients.

Firestore, Auth, the default Storage bucket and the search index are created once per
process and handed to every handler through `Depends(get_clients)`. Tests replace them
with `app.dependency_overrides[get_clients]`.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from firebase_admin import auth as firebase_auth, firestore, storage

from app.config import get_settings, init_firebase
from app.integrations.search import init_search_index


@dataclass(frozen=True)
class Clients:
    db: Any            # google.cloud.firestore.Client
    auth: Any          # firebase_admin.auth (module level API bound to the default app)
    bucket: Any        # google.cloud.storage.Bucket
    search_index: Any  # algoliasearch SearchIndex


@lru_cache
def get_clients() -> Clients:
    settings = get_settings()
    firebase_app = init_firebase(settings)
    return Clients(
        db=firestore.client(app=firebase_app),
        auth=firebase_auth,
        bucket=storage.bucket(app=firebase_app),
        search_index=init_search_index(settings),
    )
