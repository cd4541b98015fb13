"""
app/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and initializes the Firebase Admin SDK (Firestore, Auth, Storage) from the provided credentials.
Settings are loaded once per process through `get_settings()`; Firebase is initialized lazily
by `init_firebase()` so that importing the app never requires credentials.
"""
import os
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    firebase_cred_file: str = Field('firebase_service_account.json')
    firebase_project_id: str = Field(...)
    firebase_storage_bucket: str = Field(...)

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    # Algolia: admin key writes the index, search key is handed to clients
    algolia_app_id: str = Field(...)
    algolia_api_key: str = Field(...)
    algolia_search_key: str = Field(...)
    algolia_index_name: str = 'products'

    roles_sync_enabled: bool = True
    roles_sync_interval_minutes: int = 30

    # When set, callables require a Firebase ID token carrying this role claim
    callables_required_role: Optional[str] = None

    debug: bool = False
    log_level: str = 'INFO'
    allowed_origins: str = '*'  # Comma-separated list or '*' for all

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def has_env_credentials(self) -> bool:
        return all([
            self.firebase_private_key_id,
            self.firebase_private_key,
            self.firebase_client_email,
            self.firebase_client_id,
            self.firebase_auth_uri,
            self.firebase_token_uri,
            self.firebase_auth_provider_x509_cert_url,
            self.firebase_client_x509_cert_url,
        ])


@lru_cache
def get_settings() -> Settings:
    return Settings()


def _credential(settings: Settings):
    if settings.has_env_credentials:
        # Use environment variables for Firebase credentials (Cloud Run)
        cred_dict = {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "private_key_id": settings.firebase_private_key_id,
            # PEM may arrive with escaped newlines from the env
            "private_key": settings.firebase_private_key.replace("\\n", "\n"),
            "client_email": settings.firebase_client_email,
            "client_id": settings.firebase_client_id,
            "auth_uri": settings.firebase_auth_uri,
            "token_uri": settings.firebase_token_uri,
            "auth_provider_x509_cert_url": settings.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": settings.firebase_client_x509_cert_url,
        }
        return credentials.Certificate(cred_dict)
    if os.path.exists(settings.firebase_cred_file):
        # Use service account file (local development)
        return credentials.Certificate(settings.firebase_cred_file)
    return credentials.ApplicationDefault()


def init_firebase(settings: Settings) -> firebase_admin.App:
    """Initialize (or reuse) the default Firebase app."""
    try:
        return firebase_admin.initialize_app(_credential(settings), {
            'projectId': settings.firebase_project_id,
            'storageBucket': settings.firebase_storage_bucket,
        })
    except ValueError as e:
        if "already exists" in str(e):
            # Firebase app already initialized, get the default app
            return firebase_admin.get_app()
        raise
