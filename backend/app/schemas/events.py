"""
app/schemas/events.py
CloudEvent envelope and the event payloads delivered by Eventarc.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

AUTH_USER_CREATED = "google.firebase.auth.user.v1.created"
AUTH_USER_DELETED = "google.firebase.auth.user.v1.deleted"
DOCUMENT_CREATED = "google.cloud.firestore.document.v1.created"
DOCUMENT_UPDATED = "google.cloud.firestore.document.v1.updated"
DOCUMENT_DELETED = "google.cloud.firestore.document.v1.deleted"


class CloudEvent(BaseModel):
    id: str
    type: str
    source: str
    subject: Optional[str] = None
    time: Optional[str] = None
    data: Any = None


class AuthUserData(BaseModel):
    """Firebase Auth `UserRecord` as sent with user created/deleted events."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str = Field(..., description="Firebase UID")
    email: Optional[str] = Field(None, description="E-posta (varsa)")
    email_verified: bool = Field(False, alias="emailVerified")
    display_name: Optional[str] = Field(None, alias="displayName")


class FirestoreDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    fields: Dict[str, Any] = Field(default_factory=dict)
    create_time: Optional[str] = Field(None, alias="createTime")
    update_time: Optional[str] = Field(None, alias="updateTime")


class DocumentMask(BaseModel):
    field_paths: List[str] = Field(default_factory=list, alias="fieldPaths")


class DocumentEventData(BaseModel):
    """`google.events.cloud.firestore.v1.DocumentEventData` in its JSON encoding."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    value: Optional[FirestoreDocument] = None
    old_value: Optional[FirestoreDocument] = Field(None, alias="oldValue")
    update_mask: Optional[DocumentMask] = Field(None, alias="updateMask")


class DocumentChange(BaseModel):
    """Decoded before/after snapshots of one document, as handed to catalog handlers."""
    collection: str
    doc_id: str
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
