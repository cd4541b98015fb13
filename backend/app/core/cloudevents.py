# app/core/cloudevents.py
"""
CloudEvent intake for Eventarc deliveries.

Binary mode carries the attributes in `ce-*` headers and the event data as the JSON body;
structured mode (`application/cloudevents+json`) carries everything in the body.
Malformed events are answered with 400.
"""
import json
from typing import Optional

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from app.core.firestore_values import decode_fields, split_document_name
from app.schemas.events import CloudEvent, DocumentChange, DocumentEventData

STRUCTURED_CONTENT_TYPE = "application/cloudevents+json"


def _bad_event(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def read_cloud_event(request: Request) -> CloudEvent:
    body = await request.body()
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        raise _bad_event("Event body is not valid JSON")

    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(STRUCTURED_CONTENT_TYPE):
            if not isinstance(payload, dict):
                raise _bad_event("Structured CloudEvent must be a JSON object")
            return CloudEvent.model_validate(payload)
        return CloudEvent(
            id=request.headers.get("ce-id"),
            type=request.headers.get("ce-type"),
            source=request.headers.get("ce-source"),
            subject=request.headers.get("ce-subject"),
            time=request.headers.get("ce-time"),
            data=payload,
        )
    except ValidationError as exc:
        raise _bad_event(f"Invalid CloudEvent attributes: {exc.errors(include_url=False)}")


def document_change(event: CloudEvent) -> DocumentChange:
    """Decode a Firestore document event into plain before/after dicts."""
    try:
        data = DocumentEventData.model_validate(event.data or {})
    except ValidationError as exc:
        raise _bad_event(f"Invalid Firestore event data: {exc.errors(include_url=False)}")

    name: Optional[str] = None
    if data.value is not None:
        name = data.value.name
    elif data.old_value is not None:
        name = data.old_value.name
    elif event.subject:
        name = event.subject
    if not name:
        raise _bad_event("Firestore event carries no document name")

    try:
        collection, doc_id = split_document_name(name)
        return DocumentChange(
            collection=collection,
            doc_id=doc_id,
            before=decode_fields(data.old_value.fields) if data.old_value is not None else None,
            after=decode_fields(data.value.fields) if data.value is not None else None,
        )
    except ValueError as exc:
        raise _bad_event(str(exc))
