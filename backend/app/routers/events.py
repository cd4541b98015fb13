"""
# `app/routers/events.py` - Event triggers

Every trigger has its own route, `POST /events/{trigger}`, so that each Eventarc trigger
is delivered and retried on its own. A trigger accepts exactly one CloudEvent type; any
other type is answered with 400.

| Trigger               | Event                                   | Reaction |
|-----------------------|-----------------------------------------|----------|
| `createUserDoc`       | auth user created                       | `users/{uid}` profile |
| `deleteUserDoc`       | auth user deleted                       | delete profile + role record (batch) |
| `indexProduct`        | `products/{id}` created                 | save search record |
| `reindexProduct`      | `products/{id}` updated                 | save search record |
| `unindexProduct`      | `products/{id}` deleted                 | delete search record |
| `deleteProductImages` | `products/{id}` deleted                 | delete `products/{id}/{name}` blobs |
| `deleteCatImages`     | `cats/{id}` deleted                     | delete `cats/{id}/{name}` blobs |
| `createProduct`       | `products/{id}` created                 | brand & category `amount` +1 (batch) |
| `deleteProduct`       | `products/{id}` deleted                 | brand & category `amount` -1 (batch) |

Platform errors are not caught here: they reach the exception handlers and the non-2xx
reply lets Eventarc redeliver.
"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from app.core.clients import Clients, get_clients
from app.core.cloudevents import document_change, read_cloud_event
from app.schemas.events import (
    AUTH_USER_CREATED,
    AUTH_USER_DELETED,
    DOCUMENT_CREATED,
    DOCUMENT_DELETED,
    DOCUMENT_UPDATED,
    AuthUserData,
    CloudEvent,
)
from app.services import counters, images, search_index, users
from app.services.counters import CATS

logger = logging.getLogger("storefront.events")

PRODUCTS = "products"

router = APIRouter(prefix="/events", tags=["Events"])


@dataclass(frozen=True)
class Trigger:
    name: str
    event_type: str
    handler: Callable[[Clients, CloudEvent], Awaitable[None]]


def _auth_user(event: CloudEvent) -> AuthUserData:
    try:
        return AuthUserData.model_validate(event.data or {})
    except ValidationError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Invalid auth event data: {exc.errors(include_url=False)}")


def _document(event: CloudEvent, collection: str, snapshot: str) -> tuple:
    """(doc_id, data) of the `before`/`after` snapshot, checked against the trigger's collection."""
    change = document_change(event)
    if change.collection != collection:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            f"Document {change.collection}/{change.doc_id} is not in '{collection}'",
        )
    data = getattr(change, snapshot)
    if data is None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Event has no '{snapshot}' snapshot")
    return change.doc_id, data


# --- Account lifecycle ---

async def _create_user_doc(clients: Clients, event: CloudEvent) -> None:
    await run_in_threadpool(users.create_user_doc, clients.db, _auth_user(event).uid)


async def _delete_user_doc(clients: Clients, event: CloudEvent) -> None:
    await run_in_threadpool(users.delete_user_doc, clients.db, _auth_user(event).uid)


# --- Search index ---

async def _index_product(clients: Clients, event: CloudEvent) -> None:
    product_id, product = _document(event, PRODUCTS, "after")
    await run_in_threadpool(search_index.index_product, clients.search_index, product_id, product)


async def _reindex_product(clients: Clients, event: CloudEvent) -> None:
    product_id, product = _document(event, PRODUCTS, "after")
    await run_in_threadpool(search_index.reindex_product, clients.search_index, product_id, product)


async def _unindex_product(clients: Clients, event: CloudEvent) -> None:
    product_id, _ = _document(event, PRODUCTS, "before")
    await run_in_threadpool(search_index.unindex_product, clients.search_index, product_id)


# --- Stored images ---

async def _delete_product_images(clients: Clients, event: CloudEvent) -> None:
    product_id, product = _document(event, PRODUCTS, "before")
    await images.delete_document_images(clients.bucket, PRODUCTS, product_id, product.get("images"))


async def _delete_cat_images(clients: Clients, event: CloudEvent) -> None:
    cat_id, cat = _document(event, CATS, "before")
    await images.delete_document_images(clients.bucket, CATS, cat_id, cat.get("images"))


# --- Counters ---

async def _count_created_product(clients: Clients, event: CloudEvent) -> None:
    _, product = _document(event, PRODUCTS, "after")
    await run_in_threadpool(counters.increment_product_counters, clients.db, product)


async def _count_deleted_product(clients: Clients, event: CloudEvent) -> None:
    _, product = _document(event, PRODUCTS, "before")
    await run_in_threadpool(counters.decrement_product_counters, clients.db, product)


TRIGGERS: Dict[str, Trigger] = {t.name: t for t in [
    Trigger("createUserDoc", AUTH_USER_CREATED, _create_user_doc),
    Trigger("deleteUserDoc", AUTH_USER_DELETED, _delete_user_doc),
    Trigger("indexProduct", DOCUMENT_CREATED, _index_product),
    Trigger("reindexProduct", DOCUMENT_UPDATED, _reindex_product),
    Trigger("unindexProduct", DOCUMENT_DELETED, _unindex_product),
    Trigger("deleteProductImages", DOCUMENT_DELETED, _delete_product_images),
    Trigger("deleteCatImages", DOCUMENT_DELETED, _delete_cat_images),
    Trigger("createProduct", DOCUMENT_CREATED, _count_created_product),
    Trigger("deleteProduct", DOCUMENT_DELETED, _count_deleted_product),
]}


@router.post("/{trigger_name}", summary="Eventarc delivery")
async def handle_event(trigger_name: str, request: Request, clients: Clients = Depends(get_clients)):
    trigger = TRIGGERS.get(trigger_name)
    if trigger is None:
        raise HTTPException(status_code=404, detail=f"Unknown trigger: {trigger_name}")

    event = await read_cloud_event(request)
    if event.type != trigger.event_type:
        raise HTTPException(
            status_code=400,
            detail=f"Trigger {trigger_name} expects {trigger.event_type}, got {event.type}",
        )

    try:
        await trigger.handler(clients, event)
    except ValueError as e:
        if str(e) == "MISSING_BRAND_OR_CATEGORY":
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Product has no brand or category")
        raise
    logger.info("Event %s handled by %s", event.id, trigger_name)
    return {"status": "ok", "trigger": trigger_name}
