"""
# `app/main.py` - Application entry point

## Overview
Starts the FastAPI application that hosts the storefront triggers on Cloud Run.
Routers are included, CORS is configured, platform error handlers are registered and the
background role reconciliation job is scheduled.

---

## Routers
- `/events/{trigger}`: Eventarc deliveries (auth + Firestore triggers)
- `/callables/{name}`: callable functions (`{"data": ...}` -> `{"result": ...}`)
- `/search/config`: public search settings

---

## Background scheduler
- **Library:** APScheduler (`AsyncIOScheduler`)
- **Job:** `roles-sync` (`sync_role_records_once`), realigns `roles/{uid}` with the `role` claims
- **Interval:** `ROLES_SYNC_INTERVAL_MINUTES` (only when `ROLES_SYNC_ENABLED`)

**Events:**
- `startup`: scheduler starts.
- `shutdown`: scheduler stops.
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.core.clients import get_clients
from app.core.errors import register_exception_handlers
from app.routers import callables, events, search
from app.services.roles_sync import sync_role_records_once

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("storefront")

scheduler = AsyncIOScheduler()


def run_roles_sync() -> int:
    clients = get_clients()
    changed = sync_role_records_once(clients.auth, clients.db)
    logger.info("roles-sync finished, %d record(s) changed", changed)
    return changed


# Initialize FastAPI app
app = FastAPI(
    title="Storefront Triggers",
    description="Event triggers and callables keeping Firestore, Auth claims, Storage and Algolia in step.",
    version="1.0.0",
    redirect_slashes=False,
)

# Configure CORS (allow front-end domain or all origins as specified)
allow_origins = [origin.strip() for origin in settings.allowed_origins.split(',')] if settings.allowed_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(events.router)
app.include_router(callables.router)
app.include_router(search.router)


@app.on_event("startup")
async def _startup_scheduler():
    if not settings.roles_sync_enabled:
        return
    if not scheduler.running:
        scheduler.start()
    scheduler.add_job(
        run_roles_sync,
        "interval",
        minutes=settings.roles_sync_interval_minutes,
        id="roles-sync",
        replace_existing=True,
    )


@app.on_event("shutdown")
async def _shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
