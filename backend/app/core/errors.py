# app/core/errors.py
"""
Platform errors rendered in the callable error envelope.

Services never translate errors; these handlers only pick the HTTP status and shape
`{"error": {"status": "NOT_FOUND", "message": "..."}}` for whatever the platform raised.
"""
import logging

from algoliasearch.exceptions import AlgoliaUnreachableHostException, RequestException
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from firebase_admin import exceptions as fb_exceptions
from google.api_core import exceptions as gapi_exceptions

logger = logging.getLogger("storefront.errors")

FIREBASE_STATUS = {
    fb_exceptions.INVALID_ARGUMENT: 400,
    fb_exceptions.FAILED_PRECONDITION: 400,
    fb_exceptions.OUT_OF_RANGE: 400,
    fb_exceptions.UNAUTHENTICATED: 401,
    fb_exceptions.PERMISSION_DENIED: 403,
    fb_exceptions.NOT_FOUND: 404,
    fb_exceptions.ALREADY_EXISTS: 409,
    fb_exceptions.ABORTED: 409,
    fb_exceptions.CONFLICT: 409,
    fb_exceptions.RESOURCE_EXHAUSTED: 429,
    fb_exceptions.CANCELLED: 499,
    fb_exceptions.UNAVAILABLE: 503,
    fb_exceptions.DEADLINE_EXCEEDED: 504,
}

HTTP_CANONICAL = {
    400: "INVALID_ARGUMENT",
    401: "UNAUTHENTICATED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    409: "ALREADY_EXISTS",
    412: "FAILED_PRECONDITION",
    429: "RESOURCE_EXHAUSTED",
    499: "CANCELLED",
    501: "UNIMPLEMENTED",
    503: "UNAVAILABLE",
    504: "DEADLINE_EXCEEDED",
}


def error_response(status_code: int, canonical: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"status": canonical, "message": message}},
    )


async def firebase_error_handler(request: Request, exc: fb_exceptions.FirebaseError):
    status_code = FIREBASE_STATUS.get(exc.code, 500)
    logger.warning("%s %s failed: %s %s", request.method, request.url.path, exc.code, exc)
    return error_response(status_code, exc.code or "INTERNAL", str(exc))


async def google_api_error_handler(request: Request, exc: gapi_exceptions.GoogleAPICallError):
    status_code = exc.code if isinstance(exc.code, int) and 400 <= exc.code < 600 else 500
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(status_code, HTTP_CANONICAL.get(status_code, "INTERNAL"), exc.message or str(exc))


async def search_error_handler(request: Request, exc: Exception):
    if isinstance(exc, RequestException) and exc.status_code:
        status_code = exc.status_code
    elif isinstance(exc, AlgoliaUnreachableHostException):
        status_code = 503
    else:
        status_code = 500
    logger.warning("%s %s failed on search index: %s", request.method, request.url.path, exc)
    return error_response(status_code, HTTP_CANONICAL.get(status_code, "INTERNAL"), str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(fb_exceptions.FirebaseError, firebase_error_handler)
    app.add_exception_handler(gapi_exceptions.GoogleAPICallError, google_api_error_handler)
    app.add_exception_handler(RequestException, search_error_handler)
    app.add_exception_handler(AlgoliaUnreachableHostException, search_error_handler)
