import logging
import os
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from .api import cards, customers, router
from .exceptions import CardServiceError, error_envelope
from .logger_config import request_id_var, setup_logging
from .store import load_seed, store

# ---- logging ----
setup_logging()
log = logging.getLogger("app")

# ---- middleware ----
class EnforceJSONMiddleware(BaseHTTPMiddleware):
    """Requests that carry a body must send it as JSON; bodiless PUTs pass."""

    async def dispatch(self, request: Request, call_next):
        if request.method in {"POST", "PUT", "PATCH"}:
            has_body = (
                request.headers.get("content-length", "0") != "0"
                or "transfer-encoding" in request.headers
            )
            ct = request.headers.get("content-type", "").split(";")[0].strip().lower()
            if has_body and ct != "application/json":
                log.warning("Unsupported media type: %s %s", request.method, request.url.path)
                return error_envelope(415, "Content-Type must be application/json")
        return await call_next(request)


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            request_id_var.reset(token)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if os.getenv("CARDS_DISABLE_SEED") != "1":
        load_seed(store)
    log.info("Credit Card API started")
    try:
        yield
    finally:
        log.info("Credit Card API stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="Credit Card System", lifespan=lifespan)

    # middleware
    app.add_middleware(EnforceJSONMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # exception handlers
    @app.exception_handler(RequestValidationError)
    async def body_validation_handler(request: Request, exc: RequestValidationError):
        # malformed input is a 400 like every other rejected request
        problems = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        ]
        msg = "; ".join(problems) or "Invalid request."
        log.warning("rejected %s %s: %s", request.method, request.url.path, msg)
        return error_envelope(400, msg, "invalid_request")

    @app.exception_handler(CardServiceError)
    async def service_error_handler(request: Request, exc: CardServiceError):
        log.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.reason)
        return error_envelope(exc.status_code, exc.detail, exc.reason)

    @app.exception_handler(StarletteHTTPException)
    async def routing_error_handler(request: Request, exc: StarletteHTTPException):
        # unknown paths and wrong methods raised by the router itself
        log.warning("%s %s -> %s", request.method, request.url.path, exc.status_code)
        return error_envelope(exc.status_code, str(exc.detail))

    # routers
    app.include_router(router)
    app.include_router(customers)
    app.include_router(cards)
    return app


app = create_app()
