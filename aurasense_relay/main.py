import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from aurasense_relay.api.v1 import readings

# Relay loggers print to stdout so serverless/container logs pick them up
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stdout,
)
logging.getLogger("aurasense_relay").setLevel(logging.DEBUG)
from aurasense_relay.config import settings
from aurasense_relay.core.errors import InvalidMethod, RelayError
from aurasense_relay.services.http_client import close_http_client, init_http_client
from prometheus_client import make_asgi_app

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.validate_document_path()
    missing = settings.missing_store_settings()
    if missing:
        if settings.app_env == "production":
            raise RuntimeError(f"{', '.join(missing)} must be set in production")
        logger.warning("Firestore not configured (%s); readings will be rejected with 500", ", ".join(missing))
    init_http_client(timeout=settings.http_timeout_seconds)
    yield
    await close_http_client()


limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit_default])

app = FastAPI(
    title="AuraSense Relay",
    description="Relays device sensor readings to the stress prediction API and Firestore",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.settings = settings
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    headers = None
    if isinstance(exc, InvalidMethod):
        headers = {"Allow": ", ".join(exc.allowed)}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Routing-level 405 (methods without an explicit reject route) gets the same body as InvalidMethod."""
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": InvalidMethod.message}, headers=exc.headers)
    return await http_exception_handler(request, exc)


app.include_router(readings.router, prefix="/api/v1")
app.include_router(readings.device_router)

metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


@app.get("/health")
@limiter.exempt
def health(request: Request):
    return {"status": "ok"}
