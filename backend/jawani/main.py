"""FastAPI application entrypoint for the Jawani image studio backend."""
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from jawani.api.routes import api_router
from jawani.core.config import Settings, get_settings
from jawani.services.errors import ConfigurationError

logger = logging.getLogger("jawani.requests")

app = FastAPI(title="Jawani Image Studio API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


class HealthResponse(BaseModel):
    status: str = "ok"


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check() -> HealthResponse:
    """Return service health information for monitoring and load-balancers."""
    return HealthResponse()


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    # Correlation id
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "%s %s failed",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "duration_ms": (time.perf_counter() - started) * 1000.0,
            },
        )
        raise
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    actor = getattr(request.state, "actor", None) or {"type": "anonymous", "id": "-"}
    logger.info(
        "%s %s -> %s",
        request.method,
        request.url.path,
        response.status_code,
        extra={
            "request_id": request_id,
            "actor_type": actor.get("type"),
            "actor_id": actor.get("id"),
            "duration_ms": elapsed_ms,
            "ip": request.client.host if request.client else None,
        },
    )
    response.headers["X-Request-Id"] = request_id
    return response


def check_startup_settings(settings: Settings) -> None:
    """Refuse to start without a Gemini API key."""

    if not settings.api_key:
        raise ConfigurationError("API_KEY environment variable not set")


def run() -> None:
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    check_startup_settings(settings)
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
