from contextlib import asynccontextmanager
import asyncio
import logging
import os
import sys
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.ai import router as ai_router
from app.api.auth_routes import router as auth_router
from app.api.practice import router as practice_router
from app.auth import get_user_id
from app.scoring.confidence import EMOTION_MODES
from app.system_metrics import get_metrics_snapshot, increment_metric
from core.config import (
    AI_MODE,
    EMOTION_NORMALIZATION,
    ENVIRONMENT,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SEC,
    STORAGE_BACKEND,
    get_allowed_origins,
    resolve_jwt_secret,
)

logger = logging.getLogger("app.main")

_allowed_origins = get_allowed_origins()
_rate_limit_lock = asyncio.Lock()
_rate_limit_buckets: dict[str, tuple[float, int]] = {}
_MAX_RATE_LIMIT_BUCKETS = 10000
_UNLIMITED_PREFIXES = ("/docs", "/redoc", "/openapi.json", "/healthz")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    resolve_jwt_secret()
    if EMOTION_NORMALIZATION not in EMOTION_MODES:
        raise RuntimeError(
            f"EMOTION_NORMALIZATION must be one of {sorted(EMOTION_MODES)}, got {EMOTION_NORMALIZATION!r}"
        )
    logger.info("[SYSTEM] env=%s storage=%s ai_mode=%s", ENVIRONMENT, STORAGE_BACKEND, AI_MODE)
    logger.info("[SYSTEM] CORS allow_origins=%s", _allowed_origins)
    logger.info(
        "[SYSTEM] rate_limit enabled=%s window_sec=%s max_requests=%s",
        RATE_LIMIT_ENABLED,
        RATE_LIMIT_WINDOW_SEC,
        RATE_LIMIT_MAX_REQUESTS,
    )
    if EMOTION_NORMALIZATION == "shift":
        logger.warning(
            "[SYSTEM] emotion positivity uses the legacy +50 shift, which does not map -100..100 onto 0..100; "
            "set EMOTION_NORMALIZATION=linear once the frontend is ready"
        )
    yield
    logger.info("[SYSTEM] shutdown complete")


app = FastAPI(title="PlacementPanic API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)


def _request_identity(request: Request) -> str:
    forwarded_for = str(request.headers.get("x-forwarded-for") or "").strip()
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or "unknown"
    if request.client and request.client.host:
        return str(request.client.host)
    return "unknown"


async def _is_rate_limited(identity: str, now_ts: float) -> tuple[bool, int]:
    async with _rate_limit_lock:
        window_start, count = _rate_limit_buckets.get(identity, (now_ts, 0))
        if now_ts - window_start >= RATE_LIMIT_WINDOW_SEC:
            window_start, count = now_ts, 0
        if count >= RATE_LIMIT_MAX_REQUESTS:
            return True, max(1, int(RATE_LIMIT_WINDOW_SEC - (now_ts - window_start)))
        if identity not in _rate_limit_buckets and len(_rate_limit_buckets) >= _MAX_RATE_LIMIT_BUCKETS:
            for key in [key for key, (start, _) in _rate_limit_buckets.items() if now_ts - start >= RATE_LIMIT_WINDOW_SEC]:
                del _rate_limit_buckets[key]
        _rate_limit_buckets[identity] = (window_start, count + 1)
        return False, 0


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    if not RATE_LIMIT_ENABLED or request.method == "OPTIONS" or request.url.path.startswith(_UNLIMITED_PREFIXES):
        return await call_next(request)

    blocked, retry_after = await _is_rate_limited(_request_identity(request), time.time())
    if not blocked:
        return await call_next(request)

    increment_metric("rate_limited_total")
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded", "retry_after_sec": retry_after},
        headers={"Retry-After": str(retry_after)},
    )


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "service": "backend"}


@app.get("/api/system/metrics")
def system_metrics_route(request: Request):
    get_user_id(request)
    return get_metrics_snapshot(extra={
        "pid": os.getpid(),
        "python": sys.version.split(" ")[0],
        "storage_backend": STORAGE_BACKEND,
        "ai_mode": AI_MODE,
    })


app.include_router(auth_router)
app.include_router(practice_router)
app.include_router(ai_router)
