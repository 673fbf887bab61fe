import os
from pathlib import Path
from dotenv import load_dotenv

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)


def _flag(name: str, default: str = "false") -> bool:
    return str(os.getenv(name, default)).strip().lower() in {"1", "true", "yes", "on"}


ENVIRONMENT = str(os.getenv("ENV") or "development").strip().lower()

JWT_SECRET = str(os.getenv("JWT_SECRET") or "").strip()
JWT_ALGORITHM = str(os.getenv("JWT_ALGORITHM") or "HS256").strip()
JWT_EXPIRES_MIN = max(5, int(os.getenv("JWT_EXPIRES_MIN", "1440")))

STORAGE_BACKEND = str(os.getenv("STORAGE_BACKEND") or "memory").strip().lower()
STORAGE_PATH = Path(os.getenv("STORAGE_PATH") or (_BACKEND_ROOT / "data" / "practice_store.json"))

AI_MODE = str(os.getenv("AI_MODE") or "mock").strip().lower()
OPENAI_API_KEY = str(os.getenv("OPENAI_API_KEY") or "").strip()
MODEL_NAME = str(os.getenv("MODEL_NAME") or "gpt-4.1-mini").strip()
TRANSCRIBE_MODEL = str(os.getenv("TRANSCRIBE_MODEL") or "whisper-1").strip()

# "shift" keeps the legacy +50 emotion offset, "linear" maps -100..100 onto 0..100
EMOTION_NORMALIZATION = str(os.getenv("EMOTION_NORMALIZATION") or "shift").strip().lower()

RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "true")
RATE_LIMIT_WINDOW_SEC = max(10, int(os.getenv("RATE_LIMIT_WINDOW_SEC", "60")))
RATE_LIMIT_MAX_REQUESTS = max(20, int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "300")))


def get_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    return [item.strip() for item in raw.split(",") if item.strip()]


def resolve_jwt_secret() -> str:
    if JWT_SECRET:
        return JWT_SECRET
    if ENVIRONMENT == "production":
        raise RuntimeError("JWT_SECRET is not configured")
    return "placementpanic-dev-secret"
