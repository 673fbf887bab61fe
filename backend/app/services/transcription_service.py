import logging

from app.services import openai_client
from app.system_metrics import increment_metric
from core.config import TRANSCRIBE_MODEL

logger = logging.getLogger("app.services.transcription_service")

MOCK_TRANSCRIPT = "User transcript text"


def transcribe(audio_bytes: bytes, filename: str = "answer.webm") -> dict:
    if not audio_bytes:
        raise ValueError("audio is required")

    increment_metric("ai_requests_total")
    if openai_client.live_ai_enabled():
        try:
            result = openai_client.get_client().audio.transcriptions.create(
                model=TRANSCRIBE_MODEL,
                file=(filename or "answer.webm", audio_bytes),
            )
            text = str(getattr(result, "text", "") or "").strip()
            return {"transcript": text, "source": "openai"}
        except Exception as exc:
            logger.warning("transcribe failed, using mock transcript | err=%s", exc)
            increment_metric("ai_fallbacks_total")

    return {"transcript": MOCK_TRANSCRIPT, "source": "mock"}
