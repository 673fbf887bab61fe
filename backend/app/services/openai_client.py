from openai import OpenAI

from core.config import AI_MODE, OPENAI_API_KEY

_client: OpenAI | None = None


def live_ai_enabled() -> bool:
    return AI_MODE == "openai" and bool(OPENAI_API_KEY)


def get_client() -> OpenAI:
    global _client
    if _client is None:
        _client = OpenAI(api_key=OPENAI_API_KEY)
    return _client
