import json
import logging
import re

from app.services import openai_client
from app.system_metrics import increment_metric
from core.config import MODEL_NAME

logger = logging.getLogger("app.services.evaluation_service")

MOCK_EVALUATION = {
    "correctness": 85,
    "completeness": 78,
    "clarity": 82,
    "suggestions": ["Add more details", "Be more concise"],
}


def _clamp_score(value, default=50):
    try:
        return max(0, min(100, int(value)))
    except Exception:
        return default


def _normalize_eval(data: dict) -> dict:
    suggestions = data.get("suggestions")
    if isinstance(suggestions, str):
        suggestions = [suggestions]
    return {
        "correctness": _clamp_score(data.get("correctness"), 50),
        "completeness": _clamp_score(data.get("completeness"), 50),
        "clarity": _clamp_score(data.get("clarity"), 50),
        "suggestions": [str(item) for item in list(suggestions or []) if str(item).strip()][:5],
    }


def _extract_json_dict(text: str) -> dict | None:
    text = (text or "").strip()
    if not text:
        return None

    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except Exception:
        pass

    fenced = re.search(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", text, re.IGNORECASE)
    if fenced:
        try:
            parsed = json.loads(fenced.group(1))
            return parsed if isinstance(parsed, dict) else None
        except Exception:
            pass

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            parsed = json.loads(text[start:end + 1])
            return parsed if isinstance(parsed, dict) else None
        except Exception:
            return None

    return None


def _evaluate_with_openai(question: str, answer: str) -> dict | None:
    prompt = f"""
You are a senior interviewer reviewing a mock interview answer.

Question:
{question}

Candidate Answer:
{answer}

Give evaluation strictly in JSON:
{{
  "correctness": 0-100,
  "completeness": 0-100,
  "clarity": 0-100,
  "suggestions": ["short suggestion", "..."]
}}
"""

    res = openai_client.get_client().responses.create(
        model=MODEL_NAME,
        input=prompt,
    )
    parsed = _extract_json_dict(getattr(res, "output_text", ""))
    return _normalize_eval(parsed) if isinstance(parsed, dict) else None


def evaluate_answer(question: str, answer: str) -> dict:
    if not str(answer or "").strip():
        raise ValueError("userAnswer is required")

    increment_metric("ai_requests_total")
    if openai_client.live_ai_enabled():
        try:
            evaluation = _evaluate_with_openai(str(question or ""), str(answer))
            if evaluation is not None:
                return evaluation
            logger.warning("evaluate_answer unparseable model output, using mock evaluation")
        except Exception as exc:
            logger.warning("evaluate_answer failed, using mock evaluation | err=%s", exc)
        increment_metric("ai_fallbacks_total")

    return {
        **MOCK_EVALUATION,
        "suggestions": list(MOCK_EVALUATION["suggestions"]),
    }
