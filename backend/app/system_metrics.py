import threading
import time
from typing import Any


_lock = threading.Lock()
_metrics: dict[str, float] = {
    "users_registered": 0.0,
    "logins_total": 0.0,
    "sessions_started": 0.0,
    "sessions_completed": 0.0,
    "answers_submitted": 0.0,
    "answers_timed_out": 0.0,
    "confidence_scores_computed": 0.0,
    "ai_requests_total": 0.0,
    "ai_fallbacks_total": 0.0,
    "rate_limited_total": 0.0,
}


def increment_metric(name: str, amount: float = 1.0) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _metrics[key] = float(_metrics.get(key, 0.0)) + float(amount)


def reset_metrics() -> None:
    with _lock:
        for key in list(_metrics):
            _metrics[key] = 0.0


def get_metrics_snapshot(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    with _lock:
        data = dict(_metrics)

    payload: dict[str, Any] = {"generated_at": time.time()}
    payload.update({key: int(value) for key, value in data.items()})

    answers = max(1.0, float(data.get("answers_submitted") or 0.0))
    payload["timeout_rate"] = round(float(data.get("answers_timed_out") or 0.0) / answers, 4)

    if extra:
        payload.update(extra)
    return payload
