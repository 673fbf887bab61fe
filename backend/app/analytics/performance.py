from app.interview.session import PracticeSession
from app.scoring.confidence import _safe_float


def _avg(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def trend_direction(values: list[float]) -> str:
    if len(values) < 2:
        return "stable"
    delta = values[-1] - values[0]
    if delta >= 3:
        return "up"
    if delta <= -3:
        return "down"
    return "stable"


def _group_breakdown(sessions: list[PracticeSession], key: str) -> dict[str, dict]:
    groups: dict[str, list[PracticeSession]] = {}
    for session in sessions:
        groups.setdefault(str(getattr(session, key)), []).append(session)

    breakdown = {}
    for name, items in groups.items():
        scores = [_safe_float((s.summary or {}).get("score_percent")) for s in items]
        ratings = [float(a.self_rating) for s in items for a in s.answers]
        breakdown[name] = {
            "sessions": len(items),
            "answered": sum(int((s.summary or {}).get("answered") or 0) for s in items),
            "average_score_percent": round(_avg(scores), 2),
            "average_self_rating": round(_avg(ratings), 2),
        }
    return breakdown


def build_performance_overview(sessions: list[PracticeSession], recent_limit: int = 10) -> dict:
    completed = sorted(
        [s for s in sessions if s.done and isinstance(s.summary, dict)],
        key=lambda s: s.created_at,
    )
    attempts = [a for s in completed for a in s.answers]
    answered = [a for a in attempts if not a.skipped]
    confidence_scores = [
        _safe_float(a.confidence.get("score"))
        for a in attempts
        if isinstance(a.confidence, dict) and a.confidence.get("score") is not None
    ]

    points = [
        {
            "session_id": s.id,
            "category": s.category,
            "difficulty": s.difficulty,
            "created_at": s.created_at,
            "score_percent": _safe_float(s.summary.get("score_percent")),
            "verdict": str(s.summary.get("verdict") or ""),
        }
        for s in completed
    ][-max(1, int(recent_limit)):]

    by_category = _group_breakdown(completed, "category")
    ranked = sorted(by_category.items(), key=lambda item: item[1]["average_score_percent"])
    overall = round(_avg([_safe_float(s.summary.get("score_percent")) for s in completed]), 2)

    return {
        "total_sessions": len(completed),
        "total_attempted": len(attempts),
        "total_answered": len(answered),
        "average_self_rating": round(_avg([float(a.self_rating) for a in attempts]), 2),
        "overall_score_percent": overall,
        "timeout_rate": round(sum(1 for a in attempts if a.timed_out) / len(attempts), 4) if attempts else 0.0,
        "average_elapsed_sec": round(_avg([float(a.elapsed_sec) for a in answered]), 2),
        "average_confidence_score": round(_avg(confidence_scores), 2) if confidence_scores else None,
        "by_category": by_category,
        "by_difficulty": _group_breakdown(completed, "difficulty"),
        "best_category": ranked[-1][0] if ranked else None,
        "weakest_category": ranked[0][0] if ranked else None,
        "recent": points,
        "score_direction": trend_direction([p["score_percent"] for p in points]),
    }
