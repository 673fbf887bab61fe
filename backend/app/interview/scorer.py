from app.interview.session import AnswerRecord


def _avg(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def verdict_for(percent: float) -> str:
    if percent >= 80:
        return "Excellent"
    if percent >= 65:
        return "Good"
    if percent >= 50:
        return "Fair"
    return "Needs Practice"


def summarize_answers(answers: list[AnswerRecord], total_questions: int) -> dict:
    attempts = list(answers or [])
    answered = [item for item in attempts if not item.skipped]
    ratings = [float(item.self_rating) for item in attempts]
    confidence_scores = [
        float(item.confidence.get("score"))
        for item in attempts
        if isinstance(item.confidence, dict) and item.confidence.get("score") is not None
    ]

    avg_rating = round(_avg(ratings), 2)
    percent = round((avg_rating / 5.0) * 100.0, 2) if ratings else 0.0

    return {
        "total_questions": int(total_questions),
        "attempted": len(attempts),
        "answered": len(answered),
        "skipped": len(attempts) - len(answered),
        "timeouts": sum(1 for item in attempts if item.timed_out),
        "average_self_rating": avg_rating,
        "score_percent": percent,
        "average_elapsed_sec": round(_avg([float(item.elapsed_sec) for item in answered]), 2),
        "average_confidence_score": round(_avg(confidence_scores), 2) if confidence_scores else None,
        "verdict": verdict_for(percent),
    }
