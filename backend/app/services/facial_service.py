from app.system_metrics import increment_metric

MOCK_FACIAL_ANALYSIS = {
    "confidence": 85,
    "emotions": {"happy": 45, "neutral": 30, "sad": 10, "angry": 5, "fearful": 5, "surprised": 5},
    "eyeContact": 80,
}


def analyze_facial(frame_b64: str | None = None) -> dict:
    # No vision backend is wired in; every frame gets the same reading.
    increment_metric("ai_requests_total")
    return {
        "confidence": MOCK_FACIAL_ANALYSIS["confidence"],
        "emotions": dict(MOCK_FACIAL_ANALYSIS["emotions"]),
        "eyeContact": MOCK_FACIAL_ANALYSIS["eyeContact"],
        "frame_received": bool(str(frame_b64 or "").strip()),
    }
