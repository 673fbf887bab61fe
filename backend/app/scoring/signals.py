from app.scoring.confidence import ConfidenceInputs, _safe_float


def emotion_positivity(emotions: dict | None) -> float:
    data = dict(emotions or {})
    positive = _safe_float(data.get("happy"))
    negative = sum(_safe_float(data.get(key)) for key in ("sad", "angry", "fearful"))
    return positive - negative


def derive_confidence_inputs(
    evaluation: dict | None = None,
    facial: dict | None = None,
    voice: dict | None = None,
) -> ConfidenceInputs:
    """Maps evaluation, facial and voice payloads onto the seven scorer inputs. Absent signals stay 0."""
    evaluation = dict(evaluation or {})
    facial = dict(facial or {})
    voice = dict(voice or {})

    return ConfidenceInputs(
        voice_volume=_safe_float(voice.get("volume", voice.get("voiceVolume"))),
        voice_stability=_safe_float(voice.get("stability", voice.get("voiceStability"))),
        pause_frequency=_safe_float(voice.get("pause_frequency", voice.get("pauseFrequency"))),
        facial_confidence=_safe_float(facial.get("confidence")),
        emotion_positivity=emotion_positivity(facial.get("emotions")) if facial.get("emotions") else 0.0,
        answer_quality=_safe_float(evaluation.get("correctness")),
        answer_completeness=_safe_float(evaluation.get("completeness")),
    )
