import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from core.config import EMOTION_NORMALIZATION


CONFIDENCE_WEIGHTS: dict[str, float] = {
    "voiceVolume": 0.15,
    "voiceStability": 0.15,
    "pauseFrequency": 0.10,
    "facialConfidence": 0.20,
    "emotionPositivity": 0.10,
    "answerQuality": 0.15,
    "answerCompleteness": 0.15,
}

CONFIDENCE_LEVELS: list[tuple[int, str]] = [
    (80, "Very Confident"),
    (65, "Confident"),
    (50, "Moderately Confident"),
    (35, "Less Confident"),
]
LOWEST_CONFIDENCE_LEVEL = "Needs Improvement"

EMOTION_MODES = {"shift", "linear"}

_FIELD_ALIASES = {
    "voiceVolume": "voice_volume",
    "voiceStability": "voice_stability",
    "pauseFrequency": "pause_frequency",
    "facialConfidence": "facial_confidence",
    "emotionPositivity": "emotion_positivity",
    "answerQuality": "answer_quality",
    "answerCompleteness": "answer_completeness",
}


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        parsed = float(value)
    except Exception:
        return default
    return parsed if math.isfinite(parsed) else default


@dataclass(frozen=True)
class ConfidenceInputs:
    voice_volume: float = 0.0
    voice_stability: float = 0.0
    pause_frequency: float = 0.0
    facial_confidence: float = 0.0
    emotion_positivity: float = 0.0
    answer_quality: float = 0.0
    answer_completeness: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ConfidenceInputs":
        """Accepts camelCase or snake_case keys; absent, non-numeric or non-finite values become 0."""
        source = dict(data or {})
        values = {}
        for camel, snake in _FIELD_ALIASES.items():
            raw = source.get(camel, source.get(snake))
            values[snake] = _safe_float(raw, 0.0) if raw is not None else 0.0
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        return {camel: float(getattr(self, snake)) for camel, snake in _FIELD_ALIASES.items()}


@dataclass(frozen=True)
class ConfidenceResult:
    score: int
    level: str
    breakdown: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "level": self.level,
            "breakdown": dict(self.breakdown),
        }


def normalize_emotion(value: float, mode: str = "shift") -> float:
    # "shift" reproduces the legacy +50 offset, which does not map -100..100 onto 0..100
    if mode == "linear":
        return (value + 100.0) / 2.0
    return value + 50.0


def normalize_inputs(inputs: ConfidenceInputs, emotion_mode: str | None = None) -> dict[str, float]:
    mode = str(emotion_mode or EMOTION_NORMALIZATION).strip().lower()
    if mode not in EMOTION_MODES:
        raise ValueError(f"Unknown emotion normalization mode: {mode}")

    return {
        "voiceVolume": inputs.voice_volume,
        "voiceStability": inputs.voice_stability,
        "pauseFrequency": 100.0 - inputs.pause_frequency,
        "facialConfidence": inputs.facial_confidence,
        "emotionPositivity": normalize_emotion(inputs.emotion_positivity, mode),
        "answerQuality": inputs.answer_quality,
        "answerCompleteness": inputs.answer_completeness,
    }


def round_half_up(value: float) -> int:
    if not math.isfinite(value):
        raise ValueError("Confidence score is not a finite number")
    return int(math.floor(value + 0.5))


def confidence_level(score: float) -> str:
    for threshold, label in CONFIDENCE_LEVELS:
        if score >= threshold:
            return label
    return LOWEST_CONFIDENCE_LEVEL


def calculate_confidence_score(inputs: ConfidenceInputs, emotion_mode: str | None = None) -> ConfidenceResult:
    """
    Weighted confidence score over seven normalized sub-metrics.

    Inputs are not range-checked; out-of-range values flow through the
    arithmetic unchanged.
    """
    normalized = normalize_inputs(inputs, emotion_mode=emotion_mode)
    weighted = sum(value * CONFIDENCE_WEIGHTS[key] for key, value in normalized.items())
    score = round_half_up(weighted)
    return ConfidenceResult(score=score, level=confidence_level(score), breakdown=normalized)
