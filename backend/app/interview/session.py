import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any

from app.interview.questions import Question


STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"


@dataclass
class AnswerRecord:
    question_id: str
    answer: str
    elapsed_sec: float
    time_limit_sec: int
    timed_out: bool
    self_rating: int
    skipped: bool = False
    confidence: dict | None = None
    submitted_at: float = 0.0


@dataclass
class PracticeSession:
    id: str
    user_id: str
    category: str
    difficulty: str
    questions: list[dict] = field(default_factory=list)
    answers: list[AnswerRecord] = field(default_factory=list)
    current: int = 0
    status: str = STATUS_ACTIVE
    created_at: float = 0.0
    finished_at: float | None = None
    summary: dict | None = None

    @classmethod
    def create(cls, user_id: str, category: str, difficulty: str, questions: list[Question]) -> "PracticeSession":
        return cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            category=category,
            difficulty=difficulty,
            questions=[q.to_dict() for q in questions],
            created_at=time.time(),
        )

    @property
    def done(self) -> bool:
        return self.status == STATUS_COMPLETED

    def current_question(self) -> dict | None:
        if self.done or self.current >= len(self.questions):
            return None
        return dict(self.questions[self.current])

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["answers"] = [asdict(item) for item in self.answers]
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PracticeSession":
        answers = [AnswerRecord(**item) for item in list(data.get("answers") or []) if isinstance(item, dict)]
        return cls(
            id=str(data.get("id") or ""),
            user_id=str(data.get("user_id") or ""),
            category=str(data.get("category") or ""),
            difficulty=str(data.get("difficulty") or ""),
            questions=[dict(q) for q in list(data.get("questions") or []) if isinstance(q, dict)],
            answers=answers,
            current=int(data.get("current") or 0),
            status=str(data.get("status") or STATUS_ACTIVE),
            created_at=float(data.get("created_at") or 0.0),
            finished_at=data.get("finished_at"),
            summary=data.get("summary"),
        )

    def public_view(self) -> dict[str, Any]:
        return {
            "session_id": self.id,
            "category": self.category,
            "difficulty": self.difficulty,
            "status": self.status,
            "total_questions": len(self.questions),
            "answered": len(self.answers),
            "current_index": self.current,
            "current_question": self.current_question(),
            "answers": [asdict(item) for item in self.answers],
            "created_at": self.created_at,
            "finished_at": self.finished_at,
            "summary": self.summary,
        }
