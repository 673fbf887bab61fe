import logging
import math
import random
import time
from contextlib import contextmanager
from dataclasses import asdict
from threading import Lock

from app.interview.questions import normalize_category, normalize_difficulty, select_questions
from app.interview.scorer import summarize_answers
from app.interview.session import STATUS_COMPLETED, AnswerRecord, PracticeSession
from app.scoring.confidence import ConfidenceInputs, calculate_confidence_score
from app.storage.base import Store
from app.system_metrics import increment_metric
from core.logger import log_event

logger = logging.getLogger("app.interview.engine")

MIN_QUESTIONS = 1
MAX_QUESTIONS = 10
MIN_RATING = 1
MAX_RATING = 5


class PracticeEngine:

    def __init__(self, store: Store, rng: random.Random | None = None):
        self.store = store
        self.rng = rng or random.Random()
        self._locks_guard = Lock()
        self._session_locks: dict[str, Lock] = {}

    @contextmanager
    def _locked(self, session_id: str):
        # one writer per session from load to save
        with self._locks_guard:
            lock = self._session_locks.setdefault(str(session_id or ""), Lock())
        with lock:
            yield

    def _load(self, session_id: str, user_id: str) -> PracticeSession:
        record = self.store.get_session(session_id)
        if not record:
            raise LookupError("Practice session not found")
        session = PracticeSession.from_dict(record)
        if session.user_id != user_id:
            raise PermissionError("Forbidden")
        return session

    def _save(self, session: PracticeSession) -> None:
        self.store.save_session(session.to_dict())

    def _complete(self, session: PracticeSession) -> None:
        session.status = STATUS_COMPLETED
        session.finished_at = time.time()
        session.summary = summarize_answers(session.answers, len(session.questions))
        increment_metric("sessions_completed")
        log_event(
            "practice",
            "session_completed",
            session.id,
            answered=session.summary["answered"],
            score_percent=session.summary["score_percent"],
        )

    def _response(self, session: PracticeSession, record: AnswerRecord) -> dict:
        payload = {
            "session_id": session.id,
            "done": session.done,
            "answer": asdict(record),
        }
        if session.done:
            payload["summary"] = session.summary
        else:
            payload["next_question"] = session.current_question()
            payload["remaining"] = len(session.questions) - session.current
        return payload

    def start(self, user_id: str, category: str, difficulty: str, count: int = 5) -> PracticeSession:
        category_key = normalize_category(category)
        difficulty_key = normalize_difficulty(difficulty)
        wanted = max(MIN_QUESTIONS, min(int(count or 5), MAX_QUESTIONS))

        questions = select_questions(category_key, difficulty_key, wanted, rng=self.rng)
        if not questions:
            raise ValueError("No questions available for this category and difficulty")

        session = PracticeSession.create(user_id, category_key, difficulty_key, questions)
        self._save(session)
        increment_metric("sessions_started")
        log_event("practice", "session_started", session.id, category=category_key, difficulty=difficulty_key, questions=len(questions))
        return session

    def get(self, session_id: str, user_id: str) -> PracticeSession:
        return self._load(session_id, user_id)

    def submit_answer(
        self,
        session_id: str,
        user_id: str,
        answer: str,
        elapsed_sec: float,
        self_rating: int,
        confidence_inputs: ConfidenceInputs | None = None,
    ) -> dict:
        rating = int(self_rating)
        if rating < MIN_RATING or rating > MAX_RATING:
            raise ValueError(f"self_rating must be between {MIN_RATING} and {MAX_RATING}")
        elapsed = float(elapsed_sec)
        if not math.isfinite(elapsed) or elapsed < 0:
            raise ValueError("elapsed_sec must be a finite, non-negative number")

        confidence = None
        if confidence_inputs is not None:
            confidence = calculate_confidence_score(confidence_inputs).to_dict()
            increment_metric("confidence_scores_computed")

        with self._locked(session_id):
            session = self._load(session_id, user_id)
            if session.done:
                raise ValueError("Practice session already completed")

            question = session.current_question()
            time_limit = int(question.get("time_limit_sec") or 0)
            record = AnswerRecord(
                question_id=str(question.get("id") or ""),
                answer=str(answer or ""),
                elapsed_sec=round(elapsed, 2),
                time_limit_sec=time_limit,
                timed_out=elapsed > time_limit,
                self_rating=rating,
                confidence=confidence,
                submitted_at=time.time(),
            )
            return self._record(session, record)

    def skip_question(self, session_id: str, user_id: str, elapsed_sec: float = 0.0) -> dict:
        elapsed = float(elapsed_sec or 0.0)
        if not math.isfinite(elapsed):
            raise ValueError("elapsed_sec must be a finite number")
        elapsed = max(0.0, elapsed)

        with self._locked(session_id):
            session = self._load(session_id, user_id)
            if session.done:
                raise ValueError("Practice session already completed")

            question = session.current_question()
            time_limit = int(question.get("time_limit_sec") or 0)
            record = AnswerRecord(
                question_id=str(question.get("id") or ""),
                answer="",
                elapsed_sec=round(elapsed, 2),
                time_limit_sec=time_limit,
                timed_out=elapsed > time_limit,
                self_rating=MIN_RATING,
                skipped=True,
                submitted_at=time.time(),
            )
            return self._record(session, record)

    def _record(self, session: PracticeSession, record: AnswerRecord) -> dict:
        session.answers.append(record)
        session.current += 1
        increment_metric("answers_submitted")
        if record.timed_out:
            increment_metric("answers_timed_out")

        if session.current >= len(session.questions):
            self._complete(session)

        self._save(session)
        log_event(
            "practice",
            "answer_recorded",
            session.id,
            question_id=record.question_id,
            answer=record.answer,
            skipped=record.skipped,
            timed_out=record.timed_out,
        )
        return self._response(session, record)

    def finish(self, session_id: str, user_id: str) -> PracticeSession:
        with self._locked(session_id):
            session = self._load(session_id, user_id)
            if session.done:
                return session
            logger.info(
                "practice session finished early | session_id=%s answered=%s total=%s",
                session.id,
                len(session.answers),
                len(session.questions),
            )
            self._complete(session)
            self._save(session)
            return session

    def history(self, user_id: str, limit: int = 20) -> list[PracticeSession]:
        rows = self.store.list_user_sessions(user_id, limit=limit)
        return [PracticeSession.from_dict(row) for row in rows]
