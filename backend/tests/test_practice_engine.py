import random
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.interview.engine import PracticeEngine
from app.interview.scorer import summarize_answers, verdict_for
from app.interview.session import AnswerRecord
from app.scoring.confidence import ConfidenceInputs
from app.storage.memory import MemoryStore


def test_start_creates_persisted_session(engine, store):
    session = engine.start("u1", "technical", "easy", count=3)

    assert len(session.questions) == 3
    assert session.current_question()["id"] == session.questions[0]["id"]
    assert store.get_session(session.id)["user_id"] == "u1"


def test_start_clamps_question_count(engine):
    assert len(engine.start("u1", "aptitude", "easy", count=-4).questions) == 1
    # capped at 10, then at the 3-question pool
    assert len(engine.start("u1", "aptitude", "easy", count=50).questions) == 3


def test_full_session_flow_completes_with_summary(engine):
    session = engine.start("u1", "behavioral", "easy", count=3)

    first = engine.submit_answer(session.id, "u1", "I am a developer", elapsed_sec=30, self_rating=5)
    assert first["done"] is False
    assert first["remaining"] == 2
    assert first["next_question"]["id"] == session.questions[1]["id"]

    engine.submit_answer(session.id, "u1", "Built a thing", elapsed_sec=75, self_rating=4)
    last = engine.submit_answer(session.id, "u1", "Lists", elapsed_sec=45, self_rating=3)

    assert last["done"] is True
    summary = last["summary"]
    assert summary["answered"] == 3
    assert summary["timeouts"] == 1
    assert summary["average_self_rating"] == 4.0
    assert summary["score_percent"] == 80.0
    assert summary["verdict"] == "Excellent"
    assert engine.get(session.id, "u1").done


def test_answer_records_timeout_against_question_limit(engine):
    session = engine.start("u1", "technical", "hard", count=1)
    limit = session.questions[0]["time_limit_sec"]

    result = engine.submit_answer(session.id, "u1", "answer", elapsed_sec=limit + 1, self_rating=2)
    assert result["answer"]["timed_out"] is True
    assert result["answer"]["time_limit_sec"] == limit


def test_answer_with_confidence_inputs_is_scored(engine):
    session = engine.start("u1", "hr", "easy", count=2)
    inputs = ConfidenceInputs(75, 80, 20, 85, 40, 78, 82)

    result = engine.submit_answer(session.id, "u1", "answer", elapsed_sec=10, self_rating=4, confidence_inputs=inputs)
    assert result["answer"]["confidence"]["score"] == 81
    assert result["answer"]["confidence"]["level"] == "Very Confident"


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_out_of_range_rejected(engine, rating):
    session = engine.start("u1", "hr", "easy", count=1)
    with pytest.raises(ValueError):
        engine.submit_answer(session.id, "u1", "answer", elapsed_sec=5, self_rating=rating)


def test_negative_elapsed_rejected(engine):
    session = engine.start("u1", "hr", "easy", count=1)
    with pytest.raises(ValueError):
        engine.submit_answer(session.id, "u1", "answer", elapsed_sec=-1, self_rating=3)


@pytest.mark.parametrize("elapsed", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_elapsed_rejected_and_session_untouched(engine, store, elapsed):
    session = engine.start("u1", "hr", "easy", count=2)
    with pytest.raises(ValueError):
        engine.submit_answer(session.id, "u1", "answer", elapsed_sec=elapsed, self_rating=3)
    with pytest.raises(ValueError):
        engine.skip_question(session.id, "u1", elapsed_sec=elapsed)

    assert store.get_session(session.id)["answers"] == []
    assert engine.get(session.id, "u1").current == 0


def test_ownership_and_missing_sessions(engine):
    session = engine.start("u1", "hr", "easy", count=1)
    with pytest.raises(PermissionError):
        engine.submit_answer(session.id, "intruder", "answer", elapsed_sec=5, self_rating=3)
    with pytest.raises(LookupError):
        engine.get("does-not-exist", "u1")


def test_completed_session_rejects_more_answers(engine):
    session = engine.start("u1", "hr", "easy", count=1)
    engine.submit_answer(session.id, "u1", "answer", elapsed_sec=5, self_rating=3)
    with pytest.raises(ValueError):
        engine.submit_answer(session.id, "u1", "again", elapsed_sec=5, self_rating=3)
    with pytest.raises(ValueError):
        engine.skip_question(session.id, "u1")


def test_skip_records_unanswered_attempt(engine):
    session = engine.start("u1", "aptitude", "medium", count=2)
    result = engine.skip_question(session.id, "u1", elapsed_sec=12)

    assert result["answer"]["skipped"] is True
    assert result["answer"]["self_rating"] == 1
    assert result["done"] is False


def test_finish_early_is_idempotent(engine):
    session = engine.start("u1", "technical", "medium", count=4)
    engine.submit_answer(session.id, "u1", "answer", elapsed_sec=20, self_rating=4)

    finished = engine.finish(session.id, "u1")
    assert finished.done
    assert finished.summary["attempted"] == 1
    assert finished.summary["total_questions"] == 4

    again = engine.finish(session.id, "u1")
    assert again.finished_at == finished.finished_at


def test_history_lists_user_sessions(engine):
    engine.start("u1", "technical", "easy", count=1)
    engine.start("u1", "hr", "easy", count=1)
    engine.start("u2", "hr", "easy", count=1)

    assert len(engine.history("u1")) == 2
    assert len(engine.history("u2")) == 1


def test_summarize_answers_handles_skips_and_empty():
    empty = summarize_answers([], 5)
    assert empty["score_percent"] == 0.0
    assert empty["verdict"] == "Needs Practice"
    assert empty["average_confidence_score"] is None

    answers = [
        AnswerRecord("q1", "a", 40.0, 60, False, 4, confidence={"score": 70}),
        AnswerRecord("q2", "", 0.0, 60, False, 1, skipped=True),
    ]
    summary = summarize_answers(answers, 2)
    assert summary["answered"] == 1
    assert summary["skipped"] == 1
    assert summary["average_elapsed_sec"] == 40.0
    assert summary["average_confidence_score"] == 70.0
    assert summary["score_percent"] == 50.0


@pytest.mark.parametrize("percent,verdict", [(80, "Excellent"), (79.99, "Good"), (65, "Good"), (50, "Fair"), (49.9, "Needs Practice")])
def test_verdict_bands(percent, verdict):
    assert verdict_for(percent) == verdict


class _SlowReadStore(MemoryStore):
    def get_session(self, session_id):
        record = super().get_session(session_id)
        time.sleep(0.05)
        return record


def test_concurrent_answers_are_both_recorded():
    engine = PracticeEngine(_SlowReadStore(), rng=random.Random(7))
    session = engine.start("u1", "technical", "easy", count=3)

    def submit(text):
        return engine.submit_answer(session.id, "u1", text, elapsed_sec=5, self_rating=4)

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(submit, ["first", "second"]))

    stored = engine.get(session.id, "u1")
    assert stored.current == 2
    assert sorted(a.answer for a in stored.answers) == ["first", "second"]
    assert [a.question_id for a in stored.answers] == [q["id"] for q in session.questions[:2]]
    assert {r["remaining"] for r in results} == {1, 2}


def test_concurrent_finish_completes_once(store):
    engine = PracticeEngine(store, rng=random.Random(7))
    session = engine.start("u1", "hr", "easy", count=3)
    engine.submit_answer(session.id, "u1", "answer", elapsed_sec=5, self_rating=4)

    with ThreadPoolExecutor(max_workers=4) as pool:
        finished = list(pool.map(lambda _: engine.finish(session.id, "u1"), range(4)))

    assert {s.finished_at for s in finished} == {engine.get(session.id, "u1").finished_at}
