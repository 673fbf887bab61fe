from fastapi import APIRouter, Depends, Request

from app.analytics.performance import build_performance_overview
from app.api.errors import domain_errors
from app.auth import get_user_id
from app.interview.engine import PracticeEngine
from app.interview.questions import list_categories
from app.runtime import get_practice_engine
from app.schemas import AnswerRequest, SkipRequest, StartPracticeRequest
from app.scoring.confidence import ConfidenceInputs
from app.scoring.signals import derive_confidence_inputs

router = APIRouter(prefix="/api")


@router.get("/questions/categories")
def question_categories(request: Request):
    get_user_id(request)
    return {"items": list_categories()}


@router.post("/practice/start")
def start_practice(req: StartPracticeRequest, request: Request, engine: PracticeEngine = Depends(get_practice_engine)):
    user_id = get_user_id(request)
    with domain_errors():
        session = engine.start(user_id, req.category, req.difficulty, req.count)
    return {
        "session_id": session.id,
        "category": session.category,
        "difficulty": session.difficulty,
        "total_questions": len(session.questions),
        "question": session.current_question(),
    }


# Declared before /practice/{session_id} so "history" is not taken as an id.
@router.get("/practice/history")
def practice_history(request: Request, limit: int = 20, engine: PracticeEngine = Depends(get_practice_engine)):
    user_id = get_user_id(request)
    capped = max(1, min(int(limit or 20), 100))
    sessions = engine.history(user_id, limit=capped)
    return {
        "items": [
            {
                "session_id": s.id,
                "category": s.category,
                "difficulty": s.difficulty,
                "status": s.status,
                "created_at": s.created_at,
                "finished_at": s.finished_at,
                "summary": s.summary,
            }
            for s in reversed(sessions)
        ]
    }


@router.get("/practice/{session_id}")
def get_practice_session(session_id: str, request: Request, engine: PracticeEngine = Depends(get_practice_engine)):
    user_id = get_user_id(request)
    with domain_errors():
        session = engine.get(session_id, user_id)
    return session.public_view()


@router.post("/practice/{session_id}/answer")
def submit_practice_answer(
    session_id: str,
    req: AnswerRequest,
    request: Request,
    engine: PracticeEngine = Depends(get_practice_engine),
):
    user_id = get_user_id(request)
    confidence_inputs = None
    if req.confidence is not None:
        confidence_inputs = ConfidenceInputs.from_mapping(req.confidence)
    elif req.signals is not None:
        confidence_inputs = derive_confidence_inputs(
            evaluation=req.signals.get("evaluation"),
            facial=req.signals.get("facial"),
            voice=req.signals.get("voice"),
        )

    with domain_errors():
        return engine.submit_answer(
            session_id,
            user_id,
            answer=req.answer,
            elapsed_sec=req.elapsed_sec,
            self_rating=req.self_rating,
            confidence_inputs=confidence_inputs,
        )


@router.post("/practice/{session_id}/skip")
def skip_practice_question(
    session_id: str,
    request: Request,
    req: SkipRequest | None = None,
    engine: PracticeEngine = Depends(get_practice_engine),
):
    user_id = get_user_id(request)
    with domain_errors():
        return engine.skip_question(session_id, user_id, elapsed_sec=(req.elapsed_sec if req else 0.0))


@router.post("/practice/{session_id}/finish")
def finish_practice(session_id: str, request: Request, engine: PracticeEngine = Depends(get_practice_engine)):
    user_id = get_user_id(request)
    with domain_errors():
        session = engine.finish(session_id, user_id)
    return {
        "session_id": session.id,
        "status": session.status,
        "summary": session.summary,
    }


@router.get("/metrics/overview")
def performance_overview(request: Request, limit: int = 100, engine: PracticeEngine = Depends(get_practice_engine)):
    user_id = get_user_id(request)
    sessions = engine.history(user_id, limit=max(1, min(int(limit or 100), 200)))
    return build_performance_overview(sessions)
