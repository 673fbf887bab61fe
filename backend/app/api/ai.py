from fastapi import APIRouter, File, Request, UploadFile

from app.api.errors import domain_errors
from app.auth import get_user_id
from app.schemas import ConfidenceResponse, EvaluateAnswerRequest, FacialAnalysisRequest, SignalsRequest
from app.scoring.confidence import ConfidenceInputs, calculate_confidence_score
from app.scoring.signals import derive_confidence_inputs
from app.services.evaluation_service import evaluate_answer
from app.services.facial_service import analyze_facial
from app.services.transcription_service import transcribe
from app.system_metrics import increment_metric

router = APIRouter(prefix="/api")


@router.post("/transcribe")
async def transcribe_route(request: Request, audio: UploadFile = File(...)):
    get_user_id(request)
    content = await audio.read()
    with domain_errors():
        return transcribe(content, filename=audio.filename or "answer.webm")


@router.post("/evaluate-answer")
def evaluate_answer_route(req: EvaluateAnswerRequest, request: Request):
    get_user_id(request)
    with domain_errors():
        return {"evaluation": evaluate_answer(req.question, req.userAnswer)}


@router.post("/analyze-facial")
def analyze_facial_route(request: Request, req: FacialAnalysisRequest | None = None):
    get_user_id(request)
    return analyze_facial(req.frame if req else None)


@router.post("/confidence/score", response_model=ConfidenceResponse)
def confidence_score_route(payload: dict, request: Request):
    get_user_id(request)
    with domain_errors():
        result = calculate_confidence_score(ConfidenceInputs.from_mapping(payload))
    increment_metric("confidence_scores_computed")
    return result.to_dict()


@router.post("/confidence/from-signals")
def confidence_from_signals_route(req: SignalsRequest, request: Request):
    get_user_id(request)
    inputs = derive_confidence_inputs(evaluation=req.evaluation, facial=req.facial, voice=req.voice)
    with domain_errors():
        result = calculate_confidence_score(inputs)
    increment_metric("confidence_scores_computed")
    return {"inputs": inputs.to_dict(), **result.to_dict()}
