from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    email: str
    name: str
    created_at: float


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class StartPracticeRequest(BaseModel):
    category: str
    difficulty: str = "easy"
    count: int = 5


class AnswerRequest(BaseModel):
    answer: str = ""
    elapsed_sec: float = 0.0
    self_rating: int
    confidence: dict | None = None
    signals: dict | None = None


class SkipRequest(BaseModel):
    elapsed_sec: float = 0.0


class EvaluateAnswerRequest(BaseModel):
    question: str = ""
    userAnswer: str = ""


class FacialAnalysisRequest(BaseModel):
    frame: str | None = None


class SignalsRequest(BaseModel):
    evaluation: dict | None = None
    facial: dict | None = None
    voice: dict | None = None


class ConfidenceResponse(BaseModel):
    score: int
    level: str
    breakdown: dict[str, float] = Field(default_factory=dict)
