from fastapi import APIRouter, Depends, HTTPException, Request

from app.api.errors import domain_errors
from app.auth import authenticate_user, get_user_id, issue_token, public_user, register_user
from app.runtime import get_store
from app.schemas import AuthResponse, LoginRequest, RegisterRequest, UserOut
from app.storage.base import Store
from app.system_metrics import increment_metric

router = APIRouter(prefix="/api/auth")


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(req: RegisterRequest, store: Store = Depends(get_store)):
    with domain_errors():
        user = register_user(store, req.email, req.password, req.name)
    increment_metric("users_registered")
    return {"access_token": issue_token(user), "token_type": "bearer", "user": public_user(user)}


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, store: Store = Depends(get_store)):
    try:
        user = authenticate_user(store, req.email, req.password)
    except PermissionError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    increment_metric("logins_total")
    return {"access_token": issue_token(user), "token_type": "bearer", "user": public_user(user)}


@router.get("/me", response_model=UserOut)
def me(request: Request, store: Store = Depends(get_store)):
    user_id = get_user_id(request)
    user = store.get_user(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")
    return public_user(user)
