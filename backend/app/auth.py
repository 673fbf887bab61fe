import hashlib
import hmac
import logging
import secrets
import time
import uuid

from fastapi import HTTPException, Request
from jose import ExpiredSignatureError, JWTError, jwt

from app.storage.base import Store
from core.config import JWT_ALGORITHM, JWT_EXPIRES_MIN, resolve_jwt_secret

logger = logging.getLogger("app.auth")

PBKDF2_ITERATIONS = 120_000
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str, salt: str | None = None) -> tuple[str, str]:
    salt_value = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        str(password or "").encode("utf-8"),
        salt_value.encode("utf-8"),
        PBKDF2_ITERATIONS,
    )
    return digest.hex(), salt_value


def verify_password(password: str, password_hash: str, salt: str) -> bool:
    candidate, _ = hash_password(password, salt)
    return hmac.compare_digest(candidate, str(password_hash or ""))


def public_user(record: dict) -> dict:
    return {
        "id": str(record.get("id") or ""),
        "email": str(record.get("email") or ""),
        "name": str(record.get("name") or ""),
        "created_at": float(record.get("created_at") or 0.0),
    }


def issue_token(user: dict, now_ts: float | None = None) -> str:
    issued_at = int(now_ts if now_ts is not None else time.time())
    payload = {
        "sub": str(user.get("id") or ""),
        "email": str(user.get("email") or ""),
        "iat": issued_at,
        "exp": issued_at + (JWT_EXPIRES_MIN * 60),
    }
    return jwt.encode(payload, resolve_jwt_secret(), algorithm=JWT_ALGORITHM)


def resolve_user_id_from_token(token: str) -> str:
    try:
        payload = jwt.decode(token, resolve_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(401, "Token expired")
    except JWTError:
        raise HTTPException(401, "Invalid token")

    user_id = (payload or {}).get("sub")
    if not user_id:
        raise HTTPException(401, "Invalid token")
    return str(user_id)


def get_user_id(request: Request) -> str:
    auth = request.headers.get("Authorization")
    if not auth:
        raise HTTPException(401, "Unauthorized")

    if not auth.startswith("Bearer "):
        raise HTTPException(401, "Unauthorized")

    token = auth.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(401, "Unauthorized")
    return resolve_user_id_from_token(token)


def register_user(store: Store, email: str, password: str, name: str = "") -> dict:
    normalized_email = str(email or "").strip().lower()
    if "@" not in normalized_email or normalized_email.startswith("@") or normalized_email.endswith("@"):
        raise ValueError("A valid email is required")
    if len(str(password or "")) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if store.get_user_by_email(normalized_email):
        raise FileExistsError("Email already registered")

    password_hash, salt = hash_password(password)
    record = store.create_user({
        "id": str(uuid.uuid4()),
        "email": normalized_email,
        "name": str(name or "").strip() or normalized_email.split("@")[0],
        "password_hash": password_hash,
        "salt": salt,
        "created_at": time.time(),
    })
    logger.info("user registered | user_id=%s", record["id"])
    return record


def authenticate_user(store: Store, email: str, password: str) -> dict:
    record = store.get_user_by_email(email)
    if not record or not verify_password(password, record.get("password_hash", ""), record.get("salt", "")):
        logger.info("login rejected")
        raise PermissionError("Invalid email or password")
    return record
