"""
Identity for the Work Suite API.

Tokens are HS256 JWTs carrying ``{sub, email, iat, exp}``. They arrive either
as ``Authorization: Bearer`` or in the session cookie. Passwords are stored
as PBKDF2-SHA256 hashes.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
import structlog
from fastapi import Request
from pydantic import BaseModel, constr
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .config import Settings
from .content.primitives import generate_id, utc_now
from .db.models import UserModel
from .errors import ConflictError, StorageFailure, UnauthorizedError

logger = structlog.get_logger()

HASH_SCHEME = "pbkdf2_sha256"
TOKEN_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """The caller resolved from a valid token."""

    id: str
    email: str


class RegisterRequest(BaseModel):
    email: constr(strip_whitespace=True, to_lower=True, pattern=r"^[^@\s]+@[^@\s]+$", max_length=320)
    password: constr(min_length=6, max_length=256)
    display_name: Optional[constr(strip_whitespace=True, min_length=1, max_length=256)] = None


class LoginRequest(BaseModel):
    email: constr(strip_whitespace=True, to_lower=True, min_length=1)
    password: constr(min_length=1)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def issue_token(user_id: str, email: str, settings: Settings) -> str:
    """Create a signed JWT for a user."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(minutes=settings.token_expire_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str, settings: Settings) -> Identity:
    """Verify a token and return its identity, or raise UnauthorizedError."""
    try:
        payload: Dict[str, Any] = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    if not payload.get("sub") or not payload.get("email"):
        raise UnauthorizedError("Invalid token")

    return Identity(id=str(payload["sub"]), email=str(payload["email"]))


def hash_password(password: str, iterations: int) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{HASH_SCHEME}${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt, expected = stored.split("$")
    except ValueError:
        return False
    if scheme != HASH_SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), _b64decode(salt), int(iterations)
    )
    return hmac.compare_digest(_b64encode(digest), expected)


def token_from_request(request: Request, settings: Settings) -> Optional[str]:
    header = request.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(settings.auth_cookie_name) or None


def optional_user(request: Request) -> Optional[Identity]:
    """Dependency: the caller if a valid token was sent, otherwise None."""
    settings: Settings = request.app.state.settings
    token = token_from_request(request, settings)
    if not token:
        return None
    try:
        return decode_token(token, settings)
    except UnauthorizedError as e:
        logger.debug("Ignoring invalid token on optional-auth route", reason=e.message)
        return None


def require_user(request: Request) -> Identity:
    """Dependency: the caller, or UnauthorizedError."""
    settings: Settings = request.app.state.settings
    token = token_from_request(request, settings)
    if not token:
        raise UnauthorizedError("No token provided")
    return decode_token(token, settings)


class UserService:
    """Service for local accounts."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def get(self, user_id: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.email == email).first()

    def register(self, request: RegisterRequest) -> UserModel:
        if self.get_by_email(request.email):
            raise ConflictError(f"Email '{request.email}' is already registered")

        now = utc_now()
        user = UserModel(
            id=generate_id(),
            email=request.email,
            password_hash=hash_password(request.password, self.settings.password_hash_iterations),
            display_name=request.display_name or request.email.split("@")[0],
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Email '{request.email}' is already registered")
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure("Failed to register user", {"reason": str(e)}) from e

        logger.info("User registered", user_id=user.id)
        return user

    def authenticate(self, request: LoginRequest) -> UserModel:
        user = self.get_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.info("Login rejected", email=request.email)
            raise UnauthorizedError("Invalid credentials")
        return user

    def token_response(self, user: UserModel) -> Dict[str, Any]:
        return {
            "token": issue_token(user.id, user.email, self.settings),
            "user": user.to_dict(),
        }
