"""
Account routes: register, login and the current user.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .auth import Identity, LoginRequest, RegisterRequest, UserService, require_user
from .db.base import get_db
from .errors import NotFoundError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    service = UserService(db, request.app.state.settings)
    user = service.register(data)
    return service.token_response(user)


@router.post("/login")
async def login(
    data: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> JSONResponse:
    """Exchange credentials for a token; the token is also set as a cookie."""
    settings = request.app.state.settings
    service = UserService(db, settings)
    body = service.token_response(service.authenticate(data))

    response = JSONResponse(body)
    response.set_cookie(
        settings.auth_cookie_name,
        body["token"],
        max_age=settings.token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.environment == "production",
    )
    return response


@router.get("/me")
async def me(
    request: Request,
    user: Identity = Depends(require_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    account = UserService(db, request.app.state.settings).get(user.id)
    if account is None:
        raise NotFoundError("User", user.id)
    return account.to_dict()
