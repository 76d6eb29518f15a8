from __future__ import annotations

import jwt
from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBasic, HTTPBasicCredentials, HTTPBearer

from ..core.config import Settings
from ..core.errors import Unauthenticated
from ..core.security import issue_jwt, verify_jwt
from ..db.models import UserRecord
from ..schemas.auth import TokenResponse, UserResponse
from ..schemas.jobs import ERROR_RESPONSES
from ..services.board import JobBoard


router = APIRouter(prefix="/auth", tags=["auth"], responses=ERROR_RESPONSES)

basic = HTTPBasic(auto_error=False)
bearer = HTTPBearer(auto_error=False)


def get_board(request: Request) -> JobBoard:
    return request.app.state.board


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    basic_creds: HTTPBasicCredentials | None = Depends(basic),
    bearer_creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    board: JobBoard = Depends(get_board),
    settings: Settings = Depends(get_settings),
) -> UserRecord:
    if basic_creds is not None:
        return board.authenticate(basic_creds.username, basic_creds.password)
    if bearer_creds is None:
        raise Unauthenticated("Not authenticated")
    try:
        payload = verify_jwt(bearer_creds.credentials, settings)
    except jwt.PyJWTError:
        raise Unauthenticated("Invalid token")
    user = board.users.read().get(str(payload.get("sub", "")))
    if user is None:
        raise Unauthenticated("Invalid token")
    return user


@router.post("/token", response_model=TokenResponse)
def token(
    user: UserRecord = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    return TokenResponse(access_token=issue_jwt(user.username, settings))


@router.get("/me", response_model=UserResponse)
def me(user: UserRecord = Depends(get_current_user), board: JobBoard = Depends(get_board)) -> UserResponse:
    return UserResponse.from_profile(board.profile(user.username))
