from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas.auth import RegisterBody, UserResponse
from ..schemas.jobs import ERROR_RESPONSES
from ..services.board import JobBoard
from .auth import get_board


router = APIRouter(prefix="/users", tags=["users"], responses=ERROR_RESPONSES)


@router.post("", response_model=UserResponse, status_code=201)
def register(body: RegisterBody, board: JobBoard = Depends(get_board)) -> UserResponse:
    return UserResponse.from_profile(board.register(body.username, body.password))


@router.get("/{username}", response_model=UserResponse)
def get_user(username: str, board: JobBoard = Depends(get_board)) -> UserResponse:
    return UserResponse.from_profile(board.profile(username))
