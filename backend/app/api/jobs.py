from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from ..db.models import UserRecord
from ..schemas.jobs import (
    ERROR_RESPONSES,
    CheckedResponse,
    CreatedResponse,
    CreateJobRequest,
    JobResponse,
    MessageResponse,
)
from ..services.board import JobBoard
from .auth import get_board, get_current_user


router = APIRouter(prefix="/jobs", tags=["jobs"], responses=ERROR_RESPONSES)


@router.get("", response_model=List[JobResponse])
def list_jobs(available: bool = False, board: JobBoard = Depends(get_board)) -> List[JobResponse]:
    return [JobResponse.from_record(j) for j in board.list_jobs(available_only=available)]


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, board: JobBoard = Depends(get_board)) -> JobResponse:
    return JobResponse.from_record(board.get(job_id))


@router.post("", response_model=CreatedResponse)
def create_job(
    req: CreateJobRequest,
    user: UserRecord = Depends(get_current_user),
    board: JobBoard = Depends(get_board),
) -> CreatedResponse:
    job_id = board.create(req.description, req.image_location, user.username)
    return CreatedResponse(created_id=job_id)


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: str,
    user: UserRecord = Depends(get_current_user),
    board: JobBoard = Depends(get_board),
) -> MessageResponse:
    board.delete(job_id, user.username)
    return MessageResponse()


# Checkout has always been a POST; PUT is accepted to mirror checkin.
@router.api_route("/{job_id}/checkout", methods=["POST", "PUT"], response_model=CheckedResponse)
def checkout_job(
    job_id: str,
    user: UserRecord = Depends(get_current_user),
    board: JobBoard = Depends(get_board),
) -> CheckedResponse:
    board.checkout(job_id, user.username)
    return CheckedResponse(checked_id=job_id)


@router.put("/{job_id}/checkin", response_model=CheckedResponse)
def checkin_job(
    job_id: str,
    user: UserRecord = Depends(get_current_user),
    board: JobBoard = Depends(get_board),
) -> CheckedResponse:
    board.checkin(job_id, user.username)
    return CheckedResponse(checked_id=job_id)
