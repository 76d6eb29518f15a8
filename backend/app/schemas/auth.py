from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..services.board import UserProfile


class RegisterBody(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    username: str
    authored: List[str] = []
    running: List[str] = []

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserResponse":
        return cls(username=profile.username, authored=list(profile.authored), running=list(profile.running))
