from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple


def _str_field(data: Dict[str, Any], key: str, default: str | None = None) -> str:
    value = data.get(key, default)
    if value is None:
        raise ValueError(f"Missing field: {key}")
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string")
    return value


def _ids_field(data: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"Field '{key}' must be a list")
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class JobRecord:
    id: str
    description: str
    image_location: str
    author: str
    runner: str = ""

    @property
    def claimed(self) -> bool:
        return self.runner != ""

    def with_runner(self, runner: str) -> "JobRecord":
        return replace(self, runner=runner)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "imageLocation": self.image_location,
            "author": self.author,
            "runner": self.runner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobRecord":
        # Unknown keys are ignored so older binaries can read newer files.
        return cls(
            id=_str_field(data, "id"),
            description=_str_field(data, "description", ""),
            image_location=_str_field(data, "imageLocation", ""),
            author=_str_field(data, "author"),
            runner=_str_field(data, "runner", ""),
        )


@dataclass(frozen=True)
class UserRecord:
    username: str
    password: str
    authored: Tuple[str, ...] = ()
    running: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "password": self.password,
            "authored": list(self.authored),
            "running": list(self.running),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRecord":
        return cls(
            username=_str_field(data, "username"),
            password=_str_field(data, "password"),
            authored=_ids_field(data, "authored"),
            running=_ids_field(data, "running"),
        )
