from .board import JobBoard, UserProfile

__all__ = [
    "JobBoard",
    "UserProfile",
]
