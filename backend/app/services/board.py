from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Tuple

from ..core.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationError
from ..core.security import hash_password, verify_password
from ..db.models import JobRecord, UserRecord
from ..db.records import JsonRecordStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserProfile:
    username: str
    authored: Tuple[str, ...]
    running: Tuple[str, ...]


def _swap_remove(ids: Tuple[str, ...], target: str) -> Tuple[str, ...]:
    items = list(ids)
    for i, item in enumerate(items):
        if item != target:
            continue
        items[i] = items[-1]
        items.pop()
        break
    return tuple(items)


class JobBoard:
    """Job lifecycle on top of the job and user stores.

    Every mutating operation holds the jobs lock (and, when it touches
    back-references, the users lock) from the first read to the last write.
    Locks are always taken jobs first, then users.
    """

    def __init__(
        self,
        jobs: JsonRecordStore[JobRecord],
        users: JsonRecordStore[UserRecord],
        clock: Callable[[], int] = time.time_ns,
    ):
        self.jobs = jobs
        self.users = users
        self._clock = clock
        self._id_lock = threading.Lock()
        self._last_id = 0

    def _next_id(self) -> str:
        with self._id_lock:
            candidate = self._clock()
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
            return str(candidate)

    # -----------------
    # Jobs
    # -----------------
    def list_jobs(self, available_only: bool = False) -> List[JobRecord]:
        jobs = self.jobs.read().values()
        if available_only:
            jobs = [j for j in jobs if not j.claimed]
        return sorted(jobs, key=lambda j: (len(j.id), j.id))

    def get(self, job_id: str) -> JobRecord:
        job = self.jobs.read().get(job_id)
        if job is None:
            raise NotFound("Id does not exist")
        return job

    def create(self, description: str, image_location: str, author: str) -> str:
        with self.jobs.transaction() as jobs, self.users.transaction() as users:
            user = users.get(author)
            if user is None:
                raise NotFound(f"Unknown user: {author}")
            job_id = self._next_id()
            if job_id in jobs:
                raise Conflict("Job already exists")

            jobs[job_id] = JobRecord(
                id=job_id,
                description=description,
                image_location=image_location,
                author=author,
            )
            users[author] = replace(user, authored=user.authored + (job_id,))

        logger.info("job created id=%s author=%s", job_id, author)
        return job_id

    def delete(self, job_id: str, requester: str) -> None:
        # Back-references in authored/running are left behind; profile()
        # filters ids that no longer resolve.
        with self.jobs.transaction() as jobs:
            job = jobs.get(job_id)
            if job is None:
                raise NotFound("Id does not exist")
            if job.author != requester:
                logger.info("delete rejected id=%s requester=%s author=%s", job_id, requester, job.author)
                raise Forbidden("Only the author may delete this job")
            del jobs[job_id]

        logger.info("job deleted id=%s by=%s", job_id, requester)

    def checkout(self, job_id: str, requester: str) -> None:
        with self.jobs.transaction() as jobs, self.users.transaction() as users:
            job = jobs.get(job_id)
            if job is None:
                raise NotFound("Id does not exist")
            if job.claimed:
                logger.info("checkout rejected id=%s requester=%s runner=%s", job_id, requester, job.runner)
                raise Conflict("This job is already being run")
            user = users.get(requester)
            if user is None:
                raise NotFound(f"Unknown user: {requester}")

            jobs[job_id] = job.with_runner(requester)
            users[requester] = replace(user, running=user.running + (job_id,))

        logger.info("job checked out id=%s runner=%s", job_id, requester)

    def checkin(self, job_id: str, requester: str) -> None:
        with self.jobs.transaction() as jobs, self.users.transaction() as users:
            job = jobs.get(job_id)
            if job is None:
                raise NotFound("Id does not exist")
            if job.runner != requester:
                logger.info("checkin rejected id=%s requester=%s runner=%r", job_id, requester, job.runner)
                raise Conflict("You are not currently running this job")

            jobs[job_id] = job.with_runner("")
            user = users.get(requester)
            if user is not None:
                users[requester] = replace(user, running=_swap_remove(user.running, job_id))

        logger.info("job checked in id=%s runner=%s", job_id, requester)

    # -----------------
    # Users
    # -----------------
    def register(self, username: str, password: str) -> UserProfile:
        if not username or not password:
            raise ValidationError("Username and password are required")
        if username != username.strip():
            raise ValidationError("Username may not start or end with whitespace")
        if ":" in username:
            raise ValidationError("Username may not contain ':'")

        with self.users.transaction() as users:
            if username in users:
                raise Conflict("Username already taken")
            users[username] = UserRecord(username=username, password=hash_password(username, password))

        logger.info("user registered username=%s", username)
        return UserProfile(username=username, authored=(), running=())

    def authenticate(self, username: str, password: str) -> UserRecord:
        user = self.users.read().get(username)
        if user is None or not verify_password(username, password, user.password):
            raise Unauthenticated("Invalid username or password")
        return user

    def profile(self, username: str) -> UserProfile:
        user = self.users.read().get(username)
        if user is None:
            raise NotFound(f"Unknown user: {username}")
        jobs = self.jobs.read()
        return UserProfile(
            username=user.username,
            authored=tuple(j for j in user.authored if j in jobs),
            running=tuple(j for j in user.running if j in jobs),
        )
