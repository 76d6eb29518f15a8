from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    app_name: str = "job-board"
    data_dir: Path = Path(os.getenv("JOBBOARD_DATA_DIR", "./data"))
    jobs_filename: str = "Jobs.json"
    users_filename: str = "Users.json"

    # Auth
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_issuer: str = os.getenv("JWT_ISSUER", "job-board")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", "3600"))  # 1h

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Comma-separated; empty means the local Streamlit dev origins.
    cors_allow_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "")

    @property
    def jobs_path(self) -> Path:
        return self.data_dir / self.jobs_filename

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_filename


settings = Settings()
