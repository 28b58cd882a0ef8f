from datetime import timedelta

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Academic Workload Tracker"

    # Database
    DATABASE_URL: str = "sqlite:///./acadtrack.db"

    # DEV ONLY: override SECRET_KEY through the environment in production.
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Late policy
    GRACE_PERIOD_MINUTES: int = 10  # submissions within 10 mins after due are not late
    LATE_PENALTY_PER_DAY_PERCENT: int = 10  # 10% per started day late
    LATE_PENALTY_MAX_PERCENT: int = 100

    # Auto-grading
    DEFAULT_STRICTNESS: str = "medium"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def access_token_expire(self) -> timedelta:
        return timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)


settings = Settings()
