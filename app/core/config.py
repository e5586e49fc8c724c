"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Daily Decision Quiz"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./daily_quiz.db"

    # Signs the auth cookie issued by the login service
    secret_key: str = "change-me-in-production-use-env"

    # Session cookie for guest
    session_cookie_name: str = "ddq_session_id"
    session_cookie_max_age: int = 60 * 60 * 24 * 30  # 30 days

    # Auth cookie (session-based for logged-in users)
    auth_cookie_name: str = "ddq_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # Grade tiers, shared by scoring and reporting
    grade_great_threshold: int = 90
    grade_good_threshold: int = 60

    # Decrement top-pick / top-two / exact-ranking counts of a replaced best attempt
    symmetric_aggregate_replacement: bool = False

    submit_max_retries: int = 3
    seed_demo_data: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
