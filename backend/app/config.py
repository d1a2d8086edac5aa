# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Todo API"
    env: str = os.getenv("ENV", "dev")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = _env_list(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    )
    # Preflights from any other origin are still answered (public API)
    cors_origin_regex: str = os.getenv("CORS_ORIGIN_REGEX", ".*")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite://./todos.db")
    # Create tables at startup (dev only, use Aerich migrations otherwise)
    db_generate_schemas: bool = _env_bool("DB_GENERATE_SCHEMAS", "false")

    # Session cookie / token
    session_secret: str = os.getenv("SESSION_SECRET", "dev-secret")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "session_token")
    session_max_age_days: int = int(os.getenv("SESSION_MAX_AGE_DAYS", "30"))
    session_cookie_secure: bool = _env_bool("SESSION_COOKIE_SECURE", "false")

    # Client-side on-device storage (used when no session is active)
    local_storage_path: str = os.getenv("LOCAL_STORAGE_PATH", "./.local_storage.json")

    # Validation limits
    todo_text_max_length: int = 500
    user_name_min_length: int = 2
    user_name_max_length: int = 50
    password_min_length: int = 8
    email_max_length: int = 255


settings = Settings()  # Instantiate configuration

