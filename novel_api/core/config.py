"""
Application settings
"""

from pydantic_settings import BaseSettings
from typing import List, Literal
from pathlib import Path
from dotenv import load_dotenv


"""env loading priority
1) OS environment variables
2) .env at the project root
3) .env in the current working directory (pydantic-settings env_file)
"""

_here = Path(__file__).resolve()
PROJECT_ROOT = _here.parents[2]
_root_env = PROJECT_ROOT / ".env"
if _root_env.exists():
    # OS environment wins (override=False)
    load_dotenv(dotenv_path=str(_root_env), override=False)

_PLACEHOLDER_SECRET = "change-this-access-token-secret"
_PLACEHOLDER_REFRESH_SECRET = "change-this-refresh-token-secret"


class Settings(BaseSettings):
    """Application settings"""
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    # MongoDB
    DATABASE_URL: str = "mongodb://localhost:27017"
    DB_NAME: str = "novels"
    COLLECTION_NAME: str = "novels"
    USERS_COLLECTION: str = "Users"
    COMMENTS_COLLECTION: str = "Comments"
    DB_TIMEOUT_MS: int = 5000

    # File tree holding covers and chapter markdown
    NOVEL_PATH: str = str(PROJECT_ROOT / "Test_Novels")

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]

    # JWT
    JWT_SECRET_KEY: str = _PLACEHOLDER_SECRET
    JWT_REFRESH_SECRET_KEY: str = _PLACEHOLDER_REFRESH_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Search
    DEFAULT_PAGE_SIZE: int = 100
    MAX_PAGE_SIZE: int = 100
    # Empty means every non-reserved query parameter is a substring filter
    FILTERABLE_FIELDS: List[str] = []
    TAGS_EXCLUDE_COMBINATOR: Literal["or", "and"] = "or"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'

settings = Settings()


def validate_settings():
    """Validate settings for the current environment"""
    if settings.ENVIRONMENT == "production":
        if settings.JWT_SECRET_KEY == _PLACEHOLDER_SECRET:
            raise ValueError("JWT_SECRET_KEY must be changed in production.")
        if settings.JWT_REFRESH_SECRET_KEY == _PLACEHOLDER_REFRESH_SECRET:
            raise ValueError("JWT_REFRESH_SECRET_KEY must be changed in production.")
        if settings.JWT_SECRET_KEY == settings.JWT_REFRESH_SECRET_KEY:
            raise ValueError("Access and refresh tokens must use different secrets.")

    if settings.MAX_PAGE_SIZE < 1:
        raise ValueError("MAX_PAGE_SIZE must be at least 1.")

    return True


validate_settings()
