"""
Description:
Application settings loaded from the environment.

A single frozen Settings instance is built on first use and shared for the
process lifetime. Route dependencies receive it through get_settings so tests
can override it.

Dependencies:
- dotenv: For loading environment variables from a .env file.
- dataclasses: For the immutable settings container.

Author: @kcaparas1630
"""
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List
from dotenv import load_dotenv

load_dotenv()

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the API."""
    env: str = "development"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "MockInterview"
    ai_api_key: str = ""
    ai_base_url: str = GEMINI_OPENAI_BASE_URL
    ai_model: str = "gemini-2.0-flash"
    ai_questions_model: str = "gemini-2.5-pro"
    ai_timeout_seconds: float = 60.0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    ai_rate_limit: str = "10/minute"
    default_rate_limit: str = "60/minute"
    firebase_credentials_path: str = ""


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        env=os.getenv("ENV", "development"),
        mongodb_uri=os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
        mongodb_db_name=os.getenv("MONGODB_DB_NAME", "MockInterview"),
        ai_api_key=os.getenv("AI_API_KEY", ""),
        ai_base_url=os.getenv("AI_BASE_URL", GEMINI_OPENAI_BASE_URL),
        ai_model=os.getenv("AI_MODEL", "gemini-2.0-flash"),
        ai_questions_model=os.getenv("AI_QUESTIONS_MODEL", "gemini-2.5-pro"),
        ai_timeout_seconds=float(os.getenv("AI_TIMEOUT_SECONDS", "60")),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")),
        ai_rate_limit=os.getenv("AI_RATE_LIMIT", "10/minute"),
        default_rate_limit=os.getenv("DEFAULT_RATE_LIMIT", "60/minute"),
        firebase_credentials_path=os.getenv("FIREBASE_CREDENTIALS_PATH", ""),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
