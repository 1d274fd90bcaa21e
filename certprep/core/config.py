"""
Configuration management using Pydantic settings.
"""
from typing import List, Union
import os
from pydantic import field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()



class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "CertPrep Practice Exams"
    ENV: str = os.getenv("ENV", "development")
    DEBUG: bool = True
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./certprep.db")

    # JWT Configuration
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Union[List[str], str] = "*"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if v == "*" or v == ["*"]:
            return "*"
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    # Test session configuration
    DEFAULT_QUESTION_COUNT: int = int(os.getenv("DEFAULT_QUESTION_COUNT", 20))
    MAX_QUESTIONS_PER_TEST: int = int(os.getenv("MAX_QUESTIONS_PER_TEST", 90))  # Full exam
    DEFAULT_TIME_LIMIT_MINUTES: int = int(os.getenv("DEFAULT_TIME_LIMIT_MINUTES", 30))
    PASSING_SCORE: float = float(os.getenv("PASSING_SCORE", 70.0))

    # Dashboard / progress configuration
    RECENT_SESSIONS_LIMIT: int = int(os.getenv("RECENT_SESSIONS_LIMIT", 5))
    RECONCILE_BATCH_SIZE: int = int(os.getenv("RECONCILE_BATCH_SIZE", 100))

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
