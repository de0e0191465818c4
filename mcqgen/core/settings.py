"""
환경 설정 모듈
Per-environment configuration with validation
"""
import os
from typing import Optional, List
from functools import cached_property

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class BaseConfig(BaseSettings):
    """
    Base settings shared by every environment
    """
    # ===========================================
    # 애플리케이션 설정
    # ===========================================
    SERVICE_NAME: str = Field(default="mcq-generator")
    ENV: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")
    DEBUG: bool = Field(default=False)

    # ===========================================
    # 네트워크 / 생성 설정
    # ===========================================
    REQUEST_TIMEOUT_MS: int = Field(default=120000)
    LLM_MAX_RETRIES: int = Field(default=2)
    GENERATE_MAX_RETRIES: int = Field(default=1)
    RETRY_BACKOFF_MS: int = Field(default=800)
    PROMPT_TOKEN_LIMIT: int = Field(default=10000)

    # ===========================================
    # Redis 설정 (세션 저장소)
    # ===========================================
    REDIS_HOST: str = Field(default="localhost")
    REDIS_PORT: int = Field(default=6379)
    REDIS_DB: int = Field(default=0)
    REDIS_TTL: int = Field(default=86400)  # 24시간

    # ===========================================
    # 데이터베이스 설정
    # ===========================================
    DATABASE_URL: str = Field(default="sqlite:///./mcq.db")

    # ===========================================
    # LLM API 설정
    # ===========================================
    OPENAI_API_TYPE: str = Field(default="openai")  # openai, azure

    # Azure OpenAI
    AZURE_OPENAI_KEY: Optional[str] = None
    AZURE_OPENAI_ENDPOINT: Optional[str] = None
    AZURE_OPENAI_API_VERSION: str = Field(default="2025-01-01-preview")

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL_NAME: str = Field(default="o4-mini")
    ALLOWED_MODELS: str = Field(default="o4-mini")

    # ===========================================
    # CORS 설정
    # ===========================================
    CORS_ORIGINS: str = Field(default="http://localhost:5000")

    # ===========================================
    # 보안 설정
    # ===========================================
    APP_PASSWORD: str = Field(default="CMYMCQ")
    SESSION_COOKIE_NAME: str = Field(default="mcq_session")
    SESSION_COOKIE_SECURE: bool = Field(default=False)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper

    @field_validator("OPENAI_API_TYPE")
    @classmethod
    def validate_api_type(cls, v: str) -> str:
        valid_types = ["azure", "openai"]
        v_lower = v.lower()
        if v_lower not in valid_types:
            raise ValueError(f"OPENAI_API_TYPE must be one of {valid_types}")
        return v_lower

    @cached_property
    def cors_origins_list(self) -> List[str]:
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @cached_property
    def allowed_models_list(self) -> List[str]:
        return [m.strip() for m in self.ALLOWED_MODELS.split(",") if m.strip()]

    @cached_property
    def is_production(self) -> bool:
        return self.ENV.lower() in ("prod", "production")


class DevelopmentConfig(BaseConfig):
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="DEBUG")


class StagingConfig(BaseConfig):
    ENV: str = Field(default="staging")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")


class ProductionConfig(BaseConfig):
    ENV: str = Field(default="production")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="WARNING")
    SESSION_COOKIE_SECURE: bool = Field(default=True)


class TestConfig(BaseConfig):
    ENV: str = Field(default="test")
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="DEBUG")
    REDIS_DB: int = Field(default=1)  # 테스트용 별도 DB
    DATABASE_URL: str = Field(default="sqlite://")


def get_settings() -> BaseConfig:
    """
    Return the settings object for the current ENV
    """
    env = os.getenv("ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "dev": DevelopmentConfig,
        "local": DevelopmentConfig,
        "staging": StagingConfig,
        "stage": StagingConfig,
        "production": ProductionConfig,
        "prod": ProductionConfig,
        "test": TestConfig,
        "testing": TestConfig,
    }

    config_class = config_map.get(env, DevelopmentConfig)
    return config_class()


# 전역 설정 인스턴스
settings = get_settings()


# ===========================================
# 설정 검증 함수
# ===========================================

def validate_required_settings() -> List[str]:
    """
    Check that the secrets the current environment needs are present

    Returns:
        names of missing settings
    """
    missing = []

    if settings.is_production:
        if settings.APP_PASSWORD == "CMYMCQ":
            missing.append("APP_PASSWORD")

    if settings.OPENAI_API_TYPE == "azure":
        if not settings.AZURE_OPENAI_KEY:
            missing.append("AZURE_OPENAI_KEY")
        if not settings.AZURE_OPENAI_ENDPOINT:
            missing.append("AZURE_OPENAI_ENDPOINT")
    elif settings.OPENAI_API_TYPE == "openai":
        if not settings.OPENAI_API_KEY:
            missing.append("OPENAI_API_KEY")

    return missing
