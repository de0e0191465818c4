"""
Core 모듈
Settings, constants and exceptions
"""
from mcqgen.core.settings import settings, get_settings
from mcqgen.core.constants import (
    RedisKeys,
    AuthCodes,
    ErrorCodes,
    ErrorMessages,
    ReasoningEfforts,
    OptionLetters,
    SectionLabels,
    HTTPHeaders,
)
from mcqgen.core.exceptions import (
    AppException,
    AuthenticationError,
    InvalidPasswordError,
    TokenExpiredError,
    TokenInvalidError,
    TokenCorruptError,
    ValidationError,
    BadRequestError,
    NotFoundError,
    McqNotFoundError,
    ExternalServiceError,
    LLMAPIError,
    RedisError,
    McqGenerationError,
    ExportError,
)

__all__ = [
    # Settings
    "settings",
    "get_settings",

    # Constants
    "RedisKeys",
    "AuthCodes",
    "ErrorCodes",
    "ErrorMessages",
    "ReasoningEfforts",
    "OptionLetters",
    "SectionLabels",
    "HTTPHeaders",

    # Exceptions
    "AppException",
    "AuthenticationError",
    "InvalidPasswordError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenCorruptError",
    "ValidationError",
    "BadRequestError",
    "NotFoundError",
    "McqNotFoundError",
    "ExternalServiceError",
    "LLMAPIError",
    "RedisError",
    "McqGenerationError",
    "ExportError",
]
