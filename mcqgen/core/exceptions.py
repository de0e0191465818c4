"""
커스텀 예외 클래스 정의
Exception hierarchy rendered by the global error handlers
"""
from typing import Any, Dict, Optional
from fastapi import status

from mcqgen.core.constants import AuthCodes, ErrorCodes, ErrorMessages


class AppException(Exception):
    """
    Base application exception.
    Every custom exception carries a code, a message and an HTTP status.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


# ===========================================
# 인증 관련 예외
# ===========================================

class AuthenticationError(AppException):
    """Authentication failure"""

    def __init__(
        self,
        message: str = ErrorMessages.AUTH_REQUIRED,
        code: str = AuthCodes.AUTH_REQUIRED,
        login_url: str = "/login"
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details={"login_url": login_url}
        )


class InvalidPasswordError(AuthenticationError):
    def __init__(self, message: str = ErrorMessages.AUTH_PASSWORD):
        super().__init__(message=message, code=AuthCodes.AUTH_PASSWORD)


class TokenExpiredError(AuthenticationError):
    def __init__(self, message: str = ErrorMessages.AUTH_EXPIRED):
        super().__init__(message=message, code=AuthCodes.AUTH_EXPIRED)


class TokenInvalidError(AuthenticationError):
    def __init__(self, message: str = ErrorMessages.AUTH_INVALID):
        super().__init__(message=message, code=AuthCodes.AUTH_INVALID)


class TokenCorruptError(AuthenticationError):
    def __init__(self, message: str = "Session data is corrupt."):
        super().__init__(message=message, code=AuthCodes.AUTH_CORRUPT)


# ===========================================
# 검증 관련 예외
# ===========================================

class ValidationError(AppException):
    """Input validation failure"""

    def __init__(
        self,
        message: str = ErrorMessages.INVALID_INPUT,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            code=ErrorCodes.VALIDATION_FAILED,
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )


class BadRequestError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCodes.VALIDATION_FAILED,
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


# ===========================================
# 리소스 관련 예외
# ===========================================

class NotFoundError(AppException):
    """Resource not found"""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        message: Optional[str] = None
    ):
        msg = message or f"{resource} {resource_id} not found."
        super().__init__(
            code=f"{resource.upper()}_NOT_FOUND",
            message=msg,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": str(resource_id)}
        )


class McqNotFoundError(NotFoundError):
    def __init__(self, mcq_id: Any):
        super().__init__(
            resource="Mcq",
            resource_id=mcq_id,
            message=ErrorMessages.MCQ_NOT_FOUND
        )


# ===========================================
# 외부 서비스 관련 예외
# ===========================================

class ExternalServiceError(AppException):
    """External service call failed"""

    def __init__(
        self,
        service: str,
        message: str,
        original_error: Optional[Exception] = None
    ):
        msg = f"{service} service error: {message}"
        details = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            code=ErrorCodes.EXTERNAL_SERVICE_ERROR,
            message=msg,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details
        )


class LLMAPIError(ExternalServiceError):
    """LLM API call failed"""

    def __init__(
        self,
        provider: str,
        message: str = "LLM API request failed.",
        original_error: Optional[Exception] = None
    ):
        super().__init__(
            service=f"LLM ({provider})",
            message=message,
            original_error=original_error
        )


class RedisError(AppException):
    def __init__(
        self,
        message: str = ErrorMessages.REDIS_ERROR,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            code=ErrorCodes.REDIS_ERROR,
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )


# ===========================================
# 비즈니스 로직 예외
# ===========================================

class McqGenerationError(AppException):
    """The model returned nothing usable"""

    def __init__(
        self,
        message: str = ErrorMessages.MCQ_GENERATION_FAILED,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            code=ErrorCodes.MCQ_GENERATION_FAILED,
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )


class ExportError(AppException):
    def __init__(
        self,
        export_format: str,
        original_error: Optional[Exception] = None
    ):
        details = {"format": export_format}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            code=ErrorCodes.EXPORT_FAILED,
            message=f"{ErrorMessages.EXPORT_FAILED} ({export_format})",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )
