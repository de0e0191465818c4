"""
상수 정의 모듈
Magic strings used across routes and services
"""


class RedisKeys:
    """Redis key patterns"""
    AUTH_SESSION = "auth:{token}"

    @classmethod
    def auth_session(cls, token: str) -> str:
        return cls.AUTH_SESSION.format(token=token)


class AuthCodes:
    """Authentication error codes"""
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_EXPIRED = "AUTH_EXPIRED"
    AUTH_CORRUPT = "AUTH_CORRUPT"
    AUTH_INVALID = "AUTH_INVALID"
    AUTH_PASSWORD = "AUTH_PASSWORD"


class ErrorCodes:
    """Error codes"""
    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    MCQ_NOT_FOUND = "MCQ_NOT_FOUND"
    MCQ_GENERATION_FAILED = "MCQ_GENERATION_FAILED"
    EXPORT_FAILED = "EXPORT_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    REDIS_ERROR = "REDIS_ERROR"


class ErrorMessages:
    """User facing error messages"""
    AUTH_REQUIRED = "Not logged in."
    AUTH_EXPIRED = "Session expired. Please log in again."
    AUTH_INVALID = "Invalid credentials."
    AUTH_PASSWORD = "Incorrect password"
    INVALID_INPUT = "Invalid input."
    MCQ_NOT_FOUND = "MCQ not found."
    MCQ_GENERATION_FAILED = "Failed to generate MCQ."
    EXPORT_FAILED = "Failed to export MCQs."
    INTERNAL_ERROR = "Internal Server Error"
    REDIS_ERROR = "Session store error."


class ReasoningEfforts:
    """Reasoning effort hint forwarded to the model"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    ALL = [LOW, MEDIUM, HIGH]
    DEFAULT = MEDIUM


class OptionLetters:
    """Answer option slots"""
    ALL = ("A", "B", "C", "D", "E")


class SectionLabels:
    """Section labels the model is asked to emit"""
    CLINICAL_SCENARIO = "CLINICAL SCENARIO:"
    QUESTION = "QUESTION:"
    OPTIONS = "OPTIONS:"
    CORRECT_ANSWER = "CORRECT ANSWER:"
    EXPLANATION = "EXPLANATION:"
    FEEDBACK = "CORRECT ANSWER AND FEEDBACK:"


class HTTPHeaders:
    """HTTP header constants"""
    AUTHORIZATION = "Authorization"
    BEARER_PREFIX = "Bearer "
    REQUEST_ID = "X-Request-Id"
    XLSX_CONTENT = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    PDF_CONTENT = "application/pdf"
