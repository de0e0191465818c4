"""
통합 인증 서비스
Shared-password login with Redis-backed sessions
"""
import hmac
import json
import uuid
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple

import redis
from fastapi import HTTPException, Request, status

from mcqgen.core.constants import RedisKeys, ErrorMessages, AuthCodes, HTTPHeaders
from mcqgen.core.exceptions import (
    InvalidPasswordError,
    TokenExpiredError,
    TokenInvalidError,
    TokenCorruptError,
    RedisError
)
from mcqgen.core.settings import settings

logger = logging.getLogger(__name__)

# 단일 공유 비밀번호이므로 사용자는 하나뿐
SHARED_USER_ID = 1


def password_matches(candidate: str, expected: str) -> bool:
    """Case-insensitive constant-time comparison."""
    return hmac.compare_digest(
        (candidate or "").upper().encode("utf-8"),
        (expected or "").upper().encode("utf-8"),
    )


class AuthService:
    """
    Auth service.
    Checks the shared password and manages sessions stored in Redis.
    """

    def __init__(
        self,
        redis_host: str = "localhost",
        redis_port: int = 6379,
        redis_db: int = 0,
        ttl: int = 86400,  # 24시간
        password: str = "CMYMCQ",
    ):
        self.ttl = ttl
        self._password = password
        try:
            self.redis_client = redis.Redis(
                host=redis_host,
                port=redis_port,
                db=redis_db,
                decode_responses=True,
                socket_connect_timeout=3
            )
            # 연결 테스트
            self.redis_client.ping()
        except redis.ConnectionError as e:
            logger.error(f"Redis connection failed: {e}")
            raise RedisError("Cannot connect to the Redis server.", original_error=e)

    def login(self, password: str) -> Tuple[str, Dict[str, Any]]:
        """
        Check the shared password and open a session

        Returns:
            (session token, session user)

        Raises:
            InvalidPasswordError: wrong password
            RedisError: session could not be stored
        """
        if not password_matches(password, self._password):
            logger.warning("login_failed")
            raise InvalidPasswordError()
        user = {
            "id": SHARED_USER_ID,
            "logged_in_at": datetime.now(timezone.utc).isoformat(),
        }
        return self.create_session(user), user

    def create_session(self, user_info: Dict[str, Any]) -> str:
        token = str(uuid.uuid4())
        key = RedisKeys.auth_session(token)

        try:
            self.redis_client.setex(
                key,
                self.ttl,
                json.dumps(user_info, ensure_ascii=False)
            )
            logger.info(f"session created: user_id={user_info.get('id')}")
            return token
        except redis.RedisError as e:
            logger.error(f"session create failed: {e}")
            raise RedisError("Failed to create the session.", original_error=e)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Validate a token and return the session payload

        Raises:
            TokenInvalidError: empty token
            TokenExpiredError: unknown or expired token
            TokenCorruptError: session payload is not a JSON object
            RedisError: Redis failure
        """
        if not token:
            raise TokenInvalidError()

        key = RedisKeys.auth_session(token)

        try:
            user_data = self.redis_client.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis lookup error: {e}")
            raise RedisError(original_error=e)

        if not user_data:
            raise TokenExpiredError()

        try:
            user_json = json.loads(user_data)
            if not isinstance(user_json, dict):
                raise ValueError("Invalid session payload")
            return user_json
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"session payload parse error: {e}")
            raise TokenCorruptError()

    def refresh_session(self, token: str) -> bool:
        key = RedisKeys.auth_session(token)
        try:
            return bool(self.redis_client.expire(key, self.ttl))
        except redis.RedisError as e:
            logger.error(f"session refresh failed: {e}")
            return False

    def delete_session(self, token: str) -> bool:
        key = RedisKeys.auth_session(token)
        try:
            result = self.redis_client.delete(key)
            return result > 0
        except redis.RedisError as e:
            logger.error(f"session delete failed: {e}")
            return False


# ===========================================
# 싱글톤 인스턴스
# ===========================================

_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(
            redis_host=settings.REDIS_HOST,
            redis_port=settings.REDIS_PORT,
            redis_db=settings.REDIS_DB,
            ttl=settings.REDIS_TTL,
            password=settings.APP_PASSWORD,
        )
    return _auth_service


# ===========================================
# FastAPI 의존성
# ===========================================

def extract_token(request: Request) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    authorization = request.headers.get(HTTPHeaders.AUTHORIZATION)
    if authorization:
        if not authorization.startswith(HTTPHeaders.BEARER_PREFIX):
            return ""
        return authorization.replace(HTTPHeaders.BEARER_PREFIX, "", 1).strip()
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def _unauthorized(message: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "message": message,
            "code": code,
            "login_url": "/login"
        },
        headers={"WWW-Authenticate": "Bearer"}
    )


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency: the current session user

    사용법:
        @router.get("/protected")
        def protected_route(user: dict = Depends(get_current_user)):
            return {"user": user}
    """
    token = extract_token(request)
    if token is None:
        raise _unauthorized(ErrorMessages.AUTH_REQUIRED, AuthCodes.AUTH_REQUIRED)

    try:
        auth_service = get_auth_service()
        user = auth_service.verify_token(token)
        # 활동 중인 세션은 TTL 연장
        auth_service.refresh_session(token)
        return user
    except TokenInvalidError:
        raise _unauthorized(ErrorMessages.AUTH_INVALID, AuthCodes.AUTH_INVALID)
    except TokenExpiredError:
        raise _unauthorized(ErrorMessages.AUTH_EXPIRED, AuthCodes.AUTH_EXPIRED)
    except TokenCorruptError:
        raise _unauthorized("Session data is corrupt.", AuthCodes.AUTH_CORRUPT)
    except RedisError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": ErrorMessages.REDIS_ERROR}
        )
