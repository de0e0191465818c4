"""
테스트 공통 설정 및 Fixtures
pytest의 conftest.py는 모든 테스트에서 공유되는 fixture를 정의
"""
import os
import sys
import json
from datetime import datetime, timezone
from typing import Dict, Any, Generator
from unittest.mock import Mock, patch

import pytest

# 프로젝트 루트를 path에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# settings는 import 시점에 만들어지므로 mcqgen import 전에 환경을 고정
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_DB"] = "1"  # 테스트용 별도 DB
os.environ["ALLOWED_MODELS"] = "o4-mini,o3"

from fastapi.testclient import TestClient

from mcqgen.db import Base, SessionLocal, engine
from mcqgen.services.llm_client import ChatResult


SAMPLE_MCQ_TEXT = """CLINICAL SCENARIO:
A 58-year-old man presents with crushing chest pain radiating to the left arm.

QUESTION:
Which biomarker is most specific for myocardial injury?

OPTIONS:
A) Myoglobin
B) Troponin I
C) CK-MB
D) LDH
E) AST

CORRECT ANSWER:
B

EXPLANATION:
Troponin I is the most specific marker of myocardial injury."""


# ===========================================
# FastAPI 클라이언트
# ===========================================

@pytest.fixture(scope="module")
def app():
    """FastAPI 애플리케이션 인스턴스"""
    from mcqgen.main import app as fastapi_app
    return fastapi_app


@pytest.fixture(scope="module")
def client(app) -> Generator:
    """테스트 클라이언트"""
    with TestClient(app) as test_client:
        yield test_client


# ===========================================
# 싱글톤 초기화
# ===========================================

@pytest.fixture(autouse=True)
def reset_singletons():
    """테스트 간 AuthService / PromptStore 상태가 새지 않도록 초기화"""
    from mcqgen.services import auth_service
    from mcqgen.prompts.mcq_prompt import get_prompt_store

    auth_service._auth_service = None
    get_prompt_store().reset()
    yield
    auth_service._auth_service = None
    get_prompt_store().reset()


# ===========================================
# 인증 관련 Fixtures
# ===========================================

@pytest.fixture
def mock_user() -> Dict[str, Any]:
    """모의 세션 사용자"""
    return {"id": 1, "logged_in_at": "2024-01-01T00:00:00+00:00"}


@pytest.fixture
def mock_token() -> str:
    """모의 인증 토큰"""
    return "test-token-12345-abcde"


@pytest.fixture
def auth_headers(mock_token: str) -> Dict[str, str]:
    """인증 헤더"""
    return {"Authorization": f"Bearer {mock_token}"}


@pytest.fixture
def mock_current_user(app, mock_user: Dict[str, Any]):
    """
    get_current_user 의존성 오버라이드
    인증이 필요한 엔드포인트 테스트 시 사용
    """
    from mcqgen.services.auth_service import get_current_user

    app.dependency_overrides[get_current_user] = lambda: mock_user
    yield mock_user
    app.dependency_overrides.pop(get_current_user, None)


# ===========================================
# Redis 관련 Fixtures
# ===========================================

@pytest.fixture
def mock_redis():
    """Redis 클라이언트 모킹"""
    with patch("redis.Redis") as mock:
        redis_instance = Mock()
        redis_instance.get.return_value = None
        redis_instance.setex.return_value = True
        redis_instance.delete.return_value = 1
        redis_instance.ping.return_value = True
        redis_instance.expire.return_value = True
        mock.return_value = redis_instance
        yield redis_instance


@pytest.fixture
def mock_redis_with_user(mock_redis, mock_user: Dict[str, Any]):
    """사용자 세션이 있는 Redis 모킹"""
    mock_redis.get.return_value = json.dumps(mock_user)
    return mock_redis


# ===========================================
# DB Fixtures
# ===========================================

@pytest.fixture
def db_session() -> Generator:
    """메모리 SQLite 세션 (테스트마다 테이블 재생성)"""
    from mcqgen import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# ===========================================
# MCQ 관련 Fixtures
# ===========================================

@pytest.fixture
def sample_mcq_text() -> str:
    """라벨이 모두 갖춰진 모델 출력"""
    return SAMPLE_MCQ_TEXT


@pytest.fixture
def sample_parsed() -> Dict[str, Any]:
    """SAMPLE_MCQ_TEXT의 구조화 결과"""
    return {
        "clinical_scenario": "A 58-year-old man presents with crushing chest pain radiating to the left arm.",
        "question": "Which biomarker is most specific for myocardial injury?",
        "options": {
            "A": "Myoglobin",
            "B": "Troponin I",
            "C": "CK-MB",
            "D": "LDH",
            "E": "AST",
        },
        "correct_answer": "B",
        "explanation": "Troponin I is the most specific marker of myocardial injury.",
    }


@pytest.fixture
def sample_save_request(sample_mcq_text: str, sample_parsed: Dict[str, Any]) -> Dict[str, Any]:
    """샘플 MCQ 저장 요청"""
    return {
        "name": "Chest pain biomarkers",
        "topic": "Acute coronary syndrome",
        "raw_content": sample_mcq_text,
        "parsed_content": sample_parsed,
        "model": "o4-mini",
        "reasoning_effort": "high",
    }


@pytest.fixture
def sample_record(sample_mcq_text: str, sample_parsed: Dict[str, Any]):
    """Export 테스트용 McqRecord"""
    from mcqgen.schemas.mcq import McqRecord

    return McqRecord(
        id=1,
        name="Chest pain biomarkers",
        topic="Acute coronary syndrome",
        raw_content=sample_mcq_text,
        parsed_content=sample_parsed,
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        rating=4,
        model="o4-mini",
    )


# ===========================================
# LLM / 토크나이저 Fixtures
# ===========================================

@pytest.fixture
def mock_llm(sample_mcq_text: str):
    """생성기에서 호출하는 LLM 함수 모킹"""
    with patch("mcqgen.services.mcq_generator.call_llm_text") as mock:
        mock.return_value = ChatResult(text=sample_mcq_text, reasoning=None, model="o4-mini")
        yield mock


class _WordEncoding:
    """공백 단위로 세는 가짜 tiktoken 인코딩"""

    def encode(self, text, disallowed_special=()):
        return text.split()


@pytest.fixture
def stub_encoding(monkeypatch):
    """tiktoken 다운로드 없이 토큰 수를 계산"""
    from mcqgen.services import token_budget

    encoding = _WordEncoding()
    monkeypatch.setattr(token_budget, "get_encoding", lambda model: encoding)
    return encoding
