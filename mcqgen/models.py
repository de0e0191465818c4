from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, Text, JSON, CheckConstraint

from mcqgen.core.constants import ReasoningEfforts
from mcqgen.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Mcq(Base):
    __tablename__ = "mcqs"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_mcqs_rating_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    topic = Column(Text, nullable=False)
    # 모델 원문은 그대로 보관 (재파싱/감사용)
    raw_content = Column(Text, nullable=False)
    # ParsedContent JSON (생성본 또는 사용자가 수정한 버전)
    parsed_content = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    rating = Column(Integer, default=0, nullable=False)
    model = Column(String(128), nullable=False)
    reasoning = Column(Text, nullable=True)
    reasoning_effort = Column(String(16), default=ReasoningEfforts.DEFAULT, nullable=False)
