import enum
from datetime import datetime, timezone

from badgeshop.db import Base
from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String


class WorkflowPhase(enum.IntEnum):
    PURPOSE = 0
    COLORS = 1
    STYLE = 2
    ELEMENTS = 3
    FINAL = 4

    @property
    def label(self) -> str:
        return self.name.lower()


QUESTION_PHASES = [
    WorkflowPhase.PURPOSE,
    WorkflowPhase.COLORS,
    WorkflowPhase.STYLE,
    WorkflowPhase.ELEMENTS,
]


class ChatSession(Base):
    __tablename__ = "chat_sessions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    session_key = Column(String(64), unique=True, nullable=False, index=True)
    workflow_active = Column(Boolean, nullable=False, default=False)
    phase = Column(Integer, nullable=False, default=int(WorkflowPhase.PURPOSE))
    answers = Column(JSON, nullable=False, default=list)
    # badge recommendation questionnaire
    recommendation_active = Column(Boolean, nullable=False, default=False)
    asked_questions = Column(JSON, nullable=False, default=list)
    recommendation_answers = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
