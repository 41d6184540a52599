from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from badgeshop.models.chat_session import ChatSession, WorkflowPhase


class ChatSessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, session_key: str) -> Optional[ChatSession]:
        return (
            self.db.query(ChatSession)
            .filter(ChatSession.session_key == session_key)
            .first()
        )

    def get_or_create(self, session_key: Optional[str] = None) -> ChatSession:
        if session_key:
            s = self.get(session_key)
            if s:
                return s
        s = ChatSession(
            session_key=session_key or uuid4().hex,
            workflow_active=False,
            phase=int(WorkflowPhase.PURPOSE),
            answers=[],
            recommendation_active=False,
            asked_questions=[],
            recommendation_answers=[],
        )
        self.db.add(s)
        self.db.flush()
        return s

    def save_workflow(self, s: ChatSession, active: bool, phase: int, answers: List[str]) -> ChatSession:
        s.workflow_active = active
        s.phase = phase
        # assign a new list so the JSON column is marked dirty
        s.answers = list(answers)
        s.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return s

    def save_recommendation(self, s: ChatSession, active: bool, asked: List[str], answers: List[str]) -> ChatSession:
        s.recommendation_active = active
        s.asked_questions = list(asked)
        s.recommendation_answers = list(answers)
        s.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return s

    def delete_older_than(self, seconds: int) -> List[str]:
        """Delete sessions idle longer than `seconds`; returns their keys."""
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=seconds)
        keys = [
            k for (k,) in self.db.query(ChatSession.session_key).filter(ChatSession.updated_at < cutoff)
        ]
        if keys:
            self.db.query(ChatSession).filter(ChatSession.session_key.in_(keys)).delete(
                synchronize_session=False
            )
        return keys
