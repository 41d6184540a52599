import random
import threading
from collections import defaultdict
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from badgeshop.adapters.anthropic_chat import AnthropicChatAdapter
from badgeshop.config import settings
from badgeshop.models.chat_session import QUESTION_PHASES, ChatSession, WorkflowPhase
from badgeshop.repositories.chat_session_repo import ChatSessionRepository
from badgeshop.services import chat_prompts
from badgeshop.utils.log import get_logger

log = get_logger("chat")

RELEVANT_KEYWORDS = [
    "badge", "badges", "id", "card", "cards", "credential", "credentials", "design",
    "background", "accessory", "accessories", "lanyard", "lanyards", "holder", "holders",
    "miller square", "millersquare", "order", "delivery", "shipping", "price", "cost",
    "material", "plastic", "metal", "discount",
    # photos and personal data printed on cards
    "photo", "photos", "photograph", "picture", "pictures", "image", "images", "portrait",
    "headshot", "camera", "snapshot", "name", "names", "id card", "id cards",
    "identification", "identity", "personal data", "personal info", "personal information",
    "employee photo", "profile picture", "face", "facial",
    "logo", "print", "printing", "custom", "event", "conference", "company", "employee",
    "corporate", "school", "student", "faculty", "security", "access", "layout", "template",
    "magnetic", "stripe", "rfid", "qr", "barcode", "return", "policy", "contact", "help",
    "support", "question", "timeline",
]

BACKGROUND_KEYWORDS = [
    "background", "backdrop", "design prompt", "background prompt", "badge background",
    "generate background", "create background", "background design", "background ideas",
    "background suggestions",
]

RECOMMENDATION_KEYWORDS = [
    "suggestion", "prompt", "help with", "recommend", "badge design", "custom badge", "create a badge",
]

RECOMMENDATION_QUESTION_COUNT = 3

SHORT_MESSAGE_CHARS = 15
LONG_MESSAGE_CHARS = 60

FINAL_PHASE = "final"


class ChatServiceError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def is_off_topic(message: str) -> bool:
    """Keyword heuristic: short messages pass, long ones need at least one relevant keyword."""
    if len(message) < SHORT_MESSAGE_CHARS:
        return False
    lowered = message.lower()
    relevant = any(k in lowered for k in RELEVANT_KEYWORDS)
    return not relevant and len(message) > LONG_MESSAGE_CHARS


def is_background_request(message: str) -> bool:
    lowered = message.lower()
    return any(k in lowered for k in BACKGROUND_KEYWORDS)


def is_recommendation_request(message: str) -> bool:
    lowered = message.lower()
    return any(k in lowered for k in RECOMMENDATION_KEYWORDS)


def _answers_context(answers: List[str]) -> str:
    lines = []
    for i, answer in enumerate(answers):
        label = QUESTION_PHASES[i].label if i < len(QUESTION_PHASES) else "additional"
        lines.append(f"{label}: {answer}")
    return "\n".join(lines)


def build_phase_message(message: str, phase: Union[int, str], answers: List[str]) -> str:
    """
    Rewrite a workflow reply for the model.
    phase is the next question phase (1-3) or "final" once all four answers are in.
    """
    context = _answers_context(answers)
    if phase == FINAL_PHASE or phase == WorkflowPhase.FINAL:
        extra = f"Additional info: {message}" if message else ""
        return chat_prompts.WORKFLOW_FINAL.format(context=context, extra=extra)
    try:
        label = QUESTION_PHASES[int(phase)].label
    except (ValueError, IndexError, TypeError):
        raise ChatServiceError("Invalid conversation phase")
    return chat_prompts.WORKFLOW_NEXT.format(context=context, message=message, label=label)


_locks_guard = threading.Lock()
_session_locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)


def _session_lock(session_key: str) -> threading.Lock:
    with _locks_guard:
        return _session_locks[session_key]


def _forget_session_locks(session_keys: List[str]):
    with _locks_guard:
        for key in session_keys:
            _session_locks.pop(key, None)


def workflow_state(s: ChatSession) -> Dict:
    phase = WorkflowPhase(s.phase)
    return {
        "active": bool(s.workflow_active),
        "phase": int(phase),
        "phaseLabel": phase.label,
        "answers": list(s.answers or []),
    }


def recommendation_state(s: ChatSession) -> Dict:
    return {
        "active": bool(s.recommendation_active),
        "questionsAsked": len(s.asked_questions or []),
        "answers": list(s.recommendation_answers or []),
    }


class ChatService:
    def __init__(self, db: Optional[Session], chat: AnthropicChatAdapter, rng: Optional[random.Random] = None):
        self.db = db
        self.chat = chat
        self.rng = rng or random.Random()
        self.sessions = ChatSessionRepository(db) if db is not None else None

    def reply(
        self,
        message: str,
        conversation_phase: Optional[Union[int, str]] = None,
        previous_answers: Optional[List[str]] = None,
    ) -> str:
        """Stateless chat: the caller tracks the workflow and sends its phase and answers."""
        log.info(f"Message received ({len(message)} chars)")
        text = message
        # phase 0 is the opening question, sent through unchanged
        if conversation_phase and previous_answers is not None:
            text = build_phase_message(message, conversation_phase, previous_answers)
        return self.chat.complete(chat_prompts.SYSTEM_PROMPT, text)

    def assistant(self, session_key: Optional[str], message: str) -> Dict:
        """
        Stateful chat: the background workflow and the recommendation
        questionnaire live in a ChatSession row.
        Requests for one session are handled one at a time.
        """
        s = self.sessions.get_or_create(session_key)
        with _session_lock(s.session_key):
            self.db.refresh(s)
            result = self._advance(s, message)
            self.db.commit()
        return result

    def _payload(self, s: ChatSession, response: str, off_topic: bool = False) -> Dict:
        return {
            "sessionId": s.session_key,
            "response": response,
            "offTopic": off_topic,
            "workflow": workflow_state(s),
            "recommendation": recommendation_state(s),
        }

    def _advance(self, s: ChatSession, message: str) -> Dict:
        if is_off_topic(message):
            log.info(f"Off-topic message refused for session {s.session_key}")
            return self._payload(s, chat_prompts.OFF_TOPIC_REPLY, off_topic=True)

        if s.workflow_active:
            answers = list(s.answers or []) + [message]
            next_phase = s.phase + 1
            if next_phase >= WorkflowPhase.FINAL:
                prompt = build_phase_message(message, FINAL_PHASE, answers)
                next_phase = int(WorkflowPhase.FINAL)
            else:
                prompt = build_phase_message(message, next_phase, answers)
            active = next_phase < WorkflowPhase.FINAL
        elif is_background_request(message):
            answers, next_phase, active = [], int(WorkflowPhase.PURPOSE), True
            prompt = chat_prompts.WORKFLOW_START.format(message=message)
        elif s.recommendation_active:
            return self._answer_question(s, message)
        elif is_recommendation_request(message):
            return self._start_questionnaire(s)
        else:
            answers, next_phase, active = list(s.answers or []), s.phase, False
            prompt = message

        response = self.chat.complete(chat_prompts.SYSTEM_PROMPT, prompt)
        self.sessions.save_workflow(s, active, next_phase, answers)
        log.info(
            f"Session {s.session_key}: phase={WorkflowPhase(next_phase).label} active={active} answers={len(answers)}"
        )
        return self._payload(s, response)

    def _next_question(self, asked: List[str]) -> Optional[str]:
        available = [q for q in chat_prompts.RECOMMENDATION_QUESTIONS if q not in asked]
        if not available:
            return None
        return self.rng.choice(available)

    def _start_questionnaire(self, s: ChatSession) -> Dict:
        question = self._next_question([])
        self.sessions.save_recommendation(s, True, [question], [])
        log.info(f"Session {s.session_key}: recommendation questionnaire started")
        return self._payload(s, chat_prompts.RECOMMENDATION_INTRO + question)

    def _answer_question(self, s: ChatSession, message: str) -> Dict:
        asked = list(s.asked_questions or [])
        answers = list(s.recommendation_answers or []) + [message]
        if len(answers) < RECOMMENDATION_QUESTION_COUNT:
            question = self._next_question(asked)
            if question is None:
                question = chat_prompts.RECOMMENDATION_EXHAUSTED
            else:
                asked.append(question)
            self.sessions.save_recommendation(s, True, asked, answers)
            return self._payload(s, question)

        # all answers in: one model call over the compiled requirements
        response = self.chat.complete(chat_prompts.SYSTEM_PROMPT, "\n\n".join(answers))
        self.sessions.save_recommendation(s, False, [], [])
        log.info(f"Session {s.session_key}: recommendation generated from {len(answers)} answers")
        return self._payload(s, chat_prompts.RECOMMENDATION_REPLY.format(response=response))


def purge_stale_sessions(db: Session, ttl_seconds: Optional[int] = None) -> int:
    ttl = ttl_seconds if ttl_seconds is not None else settings.CHAT_SESSION_TTL_SECONDS
    keys = ChatSessionRepository(db).delete_older_than(ttl)
    db.commit()
    _forget_session_locks(keys)
    if keys:
        log.info(f"Purged {len(keys)} stale chat session(s)")
    return len(keys)
