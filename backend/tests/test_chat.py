import pytest
from fastapi.testclient import TestClient

from badgeshop.adapters.anthropic_chat import ChatProviderError
from badgeshop.db import SessionLocal
from badgeshop.main import app
from badgeshop.models.chat_session import ChatSession
from badgeshop.services import chat_prompts, chat_service
from badgeshop.services.chat_service import (
    ChatServiceError,
    build_phase_message,
    is_background_request,
    is_off_topic,
    is_recommendation_request,
    purge_stale_sessions,
)

client = TestClient(app)

LONG_OFF_TOPIC = "What do you think about the election results and the football scores from last weekend?"


def test_off_topic_heuristic():
    assert is_off_topic("hi there") is False
    assert is_off_topic("Tell me a joke please") is False
    assert is_off_topic(LONG_OFF_TOPIC) is True
    assert is_off_topic("How long does delivery take for two hundred lanyards to reach Ohio in winter?") is False


def test_background_request_detection():
    assert is_background_request("Can you help me with a BADGE BACKGROUND?")
    assert is_background_request("I need a backdrop")
    assert not is_background_request("What lanyards do you sell?")


def test_phase_message_rewrites():
    middle = build_phase_message("blue and gold", 2, ["corporate ID", "blue and gold"])
    assert "purpose: corporate ID" in middle
    assert "colors: blue and gold" in middle
    assert "ask the next question in our workflow for style" in middle

    final = build_phase_message("logo", "final", ["corporate", "blue", "minimal", "logo"])
    assert "elements: logo" in final
    assert "generate 3 detailed" in final
    assert "triple backticks" in final

    with pytest.raises(ChatServiceError):
        build_phase_message("x", "sideways", [])


def test_stateless_chat_passes_rewritten_message(fake_chat):
    res = client.post(
        "/api/chat",
        json={"message": "minimal", "conversationPhase": 3, "previousAnswers": ["event", "red", "minimal"]},
    )
    assert res.status_code == 200
    assert res.json() == {"response": fake_chat.reply}
    assert "for elements" in fake_chat.calls[-1]


def test_stateless_chat_opening_phase_is_not_rewritten(fake_chat):
    res = client.post("/api/chat", json={"message": "a bank ID", "conversationPhase": 0, "previousAnswers": []})
    assert res.status_code == 200
    assert fake_chat.calls == ["a bank ID"]


def test_stateless_chat_plain_message(fake_chat):
    res = client.post("/api/chat", json={"message": "What is your return policy?"})
    assert res.status_code == 200
    assert fake_chat.calls == ["What is your return policy?"]


@pytest.mark.parametrize("status", [401, 429, 400, 503])
def test_stateless_chat_maps_provider_errors(fake_chat, status):
    fake_chat.error = ChatProviderError("upstream said no", status)
    res = client.post("/api/chat", json={"message": "hello"})
    assert res.status_code == status
    assert res.json() == {"error": "upstream said no"}


def test_chat_without_api_key_is_500():
    # no override: the real adapter sees an empty ANTHROPIC_API_KEY
    res = client.post("/api/chat", json={"message": "hello"})
    assert res.status_code == 500
    assert res.json() == {"error": "API configuration error. Please contact the administrator."}


def test_assistant_walks_the_background_workflow(fake_chat):
    start = client.post("/api/chat/assistant", json={"message": "Help me create a badge background"}).json()
    session_id = start["sessionId"]
    assert start["workflow"] == {"active": True, "phase": 0, "phaseLabel": "purpose", "answers": []}
    assert "Start the Background Prompt Generator Workflow" in fake_chat.calls[-1]

    answers = ["Corporate ID for a bank", "navy and silver", "minimal and clean", "our logo watermark"]
    states = []
    for answer in answers:
        body = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": answer}).json()
        assert body["sessionId"] == session_id
        states.append(body["workflow"])

    assert [s["phaseLabel"] for s in states] == ["colors", "style", "elements", "final"]
    assert [s["active"] for s in states] == [True, True, True, False]
    assert states[-1]["answers"] == answers
    assert "generate 3 detailed" in fake_chat.calls[-1]
    assert "purpose: Corporate ID for a bank" in fake_chat.calls[-1]

    after = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": "thanks!"}).json()
    assert after["workflow"]["active"] is False
    assert fake_chat.calls[-1] == "thanks!"


def test_assistant_refuses_off_topic_without_calling_model(fake_chat):
    body = client.post("/api/chat/assistant", json={"message": LONG_OFF_TOPIC}).json()
    assert body["offTopic"] is True
    assert body["response"].startswith("I'm sorry, I can only answer questions")
    assert fake_chat.calls == []


def test_assistant_failure_does_not_advance_workflow(fake_chat):
    session_id = client.post("/api/chat/assistant", json={"message": "background ideas please"}).json()["sessionId"]
    fake_chat.error = ChatProviderError("Rate limit exceeded. Please try again in a moment.", 429)
    res = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": "a school badge"})
    assert res.status_code == 429

    fake_chat.error = None
    body = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": "a school badge"}).json()
    assert body["workflow"]["phaseLabel"] == "colors"
    assert body["workflow"]["answers"] == ["a school badge"]


def test_purge_removes_stale_sessions(fake_chat):
    session_id = client.post("/api/chat/assistant", json={"message": "hello"}).json()["sessionId"]
    db = SessionLocal()
    try:
        assert purge_stale_sessions(db, ttl_seconds=3600) == 0
        assert db.query(ChatSession).filter(ChatSession.session_key == session_id).count() == 1
        assert purge_stale_sessions(db, ttl_seconds=-1) >= 1
        assert db.query(ChatSession).filter(ChatSession.session_key == session_id).count() == 0
    finally:
        db.close()


def test_purge_releases_session_locks(fake_chat):
    keys = [client.post("/api/chat/assistant", json={"message": "hello"}).json()["sessionId"] for _ in range(5)]
    assert all(k in chat_service._session_locks for k in keys)
    db = SessionLocal()
    try:
        purge_stale_sessions(db, ttl_seconds=-10)
    finally:
        db.close()
    assert not any(k in chat_service._session_locks for k in keys)


def test_recommendation_request_detection():
    assert is_recommendation_request("Can you RECOMMEND something for a trade show?")
    assert is_recommendation_request("I want to create a badge for my team")
    assert not is_recommendation_request("What are your opening hours?")


def test_assistant_runs_the_recommendation_questionnaire(fake_chat):
    pool = chat_prompts.RECOMMENDATION_QUESTIONS
    start = client.post("/api/chat/assistant", json={"message": "Any suggestion for conference badges?"}).json()
    session_id = start["sessionId"]
    assert start["response"].startswith(chat_prompts.RECOMMENDATION_INTRO)
    assert start["response"][len(chat_prompts.RECOMMENDATION_INTRO):] in pool
    assert start["recommendation"] == {"active": True, "questionsAsked": 1, "answers": []}
    assert start["workflow"]["active"] is False
    assert fake_chat.calls == []

    asked = [start["response"][len(chat_prompts.RECOMMENDATION_INTRO):]]
    for answer in ["Event badges", "About 300"]:
        body = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": answer}).json()
        assert body["response"] in pool
        assert body["response"] not in asked
        asked.append(body["response"])
    assert fake_chat.calls == []
    assert body["recommendation"]["answers"] == ["Event badges", "About 300"]

    fake_chat.reply = "PVC cards with QR codes and blue lanyards"
    done = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": "QR codes please"}).json()
    assert fake_chat.calls == ["Event badges\n\nAbout 300\n\nQR codes please"]
    assert done["response"] == (
        "Based on your requirements, here's my badge recommendation:\n\n"
        "```PVC cards with QR codes and blue lanyards```"
    )
    assert done["recommendation"] == {"active": False, "questionsAsked": 0, "answers": []}


def test_recommendation_failure_keeps_answers(fake_chat):
    session_id = client.post("/api/chat/assistant", json={"message": "please recommend a badge"}).json()["sessionId"]
    for answer in ["ID cards", "Fifty"]:
        client.post("/api/chat/assistant", json={"sessionId": session_id, "message": answer})

    fake_chat.error = ChatProviderError("Rate limit exceeded. Please try again in a moment.", 429)
    res = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": "Next week"})
    assert res.status_code == 429

    fake_chat.error = None
    body = client.post("/api/chat/assistant", json={"sessionId": session_id, "message": "Next week"}).json()
    assert body["response"].startswith("Based on your requirements")
    assert fake_chat.calls[-1] == "ID cards\n\nFifty\n\nNext week"
