from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from badgeshop.adapters.anthropic_chat import AnthropicChatAdapter, ChatProviderError, get_chat_adapter
from badgeshop.db import get_db
from badgeshop.schemas.chat_schema import AssistantIn, ChatIn
from badgeshop.services.chat_service import ChatService, ChatServiceError
from badgeshop.utils.log import get_logger

router = APIRouter(prefix="/chat", tags=["chat"])
log = get_logger("chat")


@router.post("", summary="Ask Millie, the storefront assistant")
def chat(payload: ChatIn, adapter: AnthropicChatAdapter = Depends(get_chat_adapter)):
    svc = ChatService(None, adapter)
    try:
        text = svc.reply(payload.message, payload.conversation_phase, payload.previous_answers)
    except (ChatServiceError, ChatProviderError) as e:
        log.error(f"Chat request failed ({e.status_code}): {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"response": text}


@router.post("/assistant", summary="Chat with the background-prompt workflow tracked server side")
def assistant(
    payload: AssistantIn,
    db: Session = Depends(get_db),
    adapter: AnthropicChatAdapter = Depends(get_chat_adapter),
):
    svc = ChatService(db, adapter)
    try:
        return svc.assistant(payload.session_id, payload.message)
    except (ChatServiceError, ChatProviderError) as e:
        log.error(f"Assistant request failed ({e.status_code}): {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))
