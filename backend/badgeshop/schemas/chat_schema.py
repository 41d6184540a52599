from typing import List, Optional, Union

from pydantic import Field

from badgeshop.schemas.auth_schema import CamelModel


class ChatIn(CamelModel):
    message: str = Field(..., min_length=1)
    # next question phase (1-3) or "final"
    conversation_phase: Optional[Union[int, str]] = None
    previous_answers: Optional[List[str]] = None


class AssistantIn(CamelModel):
    session_id: Optional[str] = None
    message: str = Field(..., min_length=1)
