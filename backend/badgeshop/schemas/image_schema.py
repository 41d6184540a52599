from typing import Optional

from pydantic import BaseModel


class GenerateImageIn(BaseModel):
    prompt: Optional[str] = None
    type: str = "image"


class GenerateTemplateIn(BaseModel):
    prompt: Optional[str] = None


class ApiConnectionIn(BaseModel):
    service: Optional[str] = None
