from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterIn(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginIn(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UpdateProfileIn(CamelModel):
    user_id: Union[int, str]
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class ResetPasswordIn(CamelModel):
    email: str = Field(..., min_length=1)


class ResetPasswordConfirmIn(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
