from typing import List, Literal

from pydantic import Field

from devrx.models.base import CamelModel


class ChatTurn(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    message: str = Field(min_length=1)
    history: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(CamelModel):
    response: str


class AiStatusRead(CamelModel):
    is_available: bool
