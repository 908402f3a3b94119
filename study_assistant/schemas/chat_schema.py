from __future__ import annotations

from pydantic import Field

from study_assistant.models.chat_history_model import ChatSender

from .base_schema import CamelModel


class ChatMessage(CamelModel):
    sender: ChatSender
    text: str


class ChatMessageCreate(CamelModel):
    sender: ChatSender
    text: str = Field(..., min_length=1)
