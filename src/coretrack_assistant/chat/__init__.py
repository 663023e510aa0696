"""Chat module: prompt building, fallbacks and the chat service."""

from coretrack_assistant.chat.knowledge_base import KNOWLEDGE_BASE, find_knowledge_base_match
from coretrack_assistant.chat.models import (
    ChatContext,
    ChatRequest,
    ChatResponse,
    ResponseSource,
)
from coretrack_assistant.chat.prompts import build_prompt
from coretrack_assistant.chat.service import ChatService

__all__ = [
    "KNOWLEDGE_BASE",
    "find_knowledge_base_match",
    "ChatContext",
    "ChatRequest",
    "ChatResponse",
    "ResponseSource",
    "build_prompt",
    "ChatService",
]
