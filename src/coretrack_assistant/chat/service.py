"""Chat service: turns router outcomes into user-facing text."""

import logging
from collections import defaultdict, deque

from coretrack_assistant.chat.knowledge_base import find_knowledge_base_match
from coretrack_assistant.chat.models import ChatContext, ChatResponse, ResponseSource
from coretrack_assistant.chat.prompts import build_prompt
from coretrack_assistant.chat.templates import (
    conversational_fallback,
    throttled_reply,
    unavailable_reply,
)
from coretrack_assistant.ratelimit import get_tier_for_plan
from coretrack_assistant.router import (
    AssistantError,
    BackendQuotaExceeded,
    ModelRouter,
    Throttled,
)

logger = logging.getLogger(__name__)

DEFAULT_TENANT_ID = "default"


class ChatService:
    """AI assistant front end with knowledge-base and template fallbacks.

    Every path returns text; router errors never reach the caller.
    """

    HISTORY_SIZE = 10
    PROMPT_HISTORY_SIZE = 3

    def __init__(self, router: ModelRouter) -> None:
        """Initialize the chat service.

        Args:
            router: Model router used for AI answers.
        """
        self._router = router
        self._history: defaultdict[str, deque[tuple[str, str]]] = defaultdict(
            lambda: deque(maxlen=self.HISTORY_SIZE)
        )

    def get_history(self, tenant_id: str) -> list[tuple[str, str]]:
        """Return a tenant's recent (user, assistant) exchanges, oldest first."""
        return list(self._history.get(tenant_id, ()))

    async def send_message(
        self,
        message: str,
        context: ChatContext | None = None,
        contextual_data: str | None = None,
    ) -> ChatResponse:
        """Answer a user message.

        Args:
            message: The user's question.
            context: Session context (tenant, plan, role, page).
            contextual_data: Live business data supplied by the caller.

        Returns:
            Chat response with the text and where it came from.
        """
        context = context or ChatContext()
        tenant_id = context.tenant_id or DEFAULT_TENANT_ID
        tier = get_tier_for_plan(context.subscription_plan)

        if not self._router.is_configured:
            logger.info("No AI backend configured, using conversational fallback")
            return ChatResponse(
                response=conversational_fallback(message, contextual_data),
                source=ResponseSource.FALLBACK,
            )

        history = self.get_history(tenant_id)[-self.PROMPT_HISTORY_SIZE :]
        prompt = build_prompt(message, context, history, contextual_data)

        try:
            result = await self._router.invoke(tenant_id, tier, prompt)
        except Throttled as e:
            logger.info(
                "Tenant %s throttled for %d s, using fallback response",
                tenant_id,
                e.wait_seconds,
            )
            return self._throttled_response(message, contextual_data, e)
        except AssistantError as e:
            logger.warning("AI backend error, using fallback: %s", e)
            answer = find_knowledge_base_match(message)
            return ChatResponse(
                response=unavailable_reply(answer, contextual_data),
                source=(
                    ResponseSource.KNOWLEDGE_BASE if answer else ResponseSource.FALLBACK
                ),
            )

        if not result.configured or result.text is None:
            return ChatResponse(
                response=conversational_fallback(message, contextual_data),
                source=ResponseSource.FALLBACK,
            )

        self._history[tenant_id].append((message, result.text))
        return ChatResponse(
            response=result.text,
            source=ResponseSource.AI,
            backend=result.backend,
        )

    def _throttled_response(
        self,
        message: str,
        contextual_data: str | None,
        error: Throttled,
    ) -> ChatResponse:
        answer = find_knowledge_base_match(message)
        reason = str(error) if isinstance(error, BackendQuotaExceeded) else None
        return ChatResponse(
            response=throttled_reply(error.wait_seconds, answer, contextual_data, reason),
            source=ResponseSource.KNOWLEDGE_BASE if answer else ResponseSource.FALLBACK,
            wait_seconds=error.wait_seconds,
        )
