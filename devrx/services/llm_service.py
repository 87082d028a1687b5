from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from devrx.config.settings import Settings
from devrx.llm import (
    build_assistant_chain,
    build_suggestion_chain,
    build_tag_suggestion_chain,
)
from devrx.models.ai import ChatTurn
from devrx.services.tag_service import MAX_TAG_LENGTH, normalize_tag_names

logger = logging.getLogger(__name__)

SUGGESTION_UNAVAILABLE = (
    "AI suggestions are not available. Please add an OpenAI API key to enable this feature."
)
SUGGESTION_FAILED = "Unable to generate a suggestion at this time. Please try again later."
ASSISTANT_UNAVAILABLE = (
    "AI assistant is not available. Please add an OpenAI API key to enable this feature."
)
ASSISTANT_FAILED = (
    "I apologize, but I'm having trouble processing your request at the moment. "
    "Please try again later."
)
MAX_SUGGESTED_TAGS = 5


class LLMError(Exception):
    """Raised when the LLM client fails to return usable data."""


class AiAdvisor:
    """Best-effort AI helpers.

    ``available`` is false when no chat model is configured; every method then
    returns its fallback without touching the network. Failures never escape
    the public methods.
    """

    def __init__(self, llm: Optional[BaseChatModel] = None) -> None:
        self._llm = llm
        if llm is not None:
            self._suggestion_chain = build_suggestion_chain(llm)
            self._assistant_chain = build_assistant_chain(llm)
            self._tag_chain, self._tag_parser = build_tag_suggestion_chain(llm)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AiAdvisor":
        if not settings.openai_api_key:
            logger.info("OPENAI_API_KEY not configured; AI features disabled")
            return cls(None)
        # Imported lazily so the provider package is only touched when configured.
        from langchain_openai import ChatOpenAI

        llm = ChatOpenAI(
            model=settings.openai_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url.rstrip("/") if settings.openai_base_url else None,
            timeout=settings.openai_timeout,
        )
        return cls(llm)

    @property
    def available(self) -> bool:
        return self._llm is not None

    def generate_suggestion(self, title: str, content: str, tags: Sequence[str] = ()) -> str:
        if not self.available:
            return SUGGESTION_UNAVAILABLE
        return self.try_generate_suggestion(title, content, tags) or SUGGESTION_FAILED

    def try_generate_suggestion(
        self, title: str, content: str, tags: Sequence[str] = ()
    ) -> Optional[str]:
        """Like ``generate_suggestion`` but returns None instead of a placeholder."""
        if not self.available:
            return None
        try:
            return self._invoke_suggestion(title, content, tags)
        except LLMError:
            logger.exception("Error generating AI suggestion")
            return None

    def generate_assistant_response(self, message: str, history: Sequence[ChatTurn] = ()) -> str:
        if not self.available:
            return ASSISTANT_UNAVAILABLE
        try:
            return self._invoke_assistant(message, history)
        except LLMError:
            logger.exception("Error generating AI assistant response")
            return ASSISTANT_FAILED

    def suggest_tags(self, title: str, content: str) -> List[str]:
        if not self.available:
            logger.info("AI tag suggestions are not available")
            return []
        try:
            return self._invoke_tag_suggestion(title, content)
        except LLMError:
            logger.exception("Error suggesting tags")
            return []

    def _invoke_suggestion(self, title: str, content: str, tags: Sequence[str]) -> str:
        try:
            result = self._suggestion_chain.invoke(
                {"title": title, "content": content, "tags": ", ".join(tags) or "none"}
            )
        except Exception as exc:
            raise LLMError("LLM request failed") from exc
        text = (result or "").strip()
        if not text:
            raise LLMError("LLM returned an empty suggestion")
        return text

    def _invoke_assistant(self, message: str, history: Sequence[ChatTurn]) -> str:
        try:
            result = self._assistant_chain.invoke(
                {"message": message, "history": self._to_messages(history)}
            )
        except Exception as exc:
            raise LLMError("LLM request failed") from exc
        text = (result or "").strip()
        if not text:
            raise LLMError("LLM returned an empty response")
        return text

    def _invoke_tag_suggestion(self, title: str, content: str) -> List[str]:
        try:
            result = self._tag_chain.invoke(
                {
                    "title": title,
                    "content": content,
                    "format_instructions": self._tag_parser.get_format_instructions(),
                }
            )
        except Exception as exc:
            raise LLMError("LLM tag suggestion failed") from exc
        if isinstance(result, dict):
            tags = result.get("tags")
        else:
            tags = result
        if not isinstance(tags, list):
            raise LLMError("LLM returned tags in an unexpected format")
        normalized = [tag for tag in normalize_tag_names(tags) if len(tag) <= MAX_TAG_LENGTH]
        return normalized[:MAX_SUGGESTED_TAGS]

    def _to_messages(self, history: Sequence[ChatTurn]) -> List[BaseMessage]:
        messages: List[BaseMessage] = []
        for turn in history:
            if turn.role == "assistant":
                messages.append(AIMessage(content=turn.content))
            else:
                messages.append(HumanMessage(content=turn.content))
        return messages
