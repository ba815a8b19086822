"""
Chat provider abstraction.

A ``ChatProvider`` turns a conversation's stored history plus one new user
message into the assistant's reply. The concrete provider (live Gemini or the
offline mock) is picked once at startup by ``build_chat_provider`` and handed
to the routes through a dependency, so request handlers never look at the
environment themselves.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.output_parsers import StrOutputParser

from chatflow.core.config import Settings
from chatflow.core.errors import (
    ProviderAuthError,
    ProviderConfigurationError,
    ProviderError,
    ProviderRateLimitError,
)
from chatflow.models.message import Message, MessageRole

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_FALLBACK = "I'm sorry, I couldn't generate a response."

# Gemini's own role vocabulary; AIMessage is sent to Gemini as "model".
GEMINI_ROLES = {
    MessageRole.USER.value: "user",
    MessageRole.ASSISTANT.value: "model",
}


class ChatProvider(ABC):
    """Backend that answers a user message given the conversation so far."""

    name: str = "base"

    @abstractmethod
    def generate(self, history: Sequence[Message], message: str) -> str:
        """Return the reply text. Raises ``ProviderError`` subclasses on failure."""
        pass


def to_lc_messages(history: Sequence[Message]) -> list[BaseMessage]:
    messages: list[BaseMessage] = []
    for item in history:
        if GEMINI_ROLES.get(item.role) == "model":
            messages.append(AIMessage(content=item.content))
        else:
            messages.append(HumanMessage(content=item.content))
    return messages


def _status_of(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def classify_provider_error(exc: BaseException) -> ProviderError:
    """Map an exception raised by the Gemini client onto the provider error taxonomy."""
    text = str(exc) or exc.__class__.__name__
    status = _status_of(exc)

    if "API_KEY_INVALID" in text or "API key not valid" in text or status in (401, 403):
        return ProviderAuthError()
    if "QUOTA_EXCEEDED" in text:
        return ProviderRateLimitError(
            "Gemini API quota exceeded. Please check your usage at https://aistudio.google.com"
        )
    if "RATE_LIMIT_EXCEEDED" in text or "RESOURCE_EXHAUSTED" in text or status == 429:
        return ProviderRateLimitError()
    return ProviderError(f"Failed to generate AI response: {text}")


class GeminiChatProvider(ChatProvider):
    """Google Gemini through LangChain's ``ChatGoogleGenerativeAI``."""

    name = "gemini"

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 500,
        timeout: float = 30.0,
        llm: Any = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._llm = llm

    def _get_llm(self) -> Any:
        if self._llm is None:
            from langchain_google_genai import ChatGoogleGenerativeAI

            self._llm = ChatGoogleGenerativeAI(
                model=self.model,
                google_api_key=self.api_key,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
                timeout=self.timeout,
            )
        return self._llm

    def generate(self, history: Sequence[Message], message: str) -> str:
        if not self.api_key:
            logger.error("GEMINI_API_KEY is not configured")
            raise ProviderConfigurationError()

        # The stored history seeds the exchange; the new message goes last.
        exchange = to_lc_messages(history) + [HumanMessage(content=message)]
        try:
            chain = self._get_llm() | StrOutputParser()
            text = chain.invoke(exchange)
        except Exception as e:
            error = classify_provider_error(e)
            logger.warning("Gemini call failed (%s): %s", error.code, str(e))
            raise error from e

        logger.info("Gemini replied with %d chars (history=%d)", len(text or ""), len(history))
        return text or EMPTY_RESPONSE_FALLBACK


def build_chat_provider(settings: Settings) -> ChatProvider:
    """Pick the provider for this process from configuration.

    ``USE_MOCK_AI`` forces the mock; otherwise a Gemini key selects the live
    provider; with no key at all the mock is used.
    """
    from chatflow.services.mock_provider import MockChatProvider

    if settings.USE_MOCK_AI:
        logger.info("AI provider: mock (forced by USE_MOCK_AI)")
        return MockChatProvider()

    if settings.GEMINI_API_KEY:
        logger.info("AI provider: gemini (model=%s)", settings.GEMINI_MODEL)
        return GeminiChatProvider(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
            timeout=settings.LLM_REQUEST_TIMEOUT_SECONDS,
        )

    logger.info("AI provider: mock (no GEMINI_API_KEY set)")
    return MockChatProvider()
