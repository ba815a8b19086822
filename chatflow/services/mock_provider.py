from __future__ import annotations

import random
import re
from typing import Optional, Sequence

from chatflow.models.message import Message
from chatflow.services.chat_provider import ChatProvider

DEMO_NOTICE = (
    "\n\n_Note: This is a demo response. To enable full AI capabilities, get a FREE "
    "Gemini API key at https://aistudio.google.com/app/apikey_"
)

GENERIC_RESPONSES = [
    "That's interesting! Tell me more about that.",
    "I understand. Could you elaborate on that?",
    "Thanks for sharing that with me. What else would you like to discuss?",
    "I see. How can I assist you further with this?",
    "That's a good point. What are your thoughts on this?",
]

_HI_RE = re.compile(r"\bhi\b")


class MockChatProvider(ChatProvider):
    """Keyword-matching stand-in used when no Gemini key is configured."""

    name = "mock"

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def reply_for(self, message: str) -> str:
        text = message.lower()

        if "hello" in text or _HI_RE.search(text):
            return "Hello! I'm a demo AI assistant. How can I help you today?"
        if "how are you" in text:
            return "I'm doing well, thank you for asking! I'm here to assist you."
        if "what" in text and "name" in text:
            return "I'm the Chatflow AI Assistant, a demo chatbot."
        if "help" in text:
            return (
                "I'm here to help! You can ask me questions or have a conversation. "
                "Note: I'm currently running in demo mode with limited responses."
            )
        if "thank" in text:
            return "You're welcome! Is there anything else I can help you with?"
        if "bye" in text or "goodbye" in text:
            return "Goodbye! Feel free to come back anytime you need assistance."
        return self._rng.choice(GENERIC_RESPONSES)

    def generate(self, history: Sequence[Message], message: str) -> str:
        return self.reply_for(message) + DEMO_NOTICE
