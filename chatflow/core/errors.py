"""
Domain exceptions.

Services raise these; the API layer turns them into HTTP responses. Each error
carries a short machine ``code`` next to its human message.
"""

from typing import Optional


class ChatflowError(Exception):
    """Base exception for chatflow errors"""

    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# Auth / accounts

class EmailAlreadyRegisteredError(ChatflowError):
    code = "CONFLICT"
    default_message = "Email already registered"


class InvalidCredentialsError(ChatflowError):
    code = "UNAUTHORIZED"
    default_message = "Invalid credentials"


class IncorrectPasswordError(ChatflowError):
    code = "BAD_REQUEST"
    default_message = "Current password is incorrect"


class UserNotFoundError(ChatflowError):
    code = "NOT_FOUND"
    default_message = "User not found"


# Conversations

class ConversationNotFoundError(ChatflowError):
    # Also raised for conversations owned by someone else.
    code = "NOT_FOUND"
    default_message = "Conversation not found"


# AI providers

class ProviderError(ChatflowError):
    code = "PROVIDER_ERROR"
    default_message = "Failed to generate AI response"


class ProviderConfigurationError(ProviderError):
    code = "PROVIDER_NOT_CONFIGURED"
    default_message = "Gemini API key is not configured. Please add GEMINI_API_KEY to your .env file."


class ProviderAuthError(ProviderError):
    code = "PROVIDER_AUTH_FAILED"
    default_message = "Invalid Gemini API key. Please check your GEMINI_API_KEY in .env file."


class ProviderRateLimitError(ProviderError):
    code = "PROVIDER_RATE_LIMITED"
    default_message = "Gemini API rate limit exceeded. Please try again in a moment."
