from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from typing import Optional
import secrets

class Settings(BaseSettings):
    # ----------------------------------
    # App General Info
    # ----------------------------------
    PROJECT_NAME: str = "Chatflow"
    VERSION: str = "1.0.0"
    RPC_PREFIX: str = "/api/rpc"
    ENVIRONMENT: str = Field(
        default="development",
        description="Current environment: development, testing, staging, or production"
    )
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ALLOW_ORIGINS: list[str] = Field(default=["http://localhost:3000"])

    # ----------------------------------
    # Relational Database (users, conversations, messages)
    # ----------------------------------
    DATABASE_URL: str = Field(default="sqlite:///./chatflow.db")

    # ----------------------------------
    # Conversations
    # ----------------------------------
    DEFAULT_CONVERSATION_TITLE: str = Field(default="New conversation")
    CONVERSATION_TITLE_MAX_LENGTH: int = Field(
        default=50,
        ge=1,
        description="Titles derived from the first user message are cut to this many characters.",
    )

    # ----------------------------------
    # AI provider (Gemini primary, mock fallback)
    # ----------------------------------
    USE_MOCK_AI: bool = Field(default=False, description="Force the mock provider even when a key is set.")
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
        description="Google Generative Language API key. Without it the mock provider is used.",
    )
    GEMINI_MODEL: str = Field(default="gemini-2.5-flash")
    LLM_TEMPERATURE: float = Field(default=0.7)
    LLM_MAX_OUTPUT_TOKENS: int = Field(default=500)
    LLM_REQUEST_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Timeout (seconds) for a single Gemini request.",
    )

    # ----------------------------------
    # Auth (JWT in session cookie)
    # ----------------------------------
    JWT_SECRET_KEY: str = Field(
        default_factory=lambda: secrets.token_urlsafe(48),
        description="JWT signing secret. Set in .env for stable sessions.",
    )
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7)
    SESSION_COOKIE_NAME: str = Field(default="token")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

settings = Settings()
