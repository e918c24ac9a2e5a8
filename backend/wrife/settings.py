from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Hints are short; a lighter model keeps them quick
	hint_model: str = Field(default="gemini-2.5-flash-lite", validation_alias="HINT_MODEL")
	hint_max_tokens: int = Field(default=128, validation_alias="HINT_MAX_TOKENS")
	llm_timeout_seconds: float = Field(default=15.0, validation_alias="LLM_TIMEOUT_SECONDS")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter fallback configuration (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="WriFe Writing Practice", validation_alias="OPENROUTER_TITLE")

	# Idle in-memory sessions are dropped after this many hours
	session_idle_hours: float = Field(default=12.0, validation_alias="SESSION_IDLE_HOURS")

	# Session reporting
	top_repeated_words: int = Field(default=5, validation_alias="TOP_REPEATED_WORDS")

	# Logging
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
