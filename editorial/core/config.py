from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    APP_NAME: str = "Editorial Generation API"
    APP_ENV: str = "dev"
    API_PREFIX: str = "/v1"
    CORS_ORIGINS: str = "*"
    REDIS_URL: str = "redis://localhost:6379/0"
    # Model gateway (OpenAI-compatible chat completions)
    LLM_PROVIDER: str = "gateway"
    LLM_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1"
    LLM_API_KEY: Optional[str] = None
    LLM_MODEL_EDITORIAL: str = "google/gemini-2.5-pro"
    LLM_MODEL_DEFAULT: str = "google/gemini-2.5-flash"
    LLM_TIMEOUT_MS: int = 120000
    # Retry budgets (attempts after the first one)
    GENERATION_SERVICE_RETRIES: int = 1
    GENERATION_CLIENT_RETRIES: int = 1
    GENERATION_CLIENT_RETRY_DELAY_S: float = 1.0
    # Capsule gate
    CAPSULE_MIN_ITEMS: int = 2
    CAPSULE_MIN_TEXT_CHARS: int = 10
    # Pre-flight
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024
    # Transport boundary
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_S: int = 60
    AUTH_REQUIRED: bool = False
    JWT_SECRET: str = "change_me"
    JWT_ALG: str = "HS256"

    @property
    def cors_origin_list(self) -> List[str]:
        val = self.CORS_ORIGINS
        if not val: return []
        if val == "*": return ["*"]
        return [v.strip() for v in val.split(",")]

settings = Settings()
