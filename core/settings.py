import os
from dataclasses import dataclass

DEFAULT_MODEL = "llama-3.3-70b-versatile"

# 7 days
DEFAULT_CACHE_TTL_SECONDS = 60 * 60 * 24 * 7


@dataclass(frozen=True)
class Settings:
    """Server-side defaults. A request's AIConfig overrides the AI fields."""

    api_key: str | None = None
    custom_endpoint: str | None = None
    model: str = DEFAULT_MODEL
    redis_url: str | None = None
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            api_key=os.environ.get("GROQ_API_KEY") or None,
            custom_endpoint=os.environ.get("CUSTOM_AI_ENDPOINT") or None,
            model=os.environ.get("AI_MODEL") or DEFAULT_MODEL,
            redis_url=os.environ.get("REDIS_URL") or None,
            cache_ttl_seconds=int(os.environ.get("REPORT_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
