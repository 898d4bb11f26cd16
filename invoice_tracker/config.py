"""Environment-based settings for the invoice tracker."""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

DEFAULT_AI_BASE_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_AI_MODEL = "google/gemini-2.5-pro"
DEFAULT_HTTP_TIMEOUT = 120.0


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    ai_api_key: str
    ai_base_url: str = DEFAULT_AI_BASE_URL
    ai_model: str = DEFAULT_AI_MODEL
    ai_http_timeout: float = DEFAULT_HTTP_TIMEOUT
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def has_ai_credentials(self) -> bool:
        return bool(self.ai_api_key)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@lru_cache(maxsize=1)
def get_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Return cached settings, loading the .env file once without overriding the environment."""
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", ""),
        supabase_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_KEY", ""),
        ai_api_key=os.getenv("AI_API_KEY", ""),
        ai_base_url=os.getenv("AI_API_BASE_URL", DEFAULT_AI_BASE_URL),
        ai_model=os.getenv("AI_MODEL", DEFAULT_AI_MODEL),
        ai_http_timeout=_float_env("AI_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=int(os.getenv("API_PORT", 8000)),
    )
