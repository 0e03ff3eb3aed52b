"""Configuration for the web engine."""

from pydantic import BaseModel, Field


class WebEngineConfig(BaseModel):
    """Configuration for the website prober."""

    user_agent: str = "VerifyForge-AI-Bot/1.0"
    timeout_seconds: float = Field(default=30, gt=0)
    max_links_checked: int = Field(default=10, ge=0)
    slow_response_ms: int = 3000
    large_page_bytes: int = 500_000
