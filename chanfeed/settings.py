from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError

from chanfeed.errors import ConfigError


class FeedSettings(BaseSettings):
    """
    Environment-driven defaults for the feed run.

    Command-line flags override these (see run_feed_once.py).
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- Selection ----
    min_replies: int = Field(default=10, ge=0, alias="CHANFEED_MIN_REPLIES")
    pages: int = Field(default=1, ge=0, alias="CHANFEED_PAGES")
    boards: str = Field(default="news", alias="CHANFEED_BOARDS")
    filter_string: str = Field(default="", alias="CHANFEED_FILTER")

    # ---- Output ----
    # "rss" | "atom"
    feed_format: str = Field(default="rss", alias="CHANFEED_FORMAT")
    output_path: str = Field(default="rss.xml", alias="CHANFEED_OUTPUT_PATH")

    # ---- Board API ----
    api_base_url: str = Field(default="https://a.4cdn.org", alias="CHANFEED_API_BASE_URL")
    image_base_url: str = Field(default="https://i.4cdn.org", alias="CHANFEED_IMAGE_BASE_URL")

    # The API asks clients for at most one request per second.
    request_timeout_sec: float = Field(default=15.0, alias="CHANFEED_REQUEST_TIMEOUT_SEC")
    request_delay_sec: float = Field(default=1.0, alias="CHANFEED_REQUEST_DELAY_SEC")

    max_retries: int = Field(default=2, alias="CHANFEED_MAX_RETRIES")
    backoff_base_sec: float = Field(default=1.0, alias="CHANFEED_BACKOFF_BASE_SEC")
    backoff_max_sec: float = Field(default=20.0, alias="CHANFEED_BACKOFF_MAX_SEC")

    user_agent: str = Field(
        default="chanfeed/0.1 (+https://github.com/)",
        alias="CHANFEED_USER_AGENT",
    )


def load_settings() -> FeedSettings:
    """
    Raises:
        ConfigError: an environment or .env value does not validate
    """
    try:
        return FeedSettings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid settings: {problems}") from e
