import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    """Process configuration read from the environment (and a local .env file)."""

    host: str = "0.0.0.0"
    port: int = 8080
    # Empty token disables authentication
    scraper_token: str = ""
    render_locale: str = "nl-NL"
    render_timezone: str = "Europe/Amsterdam"
    render_user_agent: str = DEFAULT_USER_AGENT
    render_page_timeout_ms: int = 30000
    render_network_idle_timeout_ms: int = 15000
    render_settle_delay_s: float = 0.75

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", cls.port)),
            scraper_token=os.getenv("SCRAPER_TOKEN", cls.scraper_token),
            render_locale=os.getenv("RENDER_LOCALE", cls.render_locale),
            render_timezone=os.getenv("RENDER_TIMEZONE", cls.render_timezone),
            render_user_agent=os.getenv("RENDER_USER_AGENT", cls.render_user_agent),
            render_page_timeout_ms=int(
                os.getenv("RENDER_PAGE_TIMEOUT_MS", cls.render_page_timeout_ms)
            ),
            render_network_idle_timeout_ms=int(
                os.getenv(
                    "RENDER_NETWORK_IDLE_TIMEOUT_MS", cls.render_network_idle_timeout_ms
                )
            ),
            render_settle_delay_s=float(
                os.getenv("RENDER_SETTLE_DELAY_S", cls.render_settle_delay_s)
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read once on first use."""
    return Settings.from_env()
