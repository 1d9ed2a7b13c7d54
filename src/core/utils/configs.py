from typing import Optional, Tuple

from crawl4ai import BrowserConfig, CacheMode, CrawlerRunConfig

from src.core.utils.settings import Settings, get_settings

# Chromium flags needed to run inside a container
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

VIEWPORT_WIDTH = 1280
VIEWPORT_HEIGHT = 800


def build_renderer_components(
    settings: Optional[Settings] = None,
) -> Tuple[BrowserConfig, CrawlerRunConfig]:
    """
    Build and return the crawler configuration objects for rendering a single page.
    """
    settings = settings or get_settings()

    browser_config = BrowserConfig(
        browser_type="chromium",
        headless=True,
        user_agent=settings.render_user_agent,
        viewport_width=VIEWPORT_WIDTH,
        viewport_height=VIEWPORT_HEIGHT,
        extra_args=BROWSER_ARGS,
        verbose=False,
    )
    run_config = CrawlerRunConfig(
        cache_mode=CacheMode.BYPASS,
        wait_until="domcontentloaded",
        page_timeout=settings.render_page_timeout_ms,
        delay_before_return_html=settings.render_settle_delay_s,
        locale=settings.render_locale,
        timezone_id=settings.render_timezone,
        verbose=False,
    )

    return browser_config, run_config
