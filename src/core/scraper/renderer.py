from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from crawl4ai import AsyncWebCrawler
from playwright.async_api import Error as PlaywrightError

from src.core.utils.configs import build_renderer_components
from src.core.utils.logger import get_logger
from src.core.utils.settings import Settings, get_settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderedPage:
    """Final HTML of a page after JavaScript ran, and the URL it ended up on."""

    html: str
    url: str


class RenderError(Exception):
    """Raised when a page could not be loaded or rendered."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url
        self.message = message


def build_network_idle_hook(timeout_ms: int) -> Callable[..., Awaitable[Any]]:
    """
    Build an ``after_goto`` hook that gives client-side rendering time to finish.

    The hook waits for Playwright's ``networkidle`` state for at most
    ``timeout_ms``. Pages that keep polling never go idle; a timeout there is
    not a failure, the crawl simply continues with whatever has rendered.
    """

    async def wait_for_network_idle(page: Any, **_kwargs: Any) -> Any:
        try:
            await page.wait_for_load_state("networkidle", timeout=timeout_ms)
        except PlaywrightError as exc:
            logger.debug("Network did not go idle", extra={"error": str(exc)})
        return page

    return wait_for_network_idle


class Renderer:
    """
    Render pages in a headless browser via crawl4ai.

    A fresh browser is started for every call and always closed afterwards,
    so concurrent renders never share browser state.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        crawler_factory: Callable[..., Any] = AsyncWebCrawler,
    ):
        settings = settings or get_settings()
        self._browser_config, self._run_config = build_renderer_components(settings)
        self._after_goto = build_network_idle_hook(
            settings.render_network_idle_timeout_ms
        )
        self._crawler_factory = crawler_factory

    async def render(self, url: str) -> RenderedPage:
        """
        Load ``url`` and return its rendered HTML.

        Navigation waits for DOMContentLoaded, then (bounded) for the network
        to go idle, then for the configured settle delay.

        Args:
            url: Absolute http(s) URL

        Returns:
            RenderedPage with the final HTML and the final (post-redirect) URL

        Raises:
            RenderError: navigation failed, timed out, or the crawl was unsuccessful
        """
        try:
            async with self._crawler_factory(config=self._browser_config) as crawler:
                crawler.crawler_strategy.set_hook("after_goto", self._after_goto)
                result = await crawler.arun(url=url, config=self._run_config)
        except Exception as exc:
            raise RenderError(url, str(exc) or type(exc).__name__) from exc

        if not getattr(result, "success", False):
            message = getattr(result, "error_message", None) or "render failed"
            raise RenderError(url, message)

        final_url = (
            getattr(result, "redirected_url", None) or getattr(result, "url", None) or url
        )
        logger.debug("Rendered page", extra={"url": url, "final_url": final_url})
        return RenderedPage(html=getattr(result, "html", None) or "", url=final_url)
