"""Process-wide headless Chromium shared by every rendered-page fetch."""
import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

import structlog
from playwright.async_api import Browser, Page, Playwright, async_playwright

logger = structlog.get_logger(__name__)

MOBILE_PROFILE: dict[str, Any] = {
    "viewport": {"width": 393, "height": 852},
    "device_scale_factor": 3,
    "is_mobile": True,
    "has_touch": True,
    "user_agent": (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
    ),
    "locale": "ko-KR",
}

DESKTOP_PROFILE: dict[str, Any] = {
    "viewport": {"width": 1280, "height": 800},
    "user_agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "locale": "ko-KR",
}

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-blink-features=AutomationControlled",
]

# Hides the most common headless markers before any page script runs
STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => false });
Object.defineProperty(navigator, 'languages', { get: () => ['ko-KR', 'ko', 'en-US', 'en'] });
window.chrome = { runtime: {} };
"""

Launcher = Callable[[], Awaitable[tuple[Playwright, Browser]]]


class BrowserSessionClosedError(Exception):
    pass


class BrowserSession:
    """
    Lazily launched browser with single-flight initialization.

    Every caller gets its own browser context through ``page()``. ``close()``
    refuses new pages, waits for the in-flight ones to finish, then shuts
    the browser down.
    """

    def __init__(
        self,
        headless: bool = True,
        executable_path: str | None = None,
        launcher: Launcher | None = None,
    ) -> None:
        self._headless = headless
        self._executable_path = executable_path
        self._launcher = launcher or self._launch
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()
        self._idle = asyncio.Condition()
        self._active = 0
        self._closing = False

    @property
    def active_pages(self) -> int:
        return self._active

    async def _launch(self) -> tuple[Playwright, Browser]:
        playwright = await async_playwright().start()
        browser = await playwright.chromium.launch(
            headless=self._headless,
            executable_path=self._executable_path,
            args=LAUNCH_ARGS,
        )
        return playwright, browser

    async def browser(self) -> Browser:
        if self._browser is not None and self._browser.is_connected():
            return self._browser
        async with self._lock:
            if self._closing:
                raise BrowserSessionClosedError("Browser session is shutting down.")
            if self._browser is None or not self._browser.is_connected():
                logger.info("browser_launching", headless=self._headless)
                self._playwright, self._browser = await self._launcher()
                logger.info("browser_launched")
            return self._browser

    @asynccontextmanager
    async def page(self, *, mobile: bool = False) -> AsyncIterator[Page]:
        if self._closing:
            raise BrowserSessionClosedError("Browser session is shutting down.")

        async with self._idle:
            self._active += 1
        try:
            browser = await self.browser()
            context = await browser.new_context(**(MOBILE_PROFILE if mobile else DESKTOP_PROFILE))
            try:
                await context.add_init_script(STEALTH_SCRIPT)
                page = await context.new_page()
                yield page
            finally:
                await context.close()
        finally:
            async with self._idle:
                self._active -= 1
                self._idle.notify_all()

    async def close(self) -> None:
        self._closing = True
        async with self._idle:
            await self._idle.wait_for(lambda: self._active == 0)

        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        logger.info("browser_closed")
