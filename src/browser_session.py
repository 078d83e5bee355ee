"""
Headless browser session
Owns one Chromium instance (Playwright async API) shared by all fetches.

- launched lazily on first use, under a lock
- checked with is_connected() before reuse; a disconnect drops the handle so
  the next fetch relaunches
- every fetch gets its own browser context + page, closed unconditionally

Usage:
    async with BrowserSession(config["browser"]) as session:
        result = await session.fetch(url, timeout_ms=30000)
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional

from loguru import logger
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from receipt_errors import ErrorCode, ReceiptError
from settings import default_config


@dataclass
class FetchResult:
    html: str
    status: int
    final_url: str


class BrowserSession:
    """Explicitly owned Playwright browser shared across fetches."""

    def __init__(self, config: Optional[Dict] = None):
        self.config = {**default_config()['browser'], **(config or {})}
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self.is_connected:
                return self._browser

            try:
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                browser = await self._playwright.chromium.launch(
                    headless=self.config['headless'],
                    args=list(self.config['args']),
                    timeout=self.config['launch_timeout_ms'],
                )
            except Exception as e:
                logger.error(f"Browser launch failed: {e}")
                raise ReceiptError(ErrorCode.BROWSER_LAUNCH_FAILED, original_error=str(e))

            browser.on("disconnected", self._on_disconnected)
            self._browser = browser
            logger.info("Chromium launched")
            return browser

    def _on_disconnected(self, *_):
        logger.warning("Browser disconnected, will relaunch on next fetch")
        self._browser = None

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """
        Isolated context + page; the context is closed whatever happens.

        Failures while opening them are raised as NAVIGATION_ERROR
        (PAGE_TIMEOUT for timeouts).
        """
        browser = await self._ensure_browser()
        context = None
        try:
            try:
                context = await browser.new_context(
                    viewport=self.config['viewport'],
                    user_agent=self.config['user_agent'],
                    extra_http_headers=self.config['extra_headers'],
                )
                page = await context.new_page()
            except PlaywrightTimeoutError as e:
                logger.warning(f"Timed out opening a page: {e}")
                raise ReceiptError(ErrorCode.PAGE_TIMEOUT, original_error=str(e))
            except PlaywrightError as e:
                logger.warning(f"Could not open a page: {e}")
                raise ReceiptError(ErrorCode.NAVIGATION_ERROR, original_error=str(e))
            yield page
        finally:
            if context is not None:
                try:
                    await context.close()
                except PlaywrightError as e:
                    logger.warning(f"Error closing browser context: {e}")

    async def fetch(self, url: str, timeout_ms: int = 30000) -> FetchResult:
        """
        Render url and return its HTML.

        Raises
        ------
        ReceiptError
            BROWSER_LAUNCH_FAILED, PAGE_LOAD_FAILED, HTTP_ERROR,
            PAGE_TIMEOUT or NAVIGATION_ERROR
        """
        async with self.page() as page:
            failed_requests = []

            try:
                page.on(
                    "requestfailed",
                    lambda request: failed_requests.append(request.failure or "Request failed"),
                )
                response = await page.goto(url, wait_until="networkidle", timeout=timeout_ms)

                if response is None:
                    raise ReceiptError(
                        ErrorCode.PAGE_LOAD_FAILED,
                        details=failed_requests[-1] if failed_requests else None,
                    )

                status = response.status
                if status >= 400:
                    raise ReceiptError(
                        ErrorCode.HTTP_ERROR,
                        message=f"HTTP Error: {status}",
                        details={"status": status},
                    )

                await page.wait_for_selector("body", timeout=self.config['body_wait_ms'])
                html = await page.content()

            except PlaywrightTimeoutError as e:
                logger.warning(f"Timed out loading {url}")
                raise ReceiptError(ErrorCode.PAGE_TIMEOUT, original_error=str(e))
            except PlaywrightError as e:
                logger.warning(f"Navigation error for {url}: {e}")
                raise ReceiptError(ErrorCode.NAVIGATION_ERROR, original_error=str(e))

            logger.debug(f"Fetched {url} status={status} bytes={len(html)}")
            return FetchResult(html=html, status=status, final_url=page.url)

    async def close(self):
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.error(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
