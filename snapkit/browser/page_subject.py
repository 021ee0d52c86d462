"""Playwright page subjects and scroll regions for the snapshot runner."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page

from snapkit.browser.launcher import create_device_context
from snapkit.executor.animations import ANIMATIONS, AnimationSwitch
from snapkit.executor.image_processor import decode_png
from snapkit.models.device import DeviceConfig
from snapkit.models.snapshot import CapturedArtifact

logger = logging.getLogger(__name__)

_LAYOUT_SCRIPT = "() => document.documentElement.getBoundingClientRect().height"

_APPEARANCE_SCRIPT = """
() => {
    document.dispatchEvent(new Event('visibilitychange'));
    window.dispatchEvent(new PageTransitionEvent('pageshow', { persisted: false }));
    window.dispatchEvent(new Event('resize'));
}
"""

# Each script takes the CSS selector of the scroll container, or null for the document
_SCROLL_METRICS_SCRIPT = """
(selector) => {
    const el = selector ? document.querySelector(selector) : document.scrollingElement;
    if (!el) return null;
    const top = selector ? el.getBoundingClientRect().top + window.scrollY : 0;
    return { contentHeight: el.scrollHeight, offset: top, scrollTop: el.scrollTop };
}
"""

_SCROLL_TO_SCRIPT = """
([selector, y]) => {
    const el = selector ? document.querySelector(selector) : document.scrollingElement;
    el.scrollTo({ top: y, left: 0, behavior: 'instant' });
}
"""


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://", "file://", "about:", "data:"))


class PageSubject:
    """A page rendered in its own browser context for one device config."""

    def __init__(self, page: Page, context: BrowserContext, device: DeviceConfig):
        self.page = page
        self.context = context
        self.device = device
        self.mounted = False

    async def layout(self) -> None:
        await self.page.evaluate(_LAYOUT_SCRIPT)

    async def attach_to_window(self, size: tuple[int, int]) -> None:
        width, height = size
        await self.page.set_viewport_size({"width": width, "height": height})
        self.mounted = True

    async def run_appearance_lifecycle(self) -> None:
        await self.page.evaluate(_APPEARANCE_SCRIPT)

    async def present(self) -> None:
        await self.page.bring_to_front()

    async def capture(self, device: DeviceConfig) -> CapturedArtifact:
        """Screenshot the subject at the device's size, or the full page when it has none."""
        if device.size is None:
            data = await self.page.screenshot(full_page=True, animations="disabled", caret="hide")
            return decode_png(data, scale=device.scale)

        # Content laid out in the tall host window stays rendered after shrinking back
        if self.page.viewport_size != {"width": device.width, "height": device.height}:
            await self.page.set_viewport_size({"width": device.width, "height": device.height})
        data = await self.page.screenshot(full_page=False, animations="disabled", caret="hide")
        return decode_png(data, scale=device.scale)

    async def close(self) -> None:
        await self.context.close()


class PageSubjectFactory:
    """Creates a fresh PageSubject per device config from a URL or inline HTML."""

    def __init__(
        self,
        browser: Browser,
        source: str,
        animations: AnimationSwitch = ANIMATIONS,
        wait_until: str = "networkidle",
    ):
        self.browser = browser
        self.source = source
        self.animations = animations
        self.wait_until = wait_until

    async def __call__(self, device: DeviceConfig) -> PageSubject:
        context = await create_device_context(
            self.browser, device, animations_enabled=self.animations.enabled
        )
        try:
            page = await context.new_page()
            if is_url(self.source):
                logger.debug("Loading %s for %s", self.source, device.name)
                await page.goto(self.source, wait_until=self.wait_until)
            else:
                await page.set_content(self.source, wait_until=self.wait_until)
        except Exception:
            await context.close()
            raise
        return PageSubject(page, context, device)


class ElementScrollRegion:
    """The document, or an element matched by ``selector``, as a scroll region."""

    def __init__(self, page: Page, selector: Optional[str] = None):
        self.page = page
        self.selector = selector

    async def _metrics(self) -> dict:
        metrics = await self.page.evaluate(_SCROLL_METRICS_SCRIPT, self.selector)
        if metrics is None:
            raise LookupError(f"Scroll container not found: {self.selector}")
        return metrics

    async def content_height(self) -> float:
        return float((await self._metrics())["contentHeight"])

    async def offset_in_subject(self) -> float:
        return float((await self._metrics())["offset"])

    async def scroll_offset(self) -> float:
        return float((await self._metrics())["scrollTop"])

    async def scroll_to(self, y: float) -> None:
        await self.page.evaluate(_SCROLL_TO_SCRIPT, [self.selector, y])


def scroll_accessor_for(selector: Optional[str] = None):
    """Build a scroll accessor returning the region for ``selector`` when it exists."""

    async def accessor(subject: PageSubject) -> Optional[ElementScrollRegion]:
        if selector is not None and await subject.page.query_selector(selector) is None:
            logger.debug("No scroll container matches %s", selector)
            return None
        return ElementScrollRegion(subject.page, selector)

    return accessor
