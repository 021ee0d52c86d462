"""Browser setup for snapshot rendering — stable, device-emulating Playwright contexts."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from snapkit.models.device import DeviceConfig

logger = logging.getLogger(__name__)

# Used for devices without a fixed size
FALLBACK_VIEWPORT = {"width": 768, "height": 768}

_FREEZE_ANIMATIONS_SCRIPT = """
(() => {
    const style = document.createElement('style');
    style.setAttribute('data-snapkit', 'freeze-animations');
    style.textContent = `
        *, *::before, *::after {
            animation-duration: 0s !important;
            animation-delay: 0s !important;
            transition-duration: 0s !important;
            transition-delay: 0s !important;
            caret-color: transparent !important;
            scroll-behavior: auto !important;
        }
    `;
    const install = () => (document.head || document.documentElement).appendChild(style);
    if (document.readyState === 'loading') {
        document.addEventListener('DOMContentLoaded', install, { once: true });
    } else {
        install();
    }
})();
"""


async def launch_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """Launch Chromium with flags that keep rasterisation stable between runs."""
    return await playwright.chromium.launch(
        headless=headless,
        args=[
            "--force-color-profile=srgb",
            "--font-render-hinting=none",
            "--disable-lcd-text",
            "--hide-scrollbars",
        ],
    )


@asynccontextmanager
async def open_browser(headless: bool = True) -> AsyncIterator[Browser]:
    async with async_playwright() as p:
        browser = await launch_browser(p, headless=headless)
        try:
            yield browser
        finally:
            await browser.close()


async def create_device_context(
    browser: Browser,
    device: DeviceConfig,
    animations_enabled: bool = True,
) -> BrowserContext:
    """Create a browser context emulating a device config.

    When animations are disabled the context also prefers reduced motion and
    gets a stylesheet zeroing every animation and transition.
    """
    if device.size is not None:
        viewport = {"width": device.width, "height": device.height}
    else:
        viewport = dict(FALLBACK_VIEWPORT)

    reduce_motion = not animations_enabled or bool(device.traits.reduced_motion)
    context = await browser.new_context(
        viewport=viewport,
        device_scale_factor=device.scale,
        color_scheme=device.traits.resolved_color_scheme,
        reduced_motion="reduce" if reduce_motion else "no-preference",
        locale="en-US",
        timezone_id="UTC",
    )
    if not animations_enabled:
        await context.add_init_script(_FREEZE_ANIMATIONS_SCRIPT)
    logger.debug(
        "Created context for %s (%dx%d @%sx, %s)",
        device.name, viewport["width"], viewport["height"], device.scale,
        device.traits.resolved_color_scheme,
    )
    return context
