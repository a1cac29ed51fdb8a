import asyncio
import logging

from playwright.async_api import Error as PlaywrightError

log = logging.getLogger("navigator")

MAX_RETRIES = 3
NAV_TIMEOUT_MS = 90000
SETTLE_SECONDS = 45

WAIT_FIXED = "fixed"
WAIT_FIRST_MATCH = "first_match"


async def navigate(page, url, attempts=MAX_RETRIES, timeout_ms=NAV_TIMEOUT_MS):
    """Load `url` into `page`, retrying immediately on failure.

    Returns True once a load reaches DOMContentLoaded, False when every
    attempt failed. Never raises for navigation errors.
    """
    for attempt in range(1, attempts + 1):
        try:
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            return True
        except PlaywrightError as e:
            log.warning(f"⚠️ Attempt {attempt} failed for {url}: {e}")
    return False


async def engage(page):
    # some players only start requesting segments once scrolled into view
    try:
        await page.evaluate("() => window.scrollBy(0, window.innerHeight)")
    except PlaywrightError as e:
        log.warning(f"⚠️ Scroll failed on {page.url}: {e}")


async def settle(state, seconds=SETTLE_SECONDS, strategy=WAIT_FIXED):
    if strategy == WAIT_FIRST_MATCH:
        try:
            await asyncio.wait_for(state.found.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
        return
    await asyncio.sleep(seconds)


async def open_channel(page, channel, state, attempts=MAX_RETRIES, timeout_ms=NAV_TIMEOUT_MS,
                       settle_seconds=SETTLE_SECONDS, strategy=WAIT_FIXED):
    if not await navigate(page, channel.url, attempts=attempts, timeout_ms=timeout_ms):
        log.error(f"❌ Skipping {channel.name} after {attempts} failed attempts.")
        return False
    await engage(page)
    await settle(state, seconds=settle_seconds, strategy=strategy)
    return True
