import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from playwright.async_api import async_playwright, Error as PlaywrightError

from channels import CHANNELS
from interceptor import ChannelState, RequestInterceptor, STATUS_TOKEN_MISSING
from navigator import open_channel, MAX_RETRIES, NAV_TIMEOUT_MS, SETTLE_SECONDS, WAIT_FIXED

log = logging.getLogger("scraper")

FOUND = "found"
NOT_FOUND = "not_found"
SKIPPED = "skipped"


@dataclass
class ScrapeOptions:
    attempts: int = MAX_RETRIES
    timeout_ms: int = NAV_TIMEOUT_MS
    settle_seconds: float = SETTLE_SECONDS
    strategy: str = WAIT_FIXED
    headless: bool = True


@dataclass
class ChannelOutcome:
    name: str
    outcome: str
    result: object = None
    saved: bool = False


@dataclass
class RunSummary:
    started: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished: Optional[datetime] = None
    outcomes: list = field(default_factory=list)
    error: Optional[str] = None

    def count(self, outcome):
        return sum(1 for o in self.outcomes if o.outcome == outcome)

    @property
    def token_missing(self):
        return sum(1 for o in self.outcomes if o.result and o.result.status == STATUS_TOKEN_MISSING)

    @property
    def saved(self):
        return sum(1 for o in self.outcomes if o.saved)

    def log(self):
        duration = ((self.finished or datetime.now(timezone.utc)) - self.started).total_seconds()
        log.info("📊 RUN SUMMARY ------------------------------")
        log.info(f"🕓 Duration:      {duration:.2f} sec")
        log.info(f"📺 Channels:      {len(self.outcomes)}")
        log.info(f"✅ Found:         {self.count(FOUND)}")
        log.info(f"💾 Saved:         {self.saved}")
        log.info(f"⚠️ Token missing: {self.token_missing}")
        log.info(f"🔍 Not found:     {self.count(NOT_FOUND)}")
        log.info(f"❌ Skipped:       {self.count(SKIPPED)}")
        if self.error:
            log.info(f"💥 Aborted:       {self.error}")
        log.info("------------------------------------------------")


async def discover_channel(context, channel, store, options=None):
    options = options or ScrapeOptions()
    log.info(f"\n[Processing] {channel.name} → {channel.url}")

    state = ChannelState()
    interceptor = RequestInterceptor(channel, state, on_match=store.save if store else None)

    page = await context.new_page()
    try:
        page.set_default_navigation_timeout(0)
        await interceptor.attach(page)
        loaded = await open_channel(
            page, channel, state,
            attempts=options.attempts,
            timeout_ms=options.timeout_ms,
            settle_seconds=options.settle_seconds,
            strategy=options.strategy,
        )
        await state.drain()
    finally:
        try:
            await page.close()
        except PlaywrightError as e:
            log.warning(f"⚠️ Closing page for {channel.name} failed: {e}")

    if state.result is not None:
        return ChannelOutcome(channel.name, FOUND, state.result, state.saved)
    if not loaded:
        return ChannelOutcome(channel.name, SKIPPED)
    log.info(f"🔍 No stream request matched for {channel.name}")
    return ChannelOutcome(channel.name, NOT_FOUND)


async def run_discovery(store, channels=None, options=None):
    """One pass over the channel list. Never raises."""
    channels = CHANNELS if channels is None else channels
    options = options or ScrapeOptions()
    summary = RunSummary()
    log.info(f"🚀 Starting discovery run for {len(channels)} channels...")

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=options.headless)
            try:
                context = await browser.new_context()
                for channel in channels:
                    summary.outcomes.append(await discover_channel(context, channel, store, options))
            finally:
                await browser.close()
    except Exception as e:
        summary.error = str(e)
        log.error(f"❌ Error fetching stream links: {e}")

    summary.finished = datetime.now(timezone.utc)
    summary.log()
    return summary
