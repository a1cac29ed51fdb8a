import asyncio
import re
import logging
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Error as PlaywrightError

log = logging.getLogger("interceptor")

STATUS_ACTIVE = "active"
STATUS_TOKEN_MISSING = "token_missing"

# Stream URLs from this host carry session tokens that expire.
TOKEN_PROVIDER_HOST = "tamashaweb.com"

AUTH_SIGN_PATTERN = re.compile(r"AuthSign=([^&]*)", re.I)
SESSION_ID_PATTERN = re.compile(r"SessionId=([^&]*)", re.I)
NIMBLE_ID_PATTERN = re.compile(r"nimblesessionid=([^&]*)", re.I)


def is_token_provider(url: str) -> bool:
    return TOKEN_PROVIDER_HOST in url


@dataclass
class SessionTokens:
    auth_sign: Optional[str] = None
    session_id: Optional[str] = None
    nimble_id: Optional[str] = None

    def absorb(self, url: str):
        """Pick up any tokens in `url`. Fields already set are kept."""
        auth = AUTH_SIGN_PATTERN.search(url)
        sess = SESSION_ID_PATTERN.search(url)
        nim = NIMBLE_ID_PATTERN.search(url)
        if auth and not self.auth_sign:
            self.auth_sign = auth.group(1)
        if sess and not self.session_id:
            self.session_id = sess.group(1)
        if nim and not self.nimble_id:
            self.nimble_id = nim.group(1)

    @property
    def complete(self) -> bool:
        return bool(self.auth_sign and self.session_id and self.nimble_id)


def classify_status(url: str, tokens: SessionTokens) -> str:
    if is_token_provider(url) and not tokens.complete:
        return STATUS_TOKEN_MISSING
    return STATUS_ACTIVE


@dataclass(frozen=True)
class DiscoveryResult:
    channel_name: str
    stream_url: str
    status: str


class ChannelState:
    """Everything one channel attempt knows. Built fresh per channel."""

    def __init__(self):
        self.matched = False
        self.tokens = SessionTokens()
        self.result: Optional[DiscoveryResult] = None
        self.found = asyncio.Event()
        self.pending = set()
        self.saved = False

    def track(self, task):
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)
        return task

    async def drain(self):
        """Wait for store writes still in flight."""
        if self.pending:
            await asyncio.gather(*list(self.pending))


class RequestInterceptor:
    def __init__(self, channel, state: ChannelState, on_match=None):
        self.channel = channel
        self.state = state
        self.on_match = on_match

    def inspect(self, url: str) -> Optional[DiscoveryResult]:
        """Look at one outgoing request URL.

        Returns the DiscoveryResult when this URL is the first one to
        satisfy the channel's filter, otherwise None.
        """
        state = self.state
        if state.matched:
            return None

        if is_token_provider(url):
            state.tokens.absorb(url)

        if not self.channel.filter.matches(url):
            return None

        # flag is set before any await so later requests see it
        state.matched = True
        state.result = DiscoveryResult(
            channel_name=self.channel.name,
            stream_url=url,
            status=classify_status(url, state.tokens),
        )
        state.found.set()
        log.info(f"🎯 [FOUND] {self.channel.name} → {url}")
        if state.result.status == STATUS_TOKEN_MISSING:
            log.warning(
                f"⚠️ Missing AuthSign/SessionId/NimbleId for {self.channel.name}, saving as {STATUS_TOKEN_MISSING}."
            )
        return state.result

    async def handle_route(self, route):
        result = None
        try:
            result = self.inspect(route.request.url)
        finally:
            try:
                await route.continue_()
            except PlaywrightError as e:
                # page closed while the request was in flight
                log.debug(f"continue failed for {route.request.url}: {e}")

        if result is not None and self.on_match is not None:
            self.state.track(asyncio.ensure_future(self._record(result)))

    async def _record(self, result: DiscoveryResult):
        try:
            self.state.saved = bool(await self.on_match(result))
        except Exception as e:
            log.error(f"❌ Saving {result.channel_name} failed: {e}")

    async def attach(self, page):
        await page.route("**/*", self.handle_route)
