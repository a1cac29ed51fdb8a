import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure project root is in path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from playwright.async_api import Error as PlaywrightError


class FakeRoute:
    def __init__(self, url):
        self.request = MagicMock()
        self.request.url = url
        self.continued = False
        self.aborted = False

    async def continue_(self):
        self.continued = True

    async def abort(self):
        self.aborted = True


class FakePage:
    """Stands in for a Playwright page.

    `outcomes` holds one entry per goto() call: an exception to raise, or a
    list of request URLs the page issues once loaded.
    """

    def __init__(self, outcomes=None, url="about:blank"):
        self.outcomes = list(outcomes or [[]])
        self.url = url
        self.handler = None
        self.routes = []
        self.goto_calls = []
        self.evaluated = []
        self.closed = False
        self.default_navigation_timeout = None

    def set_default_navigation_timeout(self, timeout):
        self.default_navigation_timeout = timeout

    async def route(self, pattern, handler):
        self.routes.append(pattern)
        self.handler = handler

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        self.url = url
        outcome = self.outcomes.pop(0) if self.outcomes else []
        if isinstance(outcome, BaseException):
            raise outcome
        for request_url in outcome:
            await self.fire(request_url)

    async def fire(self, url):
        route = FakeRoute(url)
        if self.handler is not None:
            await self.handler(route)
        return route

    async def evaluate(self, expression):
        self.evaluated.append(expression)

    async def close(self):
        self.closed = True


class FakeContext:
    def __init__(self, pages):
        self.pages = list(pages)
        self.opened = []

    async def new_page(self):
        page = self.pages.pop(0)
        self.opened.append(page)
        return page


class FakeStore:
    def __init__(self, result=True):
        self.saved = []
        self.result = result

    async def save(self, result):
        self.saved.append(result)
        return self.result


class FakePlaywright:
    def __init__(self, browser=None, launch_error=None):
        self.chromium = MagicMock()
        if launch_error is not None:
            self.chromium.launch = AsyncMock(side_effect=launch_error)
        else:
            self.chromium.launch = AsyncMock(return_value=browser)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def make_browser(context):
    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()
    return browser


def nav_error(message="net::ERR_NAME_NOT_RESOLVED"):
    return PlaywrightError(message)


@pytest.fixture
def store():
    return FakeStore()
