import asyncio
import logging
import time

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from conftest import FakePage, nav_error

from channels import find_channel
from interceptor import ChannelState
from navigator import navigate, open_channel, settle, WAIT_FIRST_MATCH

GEO = find_channel("Geo Tv")


def test_navigate_uses_domcontentloaded_and_timeout():
    page = FakePage()
    assert asyncio.run(navigate(page, GEO.url))
    assert page.goto_calls == [(GEO.url, "domcontentloaded", 90000)]


def test_navigate_retries_until_success():
    page = FakePage([nav_error(), PlaywrightTimeoutError("Timeout 90000ms exceeded"), []])
    assert asyncio.run(navigate(page, GEO.url, attempts=3))
    assert len(page.goto_calls) == 3


def test_navigate_gives_up_without_raising():
    page = FakePage([nav_error(), nav_error(), nav_error(), []])
    assert not asyncio.run(navigate(page, GEO.url, attempts=3))
    assert len(page.goto_calls) == 3


def test_two_failures_then_success_scrolls_and_is_not_skipped(caplog):
    caplog.set_level(logging.INFO)
    page = FakePage([nav_error(), nav_error(), []])
    ok = asyncio.run(open_channel(page, GEO, ChannelState(), settle_seconds=0))
    assert ok
    assert len(page.evaluated) == 1
    assert "scrollBy" in page.evaluated[0]
    assert "Skipping" not in caplog.text


def test_exhausted_attempts_skip_channel(caplog):
    caplog.set_level(logging.INFO)
    page = FakePage([nav_error(), nav_error(), nav_error()])
    ok = asyncio.run(open_channel(page, GEO, ChannelState(), settle_seconds=0))
    assert not ok
    assert page.evaluated == []
    assert "Skipping Geo Tv after 3 failed attempts" in caplog.text


def test_first_match_strategy_returns_early():
    state = ChannelState()
    state.found.set()
    start = time.monotonic()
    asyncio.run(settle(state, seconds=30, strategy=WAIT_FIRST_MATCH))
    assert time.monotonic() - start < 5


def test_first_match_strategy_times_out_without_match():
    state = ChannelState()
    start = time.monotonic()
    asyncio.run(settle(state, seconds=0.05, strategy=WAIT_FIRST_MATCH))
    elapsed = time.monotonic() - start
    assert 0.04 <= elapsed < 5
    assert not state.found.is_set()
