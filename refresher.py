import asyncio
import logging
import sys
import time

import config
from channels import select_channels
from firebase_store import connect
from scraper import run_discovery, ScrapeOptions

log = logging.getLogger("refresher")


# ---------- LOGGING ----------
def setup_logging(filename=None, level=None):
    level = getattr(logging, level or config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        filename=filename or config.LOG_FILE,
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("%(asctime)s | %(levelname)-8s | %(message)s", "%H:%M:%S"))
    logging.getLogger("").addHandler(console)


# ---------- SCHEDULE ----------
async def _guarded(job):
    try:
        await job()
    except Exception as e:
        log.error(f"❌ Scheduled run failed: {e}")


def seconds_until_next_tick(interval_seconds, now=None):
    """Time left until the next wall-clock multiple of `interval_seconds`.

    With an hourly interval the ticks fall on the top of each hour.
    """
    if interval_seconds <= 0:
        return 0
    now = time.time() if now is None else now
    return interval_seconds - (now % interval_seconds)


async def schedule(job, interval_seconds, max_runs=None):
    """Start `job` now and then on every interval tick of the wall clock.

    Each run is its own task, so a slow run does not delay the next one and
    runs may overlap.
    """
    tasks = set()
    runs = 0
    while max_runs is None or runs < max_runs:
        if runs:
            log.info(f"⏰ Scheduled task: running every {interval_seconds // 60} minutes...")
        task = asyncio.ensure_future(_guarded(job))
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        runs += 1
        if max_runs is not None and runs >= max_runs:
            break
        await asyncio.sleep(seconds_until_next_tick(interval_seconds))
    if tasks:
        await asyncio.gather(*tasks)


def build_options():
    return ScrapeOptions(
        attempts=config.NAV_ATTEMPTS,
        timeout_ms=config.NAV_TIMEOUT_MS,
        settle_seconds=config.SETTLE_SECONDS,
        strategy=config.WAIT_STRATEGY,
        headless=config.HEADLESS,
    )


async def serve():
    try:
        store = connect(config.FIREBASE_CREDENTIALS, config.FIREBASE_DATABASE_URL, config.FIREBASE_COLLECTION)
    except (ValueError, OSError) as e:
        raise config.ConfigError(f"Could not initialise Firebase: {e}") from e
    channels, unknown = select_channels(config.CHANNEL_SUBSET)
    for name in unknown:
        log.warning(f"⚠️ Unknown channel in CHANNEL_SUBSET setting: {name}")
    options = build_options()

    async def job():
        await run_discovery(store, channels, options)

    await schedule(job, config.REFRESH_INTERVAL_MINUTES * 60)


def main():
    setup_logging()
    try:
        config.validate()
    except config.ConfigError as e:
        log.error(f"❌ {e}")
        return 1

    try:
        asyncio.run(serve())
    except config.ConfigError as e:
        log.error(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        log.info("Stopped by user (Ctrl+C).")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
