"""Worker process for the year-end rollover.

Sleeps until the next January 1st (or the configured check interval,
whichever comes first) and then sweeps every company for employees that
lack a record for the current year. The sweep is idempotent, so it also
runs once at startup to catch up after downtime.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timedelta

from annual_quota.config import get_settings
from annual_quota.db import dispose_engine, session_scope
from annual_quota.services.rollover import run_year_end_rollover

logger = logging.getLogger(__name__)


def seconds_until_next_year(now: datetime) -> float:
    """Seconds from ``now`` until midnight on the next January 1st (same tzinfo)."""
    next_new_year = datetime(now.year + 1, 1, 1, tzinfo=now.tzinfo)
    return (next_new_year - now) / timedelta(seconds=1)


async def run_rollover_once(today: date) -> None:
    """Sweep ``today``'s year; a failed run is logged and retried on the next wake-up."""
    logger.info("Running year-end rollover for %d", today.year)
    try:
        async with session_scope() as session:
            result = await run_year_end_rollover(session, today.year)
        if result.failed:
            logger.warning("Rollover for %d left %d employee(s) failed", today.year, result.failed)
    except Exception:
        logger.exception("Rollover run failed for %d", today.year)


async def run_rollover_loop() -> None:
    settings = get_settings()
    logger.info("Rollover worker started")

    if settings.rollover_on_startup:
        await run_rollover_once(date.today())

    try:
        while True:
            delay = min(seconds_until_next_year(datetime.now()), settings.rollover_check_interval_seconds)
            logger.debug("Rollover worker sleeping %.0f seconds", delay)
            # Land just past midnight so date.today() is already the new year.
            await asyncio.sleep(delay + 1)
            await run_rollover_once(date.today())
    finally:
        await dispose_engine()


def main() -> None:
    """Entry point for the worker process."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_rollover_loop())


if __name__ == "__main__":
    main()
