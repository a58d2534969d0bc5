"""
Driver for the dailies pipeline.

Coordinates:
- Waiting for the next primary rollover
- Fetching both activity pages
- Row extraction and rendering
- Delivery (stdout or a chat collaborator)
"""

import asyncio
import threading
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

import structlog

from .config.loader import Settings
from .core.http_client import HttpClient
from .core.models import DailyRecord, OutputFormat, ScheduleKind, WeeklyRecord
from .core.schedule import next_trigger, resolve_key, seconds_until
from .core.selectors import StructureError
from .parsers.daily import DailyParser
from .parsers.weekly import WeeklyParser
from .rendering import message_title, render

logger = structlog.get_logger(__name__)


# (title, description) -> accepted?
Deliver = Callable[[str, str], Awaitable[bool]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StartGuard:
    """One-shot start flag; claim() succeeds exactly once."""

    def __init__(self):
        self._lock = threading.Lock()
        self._started = False

    def claim(self) -> bool:
        with self._lock:
            if self._started:
                return False
            self._started = True
            return True

    @property
    def started(self) -> bool:
        return self._started


class DailiesDriver:
    """
    Scheduling loop for the dailies pipeline.

    One cycle at a time: wait for the next rollover, fetch both pages,
    extract, render, deliver. A missing table or row skips the cycle;
    fetch failures never surface (the client retries until it succeeds).
    """

    def __init__(
        self,
        http_client: HttpClient,
        settings: Settings,
        output_format: OutputFormat = OutputFormat.TXT,
        deliver: Optional[Deliver] = None,
        run_once: bool = True,
        post_now: bool = False,
        at_time: Optional[datetime] = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        emit: Callable[[str], None] = print,
    ):
        """
        Initialize driver.

        Args:
            http_client: Entered HttpClient used for both pages
            settings: Loaded settings (page URLs, site origin)
            output_format: Rendering target
            deliver: Chat collaborator, required for the discord format
            run_once: Stop after the first cycle
            post_now: Skip the wait before the first cycle
            at_time: Simulated instant; implies a single immediate cycle
            clock: Source of the current instant
            sleep: Coroutine used for inter-cycle waits
            emit: Sink for text formats
        """
        if output_format == OutputFormat.DISCORD and deliver is None:
            raise ValueError("Discord output needs a delivery collaborator")

        self.http_client = http_client
        self.settings = settings
        self.output_format = OutputFormat(output_format)
        self.deliver = deliver
        self.run_once = run_once
        self.post_now = post_now
        self.at_time = at_time
        self.clock = clock
        self.sleep = sleep
        self.emit = emit

        selectors = settings.sources.table_selectors or None
        self.daily_parser = DailyParser(settings.sources.site_origin, selectors)
        self.weekly_parser = WeeklyParser(settings.sources.site_origin, selectors)

        self._guard = StartGuard()
        self._task: Optional[asyncio.Task] = None

        # Statistics
        self.stats = {
            "cycles": 0,
            "delivered": 0,
            "skipped": 0,
            "delivery_failures": 0,
        }

    def now(self) -> datetime:
        """Simulated instant if set, otherwise a fresh clock reading."""
        return self.at_time or self.clock()

    async def fetch_records(self, now: datetime) -> tuple[DailyRecord, WeeklyRecord]:
        """
        Fetch both pages and extract the records current at `now`.

        Raises:
            StructureError: If a table or row is missing
        """
        primary_key = resolve_key(now, ScheduleKind.PRIMARY)
        secondary_key = resolve_key(now, ScheduleKind.SECONDARY)
        weekly_key = resolve_key(now, ScheduleKind.WEEKLY)

        sources = self.settings.sources

        daily_body = await self.http_client.fetch_with_retry(sources.daily_url, "Daily activities")
        daily = self.daily_parser.parse(daily_body, primary_key, secondary_key)

        weekly_body = await self.http_client.fetch_with_retry(sources.weekly_url, "Weekly activities")
        weekly = self.weekly_parser.parse(weekly_body, weekly_key)

        return daily, weekly

    async def run_cycle(self, now: Optional[datetime] = None) -> Optional[str]:
        """
        Run one fetch-extract-render pass.

        Args:
            now: Instant to resolve keys for (defaults to self.now())

        Returns:
            Rendered output, or None if the cycle was skipped
        """
        now = now or self.now()
        date_label = resolve_key(now, ScheduleKind.PRIMARY)
        self.stats["cycles"] += 1

        logger.info("cycle_started", at=now.isoformat(), date=date_label)

        try:
            daily, weekly = await self.fetch_records(now)
        except StructureError as e:
            self.stats["skipped"] += 1
            logger.error("cycle_skipped", error=str(e))
            return None

        return render(daily, weekly, date_label, self.output_format)

    async def deliver_output(self, output: str, now: datetime) -> bool:
        """Hand a rendered cycle to stdout or the chat collaborator."""
        if self.output_format != OutputFormat.DISCORD:
            self.emit(output)
            self.stats["delivered"] += 1
            return True

        title = message_title(resolve_key(now, ScheduleKind.PRIMARY))
        if await self.deliver(title, output):
            self.stats["delivered"] += 1
            return True

        self.stats["delivery_failures"] += 1
        logger.error("delivery_failed", title=title)
        return False

    async def wait_for_next_trigger(self) -> None:
        """Sleep until the next primary rollover, from a fresh clock reading."""
        now = self.clock()
        target = next_trigger(now)
        delay = seconds_until(target, now)
        logger.info("sleeping_until_next_post", seconds=delay, until=target.isoformat())
        await self.sleep(delay)

    async def run(self) -> None:
        """
        Drive cycles until done.

        Idle -> Waiting (unless posting now) -> Fetching -> Delivering ->
        Terminated (single run) or back to Waiting (loop).
        """
        single_run = self.run_once
        if self.at_time is not None:
            if not self.run_once:
                logger.warning("loop_ignored_with_simulated_time", at_time=self.at_time.isoformat())
            single_run = True
        elif not self.post_now:
            await self.wait_for_next_trigger()

        while True:
            now = self.now()
            output = await self.run_cycle(now)
            if output is not None:
                await self.deliver_output(output, now)

            if single_run:
                logger.info("single_run_completed", **self.stats)
                return

            await self.wait_for_next_trigger()

    def start(self) -> bool:
        """
        Start the scheduling loop as a task, at most once.

        Returns:
            True if this call started the loop
        """
        if not self._guard.claim():
            logger.info("timer_already_running")
            return False

        self._task = asyncio.create_task(self.run())
        return True

    async def handle_ready(self, user_name: str) -> None:
        """Ready callback for the delivery collaborator."""
        logger.info("ready", user=user_name)
        self.start()

    async def join(self) -> None:
        """Wait for the scheduling loop to finish."""
        if self._task is not None:
            await self._task
