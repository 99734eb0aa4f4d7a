"""
Main scheduler service for the question of the day bot.

This module provides:
- A once-per-tick cycle: load, fetch, reconcile, maybe deliver, save
- Periodic scheduling with APScheduler
- Fail-fast error handling and graceful shutdown on signals
"""

import asyncio
import random
import signal
from datetime import date, datetime, timezone
from typing import Callable, Dict, Optional, Type
from uuid import uuid4
from zoneinfo import ZoneInfo

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.events import EVENT_JOB_EXECUTED, EVENT_JOB_ERROR

from integrations.base import Notifier, QuestionSource
from questions.errors import (
    FetchError, NotifyError, PersistError, QotdError, ReconcileError
)
from questions.reconciler import reconcile
from questions.selector import deliver_question, is_delivery_due
from questions.store import QuestionStore
from scheduler.models import CycleResult, SchedulerConfig
from utilities.logger import CycleLogger

logger = structlog.get_logger(__name__)

CYCLE_JOB_ID = "question_cycle"

# Error raised when an unexpected exception escapes a cycle stage
STAGE_ERRORS: Dict[str, Type[QotdError]] = {
    "load": PersistError,
    "fetch": FetchError,
    "reconcile": ReconcileError,
    "deliver": NotifyError,
    "save": PersistError,
}


class QuestionBot:
    """Periodic executor that owns the question collection for one cycle at a time."""

    def __init__(
        self,
        config: SchedulerConfig,
        store: QuestionStore,
        source: QuestionSource,
        notifier: Notifier,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the bot.

        Args:
            config: Scheduler configuration
            store: Persistence for the question collection
            source: Where question lines are fetched from
            notifier: Where the daily question is delivered
            rng: Randomness source for selection
            clock: Returns the current time used for the delivery decision
        """
        self.config = config
        self.store = store
        self.source = source
        self.notifier = notifier
        self.rng = rng or random.Random()
        self.clock = clock or (lambda: datetime.now(ZoneInfo(config.timezone)))

        self.scheduler = AsyncIOScheduler(timezone=config.timezone)
        self.logger = logger.bind(component="question_bot")

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._cycle_lock: Optional[asyncio.Lock] = None
        self._failure: Optional[BaseException] = None
        self._last_delivery_date: Optional[date] = None

        self._setup_scheduler_listeners()

    def _setup_scheduler_listeners(self) -> None:
        """Setup scheduler event listeners."""
        self.scheduler.add_listener(self._on_job_executed, EVENT_JOB_EXECUTED)
        self.scheduler.add_listener(self._on_job_error, EVENT_JOB_ERROR)

    def _on_job_executed(self, event) -> None:
        self.logger.debug(
            "Cycle job executed",
            job_id=event.job_id,
            duration=event.retval.get('duration_seconds', 0) if event.retval else 0
        )

    def _on_job_error(self, event) -> None:
        """Stop the bot on a failed cycle unless configured to keep going."""
        if self.config.continue_on_error:
            self.logger.warning(
                "Cycle failed, continuing with next tick",
                job_id=event.job_id,
                error=str(event.exception)
            )
            return

        self.logger.error(
            "Cycle failed, stopping bot",
            job_id=event.job_id,
            error=str(event.exception)
        )
        self._failure = event.exception
        self.stop()

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                self._loop.add_signal_handler(signum, self._handle_signal, signum)
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform or outside the main thread
                self.logger.debug("Signal handler unavailable", signal=signum)

    def _remove_signal_handlers(self) -> None:
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                self._loop.remove_signal_handler(signum)
            except (NotImplementedError, RuntimeError):
                pass

    def _handle_signal(self, signum: int) -> None:
        self.logger.info(f"Received signal {signum}, shutting down gracefully...")
        self.stop()

    async def run_cycle(self) -> CycleResult:
        """
        Run one full cycle.

        Returns:
            CycleResult describing what happened.

        Raises:
            QotdError: Any failure aborts the cycle before the save, so the
                persisted state never reflects a partial cycle.
        """
        start_time = datetime.now(timezone.utc)
        result = CycleResult(cycle_id=uuid4().hex[:12], started_at=start_time)
        cycle_logger = CycleLogger("question_bot").bind_context(cycle_id=result.cycle_id)

        stage = "load"
        try:
            questions = await self.store.load()
            result.questions_loaded = len(questions)
            cycle_logger.log_cycle_start(result.questions_loaded)

            stage = "fetch"
            raw_text = await self.source.fetch()

            stage = "reconcile"
            reconciled = reconcile(questions, raw_text)
            result.lines_fetched = reconciled.lines_processed
            result.added = reconciled.added
            result.updated = reconciled.updated
            result.unchanged = reconciled.unchanged
            cycle_logger.log_reconciled(
                reconciled.lines_processed,
                reconciled.added,
                reconciled.updated,
                reconciled.unchanged
            )

            stage = "deliver"
            now = self.clock()
            result.delivery_due = (
                is_delivery_due(now, self.config.post_at, questions)
                and self._last_delivery_date != now.date()
            )
            if result.delivery_due:
                delivered = await deliver_question(questions, self.notifier, self.rng)
                # At most one delivery per day, even with several ticks in the minute
                self._last_delivery_date = now.date()
                if delivered is not None:
                    result.delivered_question_id = delivered.id
            cycle_logger.log_delivery(
                str(result.delivered_question_id) if result.delivered_question_id else None,
                result.delivery_due
            )

            stage = "save"
            await self.store.save(questions)
            result.questions_saved = len(questions)

        except QotdError as e:
            cycle_logger.log_error(str(e), stage=stage)
            raise
        except Exception as e:
            cycle_logger.log_error(str(e), stage=stage)
            raise STAGE_ERRORS[stage](f"Cycle {stage} failed: {e}", original_error=e) from e

        result.duration_seconds = (datetime.now(timezone.utc) - start_time).total_seconds()
        cycle_logger.log_cycle_complete(result.questions_saved, result.duration_seconds)
        return result

    async def _cycle_job(self) -> Dict:
        """Scheduled job wrapper around a single cycle."""
        async with self._cycle_lock:
            result = await self.run_cycle()
        return result.model_dump(mode="json")

    async def start(self, run_once: bool = False) -> Optional[CycleResult]:
        """
        Start the bot.

        Args:
            run_once: Run a single cycle and return instead of ticking

        Returns:
            The cycle result in run-once mode, otherwise None after a clean stop.

        Raises:
            QotdError: The error of the cycle that stopped the bot.
        """
        if run_once:
            self.logger.info("Running a single cycle")
            try:
                return await self.run_cycle()
            finally:
                await self.store.close()

        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        self._cycle_lock = asyncio.Lock()
        self._failure = None
        self._setup_signal_handlers()

        try:
            self.scheduler.add_job(
                func=self._cycle_job,
                trigger='interval',
                seconds=self.config.tick_interval_seconds,
                next_run_time=datetime.now(ZoneInfo(self.config.timezone)),
                id=CYCLE_JOB_ID,
                name='Question Cycle',
                max_instances=1,
                coalesce=True,
                replace_existing=True
            )
            self.scheduler.start()

            self.logger.info(
                "Question bot started",
                tick_interval_seconds=self.config.tick_interval_seconds,
                **self.get_status()
            )

            await self._stop_event.wait()
        finally:
            await self._shutdown()

        if self._failure is not None:
            raise self._failure
        return None

    def stop(self) -> None:
        """Request a stop; honoured once any in-flight cycle has finished."""
        if self._stop_event is None or self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._stop_event.set)

    async def _shutdown(self) -> None:
        self.logger.info("Stopping question bot")

        if self.scheduler.running:
            self.scheduler.pause()
            # Let an in-flight cycle finish its save
            async with self._cycle_lock:
                self.scheduler.shutdown(wait=False)

        self._remove_signal_handlers()
        await self.store.close()
        self.logger.info("Question bot stopped")

    def get_status(self) -> Dict:
        """Get current scheduler status."""
        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                'id': job.id,
                'name': job.name,
                'next_run_time': job.next_run_time.isoformat() if job.next_run_time else None,
                'trigger': str(job.trigger)
            })

        return {
            'running': self.scheduler.running,
            'timezone': self.config.timezone,
            'post_at': self.config.post_at.strftime("%H:%M"),
            'jobs': jobs,
            'job_count': len(jobs)
        }
