"""
Interval scheduling for consumer strategies.

Each registered strategy gets its own timer task. A strategy runs to
completion, then its timer sleeps for the interval before the next run.
Failures are logged and never stop a timer.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)

Runner = Callable[[], Awaitable[object]]


@dataclass
class ScheduledJob:
    name: str
    runner: Runner
    interval_ms: int
    runs: int = 0
    failures: int = 0


class Scheduler:
    """Runs registered strategies on independent fixed intervals."""

    def __init__(self) -> None:
        self.jobs: List[ScheduledJob] = []
        self._tasks: Dict[str, asyncio.Task] = {}

    def register(self, name: str, runner: Runner, interval_ms: int) -> ScheduledJob:
        if interval_ms <= 0:
            raise ValueError(f"Interval for {name} must be positive, got {interval_ms}")
        if any(job.name == name for job in self.jobs):
            raise ValueError(f"Job {name} already registered")
        job = ScheduledJob(name=name, runner=runner, interval_ms=interval_ms)
        self.jobs.append(job)
        return job

    async def run_job(self, job: ScheduledJob) -> None:
        """Invoke a job once, logging instead of raising on failure."""
        job.runs += 1
        try:
            await job.runner()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            job.failures += 1
            logger.error(f"Error in {job.name}: {e}", exc_info=True)

    async def _loop(self, job: ScheduledJob) -> None:
        while True:
            await self.run_job(job)
            await asyncio.sleep(job.interval_ms / 1000)

    def start(self) -> List[asyncio.Task]:
        for job in self.jobs:
            if job.name in self._tasks:
                continue
            logger.info(f"Scheduling {job.name} every {job.interval_ms}ms")
            self._tasks[job.name] = asyncio.create_task(
                self._loop(job), name=f"job_{job.name}"
            )
        return list(self._tasks.values())

    async def stop(self) -> None:
        logger.info(f"Cancelling {len(self._tasks)} scheduled tasks...")
        for task in self._tasks.values():
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        self._tasks.clear()

    async def run(self) -> None:
        """Start every job and run until cancelled."""
        tasks = self.start()
        try:
            await asyncio.gather(*tasks)
        finally:
            await self.stop()
