"""
Report Service Module

Application layer service that assembles monthly summary and daily grid
reports across a roster. Fans out one fetch per roster member and restores
roster order in the result.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Awaitable, Callable, List, Optional

from config.config_manager import AppConfig
from domain.daily_grid import DailyGridBuilder
from domain.entities import (
    DailyGridReport, DailyGridRow, MonthlySummaryReport, MonthlySummaryRow,
    RosterFilter, UserRef
)
from domain.errors import (
    AttendanceError, MalformedRecordError, MissingCalendarConfig,
    ProviderFetchFailure, ReportGenerationError
)
from domain.metrics_aggregator import MetricsAggregator
from domain.month_key import MonthKey
from domain.providers import (
    CalendarProvider, EventStoreProvider, LeaveLedgerProvider, RosterProvider
)
from infrastructure.logger import get_logger

logger = get_logger("ReportService")

TIMED_OUT = "timed out"


@dataclass
class ReportGenerationParams:
    """
    Parameters for report generation.

    This dataclass encapsulates all parameters needed for report generation,
    decoupling the service from the config file.
    """
    month_key: MonthKey
    roster_filter: RosterFilter = field(default_factory=RosterFilter)

    # Upper bound on roster members fetched at the same time
    max_concurrency: int = 10

    # True: any failed row fails the whole report
    strict: bool = False

    # Deadline for the whole fan-out, None = no deadline
    timeout_seconds: Optional[float] = None


class AttendanceReportService:
    """
    Application service for assembling attendance reports.

    This service:
    - Reads the working-days calendar once per report
    - Fetches every roster member's events (and leaves) concurrently, bounded
      by max_concurrency
    - Records a per-row error when a member's fetch fails, or raises
      ReportGenerationError in strict mode
    - Keeps rows in roster order
    """

    def __init__(
        self,
        calendar: CalendarProvider,
        leave_ledger: LeaveLedgerProvider,
        event_store: EventStoreProvider,
        roster: RosterProvider,
        aggregator: Optional[MetricsAggregator] = None,
        grid_builder: Optional[DailyGridBuilder] = None
    ):
        self.calendar = calendar
        self.leave_ledger = leave_ledger
        self.event_store = event_store
        self.roster = roster
        self.aggregator = aggregator or MetricsAggregator()
        self.grid_builder = grid_builder or DailyGridBuilder()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def build_monthly_summary_report(self, params: ReportGenerationParams) -> MonthlySummaryReport:
        """
        Build the monthly summary report.

        Raises:
            ReportGenerationError: If the roster or calendar cannot be read, or
                in strict mode when any row fails
        """
        return asyncio.run(self.build_monthly_summary_report_async(params))

    def build_daily_grid_report(self, params: ReportGenerationParams) -> DailyGridReport:
        """Build the daily grid report. Same error behavior as the summary report."""
        return asyncio.run(self.build_daily_grid_report_async(params))

    async def build_monthly_summary_report_async(
        self,
        params: ReportGenerationParams
    ) -> MonthlySummaryReport:
        month_key = params.month_key
        logger.info(f"Building monthly summary for {month_key}, filter={params.roster_filter}")

        with self._executor(params) as executor:
            working_days = await self._resolve_working_days(executor, month_key)
            users = await self._fetch_roster(executor, params.roster_filter)

            async def summarize(user: UserRef) -> MonthlySummaryRow:
                check_ins, check_outs, leaves = await asyncio.gather(
                    self._call(executor, user, "check-ins", self.event_store.get_check_ins, user.id, month_key),
                    self._call(executor, user, "check-outs", self.event_store.get_check_outs, user.id, month_key),
                    self._call(executor, user, "approved leaves", self.leave_ledger.get_approved_leaves,
                               user.id, month_key),
                )
                summary = self.aggregator.summarize(
                    working_days, month_key.days_in_month, check_ins, check_outs, leaves
                )
                return MonthlySummaryRow(user=user, summary=summary)

            rows = await self._fan_out(
                users, summarize,
                lambda user, error: MonthlySummaryRow(user=user, error=error),
                params
            )

        report = MonthlySummaryReport(month_key=month_key, working_days=working_days, rows=rows)
        self._log_outcome(report)
        return report

    async def build_daily_grid_report_async(self, params: ReportGenerationParams) -> DailyGridReport:
        month_key = params.month_key
        logger.info(f"Building daily grid for {month_key}, filter={params.roster_filter}")

        with self._executor(params) as executor:
            working_days = await self._resolve_working_days(executor, month_key)
            users = await self._fetch_roster(executor, params.roster_filter)

            async def build_grid(user: UserRef) -> DailyGridRow:
                check_ins, check_outs = await asyncio.gather(
                    self._call(executor, user, "check-ins", self.event_store.get_check_ins, user.id, month_key),
                    self._call(executor, user, "check-outs", self.event_store.get_check_outs, user.id, month_key),
                )
                grid = self.grid_builder.build(month_key, check_ins, check_outs)
                return DailyGridRow(user=user, grid=grid)

            rows = await self._fan_out(
                users, build_grid,
                lambda user, error: DailyGridRow(user=user, error=error),
                params
            )

        report = DailyGridReport(month_key=month_key, working_days=working_days, rows=rows)
        self._log_outcome(report)
        return report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _executor(self, params: ReportGenerationParams) -> "_ReportExecutor":
        # three provider calls per user at most
        return _ReportExecutor(max_workers=max(1, params.max_concurrency) * 3)

    @staticmethod
    async def _run(executor: ThreadPoolExecutor, fn: Callable, *args):
        """Run a blocking provider call on the report's own thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, partial(fn, *args))

    async def _resolve_working_days(self, executor: ThreadPoolExecutor, month_key: MonthKey) -> Optional[int]:
        """Working days for the month, None if the month is unconfigured."""
        try:
            return await self._run(executor, self.calendar.get_working_days, month_key)
        except MissingCalendarConfig:
            logger.warning(f"No working days configured for {month_key}; derived fields will be blank")
            return None
        except Exception as e:
            raise ReportGenerationError(f"Could not read working days for {month_key}: {e}") from e

    async def _fetch_roster(self, executor: ThreadPoolExecutor, roster_filter: RosterFilter) -> List[UserRef]:
        try:
            users = await self._run(executor, self.roster.get_roster, roster_filter)
        except ReportGenerationError:
            raise
        except Exception as e:
            raise ReportGenerationError(f"Could not load roster: {e}") from e
        logger.info(f"Roster: {len(users)} users")
        return users

    async def _call(self, executor: ThreadPoolExecutor, user: UserRef, source: str, fn: Callable, *args):
        """Run a provider call off the event loop, tagging failures with the user."""
        try:
            return await self._run(executor, fn, *args)
        except (ProviderFetchFailure, MalformedRecordError):
            raise
        except Exception as e:
            raise ProviderFetchFailure(user.id, source, e) from e

    async def _fan_out(
        self,
        users: List[UserRef],
        worker: Callable[[UserRef], Awaitable],
        make_error_row: Callable[[UserRef, str], object],
        params: ReportGenerationParams
    ) -> list:
        """
        Run worker once per user, at most max_concurrency at a time.

        Returns:
            One row per user, in roster order
        """
        if not users:
            return []

        semaphore = asyncio.Semaphore(max(1, params.max_concurrency))

        async def guarded(user: UserRef):
            async with semaphore:
                return await worker(user)

        tasks = [asyncio.create_task(guarded(user)) for user in users]
        done, pending = await asyncio.wait(tasks, timeout=params.timeout_seconds)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(f"{len(pending)} of {len(users)} rows did not finish before the deadline")

        rows = []
        for user, task in zip(users, tasks):
            if task in pending:
                error = TIMED_OUT
            elif task.exception() is not None:
                exc = task.exception()
                if not isinstance(exc, AttendanceError):
                    raise exc
                error = str(exc)
                logger.warning(f"Row for {user.name} ({user.id}) failed: {error}")
            else:
                rows.append(task.result())
                continue

            if params.strict:
                raise ReportGenerationError(f"Report aborted, {user.name} ({user.id}): {error}")
            rows.append(make_error_row(user, error))

        return rows

    def _log_outcome(self, report) -> None:
        logger.info(
            f"Report {report.month_key} done: {len(report.rows)} rows, "
            f"{len(report.failed_rows)} failed, state={report.state.name}"
        )

    @staticmethod
    def build_params_from_config(
        config: AppConfig,
        month_key: MonthKey,
        role: str = "",
        group: Optional[str] = None,
        zone: Optional[str] = None,
        strict: Optional[bool] = None
    ) -> ReportGenerationParams:
        """
        Build ReportGenerationParams from AppConfig.

        Group and zone fall back to the configured defaults when not given;
        pass "" explicitly to match every group or zone.
        """
        settings = config.report_settings
        return ReportGenerationParams(
            month_key=month_key,
            roster_filter=RosterFilter(
                role=role,
                group=settings.default_group if group is None else group,
                zone=settings.default_zone if zone is None else zone,
            ),
            max_concurrency=settings.max_concurrency,
            strict=settings.strict if strict is None else strict,
            timeout_seconds=settings.timeout_seconds,
        )


class _ReportExecutor(ThreadPoolExecutor):
    """
    Thread pool owned by a single report.

    Leaving the block never waits on worker threads: calls still running
    after the deadline are abandoned and queued ones are dropped.
    """

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=False, cancel_futures=True)
        return False
