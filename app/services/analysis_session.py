"""Client-side result slot for a single analysis session.

This is the helper a presentation layer holds to track its latest report; the
HTTP routes are stateless and do not use it.

Each submission captures a generation number when it starts. Its outcome is
written to the slot only if no newer submission started in the meantime, so a
slow stale call can never overwrite the result of a later one.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from app.core.errors import AnalysisError
from app.schemas.analysis import AnalysisReport, AnalysisRequest
from app.services.analysis_service import AnalysisOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    generation: int
    committed: bool
    report: AnalysisReport | None = None
    error: AnalysisError | None = None
    cancelled: bool = False


class AnalysisSession:
    def __init__(self, orchestrator: AnalysisOrchestrator):
        self._orchestrator = orchestrator
        self._generation = 0
        self._pending: asyncio.Future | None = None
        self._cancelled: set[int] = set()
        self.report: AnalysisReport | None = None
        self.error: AnalysisError | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def cancel_pending(self) -> bool:
        if not self.is_pending:
            return False
        self._cancelled.add(self._generation)
        self._pending.cancel()
        return True

    async def submit(self, request: AnalysisRequest, *, cancel_previous: bool = True) -> SubmissionOutcome:
        if cancel_previous:
            self.cancel_pending()

        self._generation += 1
        generation = self._generation
        self.report = None
        self.error = None

        task = asyncio.ensure_future(self._orchestrator.analyze(request))
        self._pending = task
        try:
            report = await task
        except asyncio.CancelledError:
            if generation not in self._cancelled:
                raise
            self._cancelled.discard(generation)
            logger.info("analysis_cancelled generation=%s", generation)
            return SubmissionOutcome(generation=generation, committed=False, cancelled=True)
        except AnalysisError as exc:
            return self._commit(generation, error=exc)
        finally:
            if self._pending is task:
                self._pending = None
        return self._commit(generation, report=report)

    def _commit(
        self,
        generation: int,
        *,
        report: AnalysisReport | None = None,
        error: AnalysisError | None = None,
    ) -> SubmissionOutcome:
        if generation != self._generation:
            logger.info(
                "analysis_result_discarded generation=%s current=%s", generation, self._generation
            )
            return SubmissionOutcome(generation=generation, committed=False, report=report, error=error)
        self.report = report
        self.error = error
        return SubmissionOutcome(generation=generation, committed=True, report=report, error=error)
