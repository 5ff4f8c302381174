from __future__ import annotations

import asyncio
import datetime
import logging
from typing import Any, Mapping

from app.analysis.analyzers import StageAnalyzer, build_analyzers
from app.analysis.llm import CompletionAdapter
from app.analysis.models import (
    FEEDBACK_TONES,
    HIRING_DECISIONS,
    PREREQUISITES,
    AnalysisRequest,
    FeedbackRequest,
    RecruiterReportRequest,
    StageKind,
    StageResult,
)
from app.analysis.store import SharedStateStore
from core.logger import log_event

logger = logging.getLogger("app.analysis.orchestrator")


class PreconditionError(Exception):
    """Trigger called while the stage is running or before its prerequisite has a result."""

    def __init__(self, stage: StageKind | None, reason: str):
        super().__init__(f"{stage.value}: {reason}" if stage is not None else reason)
        self.stage = stage
        self.reason = reason


class AnalysisOrchestrator:
    """
    Gates and runs stage analyzers, writing every outcome to the shared store.

    Stages are never chained automatically; each view triggers its own stage.
    """

    def __init__(self, adapter=None, store: SharedStateStore | None = None, analyzers: dict | None = None):
        self.store = store or SharedStateStore()
        self.analyzers: dict[StageKind, StageAnalyzer] = analyzers or build_analyzers(adapter or CompletionAdapter())
        self._tasks: set[asyncio.Task] = set()

    def get_state(self, stage):
        return self.store.get_state(StageKind(stage))

    def subscribe(self, listener):
        return self.store.subscribe(listener)

    def check_preconditions(self, stage: StageKind) -> None:
        if self.store.get_state(stage).in_flight:
            raise PreconditionError(stage, "already in flight")
        prerequisite = PREREQUISITES.get(stage)
        if prerequisite is not None and not self.store.has_result(prerequisite):
            raise PreconditionError(stage, f"requires a completed {prerequisite.value} result")

    def build_request(self, stage: StageKind, params: Mapping[str, Any]):
        params = dict(params or {})
        if stage in (StageKind.QUALITY, StageKind.PLAGIARISM):
            return AnalysisRequest(
                code=str(params.get("code") or ""),
                language=str(params.get("language") or ""),
                problem_statement=str(params.get("problem_statement") or ""),
                role_level=str(params.get("role_level") or "mid"),
            )

        quality = self.store.get_state(StageKind.QUALITY).result
        plagiarism = None
        if params.get("include_plagiarism"):
            plagiarism = self.store.get_state(StageKind.PLAGIARISM).result

        if stage == StageKind.FEEDBACK:
            decision = str(params.get("hiring_decision") or "continue").lower()
            tone = str(params.get("tone") or "constructive").lower()
            return FeedbackRequest(
                quality=quality,
                candidate_name=str(params.get("candidate_name") or ""),
                position=str(params.get("position") or "Software Developer"),
                hiring_decision=decision if decision in HIRING_DECISIONS else "continue",
                tone=tone if tone in FEEDBACK_TONES else "constructive",
                include_specifics=bool(params.get("include_specifics", True)),
                plagiarism=plagiarism,
            )

        return RecruiterReportRequest(
            quality=quality,
            candidate_name=str(params.get("candidate_name") or "the candidate"),
            position=str(params.get("position") or "the position"),
            interview_date=str(params.get("interview_date") or datetime.date.today().isoformat()),
            plagiarism=plagiarism,
        )

    def trigger(self, stage, params: Mapping[str, Any] | None = None) -> asyncio.Task:
        """
        Start a run of `stage` and return immediately.

        Raises PreconditionError synchronously, without any network call, when
        the stage is already running or its prerequisite result is missing.
        Must be called from inside a running event loop.
        """
        stage = StageKind(stage)
        loop = asyncio.get_running_loop()
        self.check_preconditions(stage)
        request = self.build_request(stage, params or {})

        if not self.store.mark_in_flight(stage):
            raise PreconditionError(stage, "already in flight")
        log_event("orchestrator", "triggered", stage.value)

        task = loop.create_task(self._run_stage(stage, request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, stage, params: Mapping[str, Any] | None = None) -> StageResult:
        return await self.trigger(stage, params)

    async def _run_stage(self, stage: StageKind, request) -> StageResult:
        analyzer = self.analyzers[stage]
        written = False
        try:
            result = await analyzer.run(request)
            self.store.write(stage, result)
            written = True
        finally:
            if not written:
                self.store.clear_in_flight(stage)
        log_event(
            "orchestrator",
            "fallback" if result.is_fallback else "succeeded",
            stage.value,
            score=result.score,
        )
        return result

    def reset(self) -> None:
        """Forget every stage result, e.g. when switching to another candidate."""
        if self.store.any_in_flight():
            raise PreconditionError(None, "cannot reset while a stage is in flight")
        self.store.reset()
        logger.info("analysis store reset")

