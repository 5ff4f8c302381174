import asyncio
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse

from app.analysis.export import recommendation_badge, render_feedback_email, render_recruiter_report
from app.analysis.llm import CompletionAdapter
from app.analysis.mock import MockCompletionAdapter
from app.analysis.models import StageKind, StageState
from app.analysis.orchestrator import AnalysisOrchestrator, PreconditionError
from app.schemas import StageStateResponse, StageTriggerRequest
from core import config

router = APIRouter(prefix="/api/analysis")
logger = logging.getLogger("app.api.analysis")


def build_orchestrator(use_mock: bool | None = None) -> AnalysisOrchestrator:
    mock = config.ANALYSIS_USE_MOCK if use_mock is None else use_mock
    adapter = MockCompletionAdapter() if mock else CompletionAdapter()
    logger.info("analysis orchestrator ready | mode=%s", "mock" if mock else "live")
    return AnalysisOrchestrator(adapter=adapter)


orchestrator = build_orchestrator()


def _stage(name: str) -> StageKind:
    try:
        return StageKind(name)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown stage: {name}")


def _state_payload(stage: StageKind, state: StageState) -> dict:
    payload = state.to_dict()
    payload["stage"] = stage.value
    recommendation = getattr(state.result, "hiring_recommendation", None)
    payload["badge"] = recommendation_badge(recommendation) if recommendation is not None else None
    return payload


@router.get("")
def list_stage_states():
    return {stage.value: _state_payload(stage, state) for stage, state in orchestrator.store.snapshot().items()}


@router.delete("")
async def reset_analysis():
    # Runs on the event loop: store listeners (websocket queues) are not thread-safe.
    try:
        orchestrator.reset()
    except PreconditionError as exc:
        raise HTTPException(status_code=409, detail=exc.reason)
    return {"status": "reset"}


@router.get("/feedback/email", response_class=PlainTextResponse)
def export_feedback_email():
    result = orchestrator.get_state(StageKind.FEEDBACK).result
    if result is None:
        raise HTTPException(status_code=404, detail="Feedback has not been generated")
    return render_feedback_email(result)


@router.get("/recruiter_report/export", response_class=PlainTextResponse)
def export_recruiter_report():
    result = orchestrator.get_state(StageKind.RECRUITER_REPORT).result
    if result is None:
        raise HTTPException(status_code=404, detail="Recruiter report has not been generated")
    return PlainTextResponse(
        render_recruiter_report(result),
        headers={"Content-Disposition": "attachment; filename=recruiter_report.txt"},
    )


@router.get("/{stage_name}", response_model=StageStateResponse)
def get_stage_state(stage_name: str):
    stage = _stage(stage_name)
    return _state_payload(stage, orchestrator.get_state(stage))


@router.post("/{stage_name}", status_code=202, response_model=StageStateResponse)
async def trigger_stage(stage_name: str, req: StageTriggerRequest, wait: bool = False):
    stage = _stage(stage_name)
    try:
        task = orchestrator.trigger(stage, req.to_params())
    except PreconditionError as exc:
        raise HTTPException(status_code=409, detail=exc.reason)

    if wait:
        await task
    return _state_payload(stage, orchestrator.get_state(stage))


@router.websocket("/ws")
async def stage_updates(websocket: WebSocket):
    """Push every store change to the connected view."""
    await websocket.accept()
    queue: asyncio.Queue = asyncio.Queue()

    def _on_change(stage: StageKind, state: StageState) -> None:
        queue.put_nowait(_state_payload(stage, state))

    unsubscribe = orchestrator.subscribe(_on_change)
    try:
        await websocket.send_json({"type": "snapshot", "stages": list_stage_states()})

        async def _forward():
            while True:
                payload = await queue.get()
                await websocket.send_json({"type": "stage_update", **payload})

        async def _wait_disconnect():
            while True:
                message = await websocket.receive()
                if message.get("type") == "websocket.disconnect":
                    return

        forward_task = asyncio.create_task(_forward())
        disconnect_task = asyncio.create_task(_wait_disconnect())
        done, pending = await asyncio.wait({forward_task, disconnect_task}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                raise exc
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()
