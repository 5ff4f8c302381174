from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable

from app.analysis.models import StageKind, StageResult, StageState

logger = logging.getLogger("app.analysis.store")


StoreListener = Callable[[StageKind, StageState], None]


class SharedStateStore:
    """
    Process-wide latest-result store, one StageState per stage.

    Reads return snapshot copies and never wait on a run. Each key is written
    only by the orchestrator's run cycle for that stage.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._lock = Lock()
        self._clock = clock
        self._states: dict[StageKind, StageState] = {stage: StageState() for stage in StageKind}
        self._listeners: list[StoreListener] = []
        self._last_stamp = 0.0

    def get_state(self, stage: StageKind) -> StageState:
        with self._lock:
            return self._states[StageKind(stage)].copy()

    def snapshot(self) -> dict[StageKind, StageState]:
        with self._lock:
            return {stage: state.copy() for stage, state in self._states.items()}

    def has_result(self, stage: StageKind) -> bool:
        with self._lock:
            return self._states[StageKind(stage)].result is not None

    def any_in_flight(self) -> bool:
        with self._lock:
            return any(state.in_flight for state in self._states.values())

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _stamp(self) -> float:
        # Strictly increasing so a regenerate always reads as newer.
        now = float(self._clock())
        if now <= self._last_stamp:
            now = self._last_stamp + 1e-6
        self._last_stamp = now
        return now

    def mark_in_flight(self, stage: StageKind) -> bool:
        """Flip the stage to running. Returns False if it already was."""
        stage = StageKind(stage)
        with self._lock:
            current = self._states[stage]
            if current.in_flight:
                return False
            self._states[stage] = StageState(
                result=current.result,
                in_flight=True,
                last_updated=current.last_updated,
            )
            state = self._states[stage].copy()
        self._notify(stage, state)
        return True

    def write(self, stage: StageKind, result: StageResult) -> StageState:
        """Store a finished run's result and clear the in-flight flag."""
        stage = StageKind(stage)
        with self._lock:
            self._states[stage] = StageState(result=result, in_flight=False, last_updated=self._stamp())
            state = self._states[stage].copy()
        self._notify(stage, state)
        return state

    def clear_in_flight(self, stage: StageKind) -> None:
        stage = StageKind(stage)
        with self._lock:
            current = self._states[stage]
            if not current.in_flight:
                return
            self._states[stage] = StageState(result=current.result, in_flight=False, last_updated=current.last_updated)
            state = self._states[stage].copy()
        self._notify(stage, state)

    def reset(self) -> None:
        with self._lock:
            self._states = {stage: StageState() for stage in StageKind}
            states = {stage: state.copy() for stage, state in self._states.items()}
        for stage, state in states.items():
            self._notify(stage, state)

    def _notify(self, stage: StageKind, state: StageState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(stage, state.copy())
            except Exception:
                logger.exception("store listener failed | stage=%s", stage.value)
