from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

from power_pose import Verdict

logger = logging.getLogger(__name__)

PROMPT_POINT_AT_PERSON = "point_at_person"


@dataclass
class Event:
    t: float
    name: str


class WorkflowState(Enum):
    NOT_STARTED = "not_started"
    DETECTING = "detecting"
    DETECTED = "detected"
    CONFIRMED = "confirmed"


class WorkflowModel:
    """
    Coarse detection state shared between the frame loop and the preview.

    Observers are only notified when the state actually changes, so feeding
    the same verdict every frame is cheap.
    """

    def __init__(self) -> None:
        self.state = WorkflowState.NOT_STARTED
        self.camera_live = False
        self._observers: List[Callable[[WorkflowState], None]] = []

    def subscribe(self, callback: Callable[[WorkflowState], None]) -> None:
        self._observers.append(callback)

    def mark_camera_live(self) -> None:
        self.camera_live = True

    def mark_camera_frozen(self) -> None:
        self.camera_live = False

    def set_state(self, state: WorkflowState, t: float = 0.0) -> Optional[Event]:
        if state == self.state:
            return None
        self.state = state
        logger.debug("Current workflow state: %s", state.name)
        for cb in self._observers:
            cb(state)
        return Event(t, state.value)

    def apply_verdict(self, verdict: Verdict, t: float = 0.0) -> List[Event]:
        if verdict is Verdict.NO_POSE:
            steps = [WorkflowState.DETECTING]
        elif verdict is Verdict.DETECTED:
            steps = [WorkflowState.DETECTED]
        elif self.state == WorkflowState.CONFIRMED:
            # holding the pose: don't bounce through DETECTED every frame
            steps = []
        else:
            steps = [WorkflowState.DETECTED, WorkflowState.CONFIRMED]
        events = []
        for s in steps:
            evt = self.set_state(s, t)
            if evt:
                events.append(evt)
        return events


class PreviewController:
    """Drives the prompt chip and the camera from workflow state changes.

    While detecting, the "point at a person" prompt is shown and frames keep
    flowing. Entering one of ``freeze_states`` hides the prompt and freezes
    the camera until ``resume`` is called.
    """

    def __init__(self,
                 model: WorkflowModel,
                 freeze_states: Iterable[WorkflowState] = (WorkflowState.DETECTED,
                                                           WorkflowState.CONFIRMED)) -> None:
        self.model = model
        self.freeze_states = frozenset(freeze_states)
        self.current_state: Optional[WorkflowState] = None
        self.prompt: Optional[str] = None
        self.prompt_entered = False
        model.subscribe(self._on_state)

    @property
    def prompt_visible(self) -> bool:
        return self.prompt is not None

    def _on_state(self, state: WorkflowState) -> None:
        if state == self.current_state:
            return
        self.current_state = state
        was_hidden = not self.prompt_visible

        if state == WorkflowState.DETECTING:
            self.prompt = PROMPT_POINT_AT_PERSON
            self._start_camera()
        elif state in self.freeze_states:
            self.prompt = None
            self._stop_camera()
        else:
            self.prompt = None

        self.prompt_entered = was_hidden and self.prompt_visible

    def _start_camera(self) -> None:
        if not self.model.camera_live:
            self.model.mark_camera_live()
            logger.info("Camera preview started")

    def _stop_camera(self) -> None:
        if self.model.camera_live:
            self.model.mark_camera_frozen()
            logger.info("Camera preview frozen on %s", self.current_state.name)

    def resume(self, t: float = 0.0) -> Optional[Event]:
        self.model.mark_camera_frozen()
        self.current_state = WorkflowState.NOT_STARTED
        self.model.state = WorkflowState.NOT_STARTED
        return self.model.set_state(WorkflowState.DETECTING, t)

    def pause(self) -> None:
        self.current_state = WorkflowState.NOT_STARTED
        self.model.state = WorkflowState.NOT_STARTED
        self.prompt = None
        self._stop_camera()
