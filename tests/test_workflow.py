# tests/test_workflow.py
"""Tests for the workflow state model and the preview controller."""

from power_pose import Verdict
from workflow import (PROMPT_POINT_AT_PERSON, PreviewController, WorkflowModel,
                      WorkflowState)

WS = WorkflowState


class TestWorkflowModel:
    """Tests for WorkflowModel transitions."""

    def test_initial_state(self):
        model = WorkflowModel()
        assert model.state is WS.NOT_STARTED
        assert model.camera_live is False

    def test_repeated_state_is_dropped(self):
        model = WorkflowModel()
        seen = []
        model.subscribe(seen.append)
        evt = model.set_state(WS.DETECTING, 1.5)
        assert evt.t == 1.5 and evt.name == "detecting"
        assert model.set_state(WS.DETECTING, 2.0) is None
        assert seen == [WS.DETECTING]

    def test_no_pose_maps_to_detecting(self):
        model = WorkflowModel()
        events = model.apply_verdict(Verdict.NO_POSE, 0.1)
        assert [e.name for e in events] == ["detecting"]

    def test_confirmed_passes_through_detected(self):
        model = WorkflowModel()
        model.apply_verdict(Verdict.NO_POSE)
        events = model.apply_verdict(Verdict.CONFIRMED, 3.0)
        assert [e.name for e in events] == ["detected", "confirmed"]
        assert model.state is WS.CONFIRMED

    def test_holding_confirmed_emits_nothing(self):
        model = WorkflowModel()
        model.apply_verdict(Verdict.CONFIRMED)
        assert model.apply_verdict(Verdict.CONFIRMED) == []

    def test_confirmed_then_detected(self):
        model = WorkflowModel()
        model.apply_verdict(Verdict.CONFIRMED)
        events = model.apply_verdict(Verdict.DETECTED)
        assert [e.name for e in events] == ["detected"]


class TestPreviewController:
    """Tests for prompt chip and camera handling."""

    def test_resume_starts_detecting(self):
        model = WorkflowModel()
        preview = PreviewController(model)
        evt = preview.resume(0.0)
        assert evt.name == "detecting"
        assert model.camera_live is True
        assert preview.prompt == PROMPT_POINT_AT_PERSON
        assert preview.prompt_entered is True

    def test_detected_freezes_by_default(self):
        model = WorkflowModel()
        preview = PreviewController(model)
        preview.resume()
        model.apply_verdict(Verdict.DETECTED)
        assert model.camera_live is False
        assert preview.prompt_visible is False

    def test_freeze_only_on_confirmed(self):
        model = WorkflowModel()
        preview = PreviewController(model, freeze_states=[WS.CONFIRMED])
        preview.resume()
        model.apply_verdict(Verdict.DETECTED)
        assert model.camera_live is True
        assert preview.prompt_visible is False
        model.apply_verdict(Verdict.CONFIRMED)
        assert model.camera_live is False

    def test_prompt_entered_only_on_first_show(self):
        model = WorkflowModel()
        preview = PreviewController(model, freeze_states=[WS.CONFIRMED])
        preview.resume()
        model.apply_verdict(Verdict.DETECTED)
        assert preview.prompt_entered is False
        model.apply_verdict(Verdict.NO_POSE)
        assert preview.prompt_entered is True

    def test_resume_after_freeze(self):
        model = WorkflowModel()
        preview = PreviewController(model)
        preview.resume()
        model.apply_verdict(Verdict.CONFIRMED)
        assert model.camera_live is False
        evt = preview.resume(5.0)
        assert evt.name == "detecting"
        assert model.state is WS.DETECTING
        assert model.camera_live is True

    def test_pause(self):
        model = WorkflowModel()
        preview = PreviewController(model)
        preview.resume()
        preview.pause()
        assert model.state is WS.NOT_STARTED
        assert model.camera_live is False
        assert preview.prompt_visible is False
