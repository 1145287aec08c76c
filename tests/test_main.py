# tests/test_main.py
"""Tests for the live CLI loop, driven by an in-memory capture and detector."""

import csv

import numpy as np
import pytest

import main
from pose_builders import build_pose
from pose_types import Pose


class FakeCapture:
    """Stands in for cv2.VideoCapture; frames are handed out by read_rgb."""

    def __init__(self, n_frames):
        self.frames = [np.zeros((48, 64, 3), dtype=np.uint8) for _ in range(n_frames)]
        self.released = False

    def get(self, prop):
        return 30.0

    def release(self):
        self.released = True


class ScriptedProvider:
    """Returns the queued poses in order; an Exception entry is raised instead."""

    def __init__(self, script):
        self.script = list(script)
        self.started = self.stopped = False

    def start(self):
        self.started = True

    def infer(self, rgb):
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def stop(self):
        self.stopped = True


@pytest.fixture
def run_cli(monkeypatch, tmp_path):
    def run(script, *extra):
        cap = FakeCapture(len(script))
        provider = ScriptedProvider(script)

        def read_rgb(c):
            if not c.frames:
                return False, None
            return True, c.frames.pop(0)

        monkeypatch.setattr(main, "open_video_capture", lambda src: cap)
        monkeypatch.setattr(main, "read_rgb", read_rgb)
        monkeypatch.setattr(main, "make_provider", lambda: provider)
        main.main(["--preview", "0", "--out", str(tmp_path), *extra])
        with open(tmp_path / "events.csv", newline="", encoding="utf-8") as f:
            events = [row["event"] for row in csv.DictReader(f)]
        return events, cap, provider
    return run


class TestHeadlessRun:
    """Headless runs keep processing frames without freezing."""

    def test_held_pose_confirmed_once(self, run_cli, tmp_path):
        events, cap, provider = run_cli([build_pose()] * 10, "--snapshot", "1")
        assert events == ["detecting", "detected", "confirmed"]
        assert [p.name for p in tmp_path.glob("confirmed_*.png")] == ["confirmed_000001.png"]
        assert cap.released and provider.started and provider.stopped

    def test_new_confirmation_after_pose_lost(self, run_cli, tmp_path):
        script = [build_pose(), build_pose(), Pose.empty(), build_pose()]
        events, _, _ = run_cli(script, "--snapshot", "1")
        assert events == ["detecting", "detected", "confirmed",
                          "detecting", "detected", "confirmed"]
        assert len(list(tmp_path.glob("confirmed_*.png"))) == 2

    def test_every_frame_logged(self, run_cli, tmp_path):
        run_cli([Pose.empty(), build_pose(), build_pose()], "--snapshot", "0")
        with open(tmp_path / "keypoints.csv", newline="", encoding="utf-8") as f:
            verdicts = [row["verdict"] for row in csv.DictReader(f)]
        assert verdicts == ["no_pose", "confirmed", "confirmed"]
        assert not list(tmp_path.glob("confirmed_*.png"))


class TestDetectionFailure:
    """A failing detector call skips the frame instead of ending the run."""

    def test_failed_frame_is_skipped(self, run_cli, tmp_path, caplog):
        script = [RuntimeError("detector crashed"), build_pose()]
        events, _, provider = run_cli(script, "--snapshot", "0")
        assert "Pose detection failed" in caplog.text
        assert events == ["detecting", "detected", "confirmed"]
        assert provider.stopped
        with open(tmp_path / "keypoints.csv", newline="", encoding="utf-8") as f:
            assert len(list(csv.DictReader(f))) == 1
