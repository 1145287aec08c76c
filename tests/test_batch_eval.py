# tests/test_batch_eval.py
"""Tests for the batch evaluator's stream classification."""

import csv

from batch_eval import SUMMARY_FIELDS, evaluate_stream, write_summary
from pose_builders import LT, build_pose
from pose_types import Pose
from power_pose import PoseClassifier


def test_evaluate_stream_counts(tmp_path):
    poses = [
        (0.0, Pose.empty()),
        (0.5, build_pose(drop=(LT.RIGHT_WRIST,))),
        (1.0, build_pose()),
        (1.5, build_pose()),
        (2.0, Pose.empty()),
        (2.5, build_pose()),
    ]
    events_path = tmp_path / "clip_events.csv"
    res = evaluate_stream("clip", poses, PoseClassifier(), events_path)

    assert res["frames"] == 6
    assert (res["no_pose"], res["detected"], res["confirmed"]) == (2, 1, 3)
    assert res["confirmations"] == 2
    assert res["first_confirmed_t"] == "1.000"

    with open(events_path, newline="", encoding="utf-8") as f:
        names = [row["event"] for row in csv.DictReader(f)]
    assert names == ["detecting", "detected", "confirmed",
                     "detecting", "detected", "confirmed"]


def test_write_summary(tmp_path):
    res = evaluate_stream("empty", [], PoseClassifier())
    path = tmp_path / "summary.csv"
    write_summary(path, [res])
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        assert reader.fieldnames == SUMMARY_FIELDS
        rows = list(reader)
    assert rows[0]["frames"] == "0"
    assert rows[0]["first_confirmed_t"] == ""
