"""
Power pose classification.

A pose is confirmed as a power pose when both arms are bent at the elbow
within a fixed angle window, the elbows hang below the shoulders, and all
arm, shoulder and hip landmarks are confidently in frame.

Usage:
    from power_pose import classify, Verdict

    verdict = classify(pose)
    if verdict is Verdict.CONFIRMED:
        ...
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from features import angle_between, has_any_landmark
from pose_types import LandmarkType, Pose

LT = LandmarkType

REQUIRED_LANDMARKS = (
    LT.LEFT_SHOULDER, LT.RIGHT_SHOULDER,
    LT.LEFT_ELBOW, LT.RIGHT_ELBOW,
    LT.LEFT_WRIST, LT.RIGHT_WRIST,
    LT.LEFT_HIP, LT.RIGHT_HIP,
)


class Verdict(Enum):
    NO_POSE = "no_pose"
    DETECTED = "detected"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class PowerPoseConfig:
    """Thresholds for the power pose template."""
    min_visibility: float = 0.9
    min_arm_angle: float = 70.0   # degrees, inclusive
    max_arm_angle: float = 90.0   # degrees, inclusive


DEFAULT_CONFIG = PowerPoseConfig()


def _in_frame(visibility: float, threshold: float) -> bool:
    # detectors report float32 likelihoods; a reported 0.9 must pass a 0.9 gate
    return bool(np.float32(visibility) >= np.float32(threshold))


def is_power_pose(pose: Pose, config: PowerPoseConfig = DEFAULT_CONFIG) -> bool:
    lms = [pose.get(t) for t in REQUIRED_LANDMARKS]
    if any(lm is None for lm in lms):
        return False
    l_sh, r_sh, l_el, r_el, l_wr, r_wr, _, _ = lms

    # all landmarks confidently in frame
    if not all(_in_frame(lm.visibility, config.min_visibility) for lm in lms):
        return False

    # 1. elbows below shoulders
    if l_el.y <= l_sh.y or r_el.y <= r_sh.y:
        return False

    # 2. hands within a certain range of the hips: not checked

    # 3. arms bent within the angle window
    for sh, el, wr in ((l_sh, l_el, l_wr), (r_sh, r_el, r_wr)):
        ang = angle_between(sh, el, wr)
        if not (config.min_arm_angle <= ang <= config.max_arm_angle):
            return False
    return True


def classify(pose: Pose, config: PowerPoseConfig = DEFAULT_CONFIG) -> Verdict:
    if not has_any_landmark(pose):
        return Verdict.NO_POSE
    if is_power_pose(pose, config):
        return Verdict.CONFIRMED
    return Verdict.DETECTED


class PoseClassifier:
    """Holds a threshold config; stateless otherwise and safe to share."""

    def __init__(self, config: Optional[PowerPoseConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def is_power_pose(self, pose: Pose) -> bool:
        return is_power_pose(pose, self.config)

    def classify(self, pose: Pose) -> Verdict:
        return classify(pose, self.config)
