from __future__ import annotations

from typing import Optional

import numpy as np

from pose_types import LandmarkType, Pose

ARM_JOINTS = {
    'arm_l': (LandmarkType.LEFT_SHOULDER, LandmarkType.LEFT_ELBOW, LandmarkType.LEFT_WRIST),
    'arm_r': (LandmarkType.RIGHT_SHOULDER, LandmarkType.RIGHT_ELBOW, LandmarkType.RIGHT_WRIST),
}


def _xy(p) -> tuple[float, float]:
    if hasattr(p, 'x') and hasattr(p, 'y'):
        return float(p.x), float(p.y)
    return float(p[0]), float(p[1])


def has_any_landmark(pose: Pose) -> bool:
    return len(pose) > 0


def angle_between(start, mid, end) -> float:
    """Return the angle at ``mid`` in degrees, in [0, 180].

    Points may be Landmarks or (x, y) pairs. The signed difference of the two
    ray headings is taken first, then its absolute value, then the reflex
    side is folded back with ``360 - angle``.
    """
    sx, sy = _xy(start)
    mx, my = _xy(mid)
    ex, ey = _xy(end)
    result = np.degrees(np.arctan2(ey - my, ex - mx) - np.arctan2(sy - my, sx - mx))
    result = abs(float(result))
    if result > 180:
        result = 360.0 - result
    return result


def arm_angles(pose: Pose) -> Optional[dict]:
    """Shoulder-elbow-wrist angle per side, or None if an arm joint is missing."""
    res = {}
    for name, (sh, el, wr) in ARM_JOINTS.items():
        a, b, c = pose.get(sh), pose.get(el), pose.get(wr)
        if a is None or b is None or c is None:
            return None
        res[name] = angle_between(a, b, c)
    return res
