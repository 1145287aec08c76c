from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Sequence

import numpy as np


class LandmarkType(Enum):
    """The 33 MediaPipe body keypoints, valued by their landmark index."""

    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32

    @property
    def key(self) -> str:
        """Lower-case name used in CSV headers, e.g. ``left_wrist``."""
        return self.name.lower()


# Names in landmark-index order, for CSV headers etc.
KP_NAMES = [t.key for t in LandmarkType]


@dataclass(frozen=True)
class Landmark:
    """A detected keypoint in image space (y grows downward)."""

    type: LandmarkType
    x: float
    y: float
    visibility: float  # in-frame likelihood [0..1]

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)


class Pose:
    """
    Immutable set of landmarks detected in one frame, keyed by identity.

    A pose may be empty or partial; ``get`` returns None for landmarks the
    detector did not report.
    """

    __slots__ = ("_landmarks",)

    def __init__(self, landmarks: Iterable[Landmark] = ()) -> None:
        by_type = {}
        for lm in landmarks:
            if lm.type in by_type:
                raise ValueError(f"duplicate landmark {lm.type.name}")
            by_type[lm.type] = lm
        self._landmarks: Mapping[LandmarkType, Landmark] = MappingProxyType(by_type)

    @classmethod
    def empty(cls) -> "Pose":
        return cls()

    @classmethod
    def from_arrays(cls,
                    xy: np.ndarray,
                    vis: np.ndarray,
                    types: Optional[Sequence[LandmarkType]] = None) -> "Pose":
        """Build a pose from ``xy[N,2]`` and ``vis[N]`` arrays.

        Row ``i`` maps to ``types[i]``, or to the landmark with index ``i``
        when ``types`` is omitted.
        """
        xy = np.asarray(xy, dtype=float)
        vis = np.asarray(vis, dtype=float)
        if xy.ndim != 2 or xy.shape[1] != 2 or len(xy) != len(vis):
            raise ValueError(f"expected xy[N,2] and vis[N], got {xy.shape} and {vis.shape}")
        if types is None:
            types = [LandmarkType(i) for i in range(len(xy))]
        return cls(Landmark(t, float(p[0]), float(p[1]), float(v))
                   for t, p, v in zip(types, xy, vis))

    @property
    def landmarks(self) -> Mapping[LandmarkType, Landmark]:
        return self._landmarks

    @property
    def is_empty(self) -> bool:
        return not self._landmarks

    def get(self, landmark_type: LandmarkType) -> Optional[Landmark]:
        return self._landmarks.get(landmark_type)

    def __contains__(self, landmark_type: object) -> bool:
        return landmark_type in self._landmarks

    def __iter__(self) -> Iterator[Landmark]:
        return iter(self._landmarks.values())

    def __len__(self) -> int:
        return len(self._landmarks)

    def __repr__(self) -> str:
        return f"Pose({len(self)} landmarks)"
