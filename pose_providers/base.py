from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from pose_types import Pose


class PoseProvider(ABC):
    """Interface for pose detectors feeding the classifier."""

    @abstractmethod
    def start(self) -> None:
        """Initialise any resources. Called before infer."""

    @abstractmethod
    def infer(self, rgb_frame: np.ndarray) -> Pose:
        """Return the pose found in an RGB frame (H,W,3 uint8).

        Landmark coordinates are in pixels. A frame without a person yields
        an empty Pose rather than None."""

    @abstractmethod
    def stop(self) -> None:
        """Release resources."""

    def __enter__(self) -> "PoseProvider":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
