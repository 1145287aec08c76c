from __future__ import annotations

import logging

import mediapipe as mp
import numpy as np

from pose_types import LandmarkType, Pose

from .base import PoseProvider

logger = logging.getLogger(__name__)


class MediaPipePose(PoseProvider):
    """PoseProvider using MediaPipe Pose with 33 landmarks, in stream mode."""

    def __init__(self,
                 static: bool = False,
                 model_complexity: int = 1,
                 det_conf: float = 0.5,
                 track_conf: float = 0.5) -> None:
        self._static = static
        self._model_complexity = model_complexity
        self._det_conf = det_conf
        self._track_conf = track_conf
        self._pose = None

    def start(self) -> None:
        logger.info("Initialising MediaPipe Pose (complexity=%d)", self._model_complexity)
        self._pose = mp.solutions.pose.Pose(
            static_image_mode=self._static,
            model_complexity=self._model_complexity,
            min_detection_confidence=self._det_conf,
            min_tracking_confidence=self._track_conf,
        )

    def infer(self, rgb_frame: np.ndarray) -> Pose:
        if self._pose is None:
            raise RuntimeError('Pose provider not started')
        res = self._pose.process(rgb_frame)
        if not res.pose_landmarks:
            return Pose.empty()
        # MediaPipe reports normalised coordinates; scale to pixels so joint
        # angles are not skewed by the frame aspect ratio.
        h, w = rgb_frame.shape[:2]
        lmks = res.pose_landmarks.landmark
        xy = np.array([[lmk.x * w, lmk.y * h] for lmk in lmks], dtype=np.float32)
        vis = np.array([lmk.visibility for lmk in lmks], dtype=np.float32)
        return Pose.from_arrays(xy, vis, list(LandmarkType)[:len(xy)])

    def stop(self) -> None:
        if self._pose:
            try:
                self._pose.close()
            except (RuntimeError, ValueError):
                logger.error("Failed to close pose detector", exc_info=True)
        self._pose = None
