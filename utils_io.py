from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional, Tuple

import cv2
import imageio
import numpy as np

from pose_types import KP_NAMES, LandmarkType, Pose

CODECS = ['avc1', 'mp4v', 'XVID']


def open_video_capture(src: str | int) -> cv2.VideoCapture:
    cap = cv2.VideoCapture(src)
    if not cap.isOpened():
        raise RuntimeError(f'Unable to open source {src}')
    return cap


def read_rgb(cap: cv2.VideoCapture) -> Tuple[bool, Optional[np.ndarray]]:
    ok, frame = cap.read()
    if not ok:
        return False, None
    return True, cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


def open_video_writer(path: Path, size: Tuple[int, int], fps: float) -> Tuple[cv2.VideoWriter, str]:
    for cc in CODECS:
        fourcc = cv2.VideoWriter_fourcc(*cc)
        writer = cv2.VideoWriter(str(path), fourcc, fps, size)
        if writer.isOpened():
            return writer, cc
    raise RuntimeError('Could not open VideoWriter with available codecs')


def save_snapshot(path: Path, rgb: np.ndarray) -> Path:
    """Write an RGB frame to disk (format from the file suffix)."""
    imageio.imwrite(path, rgb)
    return path


def event_writer(path: Path):
    f = open(path, 'w', newline='', encoding='utf-8')
    w = csv.writer(f)
    w.writerow(['t_sec', 'event'])
    return f, w


def keypoint_header() -> list:
    header = ['t_sec', 'pose_found', 'verdict']
    for name in KP_NAMES:
        header += [f'{name}.x', f'{name}.y', f'{name}.vis']
    return header


def keypoint_row(t: float, pose: Pose, verdict: str) -> list:
    """One CSV row per frame; landmarks the pose lacks are left blank.

    Coordinates and visibility are written at full precision so a replay
    classifies exactly like the live run.
    """
    row = [f'{t:.3f}', int(not pose.is_empty), verdict]
    for lt in LandmarkType:
        lm = pose.get(lt)
        if lm is None:
            row.extend(['', '', ''])
        else:
            row.extend([repr(float(lm.x)), repr(float(lm.y)), repr(float(lm.visibility))])
    return row


def keypoint_writer(path: Path):
    f = open(path, 'w', newline='', encoding='utf-8')
    w = csv.writer(f)
    w.writerow(keypoint_header())
    return f, w
