from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator, Tuple

from pose_types import Landmark, LandmarkType, Pose


def _landmark(row: dict, t: LandmarkType):
    x, y, v = row.get(f'{t.key}.x'), row.get(f'{t.key}.y'), row.get(f'{t.key}.vis')
    if not x or not y or not v:
        return None
    return Landmark(t, float(x), float(y), float(v))


class KeypointReplay:
    """Replays a keypoints.csv written by the live CLI as (t_sec, Pose) pairs.

    Rows with ``pose_found == 0`` replay as empty poses; blank landmark cells
    are treated as landmarks the detector did not report.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __iter__(self) -> Iterator[Tuple[float, Pose]]:
        with open(self.path, newline='', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            if not reader.fieldnames or 't_sec' not in reader.fieldnames:
                raise ValueError(f'{self.path} is not a keypoint CSV (missing t_sec column)')
            for row in reader:
                t = float(row['t_sec'])
                if row.get('pose_found', '1') in ('0', ''):
                    yield t, Pose.empty()
                    continue
                lms = (_landmark(row, lt) for lt in LandmarkType)
                yield t, Pose(lm for lm in lms if lm is not None)
