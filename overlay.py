# overlay.py — skeleton, HUD and prompt chip drawn in place on BGR frames
from __future__ import annotations
from typing import Optional
import cv2
import numpy as np
from pose_types import LandmarkType, Pose

LT = LandmarkType

EDGES = [
    (LT.LEFT_SHOULDER, LT.RIGHT_SHOULDER),
    (LT.LEFT_SHOULDER, LT.LEFT_ELBOW), (LT.LEFT_ELBOW, LT.LEFT_WRIST),
    (LT.RIGHT_SHOULDER, LT.RIGHT_ELBOW), (LT.RIGHT_ELBOW, LT.RIGHT_WRIST),
    (LT.LEFT_SHOULDER, LT.LEFT_HIP), (LT.RIGHT_SHOULDER, LT.RIGHT_HIP), (LT.LEFT_HIP, LT.RIGHT_HIP),
    (LT.LEFT_HIP, LT.LEFT_KNEE), (LT.LEFT_KNEE, LT.LEFT_ANKLE),
    (LT.RIGHT_HIP, LT.RIGHT_KNEE), (LT.RIGHT_KNEE, LT.RIGHT_ANKLE),
]

# BGR colour per verdict value
VERDICT_COLORS = {
    "no_pose":   (0, 0, 255),
    "detected":  (0, 215, 255),
    "confirmed": (0, 255, 0),
}

LABELS = {
    "en": {
        "verdict":         "Verdict",
        "state":           "State",
        "arm_l":           "Left arm",
        "arm_r":           "Right arm",
        "pose_ok":         "Pose found",
        "no_pose":         "No pose",
        "detected":        "Pose detected",
        "confirmed":       "Power pose!",
        "point_at_person": "Point at a person",
        "frozen":          "Frozen - press r to resume",
    },
    "pt": {
        "verdict":         "Veredito",
        "state":           "Estado",
        "arm_l":           "Braco esquerdo",
        "arm_r":           "Braco direito",
        "pose_ok":         "Pose encontrada",
        "no_pose":         "Sem pose",
        "detected":        "Pose detectada",
        "confirmed":       "Power pose!",
        "point_at_person": "Aponte para uma pessoa",
        "frozen":          "Congelado - tecle r para continuar",
    },
}


def labels(lang: str) -> dict:
    return LABELS.get(lang, LABELS["en"])


def draw_skeleton(frame: np.ndarray, pose: Pose, thr: float = 0.5,
                  color: tuple = (0, 255, 0)) -> np.ndarray:
    """Draw limbs whose two ends are both present and visible above thr."""
    def pt(lm):
        return int(lm.x), int(lm.y)
    for a, b in EDGES:
        la, lb = pose.get(a), pose.get(b)
        if la is None or lb is None:
            continue
        if la.visibility >= thr and lb.visibility >= thr:
            cv2.line(frame, pt(la), pt(lb), color, 2)
    for lm in pose:
        if lm.visibility >= thr:
            cv2.circle(frame, pt(lm), 3, (0, 215, 255), -1)
    return frame


def draw_hud(frame: np.ndarray, verdict: str, state: str, arms: Optional[dict],
             pose_ok_pct: float, lang: str = "en") -> np.ndarray:
    L = labels(lang)
    def put(txt, y, color=(0, 255, 0)):
        cv2.putText(frame, txt, (10, y), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)

    put(f"{L['verdict']}: {L.get(verdict, verdict)}", 20, VERDICT_COLORS.get(verdict, (0, 255, 0)))
    put(f"{L['state']}: {state}", 45)
    if arms:
        put(f"{L['arm_l']}: {arms['arm_l']:.1f} deg", 70)
        put(f"{L['arm_r']}: {arms['arm_r']:.1f} deg", 95)
    put(f"{L['pose_ok']}: {pose_ok_pct:.1f}%", 120)
    return frame


def draw_prompt_chip(frame: np.ndarray, text: str, highlight: bool = False) -> np.ndarray:
    """Rounded-ish label centred at the bottom of the frame."""
    h, w = frame.shape[:2]
    font, scale, thick = cv2.FONT_HERSHEY_SIMPLEX, 0.7, 2
    (tw, th), base = cv2.getTextSize(text, font, scale, thick)
    pad = 12
    x0 = max(0, (w - tw) // 2 - pad)
    y1 = h - 20
    y0 = y1 - th - base - 2 * pad
    x1 = min(w - 1, x0 + tw + 2 * pad)
    bg = (255, 255, 255) if highlight else (235, 235, 235)
    cv2.rectangle(frame, (x0, y0), (x1, y1), bg, -1)
    cv2.rectangle(frame, (x0, y0), (x1, y1), (90, 90, 90), 1)
    cv2.putText(frame, text, (x0 + pad, y1 - pad - base), font, scale, (40, 40, 40), thick, cv2.LINE_AA)
    return frame
