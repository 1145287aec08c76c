import argparse, csv, logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from power_pose import PoseClassifier, PowerPoseConfig
from pose_providers.replay import KeypointReplay
from pose_types import Pose
from workflow import WorkflowModel, WorkflowState

DATA_DIR = Path("data")
OUT_DIR  = Path("out/batch")

SUMMARY_FIELDS = ["input", "frames", "no_pose", "detected", "confirmed",
                  "confirmations", "first_confirmed_t"]

logger = logging.getLogger(__name__)

def video_poses(path: Path) -> Iterator[Tuple[float, Pose]]:
    """Run MediaPipe over a video file; t is the video timestamp."""
    import cv2
    from pose_providers.mediapipe_pose import MediaPipePose

    cap = cv2.VideoCapture(str(path))
    if not cap.isOpened():
        raise RuntimeError(f"Unable to open {path}")
    fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
    i = 0
    try:
        with MediaPipePose() as provider:
            while True:
                ok, frame = cap.read()
                if not ok: break
                rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
                yield i / fps, provider.infer(rgb)
                i += 1
    finally:
        cap.release()

def evaluate_stream(name: str, poses: Iterable[Tuple[float, Pose]],
                    classifier: PoseClassifier, events_path: Optional[Path] = None) -> dict:
    """Classify every pose; the workflow never freezes here so every change is counted."""
    model = WorkflowModel()
    res = dict(input=name, frames=0, no_pose=0, detected=0, confirmed=0,
               confirmations=0, first_confirmed_t="")
    ev_f = open(events_path, "w", newline="", encoding="utf-8") if events_path else None
    ew = csv.writer(ev_f) if ev_f else None
    if ew: ew.writerow(["t_sec", "event"])
    try:
        for t, pose in poses:
            verdict = classifier.classify(pose)
            res["frames"] += 1
            res[verdict.value] += 1
            for evt in model.apply_verdict(verdict, t):
                if ew: ew.writerow([f"{evt.t:.3f}", evt.name])
                if evt.name == WorkflowState.CONFIRMED.value:
                    res["confirmations"] += 1
                    if res["first_confirmed_t"] == "":
                        res["first_confirmed_t"] = f"{evt.t:.3f}"
    finally:
        if ev_f: ev_f.close()
    return res

def write_summary(path: Path, rows) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        w.writeheader(); w.writerows(rows)

def main(argv=None):
    ap = argparse.ArgumentParser(description="Classify power poses over recorded inputs")
    ap.add_argument("--data", type=Path, default=DATA_DIR, help="directory of *.mp4 (or *.csv with --from-csv)")
    ap.add_argument("--out", type=Path, default=OUT_DIR)
    ap.add_argument("--from-csv", action="store_true", help="replay keypoint CSVs instead of running the detector")
    ap.add_argument("--min-vis", type=float, default=0.9)
    ap.add_argument("--min-angle", type=float, default=70.0)
    ap.add_argument("--max-angle", type=float, default=90.0)
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    classifier = PoseClassifier(PowerPoseConfig(args.min_vis, args.min_angle, args.max_angle))
    pattern = "*.csv" if args.from_csv else "*.mp4"
    inputs = sorted(args.data.glob(pattern))
    if not inputs:
        print(f"No {pattern} in {args.data}/")
        return
    args.out.mkdir(parents=True, exist_ok=True)

    summary = []
    for p in inputs:
        print(f"[PROCESSING] {p.name}")
        poses = KeypointReplay(p) if args.from_csv else video_poses(p)
        try:
            res = evaluate_stream(p.name, poses, classifier, args.out / f"{p.stem}_events.csv")
        except (RuntimeError, ValueError) as e:
            logger.error("Skipping %s: %s", p.name, e)
            continue
        print(f"  -> frames={res['frames']}  confirmed={res['confirmed']}  confirmations={res['confirmations']}")
        summary.append(res)
    if summary:
        write_summary(args.out / "summary.csv", summary)
        print(f"\nSummary saved to {args.out/'summary.csv'}")

if __name__ == "__main__":
    main()
