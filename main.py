from __future__ import annotations
import argparse, logging, time
from pathlib import Path
import cv2

from features import arm_angles
from overlay import VERDICT_COLORS, draw_hud, draw_prompt_chip, draw_skeleton, labels
from power_pose import PoseClassifier, PowerPoseConfig, Verdict
from utils_io import (event_writer, keypoint_row, keypoint_writer, open_video_capture,
                      open_video_writer, read_rgb, save_snapshot)
from workflow import PreviewController, WorkflowModel, WorkflowState

BASE_DIR = Path(__file__).resolve().parent
OUT_DIR = BASE_DIR / "out"

FREEZE_ON = {
    "detected":  (WorkflowState.DETECTED, WorkflowState.CONFIRMED),
    "confirmed": (WorkflowState.CONFIRMED,),
}

logger = logging.getLogger("power_pose")

def make_provider():
    from pose_providers.mediapipe_pose import MediaPipePose
    return MediaPipePose()

def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Live power pose detector")
    ap.add_argument("--source", default=0, help="0 for webcam or path to video")
    ap.add_argument("--record", type=int, default=0, help="save result_demo.mp4")
    ap.add_argument("--preview", type=int, default=1, help="show the preview window")
    ap.add_argument("--lang", choices=["en", "pt"], default="en")
    ap.add_argument("--min-vis", type=float, default=0.9, help="min landmark visibility for the power pose")
    ap.add_argument("--min-angle", type=float, default=70.0, help="min elbow angle (deg)")
    ap.add_argument("--max-angle", type=float, default=90.0, help="max elbow angle (deg)")
    ap.add_argument("--freeze-on", choices=sorted(FREEZE_ON), default="detected",
                    help="workflow state that freezes the preview")
    ap.add_argument("--snapshot", type=int, default=1, help="save a PNG on each confirmation")
    ap.add_argument("--out", type=Path, default=OUT_DIR)
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    out_dir: Path = args.out
    out_dir.mkdir(parents=True, exist_ok=True)

    config = PowerPoseConfig(min_visibility=args.min_vis,
                             min_arm_angle=args.min_angle,
                             max_arm_angle=args.max_angle)
    classifier = PoseClassifier(config)
    model = WorkflowModel()
    # without a window there is no key to resume, so headless runs never freeze
    freeze = FREEZE_ON[args.freeze_on] if args.preview else ()
    preview = PreviewController(model, freeze_states=freeze)
    L = labels(args.lang)

    cap = open_video_capture(0 if str(args.source) == "0" else args.source)
    fps_in = cap.get(cv2.CAP_PROP_FPS) or 30
    provider = make_provider(); provider.start()

    ev_f, ev_w = event_writer(out_dir / "events.csv")
    kp_f, kp_w = keypoint_writer(out_dir / "keypoints.csv")
    writer = None; codec = None

    counts = {v.value: 0 for v in Verdict}
    pose_frames = 0; total_frames = 0; confirmations = 0
    last_bgr = None

    def log_event(evt):
        if evt:
            ev_w.writerow([f"{evt.t:.3f}", evt.name])

    t0 = time.time()
    log_event(preview.resume(0.0))
    try:
        while True:
            t = time.time() - t0
            if model.camera_live:
                ok, rgb = read_rgb(cap)
                if not ok: break
                total_frames += 1

                try:
                    pose = provider.infer(rgb)
                except (RuntimeError, ValueError):
                    logger.error("Pose detection failed", exc_info=True)
                    continue
                verdict = classifier.classify(pose)
                counts[verdict.value] += 1
                if not pose.is_empty: pose_frames += 1

                events = model.apply_verdict(verdict, t)
                for evt in events: log_event(evt)
                kp_w.writerow(keypoint_row(t, pose, verdict.value))

                if any(e.name == WorkflowState.CONFIRMED.value for e in events):
                    confirmations += 1
                    if args.snapshot:
                        path = save_snapshot(out_dir / f"confirmed_{total_frames:06d}.png", rgb)
                        logger.info("Power pose confirmed, snapshot %s", path.name)

                bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
                draw_skeleton(bgr, pose, color=VERDICT_COLORS[verdict.value])
                ok_pct = 100.0 * pose_frames / max(total_frames, 1)
                draw_hud(bgr, verdict.value, model.state.value, arm_angles(pose), ok_pct, lang=args.lang)
                if preview.prompt_visible:
                    draw_prompt_chip(bgr, L[preview.prompt], highlight=preview.prompt_entered)

                if args.record and writer is None:
                    H, W = bgr.shape[:2]
                    writer, codec = open_video_writer(out_dir / "result_demo.mp4", (W, H), fps_in)
                if writer: writer.write(bgr)
                last_bgr = bgr
                shown = bgr
            elif last_bgr is not None:
                shown = draw_prompt_chip(last_bgr.copy(), L["frozen"])
            else:
                shown = None

            if args.preview and shown is not None:
                cv2.imshow("power_pose", shown)
                key = cv2.waitKey(1)
            else:
                key = -1

            if key in (27, ord("q")): break
            if key == ord("r") and not model.camera_live:
                log_event(preview.resume(t))
            if key == ord("p") and model.camera_live:
                preview.pause()

    finally:
        cap.release(); provider.stop()
        if args.preview: cv2.destroyAllWindows()
        ev_f.close(); kp_f.close()
        if writer: writer.release()
        if total_frames:
            print(f"Pose found: {pose_frames/total_frames*100:.1f}% ({pose_frames}/{total_frames})")
            print("Frames per verdict: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
            print(f"Confirmations: {confirmations}")
            if codec: print(f"Overlay saved (codec {codec})")

if __name__ == "__main__":
    main()
