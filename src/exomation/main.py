import argparse
import os
import sys
import time
from typing import Optional

import cv2
import numpy as np

from .config_utils import load_session_config
from .exercise_analysis.classifier import PoseDetectionState
from .pose_detection.mediapipe_detector import MediaPipePoseDetector
from .progress import RepProgressEvent, RepProgressTracker
from .trainer import ExerciseTracker


class PoseDetectionError(RuntimeError):
    """Raised when a camera or video source cannot be opened."""


def draw_status(frame: np.ndarray, state: PoseDetectionState, landmark_radius: int = 5) -> None:
    """Draw landmarks and the current tracking status onto a BGR frame."""
    height, width = frame.shape[:2]
    if state.landmarks:
        for lm in state.landmarks:
            cv2.circle(frame, (int(lm.x * width), int(lm.y * height)), landmark_radius, (0, 255, 0), -1)

    color = (0, 255, 0) if state.is_in_position else (0, 200, 255)
    cv2.putText(frame, f"Exercise: {state.exercise_type.name}", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)
    cv2.putText(frame, f"Reps: {state.repetitions}", (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)
    cv2.putText(frame, f"Confidence: {state.confidence:.2f}", (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)
    if state.feedback_message:
        cv2.putText(frame, state.feedback_message, (10, 120), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 255), 2)


def run_session(
    capture_source,
    config: dict,
    model_path: Optional[str] = None,
    use_voice: bool = False,
    show_window: bool = True,
    video_timestamps: bool = False,
) -> PoseDetectionState:
    """
    Run a tracking session over an OpenCV capture source until it ends or 'q' is pressed.

    Args:
        capture_source: Camera index or video file path
        config: Session config dictionary
        model_path: Override for the pose landmarker model path
        use_voice: Speak feedback through the TTS engine
        show_window: Display the annotated frames
        video_timestamps: Use the file's frame positions instead of wall-clock time

    Returns:
        Final PoseDetectionState
    """
    landmarker_cfg = dict(config.get("pose_landmarker", {}))
    if model_path:
        landmarker_cfg["model_path"] = model_path
    config = {**config, "pose_landmarker": landmarker_cfg}
    display_cfg = config.get("display", {})
    window_name = display_cfg.get("window_name", "Exomation Exercise Tracker")
    radius = display_cfg.get("landmark_radius", 5)

    def log_progress(event: RepProgressEvent) -> None:
        print(f"[PROGRESS] {event.exercise_type}: +{event.delta} (total {event.repetitions}, {event.duration_seconds}s)")

    voice = None
    cap = None
    try:
        if use_voice:
            from .feedback.voice_feedback import VoiceFeedback
            voice = VoiceFeedback.from_config(config)

        cap = cv2.VideoCapture(capture_source)
        if not cap.isOpened():
            raise PoseDetectionError(f"Failed to open capture source: {capture_source}")

        progress = RepProgressTracker(log_progress)
        detector = MediaPipePoseDetector.from_config(config)
        start = time.monotonic()
        with ExerciseTracker(pose_detector=detector) as tracker:
            tracker.subscribe(progress.on_status)
            if voice is not None:
                tracker.subscribe(voice.on_status)
            while True:
                try:
                    ret, frame = cap.read()
                    if not ret:
                        break
                    if video_timestamps:
                        timestamp_ms = int(cap.get(cv2.CAP_PROP_POS_MSEC))
                    else:
                        timestamp_ms = int((time.monotonic() - start) * 1000)
                    tracker.submit_frame(frame, timestamp_ms)
                    if show_window:
                        draw_status(frame, tracker.status.value, radius)
                        cv2.imshow(window_name, frame)
                        key = cv2.waitKey(1) & 0xFF
                        if key == ord('q'):
                            break
                        if key == ord('r'):
                            tracker.reset_counter()
                except KeyboardInterrupt:
                    print("\n[INFO] KeyboardInterrupt received. Exiting gracefully...")
                    break
            final_state = tracker.status.value
    finally:
        if cap is not None:
            cap.release()
        if show_window:
            cv2.destroyAllWindows()
        if voice is not None:
            voice.close()
    return final_state


SQUAT_COUNT_NOTE = (
    "Note: each squat descent briefly passes through the lunge range, so the "
    "tracker switches to lunges and back and the squat count restarts. A "
    "continuous squat set shows 1 rep on screen, while every completed squat "
    "still prints a [PROGRESS] line."
)


def main(argv=None) -> int:
    """Main entry point for the exercise tracker."""
    parser = argparse.ArgumentParser(description="Exomation exercise tracker", epilog=SQUAT_COUNT_NOTE)
    parser.add_argument('--mode', type=str, choices=['camera', 'video'], default='camera', help='Run mode: camera (default) or video')
    parser.add_argument('--camera', type=int, default=0, help='Camera device ID')
    parser.add_argument('--video', type=str, help='Path to the video file to analyze (required if mode=video)')
    parser.add_argument('--model', type=str, default=None, help='Path to the pose_landmarker .task model')
    parser.add_argument('--config', type=str, default=None, help='Path to a session config JSON file')
    parser.add_argument('--voice', action='store_true', help='Speak rep counts and exercise changes')
    parser.add_argument('--no-window', action='store_true', help='Run without the preview window')
    args = parser.parse_args(argv)

    if args.mode == 'video':
        if not args.video:
            print("Error: --video argument is required when mode is 'video'.")
            return 1
        if not os.path.isfile(args.video):
            print(f"Video file not found: {args.video}")
            return 1
        source = args.video
    else:
        source = args.camera

    config = load_session_config(args.config)
    print("Initializing exercise tracker...")
    try:
        state = run_session(
            source,
            config,
            model_path=args.model,
            use_voice=args.voice,
            show_window=not args.no_window,
            video_timestamps=args.mode == 'video',
        )
    except PoseDetectionError as e:
        print(f"Error starting tracker: {e}")
        return 1
    print(f"Session complete. Last exercise: {state.exercise_type.name}, reps: {state.repetitions}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
