"""Poll the webcam and print face readings.

Usage:
    uvicorn api.main:app --reload  # (separate, for API)
    python scripts/live_face.py     # (prints one reading per poll)

Press Ctrl+C to stop.
"""
import logging
from companion.config import Settings
from companion.face import FaceEmotionTracker, poll_camera
from companion.patterns import calculate_emotional_volatility


def _print(reading):
    if reading is None:
        print("No face detected")
    else:
        print(f"{reading.emotion.upper()} {reading.confidence}%")


if __name__ == '__main__':
    s = Settings()
    logging.basicConfig(level=getattr(logging, s.LOG_LEVEL, logging.INFO))
    tracker = FaceEmotionTracker(history_size=s.UI_HISTORY_WINDOW)
    try:
        poll_camera(s, tracker, on_reading=_print)
    except KeyboardInterrupt:
        pass
    vol = calculate_emotional_volatility(tracker.history.snapshot())
    print(f"volatility={vol.volatility} stable={vol.stable}")
