"""
Adapters around the external face-expression classifier.

The classifier itself (DeepFace here, face-api.js in the browser) is opaque:
this module maps its labels onto the canonical emotions, turns its scores
into a FaceReading, and keeps the caller-owned latest-reading state.
"""
# companion/face.py
from __future__ import annotations
from typing import Callable, Dict, Optional
import logging
import time

import cv2
import numpy as np

from companion.config import Settings
from companion.exceptions import FaceAnalysisError
from companion.history import EmotionHistory
from companion.models import EmotionReading, FaceReading, is_canonical, round_half_up, utcnow

logger = logging.getLogger(__name__)

# DeepFace and face-api.js vocabularies -> canonical labels
FACE_LABEL_MAP: Dict[str, str] = {
    "happy": "happy",
    "sad": "sad",
    "angry": "angry",
    "neutral": "neutral",
    "surprise": "neutral",
    "surprised": "neutral",
    "fear": "sad",
    "fearful": "sad",
    "disgust": "angry",
    "disgusted": "angry",
}


def map_face_label(label: Optional[str]) -> str:
    return FACE_LABEL_MAP.get((label or "").strip().lower(), "neutral")


def reading_from_expressions(expressions: Dict[str, float]) -> FaceReading:
    """
    Collapse per-expression scores into one reading.

    Scores may be probabilities (0..1, face-api.js) or percentages
    (0..100, DeepFace); the max score decides which.
    """
    best, best_value = "neutral", 0.0
    for label, value in (expressions or {}).items():
        try:
            value = float(value)
        except (TypeError, ValueError):
            continue
        if value > best_value:
            best, best_value = label, value
    scale = 100.0 if best_value <= 1.0 else 1.0
    confidence = max(0, min(100, round_half_up(best_value * scale)))
    return FaceReading(emotion=map_face_label(best), confidence=confidence, timestamp=utcnow())


def decode_image(data: bytes) -> np.ndarray:
    """Decode an uploaded JPEG/PNG into a BGR frame."""
    if not data:
        raise FaceAnalysisError("Empty image payload")
    buf = np.frombuffer(data, dtype=np.uint8)
    frame = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if frame is None:
        raise FaceAnalysisError("Could not decode image")
    return frame


def analyze_face_frame(frame: np.ndarray, settings: Settings) -> Optional[FaceReading]:
    """
    Classify the first face in a frame.

    Returns:
        FaceReading, or None when no face was found, the detector was unsure,
        or inference failed (the caller then trusts the text alone).
    """
    # Lazy import for easier testing and to avoid loading heavy stacks too early
    from deepface import DeepFace

    try:
        res = DeepFace.analyze(
            frame,
            actions=["emotion"],
            enforce_detection=False,
            detector_backend=settings.FACE_DETECTOR_BACKEND,
        )
    except Exception:
        logger.exception("[face] emotion inference failed; no reading")
        return None

    res = res if isinstance(res, list) else [res]
    faces = [r for r in res if isinstance(r, dict)]
    if not faces:
        logger.debug("[face] no face detected")
        return None

    r0 = faces[0]
    det_conf = r0.get("face_confidence")
    if det_conf is not None:
        try:
            det_conf = float(det_conf)
        except (TypeError, ValueError):
            det_conf = 1.0
        if det_conf < settings.FACE_MIN_CONFIDENCE:
            logger.debug(f"[face] detector confidence {det_conf:.2f} below threshold")
            return None

    probs = r0.get("emotion")
    if isinstance(probs, dict) and probs:
        reading = reading_from_expressions(probs)
    else:
        dom = r0.get("dominant_emotion")
        if not isinstance(dom, str) or not dom:
            return None
        reading = FaceReading(emotion=map_face_label(dom), confidence=0, timestamp=utcnow())

    logger.debug(f"[face] faces={len(faces)} emotion={reading.emotion} confidence={reading.confidence}")
    return reading


class FaceEmotionTracker:
    """Latest face reading plus a short rolling history for display."""

    def __init__(self, history_size: int = 10):
        self.current: Optional[FaceReading] = None
        self.history = EmotionHistory(maxlen=history_size)

    def update(self, reading: Optional[FaceReading]) -> Optional[FaceReading]:
        self.current = reading
        if reading is not None and is_canonical(reading.emotion):
            self.history.append(EmotionReading(
                emotion=reading.emotion,
                confidence=reading.confidence,
                timestamp=reading.timestamp or utcnow(),
            ))
        return self.current


def poll_camera(
    settings: Settings,
    tracker: FaceEmotionTracker,
    max_polls: Optional[int] = None,
    on_reading: Optional[Callable[[Optional[FaceReading]], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> FaceEmotionTracker:
    """
    Sample the camera every FACE_POLL_INTERVAL seconds and feed the tracker.

    Stops after `max_polls` samples or when the camera stops delivering frames.
    """
    cap = cv2.VideoCapture(settings.CAMERA_INDEX)
    if not cap.isOpened():
        raise FaceAnalysisError(f"Could not open camera: {settings.CAMERA_INDEX}")

    polls = 0
    try:
        while max_polls is None or polls < max_polls:
            ok, frame = cap.read()
            if not ok:
                logger.warning("[face] camera returned no frame; stopping")
                break
            reading = tracker.update(analyze_face_frame(frame, settings))
            if on_reading is not None:
                on_reading(reading)
            polls += 1
            sleep(settings.FACE_POLL_INTERVAL)
    finally:
        cap.release()
    logger.debug(f"[face] polling finished; polls={polls}")
    return tracker
