# companion/pipeline.py
from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Dict, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError

from companion.comparator import compare_emotions
from companion.config import Settings
from companion.exceptions import EmotionInputError, StorageError
from companion.models import FaceReading, TextEmotionResult
from companion.patterns import summarize_history
from companion.responses import ResponseSelector
from companion.text_emotion import TextEmotionAnalyzer
from companion import store

logger = logging.getLogger(__name__)

_analyzer = TextEmotionAnalyzer()
_selector = ResponseSelector()


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def analyze_message(
    user_text: str,
    face_emotion: Optional[FaceReading],
    settings: Settings,
    text_emotion: Optional[TextEmotionResult] = None,
    analyzer: Optional[TextEmotionAnalyzer] = None,
    selector: Optional[ResponseSelector] = None,
) -> Dict:
    """
    Text analysis -> face/text comparison -> reply. No I/O.

    A precomputed `text_emotion` (e.g. from the browser) is used as-is.
    """
    if not isinstance(user_text, str):
        raise EmotionInputError(f"user_text must be a string, got {type(user_text).__name__}")

    analyzer = analyzer or _analyzer
    selector = selector or _selector

    if text_emotion is None:
        text_emotion = analyzer.analyze(user_text)
    analysis = compare_emotions(face_emotion, text_emotion)
    reply = selector.generate_response(user_text, text_emotion, face_emotion, analysis)
    if settings.RESPONSE_CLOSURE:
        reply = selector.add_supportive_closure(reply, analysis.primary_emotion)

    logger.debug(
        f"[pipeline] text={text_emotion.emotion} face={face_emotion.emotion if face_emotion else None} "
        f"primary={analysis.primary_emotion} mismatch={analysis.mismatch}"
    )
    return {
        "ai_response": reply,
        "text_emotion": text_emotion,
        "face_emotion": face_emotion,
        "emotion_analysis": analysis,
        "detected_emotion": text_emotion.emotion,
    }


def process_message(
    engine,
    user_text: str,
    face_emotion: Optional[FaceReading],
    settings: Settings,
    text_emotion: Optional[TextEmotionResult] = None,
    selector: Optional[ResponseSelector] = None,
    day: Optional[date] = None,
) -> Dict:
    """
    Analyze one message, then persist the turn and bump the day's counter
    in a single transaction.
    """
    result = analyze_message(
        user_text,
        face_emotion,
        settings,
        text_emotion=text_emotion,
        selector=selector,
    )
    day = day or today_utc()
    try:
        with engine.begin() as conn:
            conversation_id = store.save_turn(
                conn,
                user_text=user_text,
                ai_response=result["ai_response"],
                text_emotion=result["text_emotion"],
                face_emotion=face_emotion,
                analysis=result["emotion_analysis"],
            )
            store.increment_daily_summary(conn, result["detected_emotion"], day)
    except SQLAlchemyError as e:
        logger.exception("[pipeline] failed to persist turn")
        raise StorageError(f"Could not save conversation: {e}") from e

    result["conversation_id"] = conversation_id
    logger.debug(f"[pipeline] process_message finished conversation_id={conversation_id}")
    return result


def build_insight(engine, limit: int = 10) -> Dict:
    """
    Pattern, volatility, interventions and insight text over the most recent turns.
    """
    try:
        with engine.begin() as conn:
            readings = store.recent_readings(conn, limit=limit)
    except SQLAlchemyError as e:
        logger.exception("[pipeline] failed to load readings")
        raise StorageError(f"Could not load history: {e}") from e
    logger.debug(f"[pipeline] build_insight over {len(readings)} readings")
    return summarize_history(readings)
