"""
Face vs text emotion comparison.

The face reading is trusted over self-reported words: whenever the two
disagree, the face label becomes the primary emotion.
"""
# companion/comparator.py
from __future__ import annotations
from typing import Dict, FrozenSet, Optional, Tuple
import logging

from companion.models import (
    ComparisonResult,
    FaceReading,
    MismatchInsight,
    ResponseStrategy,
    TextEmotionResult,
    is_canonical,
)

logger = logging.getLogger(__name__)

Pair = Tuple[str, str]  # (face, text)

CONCERNING_PAIRS: FrozenSet[Pair] = frozenset([
    ("sad", "neutral"),
    ("sad", "happy"),
    ("angry", "neutral"),
    ("angry", "happy"),
    ("sad", "angry"),
    ("angry", "sad"),
])

HIDING_FACE_EMOTIONS = frozenset(["sad", "angry"])

SEVERITY_TABLE: Dict[Pair, int] = {
    ("sad", "happy"): 9,
    ("angry", "happy"): 9,
    ("sad", "neutral"): 7,
    ("angry", "neutral"): 7,
    ("sad", "angry"): 5,
    ("angry", "sad"): 5,
    ("happy", "sad"): 6,
    ("happy", "angry"): 6,
    ("neutral", "sad"): 3,
    ("neutral", "angry"): 3,
}
DEFAULT_SEVERITY = 2
CONFIDENT_FACE_THRESHOLD = 80
MAX_SEVERITY = 10

# 0 = highly incompatible, 10 = the same feeling
COMPATIBILITY_TABLE: Dict[Pair, int] = {
    ("happy", "happy"): 10,
    ("sad", "sad"): 10,
    ("angry", "angry"): 10,
    ("neutral", "neutral"): 10,
    ("anxious", "anxious"): 10,
    ("happy", "neutral"): 6,
    ("neutral", "happy"): 6,
    ("sad", "neutral"): 5,
    ("neutral", "sad"): 5,
    ("angry", "neutral"): 4,
    ("neutral", "angry"): 4,
    ("happy", "anxious"): 4,
    ("anxious", "happy"): 4,
    ("sad", "anxious"): 5,
    ("anxious", "sad"): 5,
    ("happy", "sad"): 2,
    ("sad", "happy"): 2,
    ("happy", "angry"): 1,
    ("angry", "happy"): 1,
    ("sad", "angry"): 3,
    ("angry", "sad"): 3,
    ("angry", "anxious"): 4,
    ("anxious", "angry"): 4,
}
DEFAULT_COMPATIBILITY = 5

INSIGHTS: Dict[Pair, MismatchInsight] = {
    ("sad", "neutral"): MismatchInsight(
        concern="I sense you might be feeling sadder than you're letting on.",
        suggestion="It's okay to acknowledge difficult feelings.",
    ),
    ("sad", "happy"): MismatchInsight(
        concern="Your words sound positive, but I notice some sadness in your expression.",
        suggestion="Sometimes it helps to be honest about how we really feel.",
    ),
    ("angry", "neutral"): MismatchInsight(
        concern="I can see some frustration even though you're staying calm with your words.",
        suggestion="It's healthy to express what's bothering you.",
    ),
    ("angry", "happy"): MismatchInsight(
        concern="You're being positive with your words, but I sense some underlying frustration.",
        suggestion="You don't have to hide your anger. I'm here to listen.",
    ),
    ("sad", "angry"): MismatchInsight(
        concern="You seem to be experiencing mixed emotions - both sadness and frustration.",
        suggestion="These complex feelings are valid and understandable.",
    ),
}


def mismatch_severity(face_emotion: str, text_emotion: str, face_confidence: float) -> int:
    """
    How alarming a face/text disagreement is, 0..10.
    """
    severity = SEVERITY_TABLE.get((face_emotion, text_emotion), DEFAULT_SEVERITY)
    if face_confidence > CONFIDENT_FACE_THRESHOLD:
        severity += 1
    return min(severity, MAX_SEVERITY)


def compatibility_score(emotion_a: str, emotion_b: str) -> int:
    return COMPATIBILITY_TABLE.get((emotion_a, emotion_b), DEFAULT_COMPATIBILITY)


def compare_emotions(
    face_emotion: Optional[FaceReading],
    text_emotion: TextEmotionResult,
) -> ComparisonResult:
    """
    Compare a face reading with a text reading.

    Args:
        face_emotion: Latest face classifier output, or None when no face was seen.
            A label outside the canonical five counts as no reading.
        text_emotion: Result of the text analyzer.

    Returns:
        ComparisonResult
    """
    if face_emotion is None or not is_canonical(face_emotion.emotion):
        if face_emotion is not None:
            logger.debug(f"[compare] ignoring unrecognised face label={face_emotion.emotion!r}")
        return ComparisonResult(
            match=True,
            mismatch=False,
            primary_emotion=text_emotion.emotion,
            confidence=text_emotion.confidence,
            text_emotion=text_emotion.emotion,
            text_confidence=text_emotion.confidence,
            is_dismissive=text_emotion.is_dismissive,
            note="Analysis based on text only (no face detected)",
        )

    face = face_emotion.emotion
    text = text_emotion.emotion

    if face == text:
        return ComparisonResult(
            match=True,
            mismatch=False,
            primary_emotion=face,
            confidence=min(face_emotion.confidence, text_emotion.confidence),
            face_emotion=face,
            text_emotion=text,
            face_confidence=face_emotion.confidence,
            text_confidence=text_emotion.confidence,
            is_dismissive=text_emotion.is_dismissive,
            compatibility=compatibility_score(face, text),
            note="Emotions are aligned",
        )

    severity = mismatch_severity(face, text, face_emotion.confidence)
    result = ComparisonResult(
        match=False,
        mismatch=True,
        concerning_mismatch=(face, text) in CONCERNING_PAIRS,
        hiding_feelings=bool(text_emotion.is_dismissive and face in HIDING_FACE_EMOTIONS),
        primary_emotion=face,
        severity=severity,
        face_emotion=face,
        text_emotion=text,
        face_confidence=face_emotion.confidence,
        text_confidence=text_emotion.confidence,
        is_dismissive=text_emotion.is_dismissive,
        compatibility=compatibility_score(face, text),
    )
    logger.debug(
        f"[compare] mismatch face={face} text={text} severity={severity} "
        f"concerning={result.concerning_mismatch} hiding={result.hiding_feelings}"
    )
    return result


def emotion_insight(result: ComparisonResult) -> Optional[MismatchInsight]:
    """
    Concern/suggestion wording for a mismatch; None when the emotions agree.
    """
    if not result.mismatch:
        return None
    face, text = result.face_emotion, result.text_emotion
    insight = INSIGHTS.get((face, text))
    if insight is not None:
        return insight
    return MismatchInsight(
        concern=f"I notice your expression shows {face} while your words seem {text}.",
        suggestion="How are you really feeling?",
    )


def response_strategy(result: ComparisonResult) -> ResponseStrategy:
    if not result.mismatch:
        return ResponseStrategy(type="aligned", approach="supportive", priority="validate_emotion")
    if result.hiding_feelings:
        return ResponseStrategy(
            type="dismissive_detected",
            approach="gentle_probing",
            priority="acknowledge_hidden_emotion",
            severity=result.severity,
        )
    if result.concerning_mismatch:
        return ResponseStrategy(
            type="concerning_mismatch",
            approach="empathetic_confrontation",
            priority="express_concern",
            severity=result.severity,
        )
    return ResponseStrategy(type="mild_mismatch", approach="curious_inquiry", priority="understand_better")
