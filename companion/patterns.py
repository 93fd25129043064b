"""
Longitudinal analysis over a sequence of emotion readings.
"""
from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence
import logging

from companion.models import (
    EmotionalPattern,
    InterventionRecommendation,
    VolatilityResult,
    round_half_up,
)

logger = logging.getLogger(__name__)

# Tie-break order for the dominant emotion
PATTERN_ORDER = ("happy", "sad", "angry", "neutral", "anxious")

MIN_PATTERN_ENTRIES = 3
TREND_WINDOW = 5
STABLE_VOLATILITY = 40
HIGH_VOLATILITY = 70

# dominant emotion -> dominance % that must be exceeded to raise concern
CONCERN_THRESHOLDS = {"sad": 60, "angry": 50, "anxious": 60}

EMOTION_LABELS = {
    "happy": "happy and positive",
    "sad": "sad or down",
    "angry": "frustrated or angry",
    "anxious": "worried or anxious",
    "neutral": "relatively neutral",
}

NO_DATA_INSIGHT = "Not enough data to generate insights yet."


def _field(entry: Any, name: str) -> Optional[str]:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def _label(entry: Any) -> Optional[str]:
    """Reading label; persisted turns carry it as `text_emotion`."""
    return _field(entry, "emotion") or _field(entry, "text_emotion")


def _is_positive(entry: Any) -> bool:
    return _field(entry, "emotion") == "happy" or _field(entry, "text_emotion") == "happy"


def detect_emotional_pattern(history: Sequence[Any]) -> EmotionalPattern:
    """
    Dominant emotion, concern flag and happiness trend over a history window.

    Args:
        history: Chronological readings (EmotionReading, dicts or row-like
            objects with `emotion` or `text_emotion`).

    Returns:
        EmotionalPattern; pattern is "insufficient_data" below 3 entries.
    """
    history = list(history or [])
    if len(history) < MIN_PATTERN_ENTRIES:
        return EmotionalPattern(pattern="insufficient_data", trend=None, concern=False)

    counts: Dict[str, int] = {e: 0 for e in PATTERN_ORDER}
    for entry in history:
        label = _label(entry)
        if label in counts:
            counts[label] += 1

    dominant, max_count = "neutral", 0
    for emotion in PATTERN_ORDER:
        if counts[emotion] > max_count:
            dominant, max_count = emotion, counts[emotion]

    total = len(history)
    dominance = (max_count / total) * 100
    threshold = CONCERN_THRESHOLDS.get(dominant)
    concern = threshold is not None and dominance > threshold

    recent = history[-TREND_WINDOW:]
    older = history[0:max(0, total - TREND_WINDOW)][:TREND_WINDOW]
    recent_positive = sum(1 for e in recent if _is_positive(e))
    older_positive = sum(1 for e in older if _is_positive(e))

    trend = "stable"
    if recent_positive > older_positive + 1:
        trend = "improving"
    if recent_positive < older_positive - 1:
        trend = "declining"

    logger.debug(f"[patterns] dominant={dominant} dominance={dominance:.1f} trend={trend} concern={concern}")
    return EmotionalPattern(
        pattern=dominant,
        dominance_percentage=round_half_up(dominance),
        trend=trend,
        concern=concern,
        emotion_breakdown=counts,
        total_entries=total,
    )


def volatility_message(score: float) -> str:
    if score < 30:
        return "Your emotions have been quite stable."
    if score < 60:
        return "You're experiencing some emotional ups and downs."
    return "You're going through a lot of emotional changes."


def calculate_emotional_volatility(history: Sequence[Any]) -> VolatilityResult:
    """
    Share of adjacent readings whose label changed, 0..100.
    """
    history = list(history or [])
    if len(history) < 2:
        return VolatilityResult(volatility=0, stable=True)

    changes = sum(
        1 for prev, cur in zip(history, history[1:])
        if _label(cur) != _label(prev)
    )
    score = (changes / (len(history) - 1)) * 100
    return VolatilityResult(
        volatility=round_half_up(score),
        stable=score < STABLE_VOLATILITY,
        message=volatility_message(score),
    )


def suggest_intervention(
    pattern: EmotionalPattern,
    volatility: VolatilityResult,
) -> List[InterventionRecommendation]:
    """
    Independent rules; every rule that fires contributes one entry, in rule order.
    """
    interventions: List[InterventionRecommendation] = []
    dominance = pattern.dominance_percentage or 0

    if pattern.concern:
        if pattern.pattern == "sad" and dominance > 70:
            interventions.append(InterventionRecommendation(
                type="professional_help",
                priority="high",
                message="I notice you've been feeling quite sad lately. It might help to talk to a counselor or therapist who can provide professional support.",
            ))
        if pattern.pattern == "angry" and dominance > 60:
            interventions.append(InterventionRecommendation(
                type="stress_management",
                priority="medium",
                message="You've been experiencing a lot of frustration. Consider trying stress-relief techniques like deep breathing, exercise, or talking to someone you trust.",
            ))
        if pattern.pattern == "anxious" and dominance > 70:
            interventions.append(InterventionRecommendation(
                type="anxiety_support",
                priority="high",
                message="Your anxiety levels seem elevated. Techniques like mindfulness, grounding exercises, or speaking with a mental health professional might help.",
            ))

    if volatility.volatility > HIGH_VOLATILITY:
        interventions.append(InterventionRecommendation(
            type="emotional_regulation",
            priority="medium",
            message="Your emotions seem to be changing rapidly. It might help to keep a journal or practice grounding techniques to find more emotional balance.",
        ))

    if pattern.trend == "declining":
        interventions.append(InterventionRecommendation(
            type="check_in",
            priority="medium",
            message="I've noticed things might not be going as well lately. Would you like to talk about what's changed or what's bothering you?",
        ))

    return interventions


def generate_emotional_insight(history: Sequence[Any]) -> str:
    history = list(history or [])
    if not history:
        return NO_DATA_INSIGHT

    pattern = detect_emotional_pattern(history)
    volatility = calculate_emotional_volatility(history)

    parts = [
        "Looking at your recent emotional state, you've been mostly "
        f"{EMOTION_LABELS.get(pattern.pattern, 'balanced')}."
    ]
    if volatility.stable:
        parts.append("Your emotions have been fairly stable.")
    else:
        parts.append(volatility.message)

    if pattern.trend == "improving":
        parts.append("On a positive note, things seem to be looking up recently! 🌟")
    elif pattern.trend == "declining":
        parts.append("I've noticed things might be getting tougher lately. Remember, it's okay to ask for support.")

    return " ".join(parts)


def summarize_history(history: Sequence[Any]) -> Dict[str, Any]:
    """Pattern, volatility, interventions and insight for one snapshot."""
    history = list(history or [])
    pattern = detect_emotional_pattern(history)
    volatility = calculate_emotional_volatility(history)
    return {
        "pattern": pattern,
        "volatility": volatility,
        "interventions": suggest_intervention(pattern, volatility),
        "insight": generate_emotional_insight(history),
    }
