"""
Pydantic data models for the emotion core and API IO.
"""
from __future__ import annotations
import math
from datetime import datetime, timezone
from datetime import date as CalendarDate
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

Emotion = Literal["happy", "sad", "angry", "anxious", "neutral"]
CANONICAL_EMOTIONS: tuple = ("happy", "sad", "angry", "anxious", "neutral")


def is_canonical(label) -> bool:
    return isinstance(label, str) and label in CANONICAL_EMOTIONS


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    """Round like a browser does (0.5 -> 1), not banker's rounding."""
    return int(math.floor(value + 0.5))


def _whole_confidence(value):
    # Classifiers report fractional percentages (87.5); stored confidences are whole.
    if isinstance(value, float) and math.isfinite(value):
        return round_half_up(value)
    return value


class EmotionReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    emotion: Emotion
    confidence: int = Field(0, ge=0, le=100)
    is_dismissive: bool = False
    timestamp: datetime = Field(default_factory=utcnow)

    round_confidence = field_validator("confidence", mode="before")(_whole_confidence)


class FaceReading(BaseModel):
    """Output of the external face classifier. The label is not constrained."""
    model_config = ConfigDict(frozen=True)

    emotion: str
    confidence: int = Field(0, ge=0, le=100)
    timestamp: Optional[datetime] = None

    round_confidence = field_validator("confidence", mode="before")(_whole_confidence)


class TextEmotionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    emotion: Emotion
    confidence: int = Field(0, ge=0, le=100)
    is_dismissive: bool = False
    all_scores: Dict[str, float] = Field(default_factory=dict)

    round_confidence = field_validator("confidence", mode="before")(_whole_confidence)


class ComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    match: bool
    mismatch: bool
    concerning_mismatch: bool = False
    hiding_feelings: bool = False
    primary_emotion: Emotion
    severity: int = Field(0, ge=0, le=10)
    confidence: Optional[int] = None
    face_emotion: Optional[Emotion] = None
    text_emotion: Optional[Emotion] = None
    face_confidence: Optional[int] = None
    text_confidence: Optional[int] = None
    is_dismissive: bool = False
    compatibility: Optional[int] = None
    note: Optional[str] = None


class MismatchInsight(BaseModel):
    concern: str
    suggestion: str


class ResponseStrategy(BaseModel):
    type: Literal["aligned", "dismissive_detected", "concerning_mismatch", "mild_mismatch"]
    approach: str
    priority: str
    severity: Optional[int] = None


# history / trend models


class EmotionalPattern(BaseModel):
    pattern: str
    dominance_percentage: Optional[int] = None
    trend: Optional[Literal["improving", "declining", "stable"]] = None
    concern: bool = False
    emotion_breakdown: Optional[Dict[str, int]] = None
    total_entries: Optional[int] = None


class VolatilityResult(BaseModel):
    volatility: int = Field(0, ge=0, le=100)
    stable: bool = True
    message: Optional[str] = None


class InterventionRecommendation(BaseModel):
    type: Literal[
        "professional_help",
        "stress_management",
        "anxiety_support",
        "emotional_regulation",
        "check_in",
    ]
    priority: Literal["high", "medium"]
    message: str


# persisted rows


class ConversationTurn(BaseModel):
    id: int
    user_text: str
    ai_response: str
    text_emotion: Optional[str] = None
    face_emotion: Optional[str] = None
    confidence_text: Optional[int] = None
    confidence_face: Optional[int] = None
    mismatch: bool = False
    severity: int = 0
    created_at: Optional[datetime] = None


class DailySummary(BaseModel):
    date: CalendarDate
    happy: int = 0
    sad: int = 0
    angry: int = 0
    neutral: int = 0


# API IO


class AnalyzeRequest(BaseModel):
    user_text: str = Field(..., min_length=1, max_length=5000)
    face_emotion: Optional[FaceReading] = None
    text_emotion: Optional[TextEmotionResult] = None
    timestamp: Optional[datetime] = None


class AnalyzeResponse(BaseModel):
    success: bool = True
    ai_response: str
    emotion_analysis: Optional[ComparisonResult] = None
    detected_emotion: Optional[Emotion] = None
    conversation_id: Optional[int] = None
    error: Optional[str] = None


class HistoryResponse(BaseModel):
    success: bool = True
    history: List[ConversationTurn] = Field(default_factory=list)
    count: int = 0


class SummaryResponse(BaseModel):
    success: bool = True
    summary: DailySummary


class InsightResponse(BaseModel):
    pattern: EmotionalPattern
    volatility: VolatilityResult
    interventions: List[InterventionRecommendation] = Field(default_factory=list)
    insight: str
