"""
Keyword-based text emotion scoring.
"""
# companion/text_emotion.py
from __future__ import annotations
from typing import Dict, List, Optional
import logging
import string

from companion.models import CANONICAL_EMOTIONS, TextEmotionResult, round_half_up

logger = logging.getLogger(__name__)

_INTENSE = ("very", "so", "really", "extremely")

EMOTION_KEYWORDS: Dict[str, Dict[str, frozenset]] = {
    "happy": {
        "keywords": frozenset([
            "happy", "joy", "joyful", "excited", "great", "amazing", "wonderful",
            "fantastic", "excellent", "good", "glad", "pleased", "delighted",
            "cheerful", "thrilled", "love", "loving", "blessed", "grateful",
            "awesome", "brilliant", "perfect", "beautiful", "fun", "enjoy",
            "celebrating", "laugh", "smile", "yay", "haha", "lol",
            "😊", "😄", "😁", "🎉", "❤️", "💕", "✨",
        ]),
        "intensifiers": frozenset(_INTENSE + ("super", "absolutely")),
    },
    "sad": {
        "keywords": frozenset([
            "sad", "unhappy", "depressed", "down", "upset", "hurt", "crying",
            "tears", "lonely", "alone", "miserable", "devastated", "heartbroken",
            "blue", "gloomy", "disappointed", "hopeless", "despair", "grief",
            "sorrow", "melancholy", "sorry", "regret", "miss", "lost", "broken",
            "empty", "numb", "pain", "ache", "😢", "😭", "💔", "😞",
        ]),
        "intensifiers": frozenset(_INTENSE + ("deeply", "totally")),
    },
    "angry": {
        "keywords": frozenset([
            "angry", "mad", "furious", "rage", "annoyed", "frustrated", "irritated",
            "pissed", "hate", "hatred", "disgusted", "outraged", "livid", "fuming",
            "bitter", "resentful", "hostile", "violent", "aggressive", "fight",
            "argue", "stupid", "idiot", "damn", "hell", "awful", "terrible",
            "worst", "😠", "😡", "🤬", "💢",
        ]),
        "intensifiers": frozenset(_INTENSE + ("absolutely", "totally")),
    },
    "anxious": {
        "keywords": frozenset([
            "anxious", "worried", "nervous", "scared", "afraid", "fear", "fearful",
            "panic", "stress", "stressed", "overwhelmed", "tense", "uneasy",
            "concerned", "troubled", "distressed", "frightened", "terrified",
            "insecure", "uncertain", "doubt", "worry", "😰", "😨", "😟",
        ]),
        "intensifiers": frozenset(_INTENSE + ("totally",)),
    },
    "neutral": {
        "keywords": frozenset([
            "okay", "ok", "fine", "alright", "normal", "regular", "usual",
            "average", "so-so", "meh", "whatever", "sure", "maybe",
        ]),
        "intensifiers": frozenset(),
    },
}

# Substrings people use to play down how they feel
DISMISSIVE_PHRASES: tuple = (
    "i'm fine",
    "it's fine",
    "i'm ok",
    "i'm okay",
    "nothing's wrong",
    "don't worry",
    "it's nothing",
    "never mind",
    "forget it",
    "doesn't matter",
)

NEGATION_WORDS = frozenset([
    "not", "no", "never", "neither", "nobody", "nothing",
    "don't", "doesn't", "didn't", "can't", "won't",
])

INTENSIFIER_WEIGHT = 1.5
NEGATION_WEIGHT = -0.5
NEGATION_WINDOW = 2

# Apostrophes are kept inside tokens ("don't"); emoji are not punctuation.
_STRIP_CHARS = string.punctuation.replace("-", "") + "“”‘’…"


def _normalize(text: str) -> str:
    return text.lower().replace("’", "'").replace("‘", "'")


def _clean_token(token: str) -> str:
    return token.strip(_STRIP_CHARS)


class TextEmotionAnalyzer:
    """
    Scores text against per-emotion keyword sets.

    Each keyword hit adds 1 to its emotion, x1.5 when the previous token is
    one of that emotion's intensifiers, and x-0.5 when a negation word
    appeared within the two preceding tokens. Scores are floored at zero, so
    a negated keyword can only suppress its emotion, never win.
    """

    def __init__(
        self,
        keywords: Optional[Dict[str, Dict[str, frozenset]]] = None,
        dismissive_phrases: Optional[tuple] = None,
        negation_words: Optional[frozenset] = None,
    ):
        self.keywords = keywords or EMOTION_KEYWORDS
        self.dismissive_phrases = tuple(dismissive_phrases or DISMISSIVE_PHRASES)
        self.negation_words = negation_words or NEGATION_WORDS

    def analyze(self, text: str) -> TextEmotionResult:
        if not text or not text.strip():
            return TextEmotionResult(emotion="neutral", confidence=0, is_dismissive=False)

        lowered = _normalize(text).strip()
        dismissive = self.is_dismissive(lowered)
        scores = self._score_tokens(lowered.split())
        emotion, confidence = self._dominant(scores)
        logger.debug(f"[text] emotion={emotion} confidence={confidence} dismissive={dismissive} scores={scores}")
        return TextEmotionResult(
            emotion=emotion,
            confidence=confidence,
            is_dismissive=dismissive,
            all_scores=scores,
        )

    def emotion_scores(self, text: str) -> Dict[str, float]:
        if not text or not text.strip():
            return {e: 0.0 for e in CANONICAL_EMOTIONS}
        return self._score_tokens(_normalize(text).split())

    def is_dismissive(self, text: str) -> bool:
        lowered = _normalize(text or "")
        return any(phrase in lowered for phrase in self.dismissive_phrases)

    def sentiment_score(self, text: str) -> float:
        """
        Polarity in [-1, 1]: happy against the sum of sad, angry and anxious.
        """
        scores = self.analyze(text).all_scores
        positive = scores.get("happy", 0.0)
        negative = scores.get("sad", 0.0) + scores.get("angry", 0.0) + scores.get("anxious", 0.0)
        total = positive + negative
        if total == 0:
            return 0.0
        return (positive - negative) / total

    def _score_tokens(self, raw_tokens: List[str]) -> Dict[str, float]:
        scores: Dict[str, float] = {e: 0.0 for e in CANONICAL_EMOTIONS}
        tokens = [_clean_token(t) for t in raw_tokens]
        negation_at: Optional[int] = None

        for i, token in enumerate(tokens):
            if not token:
                continue
            if token in self.negation_words:
                negation_at = i
                continue

            negated = negation_at is not None and i - negation_at <= NEGATION_WINDOW
            prev = tokens[i - 1] if i > 0 else ""
            hit = False
            for emotion in CANONICAL_EMOTIONS:
                data = self.keywords.get(emotion) or {}
                if token not in data.get("keywords", ()):
                    continue
                weight = 1.0
                if prev in data.get("intensifiers", ()):
                    weight *= INTENSIFIER_WEIGHT
                if negated:
                    weight *= NEGATION_WEIGHT
                scores[emotion] += weight
                hit = True

            if hit and negated:
                negation_at = None
            elif negation_at is not None and i - negation_at >= NEGATION_WINDOW:
                negation_at = None

        return {e: max(0.0, s) for e, s in scores.items()}

    @staticmethod
    def _dominant(scores: Dict[str, float]) -> tuple:
        best, best_score = "neutral", 0.0
        for emotion in CANONICAL_EMOTIONS:
            if scores.get(emotion, 0.0) > best_score:
                best, best_score = emotion, scores[emotion]
        total = sum(scores.values())
        confidence = round_half_up(100.0 * best_score / total) if total > 0 else 0
        return best, min(confidence, 100)


_default_analyzer = TextEmotionAnalyzer()


def analyze_text(text: str) -> TextEmotionResult:
    """Analyze with the shared default keyword tables."""
    return _default_analyzer.analyze(text)
