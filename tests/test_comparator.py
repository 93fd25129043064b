import itertools
import pytest

from companion.comparator import (
    SEVERITY_TABLE, compare_emotions, compatibility_score, emotion_insight,
    mismatch_severity, response_strategy,
)
from companion.models import CANONICAL_EMOTIONS, FaceReading, TextEmotionResult

def face(emotion, confidence=70):
    return FaceReading(emotion=emotion, confidence=confidence)

def text(emotion, confidence=60, dismissive=False):
    return TextEmotionResult(emotion=emotion, confidence=confidence, is_dismissive=dismissive)

def test_no_face_trusts_text():
    r = compare_emotions(None, text("happy", 80))
    assert r.match and not r.mismatch
    assert r.primary_emotion == "happy"
    assert r.confidence == 80
    assert r.severity == 0

def test_unrecognised_face_label_treated_as_absent():
    r = compare_emotions(face("surprised"), text("sad"))
    assert r.match and r.primary_emotion == "sad"
    assert r.face_emotion is None

@pytest.mark.parametrize("emotion", CANONICAL_EMOTIONS)
def test_same_label_matches(emotion):
    r = compare_emotions(face(emotion, 90), text(emotion, 40))
    assert r.match is True and r.mismatch is False
    assert r.confidence == 40
    assert r.primary_emotion == emotion

def test_hiding_feelings_end_to_end_values():
    r = compare_emotions(face("sad", 90), text("neutral", 100, dismissive=True))
    assert r.mismatch and r.hiding_feelings and r.concerning_mismatch
    assert r.primary_emotion == "sad"
    assert r.severity == 8

def test_face_trusted_over_words():
    r = compare_emotions(face("happy"), text("sad"))
    assert r.primary_emotion == "happy"
    assert not r.concerning_mismatch
    assert not r.hiding_feelings

def test_dismissive_needs_sad_or_angry_face():
    r = compare_emotions(face("anxious"), text("neutral", dismissive=True))
    assert r.mismatch and not r.hiding_feelings

@pytest.mark.parametrize("pair", [
    ("sad", "neutral"), ("sad", "happy"), ("angry", "neutral"),
    ("angry", "happy"), ("sad", "angry"), ("angry", "sad"),
])
def test_concerning_pairs(pair):
    assert compare_emotions(face(pair[0]), text(pair[1])).concerning_mismatch

def test_severity_table_values():
    assert mismatch_severity("sad", "happy", 80) == 9
    assert mismatch_severity("sad", "happy", 85) == 10
    assert mismatch_severity("angry", "neutral", 50) == 7
    assert mismatch_severity("neutral", "angry", 81) == 4
    assert mismatch_severity("anxious", "happy", 50) == 2
    assert mismatch_severity("anxious", "happy", 99) == 3

def test_severity_always_in_range_and_pure():
    for f, t in itertools.product(CANONICAL_EMOTIONS, repeat=2):
        for conf in (0, 80, 81, 100):
            s = mismatch_severity(f, t, conf)
            assert 0 <= s <= 10
            assert s == mismatch_severity(f, t, conf)
    for pair in SEVERITY_TABLE:
        assert mismatch_severity(*pair, 100) == min(SEVERITY_TABLE[pair] + 1, 10)

def test_compatibility():
    assert compatibility_score("happy", "happy") == 10
    assert compatibility_score("happy", "angry") == 1
    assert compatibility_score("anxious", "neutral") == 5
    assert compare_emotions(face("sad"), text("happy")).compatibility == 2

def test_emotion_insight():
    assert emotion_insight(compare_emotions(None, text("sad"))) is None
    specific = emotion_insight(compare_emotions(face("sad"), text("happy")))
    assert "sadness" in specific.concern
    generic = emotion_insight(compare_emotions(face("angry"), text("sad")))
    assert "angry" in generic.concern and "sad" in generic.concern
    assert generic.suggestion == "How are you really feeling?"

def test_response_strategy():
    assert response_strategy(compare_emotions(None, text("happy"))).type == "aligned"
    hiding = response_strategy(compare_emotions(face("angry", 90), text("neutral", dismissive=True)))
    assert hiding.type == "dismissive_detected" and hiding.severity == 8
    assert response_strategy(compare_emotions(face("sad"), text("angry"))).type == "concerning_mismatch"
    assert response_strategy(compare_emotions(face("neutral"), text("sad"))).type == "mild_mismatch"

def test_fractional_face_confidence_is_compared():
    r = compare_emotions(face("sad", 87.5), text("happy"))
    assert r.mismatch and r.concerning_mismatch
    assert r.face_confidence == 88
    assert r.severity == 10
