from companion.history import EmotionHistory
from companion.models import EmotionReading
from companion.patterns import calculate_emotional_volatility

def test_bounded_history_keeps_latest():
    h = EmotionHistory(maxlen=3)
    for label in ["happy", "sad", "angry", "neutral"]:
        h.append(EmotionReading(emotion=label, confidence=50))
    assert len(h) == 3
    assert [r.emotion for r in h.snapshot()] == ["sad", "angry", "neutral"]
    assert h.latest().emotion == "neutral"

def test_snapshot_is_detached():
    h = EmotionHistory()
    h.append(EmotionReading(emotion="happy"))
    snap = h.snapshot()
    h.append(EmotionReading(emotion="sad"))
    assert isinstance(snap, tuple) and len(snap) == 1
    assert h.maxlen is None

def test_empty_history_feeds_analyzers():
    h = EmotionHistory(maxlen=10)
    assert h.latest() is None
    assert calculate_emotional_volatility(h.snapshot()).volatility == 0
