import pytest
from companion.text_emotion import TextEmotionAnalyzer, analyze_text

@pytest.fixture
def analyzer():
    return TextEmotionAnalyzer()

@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_is_neutral(analyzer, text):
    r = analyzer.analyze(text)
    assert (r.emotion, r.confidence, r.is_dismissive) == ("neutral", 0, False)
    assert r.all_scores == {}

@pytest.mark.parametrize("text", [
    "the cat sat on the mat",
    "I went to the store yesterday",
    "12345 ???",
])
def test_no_keywords_is_neutral_zero(analyzer, text):
    r = analyzer.analyze(text)
    assert r.emotion == "neutral" and r.confidence == 0

def test_happy_with_intensifier(analyzer):
    r = analyzer.analyze("I am so happy today!")
    assert r.emotion == "happy"
    assert r.confidence == 100
    assert r.all_scores["happy"] == pytest.approx(1.5)

def test_dismissive_phrase(analyzer):
    r = analyzer.analyze("I'm fine")
    assert r.is_dismissive is True
    assert r.emotion == "neutral" and r.confidence == 100

def test_typographic_apostrophe_is_dismissive(analyzer):
    assert analyzer.analyze("Honestly, I’m fine.").is_dismissive is True

def test_negation_suppresses_but_never_wins(analyzer):
    r = analyzer.analyze("I am not happy")
    assert r.emotion == "neutral" and r.confidence == 0
    assert r.all_scores["happy"] == 0

def test_negation_with_intensifier(analyzer):
    # -0.5 * 1.5, floored to zero
    r = analyzer.analyze("not very sad")
    assert r.all_scores["sad"] == 0
    assert r.emotion == "neutral"

def test_negation_expires_after_two_tokens(analyzer):
    r = analyzer.analyze("not at all sad")
    assert r.emotion == "sad"
    assert r.all_scores["sad"] == pytest.approx(1.0)

def test_negation_cleared_after_use(analyzer):
    r = analyzer.analyze("not sad sad")
    # first "sad" negated (-0.5), second counts (+1)
    assert r.all_scores["sad"] == pytest.approx(0.5)
    assert r.emotion == "sad"

def test_tie_goes_to_first_in_order(analyzer):
    r = analyzer.analyze("happy but sad")
    assert r.emotion == "happy"
    assert r.confidence == 50

def test_confidence_rounds_half_up(analyzer):
    r = analyzer.analyze("sad and worried and worried")
    assert r.emotion == "anxious"
    assert r.confidence == 67

def test_punctuation_and_emoji_tokens(analyzer):
    assert analyzer.analyze("Furious!!!").emotion == "angry"
    assert analyzer.analyze("today 😊").emotion == "happy"
    r = analyzer.analyze("I'm really, really stressed")
    assert r.emotion == "anxious"
    assert r.all_scores["anxious"] == pytest.approx(1.5)

def test_dont_worry_is_dismissive_and_negated(analyzer):
    r = analyzer.analyze("Don't worry about it")
    assert r.is_dismissive is True
    assert r.all_scores["anxious"] == 0

def test_sentiment_score(analyzer):
    assert analyzer.sentiment_score("happy happy sad") == pytest.approx(1 / 3)
    assert analyzer.sentiment_score("angry and sad") == pytest.approx(-1.0)
    assert analyzer.sentiment_score("meh") == 0
    assert analyzer.sentiment_score("") == 0

def test_sentiment_score_bounds(analyzer):
    for text in ["so happy", "terrible awful day", "good but worried", "nothing"]:
        assert -1.0 <= analyzer.sentiment_score(text) <= 1.0

def test_emotion_scores_and_is_dismissive(analyzer):
    scores = analyzer.emotion_scores("lonely and scared")
    assert scores["sad"] == 1 and scores["anxious"] == 1
    assert analyzer.emotion_scores("") == {e: 0.0 for e in ("happy", "sad", "angry", "anxious", "neutral")}
    assert analyzer.is_dismissive("NEVER MIND then")
    assert not analyzer.is_dismissive("I feel great")

def test_custom_tables():
    a = TextEmotionAnalyzer(
        keywords={"happy": {"keywords": frozenset(["stoked"]), "intensifiers": frozenset()}},
        dismissive_phrases=("all good",),
    )
    r = a.analyze("All good, I'm stoked")
    assert r.emotion == "happy" and r.is_dismissive

def test_analyze_text_default():
    assert analyze_text("I feel so lonely").emotion == "sad"
