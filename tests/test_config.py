from companion.config import Settings

def test_Settings():
    s = Settings()
    assert s.HISTORY_LIMIT >= 1
    assert s.FACE_POLL_INTERVAL > 0
    # override via env-like behavior (construct new instance)
    s2 = Settings(HISTORY_LIMIT=20, DATABASE_URL="sqlite:///x.db")
    assert s2.HISTORY_LIMIT == 20
    assert s2.DATABASE_URL == "sqlite:///x.db"

def test_log_level_normalized():
    assert Settings(LOG_LEVEL=" info # comment").LOG_LEVEL == "INFO"
    assert Settings(LOG_LEVEL="chatty").LOG_LEVEL == "DEBUG"
    assert Settings(LOG_LEVEL="").LOG_LEVEL == "DEBUG"

def test_env_override(monkeypatch):
    import importlib
    import companion.config as config_mod
    monkeypatch.setenv("RESPONSE_CLOSURE", "true")
    monkeypatch.setenv("INSIGHT_WINDOW", "25")
    reloaded = importlib.reload(config_mod)
    try:
        s = reloaded.Settings()
        assert s.RESPONSE_CLOSURE is True
        assert s.INSIGHT_WINDOW == 25
    finally:
        monkeypatch.delenv("RESPONSE_CLOSURE")
        monkeypatch.delenv("INSIGHT_WINDOW")
        importlib.reload(config_mod)
