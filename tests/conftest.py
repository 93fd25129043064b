import pytest
from fastapi.testclient import TestClient

from companion.config import Settings
from companion.responses import ResponseSelector
from companion.store import init_db, make_engine


@pytest.fixture
def settings(tmp_path):
    return Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'companion.db'}", RESPONSE_CLOSURE=False)

@pytest.fixture
def engine(settings):
    eng = make_engine(settings.DATABASE_URL)
    init_db(eng)
    yield eng
    eng.dispose()

@pytest.fixture
def first_pick():
    # deterministic chooser: always the first template of the pool
    return ResponseSelector(choose=lambda pool: pool[0])

@pytest.fixture
def client(settings):
    from api.main import create_app
    with TestClient(create_app(settings)) as c:
        yield c
