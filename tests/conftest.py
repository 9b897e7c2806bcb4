import pytest

from massage_api import create_app
from massage_api.extensions import db


def _mk_app(monkeypatch, **overrides):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    cfg = {"TESTING": True, "STORE_PING_INTERVAL": 0}
    cfg.update(overrides)
    return create_app(overrides=cfg)


@pytest.fixture(scope="function")
def make_app(monkeypatch):
    """Factory for apps with non-default config; each gets its own in-memory DB."""
    apps = []

    def _make(**overrides):
        app = _mk_app(monkeypatch, **overrides)
        ctx = app.app_context()
        ctx.push()
        db.create_all()
        apps.append(ctx)
        return app

    yield _make
    for ctx in reversed(apps):
        db.session.remove()
        ctx.pop()


@pytest.fixture(scope="function")
def app(make_app):
    return make_app()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture(scope="function")
def store(app):
    return app.extensions["store"]
