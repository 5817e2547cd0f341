from fastapi.testclient import TestClient

from innkeeper import main


def test_startup_bootstraps_schema_outside_production(monkeypatch):
    calls = []
    monkeypatch.setattr(main, "init_db", lambda: calls.append("init"))
    monkeypatch.setattr(main.settings, "ENVIRONMENT", "development")

    with TestClient(main.app) as client:
        assert client.get("/health").status_code == 200

    assert calls == ["init"]


def test_production_skips_schema_bootstrap(monkeypatch):
    calls = []
    monkeypatch.setattr(main, "init_db", lambda: calls.append("init"))
    monkeypatch.setattr(main.settings, "ENVIRONMENT", "production")

    with TestClient(main.app):
        pass

    assert calls == []
