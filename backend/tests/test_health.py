from badgeshop.main import app
from fastapi.testclient import TestClient

client = TestClient(app)


def test_health_ok():
    res = client.get("/api/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["db"] is True
    assert body["barcode_db"] is True
    assert body["anthropic_configured"] is False
    assert body["openai_configured"] is False


def test_run_serves_the_app(monkeypatch):
    import uvicorn

    from badgeshop.config import settings
    from badgeshop.main import run

    seen = {}
    monkeypatch.setattr(uvicorn, "run", lambda target, **kw: seen.update(target=target, **kw))
    run()
    assert seen == {"target": "badgeshop.main:app", "host": settings.APP_HOST, "port": settings.APP_PORT}
