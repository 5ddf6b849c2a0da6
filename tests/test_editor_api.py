import time

import pytest
from fastapi.testclient import TestClient

from codrush.main import app
from codrush.features.editor import endpoints as editor_endpoints
from codrush.features.editor.sessions import EditorSessionStore
from judge0_fakes import FakeJudge0, make_service, status_payload


@pytest.fixture
def fake():
    return FakeJudge0(tokens=["abc"], statuses={
        "abc": [status_payload(2, "Processing"), status_payload(3, "Accepted", stdout="1\n")],
    })


@pytest.fixture
def client(fake):
    store = EditorSessionStore(make_service(fake))
    app.dependency_overrides[editor_endpoints.get_session_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _new_session(client):
    response = client.post("/editor/sessions")
    assert response.status_code == 201
    return response.json()


def _wait_until_idle(client, session_id):
    for _ in range(200):
        body = client.get(f"/editor/sessions/{session_id}").json()
        if not body["editor"]["processing"]:
            return body
        time.sleep(0.01)
    raise AssertionError("compile did not finish")


def test_registry_routes(client):
    languages = client.get("/languages").json()
    assert len(languages) == 12
    assert languages[0] == {
        "id": 63,
        "name": "JavaScript (Node.js 18.6.0)",
        "label": "JavaScript (Node.js 18.6.0)",
        "value": "javascript",
    }
    themes = {t["value"]: t for t in client.get("/themes").json()}
    assert themes["vs-dark"]["builtin"] is True
    assert "oceanic-next" in themes


def test_new_session_defaults(client):
    body = _new_session(client)
    editor = body["editor"]
    assert body["session_id"]
    assert editor["language"]["value"] == "javascript"
    assert editor["theme"]["value"] == "oceanic-next"
    assert editor["run_label"] == "Run (CTRL+ENTER)"
    assert editor["processing"] is False
    assert editor["output"]["output"] is None


def test_update_selections(client):
    sid = _new_session(client)["session_id"]

    editor = client.put(f"/editor/sessions/{sid}/code", json={"code": "print(1)"}).json()["editor"]
    assert editor["code"] == "print(1)"

    editor = client.put(f"/editor/sessions/{sid}/language", json={"id": 71}).json()["editor"]
    assert editor["language"]["label"] == "Python (3.8.1)"

    editor = client.put(f"/editor/sessions/{sid}/theme", json={"value": "cobalt"}).json()["editor"]
    assert editor["theme"]["value"] == "cobalt"


def test_invalid_selections_are_rejected(client):
    sid = _new_session(client)["session_id"]
    assert client.put(f"/editor/sessions/{sid}/language", json={"id": 1}).status_code == 422
    assert client.put(f"/editor/sessions/{sid}/language", json={}).status_code == 422
    assert client.put(f"/editor/sessions/{sid}/theme", json={"value": "neon"}).status_code == 422


def test_unknown_session_is_404(client):
    assert client.get("/editor/sessions/nope").status_code == 404
    assert client.post("/editor/sessions/nope/compile").status_code == 404
    assert client.delete("/editor/sessions/nope").status_code == 404


def test_compile_runs_in_background(client, fake):
    sid = _new_session(client)["session_id"]
    client.put(f"/editor/sessions/{sid}/code", json={"code": "console.log(1)"})

    started = client.post(f"/editor/sessions/{sid}/compile")
    assert started.status_code == 202
    assert started.json()["started"] is True
    assert started.json()["epoch"] == 1

    body = _wait_until_idle(client, sid)
    assert body["editor"]["output"]["output"] == "1\n"
    assert body["editor"]["output"]["details"]["status"] == "Accepted"

    notes = client.get(f"/editor/sessions/{sid}/notifications").json()
    assert [n["kind"] for n in notes] == ["success"]
    assert client.get(f"/editor/sessions/{sid}/notifications").json() == []


def test_compile_with_empty_code_does_not_start(client, fake):
    sid = _new_session(client)["session_id"]
    client.put(f"/editor/sessions/{sid}/code", json={"code": ""})

    body = client.post(f"/editor/sessions/{sid}/compile").json()
    assert body == {"started": False, "epoch": None, "processing": False}
    assert fake.calls == []


def test_oversized_source_is_413(client):
    sid = _new_session(client)["session_id"]
    client.put(f"/editor/sessions/{sid}/code", json={"code": "x" * (200 * 1024)})
    assert client.post(f"/editor/sessions/{sid}/compile").status_code == 413


def test_key_shortcut(client, fake):
    sid = _new_session(client)["session_id"]

    assert client.post(f"/editor/sessions/{sid}/keys", json={"keys": ["Enter"]}).json()["started"] is False
    assert client.post(f"/editor/sessions/{sid}/keys", json={"keys": ["Control", "Enter"]}).json()["started"] is True
    _wait_until_idle(client, sid)
    assert len(fake.posts) == 1


def test_delete_session(client):
    sid = _new_session(client)["session_id"]
    assert client.delete(f"/editor/sessions/{sid}").status_code == 204
    assert client.get(f"/editor/sessions/{sid}").status_code == 404


def test_healthz_reports_reachable_backend(client, monkeypatch):
    from codrush import main
    from codrush.features.judge0.schemas import Judge0Status

    async def statuses():
        return [Judge0Status(id=3, description="Accepted")]

    monkeypatch.setattr(main.judge0_service, "get_statuses", statuses)
    body = client.get("/healthz").json()
    assert body["status"] == "ok"
    assert body["components"]["judge0"] == "reachable"
    assert "sessions" in body["counts"]


def test_healthz_degraded_when_backend_unreachable(client, monkeypatch):
    from codrush import main
    from codrush.features.judge0.exceptions import NetworkError

    async def failing_statuses():
        raise NetworkError("connection refused")

    monkeypatch.setattr(main.judge0_service, "get_statuses", failing_statuses)
    body = client.get("/healthz").json()
    assert body["status"] == "degraded"
    assert body["components"]["judge0"] == "unreachable"


def test_backend_languages_proxy(client, monkeypatch):
    from codrush.features.judge0.exceptions import NetworkError
    from codrush.features.judge0.schemas import LanguageInfo
    from codrush.features.languages import endpoints as registry_endpoints

    async def fake_languages():
        return [LanguageInfo(id=71, name="Python (3.8.1)")]

    monkeypatch.setattr(registry_endpoints.judge0_service, "get_languages", fake_languages)
    assert client.get("/judge0/languages").json() == [{"id": 71, "name": "Python (3.8.1)"}]

    async def failing_statuses():
        raise NetworkError("down")

    monkeypatch.setattr(registry_endpoints.judge0_service, "get_statuses", failing_statuses)
    assert client.get("/judge0/statuses").status_code == 502
