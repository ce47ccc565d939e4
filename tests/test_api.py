"""
HTTP 契约：鉴权、上下文、职位流水线、看板计数与错误码（409 / 404 / 502 / 422）。

每个用例一个新的 app + 会话表，Oracle 为 Mock 或 conftest.ScriptedOracle，无需 API Key。
"""
import pytest
from fastapi.testclient import TestClient

from resumefit.api.app import create_app
from resumefit.api.session import SessionRegistry, get_bearer_token, session_key
from resumefit.oracles import MockFitOracle

AUTH = {"Authorization": "Bearer demo-token-api-test"}
OTHER = {"Authorization": "Bearer another-user"}
JD = "Senior Backend Engineer\n- Python services\n- Postgres and Kubernetes"


@pytest.fixture
def client():
    return TestClient(create_app(SessionRegistry(oracle_factory=MockFitOracle)))


@pytest.fixture
def scripted_client(oracle):
    return TestClient(create_app(SessionRegistry(oracle_factory=lambda: oracle)))


def _add_context(client, content="Python and Postgres developer", type="resume", headers=AUTH, **extra):
    r = client.post("/v1/context", json={"type": type, "content": content, **extra}, headers=headers)
    assert r.status_code == 201
    return r.json()


def _add_job(client, headers=AUTH, **extra):
    body = {"title": "Backend Engineer", "company": "Acme", "description": JD, **extra}
    r = client.post("/v1/jobs", json=body, headers=headers)
    assert r.status_code == 201
    return r.json()


# ──────────────────────────────────────────────
# 1. 鉴权与会话
# ──────────────────────────────────────────────

class TestAuth:
    @pytest.mark.parametrize("header,expected", [
        (None, None),
        ("", None),
        ("Basic abc", None),
        ("Bearer   ", None),
        ("Bearer abc", "abc"),
        ("bearer  xyz ", "xyz"),
    ])
    def test_get_bearer_token(self, header, expected):
        assert get_bearer_token(header) == expected

    def test_session_key_sanitised(self):
        assert session_key("abc/../def!") == "abcdef"
        assert session_key("///") == "anon"
        assert len(session_key("x" * 200)) == 64

    def test_missing_token_401(self, client):
        assert client.get("/v1/jobs").status_code == 401
        assert client.get("/v1/context", headers={"Authorization": "Token x"}).status_code == 401

    def test_health_needs_no_token(self, client):
        assert client.get("/health").json()["status"] == "ok"

    def test_sessions_are_isolated(self, client):
        _add_context(client)
        _add_job(client)
        assert client.get("/v1/context", headers=OTHER).json()["items"] == []
        assert client.get("/v1/jobs", headers=OTHER).json()["total"] == 0
        assert client.get("/v1/jobs", headers=AUTH).json()["total"] == 1

    def test_language_setting(self, client):
        assert client.get("/v1/session", headers=AUTH).json() == {"language": "en"}
        r = client.put("/v1/session", json={"language": "ko"}, headers=AUTH)
        assert r.json() == {"language": "ko"}
        assert client.put("/v1/session", json={"language": "fr"}, headers=AUTH).status_code == 422
        job = _add_job(client)
        r = client.post(f"/v1/jobs/{job['id']}/analyze", headers=AUTH)
        assert r.status_code == 409
        assert "활성화된" in r.json()["detail"]["message"]


class TestSessionLifecycle:
    def test_injected_registry_is_used(self, oracle):
        registry = SessionRegistry(oracle_factory=lambda: oracle)
        app = create_app(registry)
        assert app.state.sessions is registry

        client = TestClient(app)
        _add_context(client)
        job = _add_job(client)
        r = client.post(f"/v1/jobs/{job['id']}/analyze", headers=AUTH)
        assert r.status_code == 200
        assert r.json()["result"]["summary"] == "scripted"
        assert oracle.calls["analyze"] == 1
        assert len(registry) == 1

    def test_end_session_discards_state(self, oracle):
        registry = SessionRegistry(oracle_factory=lambda: oracle)
        client = TestClient(create_app(registry))
        _add_context(client)
        _add_context(client, headers=OTHER)
        assert len(registry) == 2

        assert client.delete("/v1/session", headers=AUTH).status_code == 204
        assert len(registry) == 1
        assert client.delete("/v1/session", headers=AUTH).status_code == 204
        assert client.get("/v1/context", headers=AUTH).json()["items"] == []
        assert len(client.get("/v1/context", headers=OTHER).json()["items"]) == 1

    def test_end_session_needs_token(self, client):
        assert client.delete("/v1/session").status_code == 401


# ──────────────────────────────────────────────
# 2. 上下文
# ──────────────────────────────────────────────

class TestContext:
    def test_add_list_toggle_delete(self, client):
        item = _add_context(client, type="hobby", content="Hiking")
        assert item["title"] == "Hobby"
        assert item["isActive"] is True
        assert "dateAdded" in item

        listing = client.get("/v1/context", headers=AUTH).json()
        assert listing["activeCount"] == 1

        r = client.post(f"/v1/context/{item['id']}/toggle", headers=AUTH)
        assert r.status_code == 200 and r.json()["isActive"] is False
        assert client.get("/v1/context", headers=AUTH).json()["activeCount"] == 0

        assert client.delete(f"/v1/context/{item['id']}", headers=AUTH).status_code == 204
        assert client.delete(f"/v1/context/{item['id']}", headers=AUTH).status_code == 204
        assert client.get("/v1/context", headers=AUTH).json()["items"] == []

    def test_blank_content_422(self, client):
        r = client.post("/v1/context", json={"content": "   "}, headers=AUTH)
        assert r.status_code == 422

    def test_toggle_missing_404(self, client):
        r = client.post("/v1/context/nope/toggle", headers=AUTH)
        assert r.status_code == 404
        assert r.json()["detail"]["code"] == "not_found"

    def test_upload_text_file(self, client):
        r = client.post(
            "/v1/context/upload",
            files={"file": ("resume.txt", b"Python developer, 5 years", "text/plain")},
            data={"type": "resume"},
            headers=AUTH,
        )
        assert r.status_code == 201
        body = r.json()
        assert body["type"] == "resume"
        assert body["title"] == "resume.txt"
        assert body["content"] == "Python developer, 5 years"

    def test_upload_empty_file_422(self, client):
        r = client.post(
            "/v1/context/upload",
            files={"file": ("empty.txt", b"", "text/plain")},
            headers=AUTH,
        )
        assert r.status_code == 422
        assert r.json()["detail"]["code"] == "invalid_input"


# ──────────────────────────────────────────────
# 3. 职位流水线
# ──────────────────────────────────────────────

class TestJobs:
    def test_new_job_shape(self, client):
        job = _add_job(client)
        assert job["status"] == "IDLE"
        assert job["applicationStatus"] == "NOT_APPLIED"
        assert job["result"] is None and job["usedContextSnapshot"] is None
        assert "analysisGeneration" not in job

    def test_blank_title_422(self, client):
        r = client.post("/v1/jobs", json={"title": " ", "description": JD}, headers=AUTH)
        assert r.status_code == 422

    def test_analyze_without_context_409(self, client):
        job = _add_job(client)
        r = client.post(f"/v1/jobs/{job['id']}/analyze", headers=AUTH)
        assert r.status_code == 409
        assert r.json()["detail"]["code"] == "no_active_context"
        assert client.get(f"/v1/jobs/{job['id']}", headers=AUTH).json()["status"] == "IDLE"

    def test_analyze_then_artifacts(self, client):
        ctx = _add_context(client)
        _add_context(client, type="hobby", content="Chess", isActive=False)
        job = _add_job(client)

        r = client.post(f"/v1/jobs/{job['id']}/analyze", headers=AUTH)
        assert r.status_code == 200
        analyzed = r.json()
        assert analyzed["status"] == "COMPLETED"
        assert 0 <= analyzed["result"]["overallScore"] <= 100
        assert analyzed["result"]["fitLabel"] in ("High Fit", "Medium Fit", "Low Fit", "Overstretch")
        assert [i["id"] for i in analyzed["usedContextSnapshot"]] == [ctx["id"]]

        tailored = client.post(f"/v1/jobs/{job['id']}/tailored-resume", headers=AUTH).json()
        assert tailored["tailoredResume"]
        assert tailored["result"] == analyzed["result"]
        assert tailored["status"] == "COMPLETED"

        letter = client.post(f"/v1/jobs/{job['id']}/cover-letter", headers=AUTH).json()
        assert letter["coverLetter"].startswith("Dear Hiring Team")

        fetched = client.get(f"/v1/jobs/{job['id']}", headers=AUTH).json()
        assert fetched["usedContextSnapshot"] == analyzed["usedContextSnapshot"]

    def test_unknown_job_404(self, client):
        _add_context(client)
        assert client.get("/v1/jobs/nope", headers=AUTH).status_code == 404
        r = client.post("/v1/jobs/nope/analyze", headers=AUTH)
        assert r.status_code == 404
        assert r.json()["detail"]["code"] == "not_found"

    def test_delete_idempotent(self, client):
        job = _add_job(client)
        assert client.delete(f"/v1/jobs/{job['id']}", headers=AUTH).status_code == 204
        assert client.delete(f"/v1/jobs/{job['id']}", headers=AUTH).status_code == 204
        assert client.get(f"/v1/jobs/{job['id']}", headers=AUTH).status_code == 404


class TestBoard:
    def test_empty_stats(self, client):
        stats = client.get("/v1/jobs/stats", headers=AUTH).json()
        assert stats["total"] == 0
        assert stats["counts"] == {
            "NOT_APPLIED": 0, "WISHLIST": 0, "APPLIED": 0,
            "INTERVIEWING": 0, "OFFER": 0, "REJECTED": 0,
        }

    def test_status_update_filter_and_counts(self, client):
        first = _add_job(client, title="First")
        second = _add_job(client, title="Second")
        r = client.put(
            f"/v1/jobs/{first['id']}/application-status",
            json={"status": "APPLIED"},
            headers=AUTH,
        )
        assert r.status_code == 200
        assert r.json()["applicationStatus"] == "APPLIED"
        assert r.json()["status"] == "IDLE"

        listing = client.get("/v1/jobs", headers=AUTH).json()
        assert [j["id"] for j in listing["jobs"]] == [second["id"], first["id"]]
        applied = client.get("/v1/jobs", params={"status": "APPLIED"}, headers=AUTH).json()
        assert [j["id"] for j in applied["jobs"]] == [first["id"]]

        counts = client.get("/v1/jobs/stats", headers=AUTH).json()["counts"]
        assert counts["APPLIED"] == 1 and counts["NOT_APPLIED"] == 1

    def test_invalid_status_422(self, client):
        job = _add_job(client)
        r = client.put(f"/v1/jobs/{job['id']}/application-status", json={"status": "GHOSTED"}, headers=AUTH)
        assert r.status_code == 422


# ──────────────────────────────────────────────
# 4. Oracle 失败与画像 / 润色
# ──────────────────────────────────────────────

class TestOracleErrors:
    def test_analysis_failure_is_job_error_not_http_error(self, scripted_client, oracle):
        _add_context(scripted_client)
        job = _add_job(scripted_client)
        oracle.script(RuntimeError("quota exhausted"))
        r = scripted_client.post(f"/v1/jobs/{job['id']}/analyze", headers=AUTH)
        assert r.status_code == 200
        assert r.json()["status"] == "ERROR"
        assert r.json()["result"] is None

    def test_artifact_failure_502(self, scripted_client, oracle):
        _add_context(scripted_client)
        job = _add_job(scripted_client)
        oracle.fail.add("write_cover_letter")
        r = scripted_client.post(f"/v1/jobs/{job['id']}/cover-letter", headers=AUTH)
        assert r.status_code == 502
        assert r.json()["detail"]["code"] == "oracle_failure"
        assert scripted_client.get(f"/v1/jobs/{job['id']}", headers=AUTH).json()["coverLetter"] is None

    def test_persona(self, client):
        assert client.post("/v1/persona", headers=AUTH).status_code == 409
        _add_context(client)
        r = client.post("/v1/persona", headers=AUTH)
        assert r.status_code == 200
        assert r.json()["text"].startswith("## Profile Summary")

    def test_polish(self, client):
        r = client.post("/v1/experience/polish", json={"text": "i managed a club event"}, headers=AUTH)
        assert r.status_code == 200
        assert r.json()["text"] == "- I managed a club event"
        blank = client.post("/v1/experience/polish", json={"text": "  "}, headers=AUTH)
        assert blank.status_code == 422
