import base64
import json
import pytest
from fastapi.testclient import TestClient

from conftest import FakeCollection, FakeInvoker, words
from resume_analyzer.main import app
from resume_analyzer.models.settings import AppSettings, LLMSettings
from resume_analyzer.routers.dependencies import (
    get_current_owner,
    get_pipeline,
    get_report_store,
    get_token_verifier,
)
from resume_analyzer.services.pipeline import ResumePipeline
from resume_analyzer.services.report_store import ReportStore
from resume_analyzer.utils.exceptions import Unauthorized

ANALYSIS_REPLY = json.dumps({
    "skills": ["Python", "SQL"],
    "summary": "Backend engineer.",
    "experience": "Eight years.",
    "education": "MSc.",
    "score": 81,
    "improvements": "Add metrics",
})
MATCH_REPLY = json.dumps({"matchPercentage": 55, "missingSkills": ["Rust"], "suggestions": "Learn Rust"})
TEN_WORDS = "one two three four five six seven eight nine ten"


class FakeVerifier:
    def verify(self, token):
        if token != "good-token":
            raise Unauthorized()
        return "user-1"


@pytest.fixture
def harness():
    collection = FakeCollection()
    store = ReportStore(collection)
    invoker = FakeInvoker(lambda system, user: MATCH_REPLY if "Job Description" in user else ANALYSIS_REPLY)
    settings = AppSettings(llm=LLMSettings(api_key="test-key"))

    app.dependency_overrides[get_current_owner] = lambda: "user-1"
    app.dependency_overrides[get_report_store] = lambda: store
    app.dependency_overrides[get_pipeline] = lambda: ResumePipeline(settings, invoker, store)
    yield {"collection": collection, "invoker": invoker}
    app.dependency_overrides.clear()


@pytest.fixture
def client(harness):
    return TestClient(app)


class TestAnalyzeEndpoints:
    """Test cases for the analysis endpoints"""

    def test_analyze_resume_success(self, client, harness):
        response = client.post("/api/analyze-resume", json={"resumeText": words(500), "filename": "cv.pdf"})

        assert response.status_code == 200
        data = response.json()
        assert data["reportId"] == harness["collection"].docs[0]["report_id"]
        assert data["analysis"] == json.loads(ANALYSIS_REPLY)
        assert "X-Request-ID" in response.headers

    def test_analyze_resume_insufficient_content(self, client, harness):
        response = client.post("/api/analyze-resume", json={"resumeText": TEN_WORDS, "filename": "cv.pdf"})

        assert response.status_code == 422
        body = response.json()
        assert "enough text" in body["error"]
        assert body["error_code"] == "INSUFFICIENT_CONTENT"
        assert harness["invoker"].calls == []
        assert harness["collection"].docs == []

    def test_analyze_resume_missing_fields(self, client):
        response = client.post("/api/analyze-resume", json={"resumeText": words(500)})

        assert response.status_code == 400
        assert response.json()["error"] == "Resume text and filename are required"

    def test_analyze_resume_body_not_json(self, client):
        response = client.post("/api/analyze-resume", content=b"not json", headers={"content-type": "application/json"})

        assert response.status_code == 422
        assert isinstance(response.json()["error"], str)

    def test_analyze_document_plain_text(self, client, harness):
        payload = {
            "filename": "cv.txt",
            "contentType": "text/plain",
            "base64Content": base64.b64encode(words(200).encode()).decode(),
        }
        response = client.post("/api/analyze-document", json=payload)

        assert response.status_code == 200
        assert harness["collection"].docs[0]["resume_text"] == words(200)

    def test_analyze_document_invalid_base64(self, client):
        payload = {"filename": "cv.pdf", "contentType": "application/pdf", "base64Content": "###"}
        response = client.post("/api/analyze-document", json=payload)

        assert response.status_code == 400
        assert "Invalid base64" in response.json()["error"]


class TestJobMatchEndpoint:
    """Test cases for the job match endpoint"""

    def test_job_match_success(self, client, harness):
        created = client.post("/api/analyze-resume", json={"resumeText": words(500), "filename": "cv.pdf"}).json()

        response = client.post("/api/job-match", json={
            "resumeText": "ignored",
            "jobDescription": "Systems engineer, Rust",
            "reportId": created["reportId"],
        })

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "analysis": {"matchPercentage": 55, "missingSkills": ["Rust"], "suggestions": "Learn Rust"},
        }
        doc = harness["collection"].docs[0]
        assert doc["match_percentage"] == 55
        assert doc["score"] == 81

    def test_job_match_unknown_report(self, client):
        response = client.post("/api/job-match", json={"jobDescription": "Any", "reportId": "nope"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND_OR_FORBIDDEN"

    def test_job_match_missing_description(self, client):
        response = client.post("/api/job-match", json={"reportId": "r-1"})

        assert response.status_code == 400
        assert response.json()["error"] == "Job description and report ID are required"


class TestReportEndpoints:
    """Test cases for report reads"""

    def test_list_and_get_reports(self, client, harness):
        client.post("/api/analyze-resume", json={"resumeText": words(500), "filename": "first.pdf"})
        client.post("/api/analyze-resume", json={"resumeText": words(600), "filename": "second.pdf"})

        listing = client.get("/api/reports")
        assert listing.status_code == 200
        rows = listing.json()
        assert len(rows) == 2
        assert {r["resume_filename"] for r in rows} == {"first.pdf", "second.pdf"}

        detail = client.get(f"/api/reports/{rows[0]['report_id']}")
        assert detail.status_code == 200
        assert detail.json()["score"] == 81
        assert detail.json()["owner"] == "user-1"

    def test_get_report_not_found(self, client):
        response = client.get("/api/reports/missing")
        assert response.status_code == 404


class TestAuthentication:
    """Requests go through the real bearer-header dependency"""

    @pytest.fixture
    def auth_client(self, harness):
        del app.dependency_overrides[get_current_owner]
        app.dependency_overrides[get_token_verifier] = lambda: FakeVerifier()
        return TestClient(app)

    def test_missing_header(self, auth_client):
        response = auth_client.post("/api/analyze-resume", json={"resumeText": words(500), "filename": "cv.pdf"})
        assert response.status_code == 401
        assert response.json()["error"]

    def test_bad_token(self, auth_client, harness):
        response = auth_client.post(
            "/api/analyze-resume",
            json={"resumeText": words(500), "filename": "cv.pdf"},
            headers={"Authorization": "Bearer forged"},
        )
        assert response.status_code == 401
        assert harness["invoker"].calls == []

    def test_good_token(self, auth_client, harness):
        response = auth_client.post(
            "/api/analyze-resume",
            json={"resumeText": words(500), "filename": "cv.pdf"},
            headers={"Authorization": "Bearer good-token"},
        )
        assert response.status_code == 200
        assert harness["collection"].docs[0]["owner"] == "user-1"


class TestHealth:

    def test_health(self):
        response = TestClient(app).get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
