import io
import unittest
from unittest import mock

from docx import Document
from fastapi.testclient import TestClient

from app import app
from fakes import ScriptedAIClient, on_topic_answer
from mock_interview.core.config import DOCX_MIME_TYPE, PDF_MIME_TYPE
from mock_interview.services.candidate_store import InMemoryCandidateStore, get_candidate_store
from mock_interview.services.session_manager import SessionManager, get_session_manager

PROFILE = {
    "name": "Maria Garcia",
    "email": "maria@example.com",
    "phone": "555-867-5309",
    "resume_text": "React and Node.js developer",
}


class RouterTestCase(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryCandidateStore()
        self.manager = SessionManager(
            ai_client=ScriptedAIClient(scores=[8, 8, 6, 6, 4, 4]),
            store=self.store,
            backoff_base=0,
        )
        app.dependency_overrides[get_session_manager] = lambda: self.manager
        app.dependency_overrides[get_candidate_store] = lambda: self.store
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class TestHealth(RouterTestCase):
    def test_root_and_health(self):
        self.assertEqual(self.client.get("/").status_code, 200)
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["active_sessions"], 0)
        self.assertIn("ai_configured", body)


class TestResumeRouter(RouterTestCase):
    def upload(self, name, data, content_type):
        return self.client.post("/api/resume/parse", files={"file": (name, data, content_type)})

    def test_parses_docx(self):
        document = Document()
        for line in ("Maria Garcia", "maria@example.com", "555-867-5309"):
            document.add_paragraph(line)
        buffer = io.BytesIO()
        document.save(buffer)

        response = self.upload("cv.docx", buffer.getvalue(), DOCX_MIME_TYPE)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["name"], "Maria Garcia")
        self.assertEqual(body["email"], "maria@example.com")
        self.assertEqual(body["phone"], "555-867-5309")

    def test_rejects_unsupported_type(self):
        response = self.upload("cv.txt", b"plain text", "text/plain")
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_rejects_empty_file(self):
        response = self.upload("cv.pdf", b"", PDF_MIME_TYPE)
        self.assertEqual(response.status_code, 400)

    def test_rejects_oversized_file(self):
        with mock.patch("mock_interview.services.resume_parser.MAX_UPLOAD_BYTES", 10):
            response = self.upload("cv.pdf", b"%PDF-" + b"0" * 20, PDF_MIME_TYPE)
        self.assertEqual(response.status_code, 413)
        self.assertIn("error", response.json())

    def test_unreadable_pdf_still_returns_200(self):
        response = self.upload("cv.pdf", b"not really a pdf", PDF_MIME_TYPE)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["text"], "Error parsing PDF content.")


class TestInterviewRouter(RouterTestCase):
    def create(self):
        response = self.client.post("/api/interviews", json=PROFILE)
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_full_interview_over_http(self):
        session = self.create()
        session_id = session["session_id"]
        self.assertEqual(session["status"], "in-progress")
        self.assertEqual(session["current_question"]["difficulty"], "Easy")
        self.assertEqual(session["current_question"]["time_limit"], 20)

        draft = self.client.put(f"/api/interviews/{session_id}/draft", json={"answer": "work in"})
        self.assertEqual(draft.status_code, 200)

        for number in range(1, 7):
            response = self.client.post(
                f"/api/interviews/{session_id}/answer",
                json={"answer": on_topic_answer(number)},
            )
            self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertEqual(body["status"], "completed")
        self.assertEqual(body["final_score"], 60)

        fetched = self.client.get(f"/api/interviews/{session_id}").json()
        self.assertEqual(fetched["summary"], body["summary"])

        late = self.client.post(f"/api/interviews/{session_id}/answer", json={"answer": "late"})
        self.assertEqual(late.status_code, 409)

        candidates = self.client.get("/api/candidates").json()
        self.assertEqual(candidates["total"], 1)
        self.assertEqual(candidates["stats"]["completed"], 1)
        candidate = self.client.get(f"/api/candidates/{body['candidate_id']}").json()
        self.assertEqual(candidate["score"], 60)
        self.assertEqual(len(candidate["individual_scores"]), 6)

    def test_unknown_session_is_404(self):
        self.assertEqual(self.client.get("/api/interviews/missing").status_code, 404)
        response = self.client.post("/api/interviews/missing/answer", json={"answer": "hi"})
        self.assertEqual(response.status_code, 404)

    def test_retry_without_failure_is_409(self):
        session = self.create()
        response = self.client.post(f"/api/interviews/{session['session_id']}/retry-question")
        self.assertEqual(response.status_code, 409)

    def test_reset_then_start_again(self):
        session_id = self.create()["session_id"]

        self.assertEqual(
            self.client.post(f"/api/interviews/{session_id}/start", json=PROFILE).status_code,
            409,
        )

        reset = self.client.post(f"/api/interviews/{session_id}/reset")
        self.assertEqual(reset.status_code, 200)
        self.assertEqual(reset.json()["status"], "idle")

        restarted = self.client.post(f"/api/interviews/{session_id}/start", json=PROFILE)
        self.assertEqual(restarted.status_code, 200)
        self.assertEqual(restarted.json()["status"], "in-progress")

    def test_profile_requires_contact_fields(self):
        response = self.client.post("/api/interviews", json={"name": "No Phone", "email": "x@y.io"})
        self.assertEqual(response.status_code, 422)


class TestCandidatesRouter(RouterTestCase):
    def test_search_and_missing_candidate(self):
        self.client.post("/api/interviews", json=PROFILE)
        self.client.post("/api/interviews", json={**PROFILE, "name": "Omar Haddad", "email": "omar@corp.io"})

        everyone = self.client.get("/api/candidates").json()
        self.assertEqual(everyone["total"], 2)
        self.assertEqual(everyone["stats"]["in_progress"], 2)

        found = self.client.get("/api/candidates", params={"search": "omar"}).json()
        self.assertEqual([c["name"] for c in found["candidates"]], ["Omar Haddad"])

        none = self.client.get("/api/candidates", params={"status": "completed"}).json()
        self.assertEqual(none["total"], 0)

        self.assertEqual(self.client.get("/api/candidates/missing").status_code, 404)


if __name__ == "__main__":
    unittest.main()
