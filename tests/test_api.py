"""Tests for FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from app.vetfile.config import Settings
from app.vetfile.routers import documents

API = "/api/documents"


def _upload(client: TestClient, files, data=None):
    return client.post(f"{API}/upload", files=files, data=data or {})


def _upload_dd214(client: TestClient, pdf_bytes: bytes) -> str:
    response = _upload(
        client,
        files=[("documents", ("dd214.pdf", pdf_bytes, "application/pdf"))],
        data={"documentType": "DD214"},
    )
    assert response.status_code == 200
    return response.json()["uploadId"]


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_endpoint(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime"] >= 0
        assert "timestamp" in data

    def test_api_health_endpoint(self, client: TestClient):
        assert client.get("/api/health").json()["status"] == "ok"

    def test_root_endpoint(self, client: TestClient):
        assert client.get("/").status_code == 200


class TestUploadEndpoint:
    """Tests for POST /api/documents/upload."""

    def test_upload_pdf(self, client: TestClient, sample_pdf_bytes: bytes, settings: Settings):
        response = _upload(
            client,
            files=[("documents", ("dd214.pdf", sample_pdf_bytes, "application/pdf"))],
            data={"documentType": "DD214"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Files uploaded successfully"
        assert data["uploadId"]
        assert data["files"] == [
            {
                "id": data["files"][0]["id"],
                "originalName": "dd214.pdf",
                "size": len(sample_pdf_bytes),
                "documentType": "DD214",
            }
        ]
        stored = list(settings.upload_dir.iterdir())
        assert len(stored) == 1
        assert stored[0].suffix == ".pdf"
        assert stored[0].read_bytes() == sample_pdf_bytes

    def test_upload_per_file_document_types(
        self, client: TestClient, sample_pdf_bytes: bytes, sample_png_bytes: bytes
    ):
        response = _upload(
            client,
            files=[
                ("documents", ("dd214.pdf", sample_pdf_bytes, "application/pdf")),
                ("documents", ("str.png", sample_png_bytes, "image/png")),
            ],
            data={"documentType": ["DD214", "Medical Record"]},
        )
        assert response.status_code == 200
        types = [f["documentType"] for f in response.json()["files"]]
        assert types == ["DD214", "Medical Record"]

    def test_document_type_defaults_to_unknown(self, client: TestClient, sample_pdf_bytes: bytes):
        response = _upload(
            client, files=[("documents", ("dd214.pdf", sample_pdf_bytes, "application/pdf"))]
        )
        assert response.json()["files"][0]["documentType"] == "unknown"

    def test_upload_requires_files(self, client: TestClient):
        response = _upload(client, files=None, data={"documentType": "DD214"})
        assert response.status_code == 400
        assert response.json()["error"] == "No files uploaded"

    def test_upload_rejects_invalid_type(
        self, client: TestClient, sample_pdf_bytes: bytes, settings: Settings
    ):
        response = _upload(
            client,
            files=[
                ("documents", ("dd214.pdf", sample_pdf_bytes, "application/pdf")),
                ("documents", ("notes.txt", b"not a pdf", "text/plain")),
            ],
        )
        assert response.status_code == 400
        assert "Only PDF, JPEG, and PNG" in response.json()["detail"]
        # nothing is stored when any file is rejected
        assert not settings.upload_dir.exists() or not any(settings.upload_dir.iterdir())

    def test_upload_rejects_too_many_files(self, client: TestClient, sample_pdf_bytes: bytes):
        files = [
            ("documents", (f"doc{i}.pdf", sample_pdf_bytes, "application/pdf"))
            for i in range(11)
        ]
        response = _upload(client, files=files)
        assert response.status_code == 400
        assert "Too many files" in response.json()["detail"]

    def test_upload_rejects_oversized_file(self, client: TestClient, settings: Settings):
        settings.max_file_size_mb = 1
        big = b"%PDF-1.4\n" + b"0" * (1024 * 1024 + 1)
        response = _upload(
            client, files=[("documents", ("big.pdf", big, "application/pdf"))]
        )
        assert response.status_code == 400
        assert "1MB" in response.json()["detail"]

    def test_failed_upload_removes_stored_files(
        self, client: TestClient, sample_pdf_bytes: bytes, settings: Settings, monkeypatch
    ):
        original_store = documents._store
        calls = []

        def store_then_fail(content, name, upload_dir):
            calls.append(name)
            if len(calls) == 2:
                raise OSError("disk full")
            return original_store(content, name, upload_dir)

        monkeypatch.setattr(documents, "_store", store_then_fail)
        with pytest.raises(OSError):
            _upload(
                client,
                files=[
                    ("documents", ("a.pdf", sample_pdf_bytes, "application/pdf")),
                    ("documents", ("b.pdf", sample_pdf_bytes, "application/pdf")),
                ],
            )

        assert calls == ["a.pdf", "b.pdf"]
        assert not any(settings.upload_dir.iterdir())


class TestUploadStatusEndpoint:
    def test_status_of_new_upload(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        data = client.get(f"{API}/uploads/{upload_id}").json()

        assert data["status"] == "uploaded"
        assert data["analysisId"] is None
        assert "path" not in data["files"][0]

    def test_unknown_upload(self, client: TestClient):
        assert client.get(f"{API}/uploads/missing").status_code == 404


class TestProcessPdfEndpoint:
    def test_returns_extracted_text(
        self, client: TestClient, sample_pdf_bytes: bytes, settings: Settings
    ):
        response = client.post(
            f"{API}/process-pdf",
            files={"document": ("dd214.pdf", sample_pdf_bytes, "application/pdf")},
            data={"documentType": "DD214"},
        )
        assert response.status_code == 200
        data = response.json()
        assert "CERTIFICATE OF RELEASE" in data["text"]
        assert data["characters"] == len(data["text"])
        assert data["documentType"] == "DD214"
        assert not any(settings.upload_dir.iterdir())

    def test_rejects_invalid_type(self, client: TestClient):
        response = client.post(
            f"{API}/process-pdf",
            files={"document": ("notes.txt", b"text", "text/plain")},
        )
        assert response.status_code == 400


class TestAnalysisFlow:
    """End-to-end flow in mock mode: upload, analyze, fetch, generate form."""

    def test_dd214_scenario(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)

        analyze = client.post(f"{API}/analyze/{upload_id}")
        assert analyze.status_code == 200
        result = analyze.json()
        assert result["uploadId"] == upload_id
        assert result["source"] == "mock"
        assert result["degraded"] is False
        assert result["analysis"]["veteranInfo"]["name"] == "John A. Smith"
        assert len(result["analysis"]["potentialClaims"]) == 3

        fetched = client.get(f"{API}/analysis/{upload_id}").json()
        assert fetched["analysisId"] == result["analysisId"]
        assert fetched["status"] == "analyzed"
        assert fetched["analysis"] == result["analysis"]

        form = client.post(
            f"{API}/generate-form/{upload_id}", json={"selectedClaims": ["Tinnitus"]}
        )
        assert form.status_code == 200
        form_data = form.json()["form"]["formData"]
        assert form_data["formType"] == "VA-21-526EZ"
        assert len(form_data["disabilities"]) == 1
        assert form_data["disabilities"][0]["condition"] == "Tinnitus"
        assert form_data["disabilities"][0]["sequence"] == 1
        assert form_data["veteran"]["ssn"] == ""
        assert form_data["veteran"]["address"]["zipCode"] == ""

    def test_get_analysis_is_idempotent(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        client.post(f"{API}/analyze/{upload_id}")

        first = client.get(f"{API}/analysis/{upload_id}")
        second = client.get(f"{API}/analysis/{upload_id}")
        assert first.content == second.content

    def test_reanalysis_rebinds_latest(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        first = client.post(f"{API}/analyze/{upload_id}").json()["analysisId"]
        second = client.post(f"{API}/analyze/{upload_id}").json()["analysisId"]

        assert first != second
        assert client.get(f"{API}/analysis/{upload_id}").json()["analysisId"] == second

    def test_analyze_unknown_upload(self, client: TestClient):
        response = client.post(f"{API}/analyze/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "Upload not found"

    def test_analysis_not_ready(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        response = client.get(f"{API}/analysis/{upload_id}")

        assert response.status_code == 400
        assert response.json()["status"] == "uploaded"

    def test_get_analysis_unknown_upload(self, client: TestClient):
        assert client.get(f"{API}/analysis/missing").status_code == 404

    def test_analyze_failure_returns_500(self, client, tracker, sample_pdf_bytes):
        async def crashing_extractor(files):
            raise RuntimeError("extractor crashed")

        tracker.extractor.extract_documents = crashing_extractor
        upload_id = _upload_dd214(client, sample_pdf_bytes)

        response = client.post(f"{API}/analyze/{upload_id}")
        assert response.status_code == 500
        assert "extractor crashed" in response.json()["error"]
        assert client.get(f"{API}/uploads/{upload_id}").json()["status"] == "failed"


class TestGenerateFormEndpoint:
    def test_empty_selection_rejected(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        client.post(f"{API}/analyze/{upload_id}")

        response = client.post(f"{API}/generate-form/{upload_id}", json={"selectedClaims": []})
        assert response.status_code == 400
        assert response.json()["error"] == "No claims selected"

    @pytest.mark.parametrize(
        "body",
        [{"selectedClaims": "Tinnitus"}, {"selectedClaims": None}, {"selectedClaims": [1, 2]}],
    )
    def test_malformed_selection_rejected(
        self, client: TestClient, sample_pdf_bytes: bytes, body
    ):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        client.post(f"{API}/analyze/{upload_id}")

        response = client.post(f"{API}/generate-form/{upload_id}", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "No claims selected"

    def test_missing_body_rejected(self, client: TestClient):
        assert client.post(f"{API}/generate-form/missing").status_code == 400

    def test_never_analyzed_upload(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        response = client.post(
            f"{API}/generate-form/{upload_id}", json={"selectedClaims": ["Tinnitus"]}
        )
        assert response.status_code == 404

    def test_unmatched_claims_omitted(self, client: TestClient, sample_pdf_bytes: bytes):
        upload_id = _upload_dd214(client, sample_pdf_bytes)
        client.post(f"{API}/analyze/{upload_id}")

        response = client.post(
            f"{API}/generate-form/{upload_id}",
            json={"selectedClaims": ["Tinnitus", "Flat Feet"]},
        )
        disabilities = response.json()["form"]["formData"]["disabilities"]
        assert [d["condition"] for d in disabilities] == ["Tinnitus"]


class TestCORS:
    """Tests for CORS configuration."""

    def test_cors_allows_frontend(self, client: TestClient):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert response.status_code == 200
        assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"
