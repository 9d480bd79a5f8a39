"""API endpoint tests using FastAPI TestClient."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from perfmodel_api.main import create_app
from perfmodel_api.routers import benchmarks, modeling
from perfmodel_api.services.benchmark_service import BenchmarkService
from perfmodel_api.services.modeling_service import ModelingService


@pytest.fixture
def app(temp_db, monkeypatch):
    """Create test application backed by a temporary database."""
    monkeypatch.delenv("API_KEY", raising=False)
    test_app = create_app()

    # Reset global state in routers
    benchmarks._db = None
    benchmarks._service = None
    modeling._service = None

    benchmark_service = BenchmarkService(temp_db)
    modeling_service = ModelingService(temp_db)

    test_app.dependency_overrides[benchmarks.get_service] = lambda: benchmark_service
    test_app.dependency_overrides[modeling.get_modeling_service] = lambda: modeling_service
    return test_app


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def api_key():
    """Test API key."""
    return "test-api-key-12345"


@pytest.fixture
def client_with_auth(app, api_key):
    """Create test client with API key authentication enabled."""
    with patch.dict(os.environ, {"API_KEY": api_key}):
        yield TestClient(app), api_key


@pytest.fixture
def uploaded(client, sample_csv):
    """Upload the sample CSV and return the response body."""
    response = client.post(
        "/api/v1/benchmarks/upload",
        files={"file": ("results.csv", sample_csv, "text/csv")},
    )
    assert response.status_code == 200
    return response.json()


class TestRootEndpoints:
    """Tests for root-level endpoints."""

    def test_root_returns_service_info(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "llm-perfmodel-api"
        assert "version" in data

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_lifespan_logs_startup_and_shutdown(self, app, capsys):
        """Entering and leaving the client runs the lifespan handler."""
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200

        output = capsys.readouterr().out
        assert "application_started" in output
        assert "application_shutdown" in output


class TestBenchmarkEndpoints:
    """Tests for /api/v1/benchmarks routes."""

    def test_no_router_level_health(self, client):
        """Health lives only at the application root."""
        response = client.get("/api/v1/benchmarks/health")
        assert response.status_code == 404
        assert response.json()["detail"] == "Benchmark not found"

    def test_upload(self, uploaded):
        assert uploaded["success"] is True
        assert uploaded["rows_inserted"] == 3
        assert uploaded["benchmark_id"]

    def test_upload_rejects_non_csv(self, client, sample_csv):
        response = client.post(
            "/api/v1/benchmarks/upload",
            files={"file": ("results.json", sample_csv, "application/json")},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Only CSV files are allowed"

    def test_upload_rejects_bad_csv(self, client):
        response = client.post(
            "/api/v1/benchmarks/upload",
            files={"file": ("results.csv", "provider_model\nm\n", "text/csv")},
        )
        assert response.status_code == 400
        assert "Missing required columns" in response.json()["detail"]

    def test_list_models(self, client, uploaded):
        response = client.get("/api/v1/benchmarks/models")
        assert response.status_code == 200
        models = response.json()
        assert len(models) == 1
        assert models[0]["provider_model"] == "llama-3-8b"
        assert models[0]["num_runs"] == 3

    def test_list_model_benchmarks(self, client, uploaded):
        response = client.get("/api/v1/benchmarks/models/llama-3-8b/benchmarks")
        assert response.status_code == 200
        assert response.json()[0]["benchmark_id"] == uploaded["benchmark_id"]

    def test_model_name_with_slash(self, client, sample_csv):
        client.post(
            "/api/v1/benchmarks/upload",
            files={"file": ("r.csv", sample_csv.replace("llama-3-8b", "meta/llama-3-8b"), "text/csv")},
        )
        response = client.get("/api/v1/benchmarks/models/meta/llama-3-8b/benchmarks")
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_get_benchmark(self, client, uploaded):
        response = client.get(f"/api/v1/benchmarks/{uploaded['benchmark_id']}")
        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_get_benchmark_not_found(self, client):
        response = client.get("/api/v1/benchmarks/nonexistent-id")
        assert response.status_code == 404

    def test_delete_benchmark(self, client, uploaded):
        response = client.delete(f"/api/v1/benchmarks/{uploaded['benchmark_id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "deleted": 3}

    def test_delete_benchmark_not_found(self, client):
        response = client.delete("/api/v1/benchmarks/nonexistent-id")
        assert response.status_code == 404


class TestAuthentication:
    """Tests for API key protected routes."""

    def test_upload_requires_key(self, client_with_auth, sample_csv):
        client, _ = client_with_auth
        response = client.post(
            "/api/v1/benchmarks/upload",
            files={"file": ("results.csv", sample_csv, "text/csv")},
        )
        assert response.status_code == 401

    def test_delete_rejects_wrong_key(self, client_with_auth):
        client, _ = client_with_auth
        response = client.delete(
            "/api/v1/benchmarks/some-id",
            headers={"X-API-Key": "wrong-key"},
        )
        assert response.status_code == 401

    def test_valid_key_accepted(self, client_with_auth, sample_csv):
        client, api_key = client_with_auth
        response = client.post(
            "/api/v1/benchmarks/upload",
            files={"file": ("results.csv", sample_csv, "text/csv")},
            headers={"X-API-Key": api_key},
        )
        assert response.status_code == 200

    def test_read_routes_are_public(self, client_with_auth):
        client, _ = client_with_auth
        assert client.get("/api/v1/benchmarks/models").status_code == 200


class TestModelingEndpoints:
    """Tests for /api/v1/modeling routes."""

    def test_list_models(self, client, uploaded):
        response = client.get("/api/v1/modeling/models")
        assert response.status_code == 200
        assert response.json() == ["llama-3-8b"]

    def test_predict(self, client, uploaded):
        response = client.post(
            "/api/v1/modeling/predict",
            json={"model": "llama-3-8b", "input_tokens": 200, "output_tokens": 100},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["model_name"] == "llama-3-8b"
        assert data["method"] == "auto_linear"
        assert data["confidence"] == "high"
        assert data["num_observations_used"] == 3
        assert data["predictions"]["ttft_mean"] == pytest.approx(200.0)

    def test_predict_unknown_model(self, client):
        response = client.post(
            "/api/v1/modeling/predict",
            json={"model": "missing", "input_tokens": 200, "output_tokens": 100},
        )
        assert response.status_code == 404
        assert "Insufficient data" in response.json()["detail"]

    def test_predict_invalid_method(self, client):
        response = client.post(
            "/api/v1/modeling/predict",
            json={"model": "llama-3-8b", "input_tokens": 200, "output_tokens": 100, "method": "cubic"},
        )
        assert response.status_code == 422

    def test_predict_rejects_non_positive_tokens(self, client):
        response = client.post(
            "/api/v1/modeling/predict",
            json={"model": "llama-3-8b", "input_tokens": 0, "output_tokens": 100},
        )
        assert response.status_code == 422

    def test_export(self, client, uploaded):
        result = client.post(
            "/api/v1/modeling/predict",
            json={"model": "llama-3-8b", "input_tokens": 200, "output_tokens": 100},
        ).json()

        response = client.post("/api/v1/modeling/export", json={"result": result})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "prediction-llama_3_8b-" in response.headers["content-disposition"]
        header, row = response.text.strip().split("\n")
        columns = header.split(",")
        values = dict(zip(columns, row.split(",")))
        assert columns[0] == "provider_name"
        assert values["provider_model"] == "llama-3-8b"
        assert float(values["input_avg_len"]) == 200.0
        assert values["traffic_level"] == ""
        assert float(values["ttft_mean"]) == pytest.approx(200.0)
