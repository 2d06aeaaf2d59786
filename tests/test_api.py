import pytest
from fastapi.testclient import TestClient

from taxifare.backend import api
from taxifare.utils.config import PipelineConfig

SAMPLE_BODY = {
    "vendor_id": "VTS",
    "rate_code": "1",
    "passenger_count": 1,
    "trip_time_in_secs": 1140,
    "trip_distance": 3.75,
    "payment_type": "CRD",
}


@pytest.fixture
def client():
    api._load_model.cache_clear()
    yield TestClient(api.app)
    api.app.dependency_overrides.clear()
    api._load_model.cache_clear()


def test_predict_with_saved_model(client, trained_model, tmp_path):
    trained_model.save(tmp_path / "Data" / "Model.joblib")
    api.app.dependency_overrides[api.get_config] = lambda: PipelineConfig.from_working_directory(tmp_path)

    response = client.post("/taxi/predict", json=SAMPLE_BODY)

    assert response.status_code == 200
    body = response.json()
    assert body["trip"]["vendor_id"] == "VTS"
    assert body["trip"]["fare_amount"] == 0.0
    assert 0.0 <= body["predicted_fare"] <= 100.0
    assert client.get("/health").json() == {"status": "ok", "model_loaded": True}


def test_predict_without_model(client, tmp_path):
    api.app.dependency_overrides[api.get_config] = lambda: PipelineConfig.from_working_directory(tmp_path)

    response = client.post("/taxi/predict", json=SAMPLE_BODY)

    assert response.status_code == 503
    assert "model file not found" in response.json()["detail"]
    assert client.get("/health").json()["model_loaded"] is False


def test_predict_rejects_incomplete_trip(client, trained_model):
    api.app.dependency_overrides[api.get_model] = lambda: trained_model

    response = client.post("/taxi/predict", json={"vendor_id": "VTS"})

    assert response.status_code == 422


def test_predict_with_corrupt_model(client, tmp_path):
    model_path = tmp_path / "Data" / "Model.joblib"
    model_path.parent.mkdir()
    model_path.write_bytes(b"not a pickle")
    api.app.dependency_overrides[api.get_config] = lambda: PipelineConfig.from_working_directory(tmp_path)

    response = client.post("/taxi/predict", json=SAMPLE_BODY)

    assert response.status_code == 503
    assert "cannot read model artifact" in response.json()["detail"]
