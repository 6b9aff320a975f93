# tests/test_api.py

import pytest
from httpx import AsyncClient, ASGITransport
from backflow_insights import config
from backflow_insights.api.main import app  # Import the FastAPI app instance

# Mark all tests in this module as async for httpx
pytestmark = pytest.mark.anyio

@pytest.fixture
async def client():
    """Create an async test client for the API."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

@pytest.fixture
def pinned_engine(engine, monkeypatch):
    """Swap the engine built at import for one over the fixture repository."""
    monkeypatch.setattr("backflow_insights.api.main.engine", engine)
    return engine

CHURN_PAYLOAD = {
    "customerId": "walk_in",
    "appointmentFrequency": 0.3,
    "averageServiceValue": 400.0,
    "lastServiceDate": "2023-12-01",
    "totalServices": 2,
    "cancellationRate": 0.2,
    "paymentHistory": "poor",
    "customerSatisfactionScore": 2.5,
}

async def test_read_root(client: AsyncClient):
    """Test the root endpoint to ensure the API is running."""
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Backflow Predictive Insights API!"}

async def test_health(client: AsyncClient, pinned_engine):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "engine_loaded": True, "data_source": config.DATA_SOURCE}

async def test_health_reports_missing_engine(client: AsyncClient, monkeypatch):
    monkeypatch.setattr("backflow_insights.api.main.engine", None)

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["engine_loaded"] is False

async def test_insights_endpoint(client: AsyncClient, pinned_engine):
    response = await client.get("/insights", params={"timeframe": "30d"})

    assert response.status_code == 200
    data = response.json()
    assert set(data["insights"]) == {"demandForecast", "churnRisk", "maintenanceAlerts",
                                     "revenueOptimization", "seasonalPatterns", "riskAssessment"}
    assert len(data["insights"]["demandForecast"]) == 30
    assert data["insights"]["churnRisk"][0]["customerId"] == "C3"

    metadata = data["metadata"]
    assert metadata["timeframe"] == "30d"
    assert metadata["processingTime"].endswith("ms")
    assert metadata["dataPoints"] == 43
    assert metadata["recommendations"] == {"immediate": 3, "shortTerm": 8, "longTerm": 5}
    assert metadata["accuracy"] == {"demandForecast": 0.78, "churnPrediction": 0.85,
                                    "maintenanceAlerts": 0.82, "revenueOptimization": 0.76}

async def test_insights_focus(client: AsyncClient, pinned_engine):
    response = await client.get("/insights", params={"timeframe": "30d", "focus": "maintenance"})

    assert response.status_code == 200
    assert set(response.json()["insights"]) == {"maintenanceAlerts", "riskAssessment"}

async def test_insights_invalid_timeframe(client: AsyncClient, pinned_engine):
    response = await client.get("/insights", params={"timeframe": "2y"})
    assert response.status_code == 422

async def test_insights_engine_failure(client: AsyncClient, monkeypatch):
    """A failing generator surfaces as a 500, never a partial payload."""
    class BrokenEngine:
        async def generate_predictive_insights(self, timeframe):
            raise RuntimeError("customer store unreachable")

    monkeypatch.setattr("backflow_insights.api.main.engine", BrokenEngine())

    response = await client.get("/insights")
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to generate predictive insights."}

async def test_engine_unavailable(client: AsyncClient, monkeypatch):
    """Test the API's response when the engine failed to build."""
    monkeypatch.setattr("backflow_insights.api.main.engine", None)

    response = await client.post("/churn/score", json=CHURN_PAYLOAD)

    assert response.status_code == 503 # Service Unavailable
    assert response.json() == {"detail": "Insights engine is not available. Please check the logs."}

async def test_score_churn(client: AsyncClient, pinned_engine):
    response = await client.post("/churn/score", json=CHURN_PAYLOAD)

    assert response.status_code == 200
    data = response.json()
    assert data["customerId"] == "walk_in"
    assert data["churnProbability"] == 0.95
    assert data["riskLevel"] == "high"
    assert "Poor payment history" in data["keyFactors"]

async def test_score_churn_rejects_out_of_range_input(client: AsyncClient, pinned_engine):
    response = await client.post("/churn/score", json={**CHURN_PAYLOAD, "cancellationRate": 2})
    assert response.status_code == 422

async def test_rescore_customer(client: AsyncClient, pinned_engine):
    response = await client.post("/customers/C2/churn")
    assert response.status_code == 200
    assert response.json()["riskLevel"] == "medium"

    response = await client.post("/customers/nobody/churn")
    assert response.status_code == 404

async def test_assess_equipment(client: AsyncClient, pinned_engine):
    payload = {"id": "test_device_001", "type": "Backflow Test Kit", "age": 3.5,
               "usage": 1200, "lastMaintenance": "2024-06-15"}
    response = await client.post("/equipment/assess", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["riskLevel"] == "medium"
    assert data["predictedFailureDate"] == "2025-07-14"
    assert data["maintenanceWindow"] == {"start": "2025-06-14", "end": "2025-07-07"}

async def test_estimate_demand(client: AsyncClient, pinned_engine):
    response = await client.get("/demand/estimate", params={"day": "2025-01-20"})

    assert response.status_code == 200
    data = response.json()
    assert data["period"] == "2025-01-20"
    assert data["factors"]["seasonal"] == 0.7

async def test_run_scenario(client: AsyncClient):
    response = await client.post("/scenarios/premium_pricing")
    assert response.status_code == 200
    assert response.json()["roi"] == 2.8

async def test_run_unknown_scenario(client: AsyncClient):
    response = await client.post("/scenarios/open_second_office")
    assert response.status_code == 400
    assert response.json()["detail"]["availableScenarios"] == ["premium_pricing", "service_expansion", "staff_increase"]
