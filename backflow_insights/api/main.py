import logging
import time
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from .. import config
from ..data_processing import build_repository
from ..insights import PredictiveAnalyticsEngine
from ..schemas import (
    ChurnAssessment,
    CustomerBehaviorSample,
    DemandForecastPoint,
    EquipmentSample,
    MaintenanceAlert,
    Timeframe,
)
from ..summary import (
    UnknownScenarioError,
    calculate_data_points,
    count_immediate_actions,
    count_long_term_actions,
    count_short_term_actions,
    filter_insights_by_focus,
    simulate_scenario,
)
from .pydantic_models import ActionSummary, InsightsMetadata, InsightsResponse, ScenarioResponse

# Configure logging
logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)

# Initialize FastAPI app
app = FastAPI(title="Backflow Predictive Insights API", version="1.0")

# --- Engine Loading ---
# Built once when the application starts, from config.DATA_SOURCE.
try:
    engine = PredictiveAnalyticsEngine(repository=build_repository())
    logging.info(f"Insights engine ready (data source: '{config.DATA_SOURCE}').")
except Exception as e:
    logging.error(f"Failed to build insights engine: {e}")
    # Endpoints report 503 until the data source is fixed
    engine = None

ENGINE_UNAVAILABLE = "Insights engine is not available. Please check the logs."


def _require_engine():
    if engine is None:
        raise HTTPException(status_code=503, detail=ENGINE_UNAVAILABLE)
    return engine


def _to_wire(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json', by_alias=True)
    if isinstance(value, list):
        return [_to_wire(v) for v in value]
    return value


def _accuracy(models):
    return {
        'demandForecast': models['demand_forecast']['accuracy'],
        'churnPrediction': models['churn_prediction']['accuracy'],
        'maintenanceAlerts': models['maintenance_prediction']['accuracy'],
        'revenueOptimization': config.REVENUE_OPTIMIZATION_ACCURACY,
    }


@app.get("/", tags=["Root"])
def read_root():
    """A simple endpoint to check if the API is running."""
    return {"message": "Welcome to the Backflow Predictive Insights API!"}


@app.get("/health", tags=["Root"])
def health():
    return {"status": "ok", "engine_loaded": engine is not None, "data_source": config.DATA_SOURCE}


@app.get("/insights", response_model=InsightsResponse, tags=["Insights"])
async def get_insights(timeframe: Timeframe = '90d', focus: Optional[str] = None):
    """
    Returns predictive insights with run metadata.

    - **timeframe**: demand forecast horizon (30d, 90d or 1y).
    - **focus**: optional section filter (churn, demand, maintenance, revenue).
    """
    current = _require_engine()

    try:
        started = time.perf_counter()
        insights = await current.generate_predictive_insights(timeframe)
        elapsed_ms = round((time.perf_counter() - started) * 1000)
    except Exception as e:
        logging.error(f"Error generating predictive insights: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate predictive insights.")

    sections = filter_insights_by_focus(insights, focus)
    metadata = InsightsMetadata(
        timeframe=timeframe,
        generated_at=datetime.now(timezone.utc).isoformat(),
        processing_time=f"{elapsed_ms}ms",
        data_points=calculate_data_points(insights),
        accuracy=_accuracy(current.models),
        recommendations=ActionSummary(
            immediate=count_immediate_actions(insights),
            short_term=count_short_term_actions(insights),
            long_term=count_long_term_actions(insights),
        ),
    )
    return InsightsResponse(
        insights={to_camel(name): _to_wire(section) for name, section in sections.items()},
        metadata=metadata,
    )


@app.post("/churn/score", response_model=ChurnAssessment, tags=["Churn"])
def score_churn(sample: CustomerBehaviorSample):
    """Scores a single customer's churn risk from the submitted behavior record."""
    return _require_engine().churn.score(sample)


@app.post("/customers/{customer_id}/churn", response_model=ChurnAssessment, tags=["Churn"])
def rescore_customer(customer_id: str):
    current = _require_engine()
    try:
        return current.rescore_customer(customer_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Customer '{customer_id}' not found.")


@app.post("/equipment/assess", response_model=MaintenanceAlert, tags=["Equipment"])
def assess_equipment(equipment: EquipmentSample):
    return _require_engine().equipment.alert(equipment)


@app.get("/demand/estimate", response_model=DemandForecastPoint, tags=["Demand"])
def estimate_demand(day: date):
    return _require_engine().demand.estimate(day)


@app.post("/scenarios/{name}", response_model=ScenarioResponse, tags=["Scenarios"])
def run_scenario(name: str):
    try:
        return simulate_scenario(name)
    except UnknownScenarioError as e:
        raise HTTPException(status_code=400, detail={"error": str(e), "availableScenarios": e.available})
