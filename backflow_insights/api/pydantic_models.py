from typing import Any, Dict

from pydantic import Field

from ..schemas import CamelModel


class ActionSummary(CamelModel):
    """How many follow-up actions fall into each planning horizon."""
    immediate: int
    short_term: int
    long_term: int


class InsightsMetadata(CamelModel):
    timeframe: str
    generated_at: str
    processing_time: str = Field(..., description="Engine run time, e.g. '12ms'.")
    data_points: int
    accuracy: Dict[str, float]
    recommendations: ActionSummary


class InsightsResponse(CamelModel):
    """
    Defines the structure for the /insights response.
    `insights` holds the requested sections keyed by their camelCase names.
    """
    insights: Dict[str, Any]
    metadata: InsightsMetadata


class ScenarioResponse(CamelModel):
    scenario: str
    description: str
    impact: Dict[str, str]
    roi: float
    breakeven: str
