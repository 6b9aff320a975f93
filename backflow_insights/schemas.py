# backflow_insights/schemas.py

from datetime import date
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PaymentHistory = Literal['excellent', 'good', 'fair', 'poor']
TimeSlot = Literal['morning', 'afternoon', 'evening']
ChurnRiskLevel = Literal['low', 'medium', 'high']
EquipmentRiskLevel = Literal['low', 'medium', 'high', 'critical']
Effort = Literal['low', 'medium', 'high']
Timeframe = Literal['30d', '90d', '1y']


class CamelModel(BaseModel):
    """Snake-case attributes in Python, camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerBehaviorSample(CamelModel):
    """
    A customer's service and payment behavior, as loaded from the customer store.
    """
    customer_id: str
    appointment_frequency: float = Field(..., ge=0, description="Visits per year")
    average_service_value: float = Field(..., ge=0)
    last_service_date: date
    total_services: int = Field(..., ge=0)
    cancellation_rate: float = Field(..., ge=0, le=1)
    payment_history: PaymentHistory
    customer_satisfaction_score: float = Field(..., ge=1, le=5)
    preferred_time_slots: List[TimeSlot] = Field(default_factory=list)
    service_types: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customerId": "customer_7",
                "appointmentFrequency": 2.5,
                "averageServiceValue": 275.0,
                "lastServiceDate": "2026-03-02",
                "totalServices": 8,
                "cancellationRate": 0.05,
                "paymentHistory": "good",
                "customerSatisfactionScore": 4.2,
                "preferredTimeSlots": ["morning"],
                "serviceTypes": ["Annual Test"],
            }
        },
    )


class ChurnAssessment(CamelModel):
    customer_id: str
    churn_probability: float
    risk_level: ChurnRiskLevel
    key_factors: List[str]
    retention_strategies: List[str]
    estimated_value_at_risk: float


class EquipmentSample(CamelModel):
    id: str
    type: str
    age: float = Field(..., ge=0, description="Age in years")
    usage: float = Field(..., ge=0, description="Hours, or miles for vehicles")
    last_maintenance: date

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "van_001",
                "type": "Service Vehicle",
                "age": 2.1,
                "usage": 45000,
                "lastMaintenance": "2026-08-01",
            }
        },
    )


class MaintenanceWindow(CamelModel):
    start: date
    end: date


class MaintenanceAlert(CamelModel):
    equipment_id: str
    equipment_type: str
    risk_level: EquipmentRiskLevel
    predicted_failure_date: date
    confidence: float
    maintenance_window: MaintenanceWindow
    cost_impact: float
    recommendations: List[str]


class DemandFactors(CamelModel):
    seasonal: float
    trend: float
    external: float


class DemandForecastPoint(CamelModel):
    period: date
    predicted_appointments: int
    confidence: float
    factors: DemandFactors
    recommendations: List[str]


class RevenueStrategy(CamelModel):
    strategy: str
    impact: float
    effort: Effort
    timeline: str
    description: str


class RevenueOptimization(CamelModel):
    current_revenue: float
    optimized_revenue: float
    potential_gain: float
    strategies: List[RevenueStrategy]


class SeasonalPattern(CamelModel):
    pattern: str
    impact: float
    description: str


class RiskArea(CamelModel):
    category: str
    level: ChurnRiskLevel
    description: str
    mitigation: List[str]


class PredictiveInsights(CamelModel):
    demand_forecast: List[DemandForecastPoint]
    churn_risk: List[ChurnAssessment]
    maintenance_alerts: List[MaintenanceAlert]
    revenue_optimization: RevenueOptimization
    seasonal_patterns: List[SeasonalPattern]
    risk_assessment: List[RiskArea]
