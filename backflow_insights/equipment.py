# backflow_insights/equipment.py

import logging
from datetime import date, timedelta
from typing import List, NamedTuple

from . import config
from .schemas import EquipmentSample, MaintenanceAlert, MaintenanceWindow
from .utils import ConstantFactor, days_between

RISK_ORDER = {'critical': 4, 'high': 3, 'medium': 2, 'low': 1}


class RiskAssessment(NamedTuple):
    risk_level: str
    score: int
    factors: List[str]


def heavy_usage_threshold(equipment_type):
    return config.HEAVY_USAGE_THRESHOLDS.get(equipment_type, config.DEFAULT_HEAVY_USAGE)


def risk_band(score):
    for band, minimum in config.EQUIPMENT_RISK_BANDS:
        if score >= minimum:
            return band
    return 'low'


def estimate_cost(equipment_type):
    return config.FAILURE_COSTS.get(equipment_type, config.DEFAULT_FAILURE_COST)


def maintenance_window(failure_date: date) -> MaintenanceWindow:
    before_start, before_end = config.MAINTENANCE_WINDOW_DAYS
    return MaintenanceWindow(
        start=failure_date - timedelta(days=before_start),
        end=failure_date - timedelta(days=before_end),
    )


def maintenance_recommendations(factors):
    recommendations = [config.MAINTENANCE_RECOMMENDATIONS[f]
                       for f in factors if f in config.MAINTENANCE_RECOMMENDATIONS]
    recommendations.append(config.STANDING_MAINTENANCE_RECOMMENDATION)
    return recommendations


class EquipmentRiskScorer:
    """
    Threshold scoring of equipment age, usage and maintenance recency.

    Confidence comes from an injected provider and does not depend on the
    equipment; the default is config.MAINTENANCE_CONFIDENCE_PLACEHOLDER.
    """

    def __init__(self, confidence=None, today=None):
        self.confidence_provider = confidence or ConstantFactor(config.MAINTENANCE_CONFIDENCE_PLACEHOLDER)
        self.today = today

    def _today(self):
        return self.today or date.today()

    def assess(self, equipment: EquipmentSample) -> RiskAssessment:
        score = 0
        factors = []

        if equipment.age > 5:
            score += 3
            factors.append('High age')
        elif equipment.age > 3:
            score += 2
            factors.append('Moderate age')

        if equipment.usage > heavy_usage_threshold(equipment.type):
            score += 3
            factors.append('Heavy usage')

        if days_between(equipment.last_maintenance, self._today()) > config.OVERDUE_MAINTENANCE_DAYS:
            score += 2
            factors.append('Overdue maintenance')

        return RiskAssessment(risk_band(score), score, factors)

    def project_failure(self, risk_level) -> date:
        """Fixed offset per band, independent of where the score falls inside the band."""
        return self._today() + timedelta(days=config.FAILURE_OFFSET_DAYS[risk_level])

    def confidence(self):
        return self.confidence_provider()

    def alert(self, equipment: EquipmentSample) -> MaintenanceAlert:
        risk = self.assess(equipment)
        failure_date = self.project_failure(risk.risk_level)

        return MaintenanceAlert(
            equipment_id=equipment.id,
            equipment_type=equipment.type,
            risk_level=risk.risk_level,
            predicted_failure_date=failure_date,
            confidence=self.confidence(),
            maintenance_window=maintenance_window(failure_date),
            cost_impact=estimate_cost(equipment.type),
            recommendations=maintenance_recommendations(risk.factors),
        )

    def alerts(self, equipment_list):
        """Alerts for every non-low equipment item, most severe first."""
        alerts = [self.alert(e) for e in equipment_list if self.assess(e).risk_level != 'low']
        logging.info(f"Equipment assessment complete: {len(alerts)} maintenance alerts raised.")
        return sorted(alerts, key=lambda a: RISK_ORDER[a.risk_level], reverse=True)
