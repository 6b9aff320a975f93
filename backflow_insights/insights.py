# backflow_insights/insights.py

import asyncio
import json
import logging

from . import config
from .churn import ChurnScorer
from .data_processing import CsvRepository, SimulatedRepository
from .demand import DemandEstimator
from .equipment import EquipmentRiskScorer
from .schemas import (
    PredictiveInsights,
    RevenueOptimization,
    RevenueStrategy,
    RiskArea,
    SeasonalPattern,
)

# Configure logging
logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)


class PredictiveAnalyticsEngine:
    """
    Combines the demand, churn and equipment calculators into one insights payload.

    The repository supplies customers, equipment and revenue; the calculators
    stay pure. Every section is computed fresh on each call.
    """

    def __init__(self, repository=None, demand=None, churn=None, equipment=None):
        self.repository = repository or SimulatedRepository()
        self.demand = demand or DemandEstimator()
        self.churn = churn or ChurnScorer()
        self.equipment = equipment or EquipmentRiskScorer()
        self.models = {name: dict(meta) for name, meta in config.MODEL_METADATA.items()}

    async def generate_predictive_insights(self, timeframe='90d') -> PredictiveInsights:
        """
        Runs all six insight generators concurrently.

        Args:
            timeframe (str): '30d', '90d' or '1y'; controls the demand forecast horizon.

        Returns:
            PredictiveInsights: The combined sections.

        Raises:
            ValueError: If the timeframe is not supported. Any error raised by a
                generator propagates; no partial result is returned.
        """
        logging.info(f"Generating predictive insights (timeframe: {timeframe})...")
        (
            demand_forecast,
            churn_risk,
            maintenance_alerts,
            revenue_optimization,
            seasonal_patterns,
            risk_assessment,
        ) = await asyncio.gather(
            self.generate_demand_forecast(timeframe),
            self.predict_customer_churn(),
            self.generate_maintenance_alerts(),
            self.optimize_revenue(),
            self.analyze_seasonal_patterns(),
            self.assess_business_risks(),
        )

        return PredictiveInsights(
            demand_forecast=demand_forecast,
            churn_risk=churn_risk,
            maintenance_alerts=maintenance_alerts,
            revenue_optimization=revenue_optimization,
            seasonal_patterns=seasonal_patterns,
            risk_assessment=risk_assessment,
        )

    async def generate_demand_forecast(self, timeframe):
        return self.demand.forecast(timeframe)

    async def predict_customer_churn(self):
        return self.churn.rank(self.repository.load_customers())

    async def generate_maintenance_alerts(self):
        return self.equipment.alerts(self.repository.load_equipment())

    async def optimize_revenue(self):
        current = self.repository.monthly_revenue()
        strategies = sorted(
            (RevenueStrategy(**s) for s in config.REVENUE_STRATEGIES),
            key=lambda s: s.impact,
            reverse=True,
        )
        potential_gain = sum(s.impact for s in strategies)
        return RevenueOptimization(
            current_revenue=current,
            optimized_revenue=current + potential_gain,
            potential_gain=potential_gain,
            strategies=strategies,
        )

    async def analyze_seasonal_patterns(self):
        return [SeasonalPattern(**p) for p in config.SEASONAL_PATTERNS]

    async def assess_business_risks(self):
        return [RiskArea(**r) for r in config.RISK_AREAS]

    def rescore_customer(self, customer_id):
        """
        Scores a single customer from the repository.

        Raises:
            KeyError: If the repository has no such customer.
        """
        logging.info(f"Rescoring churn for customer {customer_id}...")
        return self.churn.score(self.repository.get_customer(customer_id))


def write_report(insights, path):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(insights.model_dump(mode='json', by_alias=True), f, indent=2)
    logging.info(f"Insights report saved to {path}")


def main(timeframe='90d'):
    """Runs the engine over the CSV dataset and writes the insights report."""
    logging.info("Starting insights report...")
    engine = PredictiveAnalyticsEngine(repository=CsvRepository())
    insights = asyncio.run(engine.generate_predictive_insights(timeframe))
    write_report(insights, config.INSIGHTS_REPORT_PATH)
    logging.info("Insights report complete.")
    return insights


if __name__ == '__main__':
    main()
