# backflow_insights/churn.py

import logging
from datetime import date

from . import config
from .schemas import ChurnAssessment, CustomerBehaviorSample
from .utils import days_between, round_half_up


def recency_rule(days_since_service):
    if days_since_service > 365:
        return 3, 'Long time since last service'
    if days_since_service > 180:
        return 2, 'Long time since last service'
    if days_since_service > 90:
        return 1, 'Service interval lapsing'
    return 0, None


def payment_rule(payment_history):
    points = config.PAYMENT_HISTORY_POINTS[payment_history]
    label = 'Poor payment history' if payment_history in ('fair', 'poor') else None
    return points, label


def cancellation_rule(cancellation_rate):
    # Every cancellation adds to the score; only a high rate is worth naming
    points = cancellation_rate * config.CANCELLATION_WEIGHT
    label = 'High cancellation rate' if cancellation_rate > config.HIGH_CANCELLATION_RATE else None
    return points, label


def satisfaction_rule(satisfaction):
    if satisfaction < 3:
        return 2, 'Low satisfaction score'
    if satisfaction < 4:
        return 1, 'Below-target satisfaction score'
    return 0, None


def frequency_rule(appointment_frequency):
    if appointment_frequency < config.LOW_FREQUENCY_PER_YEAR:
        return 1, 'Infrequent service usage'
    return 0, None


def normalize_probability(score):
    low, high = config.CHURN_PROBABILITY_BOUNDS
    return min(high, max(low, score / config.MAX_CHURN_SCORE))


def risk_level(probability):
    for band, minimum in config.CHURN_RISK_BANDS:
        if probability >= minimum:
            return band
    return 'low'


def retention_strategies(factors):
    strategies = []
    for factor in factors:
        for strategy in config.RETENTION_STRATEGIES.get(factor, []):
            if strategy not in strategies:
                strategies.append(strategy)
    return strategies


class ChurnScorer:
    """
    Additive rule-based churn scoring.

    Each rule returns its points and the factor label together, so the score and
    the reported factors always come from the same thresholds.
    """

    def __init__(self, today=None):
        self.today = today

    def _today(self):
        return self.today or date.today()

    def evaluate(self, sample: CustomerBehaviorSample):
        """
        Runs every rule once.

        Returns:
            tuple: (score, factors) where factors is the ordered list of labels
            of the rules that fired.
        """
        days_since_service = days_between(sample.last_service_date, self._today())
        results = [
            recency_rule(days_since_service),
            payment_rule(sample.payment_history),
            cancellation_rule(sample.cancellation_rate),
            satisfaction_rule(sample.customer_satisfaction_score),
            frequency_rule(sample.appointment_frequency),
        ]
        score = sum(points for points, _ in results)
        factors = [label for _, label in results if label]
        return score, factors

    def score(self, sample: CustomerBehaviorSample) -> ChurnAssessment:
        score, factors = self.evaluate(sample)
        probability = normalize_probability(score)

        return ChurnAssessment(
            customer_id=sample.customer_id,
            churn_probability=round_half_up(probability, 2),
            risk_level=risk_level(probability),
            key_factors=factors,
            retention_strategies=retention_strategies(factors),
            estimated_value_at_risk=(sample.average_service_value
                                     * sample.appointment_frequency
                                     * config.VALUE_AT_RISK_YEARS),
        )

    def rank(self, samples):
        """Scores every sample and returns only medium and high risk, highest probability first."""
        assessments = [self.score(sample) for sample in samples]
        at_risk = [a for a in assessments if a.risk_level != 'low']
        logging.info(f"Churn scoring complete: {len(at_risk)} of {len(assessments)} customers at risk.")
        return sorted(at_risk, key=lambda a: a.churn_probability, reverse=True)
