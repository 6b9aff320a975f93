# tests/test_churn.py

from datetime import date

import pytest
from pydantic import ValidationError

from backflow_insights import churn
from backflow_insights.churn import ChurnScorer
from backflow_insights.schemas import CustomerBehaviorSample

# --- Rule Tests ---

@pytest.mark.parametrize("days, expected_points, expected_label", [
    (411, 3, 'Long time since last service'),
    (366, 3, 'Long time since last service'),
    (365, 2, 'Long time since last service'),
    (181, 2, 'Long time since last service'),
    (180, 1, 'Service interval lapsing'),
    (91, 1, 'Service interval lapsing'),
    (90, 0, None),
])
def test_recency_rule(days, expected_points, expected_label):
    assert churn.recency_rule(days) == (expected_points, expected_label)

@pytest.mark.parametrize("history, expected_points, labelled", [
    ('excellent', 0.0, False),
    ('good', 0.5, False),
    ('fair', 2.0, True),
    ('poor', 3.0, True),
])
def test_payment_rule(history, expected_points, labelled):
    points, label = churn.payment_rule(history)
    assert points == expected_points
    assert (label == 'Poor payment history') is labelled

def test_cancellation_rule_scores_every_rate_but_labels_only_high_rates():
    assert churn.cancellation_rule(0.1) == (pytest.approx(1.0), None)
    points, label = churn.cancellation_rule(0.2)
    assert points == pytest.approx(2.0)
    assert label == 'High cancellation rate'

def test_satisfaction_and_frequency_rules():
    assert churn.satisfaction_rule(2.9) == (2, 'Low satisfaction score')
    assert churn.satisfaction_rule(3.5) == (1, 'Below-target satisfaction score')
    assert churn.satisfaction_rule(4.0) == (0, None)
    assert churn.frequency_rule(0.4) == (1, 'Infrequent service usage')
    assert churn.frequency_rule(0.5) == (0, None)

@pytest.mark.parametrize("score, expected", [(0, 0.05), (4.5, 0.45), (11, 0.95)])
def test_normalize_probability_is_clamped(score, expected):
    assert churn.normalize_probability(score) == pytest.approx(expected)

@pytest.mark.parametrize("probability, expected", [
    (0.95, 'high'), (0.7, 'high'), (0.69, 'medium'), (0.4, 'medium'), (0.39, 'low'), (0.05, 'low'),
])
def test_risk_level_bands(probability, expected):
    assert churn.risk_level(probability) == expected

def test_retention_strategies_are_deduplicated_in_order():
    strategies = churn.retention_strategies(['Long time since last service', 'Infrequent service usage'])
    assert strategies == ['Send proactive service reminder', 'Offer maintenance package discount']

# --- Scorer Tests ---

def test_healthy_customer_is_low_risk(today, healthy_customer):
    assessment = ChurnScorer(today=today).score(healthy_customer)

    assert assessment.churn_probability == 0.05
    assert assessment.risk_level == 'low'
    assert assessment.key_factors == []
    assert assessment.retention_strategies == []
    assert assessment.estimated_value_at_risk == pytest.approx(1200.0)  # 300 * 2 * 2 years

def test_medium_risk_customer(today, medium_risk_customer):
    assessment = ChurnScorer(today=today).score(medium_risk_customer)

    assert assessment.churn_probability == pytest.approx(0.45)
    assert assessment.risk_level == 'medium'
    assert assessment.key_factors == ['Long time since last service', 'Poor payment history']

def test_every_rule_fires_for_high_risk_customer(today, high_risk_customer):
    score, factors = ChurnScorer(today=today).evaluate(high_risk_customer)

    assert score == pytest.approx(11.0)
    assert factors == [
        'Long time since last service',
        'Poor payment history',
        'High cancellation rate',
        'Low satisfaction score',
        'Infrequent service usage',
    ]

def test_factors_and_strategies_agree(today, high_risk_customer):
    assessment = ChurnScorer(today=today).score(high_risk_customer)

    assert assessment.churn_probability == 0.95
    assert assessment.risk_level == 'high'
    assert 'Send proactive service reminder' in assessment.retention_strategies
    assert 'Offer flexible payment terms' in assessment.retention_strategies
    assert 'Schedule customer feedback call' in assessment.retention_strategies
    assert len(assessment.retention_strategies) == len(set(assessment.retention_strategies))

def test_scoring_depends_on_reference_date(healthy_customer):
    early = ChurnScorer(today=date(2025, 1, 15)).score(healthy_customer)
    late = ChurnScorer(today=date(2026, 6, 1)).score(healthy_customer)

    assert early.churn_probability < late.churn_probability
    assert 'Long time since last service' in late.key_factors

def test_rank_drops_low_risk_and_sorts_descending(today, healthy_customer, medium_risk_customer, high_risk_customer):
    ranked = ChurnScorer(today=today).rank([medium_risk_customer, healthy_customer, high_risk_customer])

    assert [a.customer_id for a in ranked] == ['C3', 'C2']
    assert all(a.risk_level != 'low' for a in ranked)

def test_rank_of_no_customers_is_empty(today):
    assert ChurnScorer(today=today).rank([]) == []

def test_out_of_range_behavior_is_rejected():
    with pytest.raises(ValidationError):
        CustomerBehaviorSample(
            customer_id='bad',
            appointment_frequency=1.0,
            average_service_value=100.0,
            last_service_date=date(2024, 1, 1),
            total_services=1,
            cancellation_rate=1.5,
            payment_history='good',
            customer_satisfaction_score=4.0,
        )
