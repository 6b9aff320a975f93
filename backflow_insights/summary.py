# backflow_insights/summary.py

from . import config


class UnknownScenarioError(KeyError):
    def __init__(self, scenario):
        self.scenario = scenario
        self.available = sorted(config.SCENARIOS)
        super().__init__(scenario)

    def __str__(self):
        return f"Unknown scenario '{self.scenario}'. Available: {', '.join(self.available)}"


def _mentions(text, *words):
    text = text.lower()
    return any(word in text for word in words)


def filter_insights_by_focus(insights, focus=None):
    """
    Narrows an insights payload to the sections relevant to one focus area.

    Args:
        insights (PredictiveInsights): The full payload.
        focus (str): 'churn', 'demand', 'maintenance' or 'revenue'. Anything
            else, including None, returns every section.

    Returns:
        dict: Section name (snake_case) to section content.
    """
    if focus == 'churn':
        return {
            'churn_risk': insights.churn_risk,
            'seasonal_patterns': [p for p in insights.seasonal_patterns
                                  if _mentions(p.pattern, 'customer', 'retention')],
        }
    if focus == 'demand':
        return {
            'demand_forecast': insights.demand_forecast,
            'seasonal_patterns': insights.seasonal_patterns,
        }
    if focus == 'maintenance':
        return {
            'maintenance_alerts': insights.maintenance_alerts,
            'risk_assessment': [r for r in insights.risk_assessment
                                if _mentions(r.category, 'equipment', 'maintenance')],
        }
    if focus == 'revenue':
        return {
            'revenue_optimization': insights.revenue_optimization,
            'churn_risk': insights.churn_risk[:config.REVENUE_FOCUS_TOP_CHURN],
            'seasonal_patterns': insights.seasonal_patterns,
        }
    return {name: getattr(insights, name) for name in type(insights).model_fields}


def calculate_data_points(insights):
    return (len(insights.demand_forecast)
            + len(insights.churn_risk)
            + len(insights.maintenance_alerts)
            + len(insights.seasonal_patterns)
            + len(insights.risk_assessment))


def count_immediate_actions(insights):
    return (sum(1 for c in insights.churn_risk if c.risk_level == 'high')
            + sum(1 for m in insights.maintenance_alerts if m.risk_level == 'critical')
            + sum(1 for r in insights.risk_assessment if r.level == 'high'))


def count_short_term_actions(insights):
    strategies = insights.revenue_optimization.strategies
    return (sum(1 for c in insights.churn_risk if c.risk_level == 'medium')
            + sum(1 for m in insights.maintenance_alerts if m.risk_level == 'high')
            + sum(1 for r in insights.risk_assessment if r.level == 'medium')
            + sum(1 for s in strategies if s.effort == 'low' or 'month' in s.timeline))


def count_long_term_actions(insights):
    strategies = insights.revenue_optimization.strategies
    return (sum(1 for s in strategies if s.effort == 'high' or '6 months' in s.timeline)
            + len(insights.risk_assessment))


def simulate_scenario(name):
    """
    Looks up a what-if business scenario.

    Raises:
        UnknownScenarioError: If the scenario is not in config.SCENARIOS.
    """
    if name not in config.SCENARIOS:
        raise UnknownScenarioError(name)
    return {'scenario': name, **config.SCENARIOS[name]}
