# backflow_insights/demand.py

import logging
from datetime import date, timedelta

from . import config
from .schemas import DemandFactors, DemandForecastPoint
from .utils import ConstantFactor, round_half_up


def seasonal_factor(day: date) -> float:
    return config.SEASONAL_FACTORS.get(day.month, 1.0)


def trend_factor(day: date, today: date) -> float:
    """Linear growth from the current month, floored but not capped."""
    years_from_now = (day.year - today.year) + (day.month - today.month) / 12
    return max(config.MIN_TREND_FACTOR, 1 + years_from_now * config.ANNUAL_GROWTH_RATE)


def base_demand(day: date) -> int:
    """Average appointments for the day of week; Saturday and Sunday run at a reduced rate."""
    if day.weekday() >= 5:
        return round_half_up(config.BASE_DAILY_APPOINTMENTS * config.WEEKEND_DEMAND_RATIO)
    return config.BASE_DAILY_APPOINTMENTS


def prediction_confidence(day: date, today: date, factors: DemandFactors) -> float:
    # Confidence decays with distance and with how far the factors stray from 1
    days_from_now = abs((day - today).days)
    time_decay = max(config.MIN_FORECAST_CONFIDENCE,
                     1 - (days_from_now / 365) * config.FORECAST_TIME_DECAY)
    stability = (1
                 - abs(factors.seasonal - 1) * config.SEASONAL_VOLATILITY_WEIGHT
                 - abs(factors.external - 1) * config.EXTERNAL_VOLATILITY_WEIGHT)
    return round_half_up(max(config.MIN_FORECAST_CONFIDENCE, time_decay * stability), 2)


def demand_recommendations(predicted: int, baseline: int, factors: DemandFactors):
    recommendations = []
    increase = (predicted - baseline) / baseline

    if increase > config.DEMAND_SURGE_RATIO:
        recommendations.append('Consider increasing technician availability')
        recommendations.append('Prepare for higher equipment usage')
    if factors.seasonal > config.SEASONAL_PEAK_FACTOR:
        recommendations.append('Schedule additional staff for seasonal peak')
    if factors.external > config.EXTERNAL_ALERT_FACTOR:
        recommendations.append('Monitor external factors affecting demand')

    return recommendations


def forecast_periods(timeframe: str, today: date):
    """
    Lists the days to forecast for a timeframe, starting tomorrow.

    Args:
        timeframe (str): One of the keys of config.FORECAST_TIMEFRAMES.
        today (date): The day the forecast is made.

    Returns:
        list[date]: Daily dates for '30d' and '90d', weekly dates for '1y'.

    Raises:
        ValueError: If the timeframe is not supported.
    """
    if timeframe not in config.FORECAST_TIMEFRAMES:
        raise ValueError(
            f"Unsupported timeframe '{timeframe}'. "
            f"Expected one of {sorted(config.FORECAST_TIMEFRAMES)}."
        )
    horizon, step = config.FORECAST_TIMEFRAMES[timeframe]
    return [today + timedelta(days=i) for i in range(1, horizon + 1) if i % step == 0]


class DemandEstimator:
    """
    Estimates daily appointment demand as baseline x seasonal x trend x external.

    The external factor comes from an injected provider. The default is the
    documented placeholder in config.EXTERNAL_FACTOR_PLACEHOLDER; pass a
    utils.RandomFactor to reproduce the bounded random perturbation.
    """

    def __init__(self, external_factor=None, today=None):
        self.external_factor = external_factor or ConstantFactor(config.EXTERNAL_FACTOR_PLACEHOLDER)
        self.today = today

    def _today(self):
        return self.today or date.today()

    def estimate(self, day: date) -> DemandForecastPoint:
        today = self._today()
        factors = DemandFactors(
            seasonal=seasonal_factor(day),
            trend=trend_factor(day, today),
            external=self.external_factor(day),
        )
        baseline = base_demand(day)
        predicted = round_half_up(baseline * factors.seasonal * factors.trend * factors.external)

        return DemandForecastPoint(
            period=day,
            predicted_appointments=predicted,
            confidence=prediction_confidence(day, today, factors),
            factors=factors,
            recommendations=demand_recommendations(predicted, baseline, factors),
        )

    def forecast(self, timeframe: str = '90d'):
        periods = forecast_periods(timeframe, self._today())
        logging.info(f"Forecasting demand for {len(periods)} periods ({timeframe})...")
        return [self.estimate(day) for day in periods]
