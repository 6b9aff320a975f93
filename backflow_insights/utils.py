# backflow_insights/utils.py

import math
from datetime import date

import numpy as np

from . import config


def round_half_up(value, ndigits=0):
    """Rounds .5 away from zero for positive values, unlike the built-in round()."""
    scale = 10 ** ndigits
    rounded = math.floor(value * scale + 0.5) / scale
    return int(rounded) if ndigits == 0 else rounded


def days_between(start: date, end: date) -> int:
    return (end - start).days


class ConstantFactor:
    """Factor provider that always returns the same documented value."""

    def __init__(self, value):
        self.value = value

    def __call__(self, *args):
        return self.value


class RandomFactor:
    """Factor provider drawing uniformly from [low, high) with a seedable generator."""

    def __init__(self, low, high, seed=None):
        self.low = low
        self.high = high
        self.rng = np.random.default_rng(seed)

    def __call__(self, *args):
        return float(self.rng.uniform(self.low, self.high))


# --- Display helpers shared by the API and dashboard ---

def calculate_seasonal_multiplier(month):
    return config.SEASONAL_FACTORS.get(month, 1.0)


def format_prediction_confidence(confidence):
    if confidence >= 0.8:
        return 'High Confidence'
    if confidence >= 0.6:
        return 'Medium Confidence'
    return 'Low Confidence'


def calculate_roi(investment, returns, timeframe_months):
    """
    Annualized return on investment.

    Args:
        investment (float): Amount invested. Must be non-zero.
        returns (float): Amount returned over the timeframe.
        timeframe_months (float): Length of the timeframe in months.

    Returns:
        float: (returns - investment) / investment scaled to twelve months.
    """
    if investment == 0 or timeframe_months == 0:
        raise ValueError("investment and timeframe_months must be non-zero")
    return ((returns - investment) / investment) * (12 / timeframe_months)
