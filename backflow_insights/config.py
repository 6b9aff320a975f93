# backflow_insights/config.py

import os
from pathlib import Path

# --- DIRECTORIES ---
# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Data directories
DATA_DIR = BASE_DIR / 'data'
RAW_DATA_DIR = DATA_DIR / 'raw'
REPORTS_DIR = BASE_DIR / 'reports'

# --- FILE PATHS ---
CUSTOMERS_PATH = RAW_DATA_DIR / 'customers.csv'
EQUIPMENT_PATH = RAW_DATA_DIR / 'equipment.csv'
REVENUE_PATH = RAW_DATA_DIR / 'revenue.csv'
INSIGHTS_REPORT_PATH = REPORTS_DIR / 'insights.json'

# --- LOGGING ---
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# --- DATA SOURCE ---
# "simulated" generates customers from a seeded generator, "csv" reads RAW_DATA_DIR
DATA_SOURCE = os.getenv("INSIGHTS_DATA_SOURCE", "simulated")
RANDOM_STATE = int(os.getenv("INSIGHTS_RANDOM_STATE", "42"))
SIMULATED_CUSTOMERS = 50

# --- DEMAND FORECAST ---
# Calendar month -> demand multiplier
SEASONAL_FACTORS = {
    1: 0.7, 2: 0.8, 3: 1.3, 4: 1.4, 5: 1.35, 6: 1.15,
    7: 1.2, 8: 1.1, 9: 1.25, 10: 1.45, 11: 1.3, 12: 0.75,
}
ANNUAL_GROWTH_RATE = 0.15
MIN_TREND_FACTOR = 0.8
BASE_DAILY_APPOINTMENTS = 25
WEEKEND_DEMAND_RATIO = 0.3
# Placeholder until a real external signal (weather, economy) is wired in
EXTERNAL_FACTOR_PLACEHOLDER = 1.0
EXTERNAL_FACTOR_RANGE = (0.9, 1.1)
MIN_FORECAST_CONFIDENCE = 0.5
FORECAST_TIME_DECAY = 0.3
SEASONAL_VOLATILITY_WEIGHT = 0.2
EXTERNAL_VOLATILITY_WEIGHT = 0.3
DEMAND_SURGE_RATIO = 0.2
SEASONAL_PEAK_FACTOR = 1.3
EXTERNAL_ALERT_FACTOR = 1.1

# Timeframe -> (days ahead, step in days)
FORECAST_TIMEFRAMES = {
    '30d': (30, 1),
    '90d': (90, 1),
    '1y': (365, 7),
}

# --- CHURN SCORING ---
PAYMENT_HISTORY_POINTS = {'excellent': 0.0, 'good': 0.5, 'fair': 2.0, 'poor': 3.0}
CANCELLATION_WEIGHT = 10
HIGH_CANCELLATION_RATE = 0.1
LOW_FREQUENCY_PER_YEAR = 0.5
MAX_CHURN_SCORE = 10
CHURN_PROBABILITY_BOUNDS = (0.05, 0.95)
# Minimum probability per band, checked in order
CHURN_RISK_BANDS = [('high', 0.7), ('medium', 0.4), ('low', 0.0)]
VALUE_AT_RISK_YEARS = 2

RETENTION_STRATEGIES = {
    'Long time since last service': [
        'Send proactive service reminder',
        'Offer maintenance package discount',
    ],
    'Service interval lapsing': ['Send proactive service reminder'],
    'Poor payment history': [
        'Offer flexible payment terms',
        'Discuss payment plan options',
    ],
    'Low satisfaction score': [
        'Schedule customer feedback call',
        'Offer service quality guarantee',
    ],
    'Below-target satisfaction score': ['Schedule customer feedback call'],
    'High cancellation rate': [
        'Improve scheduling flexibility',
        'Send appointment reminders earlier',
    ],
    'Infrequent service usage': ['Offer maintenance package discount'],
}

# --- EQUIPMENT RISK ---
HEAVY_USAGE_THRESHOLDS = {'Service Vehicle': 50000}
DEFAULT_HEAVY_USAGE = 2000
OVERDUE_MAINTENANCE_DAYS = 180
# Minimum score per band, checked in order
EQUIPMENT_RISK_BANDS = [('critical', 7), ('high', 5), ('medium', 3), ('low', 0)]
FAILURE_OFFSET_DAYS = {'critical': 30, 'high': 90, 'medium': 180, 'low': 365}
MAINTENANCE_WINDOW_DAYS = (30, 7)
FAILURE_COSTS = {'Backflow Test Kit': 2500, 'Service Vehicle': 8000}
DEFAULT_FAILURE_COST = 1500
MAINTENANCE_CONFIDENCE_PLACEHOLDER = 0.8
MAINTENANCE_CONFIDENCE_RANGE = (0.7, 0.9)
MAINTENANCE_RECOMMENDATIONS = {
    'High age': 'Consider replacement planning',
    'Heavy usage': 'Increase maintenance frequency',
    'Overdue maintenance': 'Schedule immediate maintenance inspection',
}
STANDING_MAINTENANCE_RECOMMENDATION = 'Monitor performance metrics closely'

# --- MODEL METADATA ---
# Reported alongside insights; scoring never reads these
MODEL_METADATA = {
    'churn_prediction': {'accuracy': 0.85, 'features': ['recency', 'frequency', 'monetary']},
    'demand_forecast': {'accuracy': 0.78, 'method': 'time_series'},
    'maintenance_prediction': {'accuracy': 0.82, 'method': 'survival_analysis'},
}
REVENUE_OPTIMIZATION_ACCURACY = 0.76

# --- STATIC CATALOGS ---
SEASONAL_PATTERNS = [
    {'pattern': 'Spring Peak', 'impact': 1.35,
     'description': 'Annual testing requirements drive 35% increase in March-May'},
    {'pattern': 'Summer Stability', 'impact': 1.15,
     'description': 'Steady demand with new construction and maintenance'},
    {'pattern': 'Fall Rush', 'impact': 1.45,
     'description': 'Pre-winter equipment checks create highest demand period'},
    {'pattern': 'Winter Slowdown', 'impact': 0.7,
     'description': 'Reduced demand due to weather and holiday seasonality'},
    {'pattern': 'Emergency Weather Events', 'impact': 2.2,
     'description': 'Severe weather can trigger 2-3x normal repair demand'},
]

RISK_AREAS = [
    {'category': 'Technician Capacity', 'level': 'medium',
     'description': 'Current team may be insufficient for projected 15% growth',
     'mitigation': ['Begin recruiting certified technicians',
                    'Implement advanced training program',
                    'Consider contractor partnerships for overflow']},
    {'category': 'Equipment Reliability', 'level': 'low',
     'description': 'Testing equipment showing normal wear patterns',
     'mitigation': ['Maintain regular calibration schedule',
                    'Keep backup equipment inventory',
                    'Monitor performance metrics']},
    {'category': 'Customer Concentration', 'level': 'medium',
     'description': 'Top 10 customers represent 45% of revenue',
     'mitigation': ['Diversify customer base through marketing',
                    'Strengthen relationships with key accounts',
                    'Develop service packages for smaller customers']},
    {'category': 'Regulatory Changes', 'level': 'high',
     'description': 'Pending EPA regulations may impact testing requirements',
     'mitigation': ['Monitor regulatory developments closely',
                    'Prepare compliance documentation',
                    'Train technicians on new requirements',
                    'Update equipment if needed']},
]

REVENUE_STRATEGIES = [
    {'strategy': 'Dynamic Pricing Model', 'impact': 8500, 'effort': 'medium',
     'timeline': '2-3 months',
     'description': 'Implement seasonal and demand-based pricing adjustments'},
    {'strategy': 'Service Package Upselling', 'impact': 6200, 'effort': 'low',
     'timeline': '1 month',
     'description': 'Promote annual maintenance packages to existing customers'},
    {'strategy': 'Route Optimization', 'impact': 4800, 'effort': 'medium',
     'timeline': '2 months',
     'description': 'Reduce travel time and increase daily appointment capacity'},
    {'strategy': 'Customer Retention Program', 'impact': 7200, 'effort': 'high',
     'timeline': '4-6 months',
     'description': 'Implement loyalty program and proactive customer engagement'},
    {'strategy': 'Emergency Service Premium', 'impact': 3600, 'effort': 'low',
     'timeline': '2 weeks',
     'description': 'Introduce premium pricing for same-day emergency services'},
]

# Monthly revenue range used by the simulated repository
SIMULATED_REVENUE_RANGE = (45000, 60000)

SCENARIOS = {
    'staff_increase': {
        'description': 'Add 2 additional technicians',
        'impact': {'capacity': '+40%', 'revenue': '+$12,000/month',
                   'customerSatisfaction': '+15%', 'costs': '+$8,000/month'},
        'roi': 1.5,
        'breakeven': '3 months',
    },
    'premium_pricing': {
        'description': 'Increase prices by 15% for emergency services',
        'impact': {'revenue': '+$4,500/month', 'demandChange': '-8%',
                   'customerRetention': '-3%', 'marketPosition': 'Premium tier'},
        'roi': 2.8,
        'breakeven': '1 month',
    },
    'service_expansion': {
        'description': 'Add irrigation system testing services',
        'impact': {'marketSize': '+25%', 'revenue': '+$8,000/month',
                   'requiredInvestment': '$15,000', 'timeToMarket': '4 months'},
        'roi': 1.2,
        'breakeven': '6 months',
    },
}

# --- INSIGHT SUMMARY ---
REVENUE_FOCUS_TOP_CHURN = 10
