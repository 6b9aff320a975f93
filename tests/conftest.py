# tests/conftest.py

from datetime import date

import pytest

from backflow_insights.churn import ChurnScorer
from backflow_insights.data_processing import InsightsRepository
from backflow_insights.demand import DemandEstimator
from backflow_insights.equipment import EquipmentRiskScorer
from backflow_insights.insights import PredictiveAnalyticsEngine
from backflow_insights.schemas import CustomerBehaviorSample, EquipmentSample

# Every date-dependent calculation in the tests is pinned to this day
TODAY = date(2025, 1, 15)


class StaticRepository(InsightsRepository):
    """In-memory repository with hand-picked records."""

    def __init__(self, customers, equipment, revenue=50000.0):
        self.customers = customers
        self.equipment = equipment
        self.revenue = revenue

    def load_customers(self):
        return list(self.customers)

    def load_equipment(self):
        return list(self.equipment)

    def monthly_revenue(self):
        return self.revenue


@pytest.fixture
def anyio_backend():
    # The engine is built on asyncio.gather, so async tests run on asyncio only
    return 'asyncio'


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def healthy_customer():
    """Recently serviced, pays on time, satisfied: scores zero points."""
    return CustomerBehaviorSample(
        customer_id='C1',
        appointment_frequency=2.0,
        average_service_value=300.0,
        last_service_date=date(2024, 12, 15),
        total_services=8,
        cancellation_rate=0.0,
        payment_history='excellent',
        customer_satisfaction_score=4.5,
    )


@pytest.fixture
def medium_risk_customer():
    """200 days since service and fair payments: 4.5 points."""
    return CustomerBehaviorSample(
        customer_id='C2',
        appointment_frequency=1.0,
        average_service_value=250.0,
        last_service_date=date(2024, 6, 29),
        total_services=4,
        cancellation_rate=0.05,
        payment_history='fair',
        customer_satisfaction_score=4.2,
    )


@pytest.fixture
def high_risk_customer():
    """Every churn rule fires."""
    return CustomerBehaviorSample(
        customer_id='C3',
        appointment_frequency=0.3,
        average_service_value=400.0,
        last_service_date=date(2023, 12, 1),
        total_services=2,
        cancellation_rate=0.2,
        payment_history='poor',
        customer_satisfaction_score=2.5,
    )


@pytest.fixture
def test_kit():
    """Moderate age and overdue maintenance: medium risk."""
    return EquipmentSample(id='test_device_001', type='Backflow Test Kit', age=3.5,
                           usage=1200, last_maintenance=date(2024, 6, 15))


@pytest.fixture
def service_van():
    """Young, under the vehicle mileage threshold, recently maintained: low risk."""
    return EquipmentSample(id='van_001', type='Service Vehicle', age=2.1,
                           usage=45000, last_maintenance=date(2024, 8, 1))


@pytest.fixture
def worn_gauge():
    """Old, heavily used and overdue: critical risk."""
    return EquipmentSample(id='gauge_007', type='Pressure Gauge', age=6,
                           usage=3000, last_maintenance=date(2024, 1, 1))


@pytest.fixture
def repository(healthy_customer, medium_risk_customer, high_risk_customer,
               test_kit, service_van, worn_gauge):
    return StaticRepository(
        customers=[healthy_customer, medium_risk_customer, high_risk_customer],
        equipment=[test_kit, service_van, worn_gauge],
    )


@pytest.fixture
def engine(repository):
    return PredictiveAnalyticsEngine(
        repository=repository,
        demand=DemandEstimator(today=TODAY),
        churn=ChurnScorer(today=TODAY),
        equipment=EquipmentRiskScorer(today=TODAY),
    )
