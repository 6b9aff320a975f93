# backflow_insights/data_processing.py

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta

import numpy as np
import pandas as pd

from . import config
from .schemas import CustomerBehaviorSample, EquipmentSample

# Configure logging to provide feedback during execution
logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)

LIST_SEPARATOR = ';'
LIST_COLUMNS = ['preferred_time_slots', 'service_types']
PAYMENT_CATEGORIES = ['excellent', 'good', 'fair', 'poor']
TIME_SLOTS = ['morning', 'afternoon', 'evening']
SERVICE_TYPES = ['Annual Test', 'Repair', 'Installation']

# Reference fleet used when no equipment register is available
REFERENCE_EQUIPMENT = [
    {'id': 'test_device_001', 'type': 'Backflow Test Kit', 'age': 3.5,
     'usage': 1200, 'last_maintenance': date(2024, 6, 15)},
    {'id': 'van_001', 'type': 'Service Vehicle', 'age': 2.1,
     'usage': 45000, 'last_maintenance': date(2024, 8, 1)},
]


def load_data(path):
    """
    Loads data from a specified CSV file path.

    Args:
        path (Path): The path to the CSV file.

    Returns:
        pd.DataFrame: The loaded data as a pandas DataFrame.

    Raises:
        FileNotFoundError: If the data file does not exist at the given path.
    """
    logging.info(f"Loading data from {path}...")
    try:
        return pd.read_csv(path)
    except FileNotFoundError:
        logging.error(f"Data file not found at {path}. Aborting.")
        raise


def _split_list(value):
    if isinstance(value, str) and value:
        return [item.strip() for item in value.split(LIST_SEPARATOR) if item.strip()]
    return []


def frame_to_customers(df):
    """
    Converts a customer DataFrame into validated behavior samples.

    Args:
        df (pd.DataFrame): One row per customer, snake_case columns matching
            CustomerBehaviorSample. List columns are ';'-separated strings.

    Returns:
        list[CustomerBehaviorSample]: One sample per row.

    Raises:
        pydantic.ValidationError: If a row violates a field constraint.
    """
    df = df.copy()
    df['last_service_date'] = pd.to_datetime(df['last_service_date']).dt.date
    df['customer_id'] = df['customer_id'].astype(str)
    for col in LIST_COLUMNS:
        if col in df.columns:
            df[col] = df[col].apply(_split_list)
    return [CustomerBehaviorSample(**row) for row in df.to_dict(orient='records')]


def frame_to_equipment(df):
    df = df.copy()
    df['last_maintenance'] = pd.to_datetime(df['last_maintenance']).dt.date
    df['id'] = df['id'].astype(str)
    return [EquipmentSample(**row) for row in df.to_dict(orient='records')]


def customers_to_frame(customers):
    """Flattens customer samples into a DataFrame, joining list fields with ';'."""
    rows = []
    for customer in customers:
        row = customer.model_dump()
        for col in LIST_COLUMNS:
            row[col] = LIST_SEPARATOR.join(row[col])
        rows.append(row)
    return pd.DataFrame(rows, columns=list(CustomerBehaviorSample.model_fields))


def equipment_to_frame(equipment):
    return pd.DataFrame([e.model_dump() for e in equipment], columns=list(EquipmentSample.model_fields))


def latest_monthly_revenue(df):
    """Revenue of the most recent month in a (month, revenue) DataFrame."""
    if df.empty:
        raise ValueError("Revenue data is empty.")
    ordered = df.assign(month=pd.to_datetime(df['month'])).sort_values('month')
    return float(ordered['revenue'].iloc[-1])


class InsightsRepository(ABC):
    """
    Data-access interface the analytics engine reads from.

    Subclasses provide customers, equipment and the current monthly revenue;
    scoring code never knows where the data came from.
    """

    @abstractmethod
    def load_customers(self):
        ...

    @abstractmethod
    def load_equipment(self):
        ...

    @abstractmethod
    def monthly_revenue(self):
        ...

    def get_customer(self, customer_id):
        for customer in self.load_customers():
            if customer.customer_id == customer_id:
                return customer
        raise KeyError(customer_id)


class CsvRepository(InsightsRepository):
    """Reads the customer, equipment and revenue extracts written by main()."""

    def __init__(self, customers_path=None, equipment_path=None, revenue_path=None):
        self.customers_path = customers_path or config.CUSTOMERS_PATH
        self.equipment_path = equipment_path or config.EQUIPMENT_PATH
        self.revenue_path = revenue_path or config.REVENUE_PATH

    def load_customers(self):
        return frame_to_customers(load_data(self.customers_path))

    def load_equipment(self):
        return frame_to_equipment(load_data(self.equipment_path))

    def monthly_revenue(self):
        return latest_monthly_revenue(load_data(self.revenue_path))


class SimulatedRepository(InsightsRepository):
    """
    Seeded stand-in for the customer database.

    Customers are drawn once at construction and stored as days since their
    last service. Dates are resolved against the reference date on every read,
    so an unpinned repository stays in step with scorers that use date.today().
    The same seed and reference date always give the same data.
    """

    def __init__(self, seed=None, n_customers=None, today=None):
        self.seed = config.RANDOM_STATE if seed is None else seed
        self.n_customers = config.SIMULATED_CUSTOMERS if n_customers is None else n_customers
        self.today = today
        rng = np.random.default_rng(self.seed)
        self._records = self._generate_customers(rng)
        low, high = config.SIMULATED_REVENUE_RANGE
        self._monthly_revenue = float(rng.uniform(low, high))

    def _generate_customers(self, rng):
        logging.info(f"Simulating {self.n_customers} customers (seed={self.seed})...")
        records = []
        for i in range(self.n_customers):
            records.append(dict(
                customer_id=f"customer_{i}",
                appointment_frequency=float(rng.uniform(1, 5)),
                average_service_value=float(rng.uniform(150, 450)),
                days_since_service=int(rng.integers(0, 365)),
                total_services=int(rng.integers(1, 21)),
                cancellation_rate=float(rng.uniform(0, 0.15)),
                payment_history=PAYMENT_CATEGORIES[int(rng.integers(0, len(PAYMENT_CATEGORIES)))],
                customer_satisfaction_score=float(rng.uniform(3.5, 5.0)),
                preferred_time_slots=list(TIME_SLOTS),
                service_types=list(SERVICE_TYPES),
            ))
        return records

    def _today(self):
        return self.today or date.today()

    def load_customers(self):
        today = self._today()
        customers = []
        for record in self._records:
            fields = dict(record)
            days = fields.pop('days_since_service')
            customers.append(CustomerBehaviorSample(last_service_date=today - timedelta(days=days), **fields))
        return customers

    def load_equipment(self):
        return [EquipmentSample(**row) for row in REFERENCE_EQUIPMENT]

    def monthly_revenue(self):
        return self._monthly_revenue


def build_repository(source=None):
    """
    Creates the repository named by config.DATA_SOURCE.

    Raises:
        ValueError: If the source is neither 'simulated' nor 'csv'.
    """
    source = source or config.DATA_SOURCE
    if source == 'simulated':
        return SimulatedRepository()
    if source == 'csv':
        return CsvRepository()
    raise ValueError(f"Unknown data source '{source}'. Expected 'simulated' or 'csv'.")


def finalize_and_save_data(repository, raw_dir):
    """
    Writes the repository's customers, equipment and revenue to CSV files.

    Args:
        repository (InsightsRepository): Source of the records.
        raw_dir (Path): Directory receiving customers.csv, equipment.csv and revenue.csv.
    """
    logging.info("Finalizing and saving the dataset...")
    raw_dir.mkdir(parents=True, exist_ok=True)

    customers_df = customers_to_frame(repository.load_customers())
    customers_df.to_csv(raw_dir / config.CUSTOMERS_PATH.name, index=False)

    equipment_df = equipment_to_frame(repository.load_equipment())
    equipment_df.to_csv(raw_dir / config.EQUIPMENT_PATH.name, index=False)

    revenue_df = pd.DataFrame([{
        'month': date.today().strftime('%Y-%m'),
        'revenue': round(repository.monthly_revenue(), 2),
    }])
    revenue_df.to_csv(raw_dir / config.REVENUE_PATH.name, index=False)

    logging.info(f"Dataset saved to {raw_dir}. Customers: {customers_df.shape}, equipment: {equipment_df.shape}")


def main():
    """Writes a simulated customer and equipment dataset to the raw data directory."""
    logging.info("Starting dataset generation...")
    repository = SimulatedRepository()
    finalize_and_save_data(repository, config.RAW_DATA_DIR)
    logging.info("Dataset generation complete.")


if __name__ == '__main__':
    main()
