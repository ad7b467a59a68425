from customer_resolution.datasets.profiles import ACCOUNT_COLUMNS, ACCOUNT_SCHEMA
from customer_resolution.datasets.reference import ReferenceDatasetGenerator

__all__ = ["ACCOUNT_COLUMNS", "ACCOUNT_SCHEMA", "ReferenceDatasetGenerator"]
