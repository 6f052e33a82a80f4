"""Training-data loaders and the built-in dataset registry."""

# Importing the loaders registers the file-backed dataset.
from . import training_data as _training_data  # noqa: F401
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset
from .training_data import check_compatible, load_training_data, parse_records

__all__ = [
    "DatasetSpec",
    "available_datasets",
    "check_compatible",
    "get_dataset",
    "load_training_data",
    "parse_records",
    "register_dataset",
]
