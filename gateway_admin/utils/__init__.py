"""Utility modules."""
from .transaction import TransactionContext
from .timestamps import inject_timestamp
from .startup_check import validate_environment, get_missing_vars

__all__ = [
    "TransactionContext",
    "inject_timestamp",
    "validate_environment",
    "get_missing_vars",
]
