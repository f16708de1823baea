"""Application registry and its persistence backends."""

from loan_wizard.store.backends import JsonFileStore, KeyValueStore, MemoryStore
from loan_wizard.store.registry import (
    ApplicationRegistry,
    check_application,
    generate_application_id,
)

__all__ = [
    "ApplicationRegistry",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "check_application",
    "generate_application_id",
]
