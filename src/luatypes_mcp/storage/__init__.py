"""Storage package for built symbol databases."""

from .database_store import (
    DEFAULT_DATABASE,
    DatabaseStore,
    StoredDatabase,
    get_default_store,
    diagnostic_to_dict,
    member_to_dict,
    method_to_dict,
    signature_to_dict,
    symbol_to_dict,
)

__all__ = [
    "DEFAULT_DATABASE",
    "DatabaseStore",
    "StoredDatabase",
    "get_default_store",
    "diagnostic_to_dict",
    "member_to_dict",
    "method_to_dict",
    "signature_to_dict",
    "symbol_to_dict",
]
