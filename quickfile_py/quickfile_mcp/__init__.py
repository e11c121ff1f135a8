from .client import QuickFileClient, get_api_client, reset_api_client
from .exceptions import ClientError, ConfigError, ParseError, QuickFileError, ValidationError
from . import (
    models,
    exceptions,
    auth,
    credentials,
    envelope,
    schemas,
    system,
    clients,
    invoices,
    purchases,
    suppliers,
    bank,
    reports,
)

__all__ = [
    "QuickFileClient",
    "get_api_client",
    "reset_api_client",
    "QuickFileError",
    "ConfigError",
    "ClientError",
    "ParseError",
    "ValidationError",
    "models",
    "exceptions",
    "auth",
    "credentials",
    "envelope",
    "schemas",
    "system",
    "clients",
    "invoices",
    "purchases",
    "suppliers",
    "bank",
    "reports",
]
