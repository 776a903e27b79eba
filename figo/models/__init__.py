"""Data models for the figo Connect API."""

from figo.models.base import FigoModel, flatten
from figo.models.requests import (
    TokenRequest,
    TransactionFilter,
    SyncRequest,
    NotificationRequest,
)
from figo.models.token import AccessToken
from figo.models.responses import (
    Account,
    Transaction,
    Notification,
    Payment,
)

__all__ = [
    "FigoModel",
    "flatten",
    "TokenRequest",
    "TransactionFilter",
    "SyncRequest",
    "NotificationRequest",
    "Account",
    "Transaction",
    "Notification",
    "Payment",
    "AccessToken",
]
