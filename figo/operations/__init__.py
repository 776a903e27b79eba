"""Operations modules for the figo Connect API."""

from figo.operations.account_operations import AccountOperations
from figo.operations.notification_operations import NotificationOperations
from figo.operations.payment_operations import PaymentOperations

__all__ = ["AccountOperations", "NotificationOperations", "PaymentOperations"]
