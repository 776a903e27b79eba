"""Response models for the figo Connect API."""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional, List, Dict, Any, FrozenSet
from pydantic import Field

from figo.models.base import FigoModel


class Account(FigoModel):
    """Bank account the user granted the app access to."""

    nested_fields: ClassVar[FrozenSet[str]] = frozenset({"additional_icons"})

    account_id: str = Field(..., description="Internal figo Connect account ID")
    bank_id: Optional[str] = Field(None, description="Internal figo Connect bank ID")
    name: Optional[str] = Field(None, description="Account name")
    owner: Optional[str] = Field(None, description="Account owner")
    auto_sync: Optional[bool] = Field(None, description="Whether the account is synchronized automatically")
    account_number: Optional[str] = Field(None, description="Account number")
    bank_code: Optional[str] = Field(None, description="Bank code")
    bank_name: Optional[str] = Field(None, description="Bank name")
    currency: Optional[str] = Field(None, description="Three-character currency code")
    iban: Optional[str] = Field(None, description="IBAN")
    bic: Optional[str] = Field(None, description="BIC")
    type: Optional[str] = Field(None, description="Account type")
    icon: Optional[str] = Field(None, description="Account icon URL")
    additional_icons: Optional[Dict[str, str]] = Field(None, description="Account icon in other resolutions")
    preview: Optional[bool] = Field(None, description="Whether this is a preview account")

    balance_balance: Optional[Decimal] = Field(None, description="Account balance")
    balance_balance_date: Optional[datetime] = Field(None, description="Bank server timestamp of the balance")
    balance_credit_line: Optional[Decimal] = Field(None, description="Credit line")
    balance_monthly_spending_limit: Optional[Decimal] = Field(None, description="User-defined spending limit")

    status_code: Optional[int] = Field(None, description="Internal figo Connect status code")
    status_message: Optional[str] = Field(None, description="Human-readable sync status")
    status_sync_timestamp: Optional[datetime] = Field(None, description="Timestamp of last synchronization")
    status_success_timestamp: Optional[datetime] = Field(None, description="Timestamp of last successful synchronization")


class Transaction(FigoModel):
    """Bank transaction model."""

    transaction_id: str = Field(..., description="Internal figo Connect transaction ID")
    account_id: Optional[str] = Field(None, description="Internal figo Connect account ID")
    name: Optional[str] = Field(None, description="Name of originator or recipient")
    account_number: Optional[str] = Field(None, description="Account number of originator or recipient")
    bank_code: Optional[str] = Field(None, description="Bank code of originator or recipient")
    bank_name: Optional[str] = Field(None, description="Bank name of originator or recipient")
    amount: Optional[Decimal] = Field(None, description="Transaction amount")
    currency: Optional[str] = Field(None, description="Three-character currency code")
    booking_date: Optional[datetime] = Field(None, description="Booking date")
    value_date: Optional[datetime] = Field(None, description="Value date")
    purpose: Optional[str] = Field(None, description="Purpose text")
    type: Optional[str] = Field(None, description="Transaction type")
    booking_text: Optional[str] = Field(None, description="Booking text")
    booked: Optional[bool] = Field(None, description="Whether the transaction is booked or pending")
    visited: Optional[bool] = Field(None, description="Whether the transaction has been seen")
    categories: Optional[List[Dict[str, Any]]] = Field(None, description="Transaction categories")
    creation_timestamp: Optional[datetime] = Field(None, description="Internal creation timestamp")
    modification_timestamp: Optional[datetime] = Field(None, description="Internal modification timestamp")


class Notification(FigoModel):
    """Registered notification."""

    notification_id: Optional[str] = Field(None, description="Internal figo Connect notification ID")
    observe_key: str = Field(..., description="Notification key")
    notify_uri: str = Field(..., description="Notification messages are sent to this URL")
    state: Optional[str] = Field(None, description="State forwarded in the notification message")


class Payment(FigoModel):
    """Payment created via the finX API."""

    excluded_keys: ClassVar[FrozenSet[str]] = frozenset({"access_method", "resolutions"})
    nested_fields: ClassVar[FrozenSet[str]] = frozenset({"bank_additional_icons"})

    account_id: Optional[str] = Field(None, description="Internal figo Connect account ID")
    payment_id: Optional[str] = Field(None, description="Internal figo Connect payment ID")
    type: Optional[str] = Field(None, description="Payment type")
    name: Optional[str] = Field(None, description="Name of creditor or debtor")
    iban: Optional[str] = Field(None, description="IBAN of creditor")
    account_number: Optional[str] = Field(None, description="Account number of creditor or debtor")
    currency: Optional[str] = Field(None, description="Three-character currency code")
    purpose: Optional[str] = Field(None, description="Purpose text")

    debtor_iban: Optional[str] = Field(None, description="IBAN of debtor")
    creditor_iban: Optional[str] = Field(None, description="IBAN of creditor")
    creditor_name: Optional[str] = Field(None, description="Name of creditor")
    amount_value: Optional[Decimal] = Field(None, description="Payment amount")
    amount_currency: Optional[str] = Field(None, description="Currency of the payment amount")

    provider_id: Optional[str] = Field(None, description="Provider ID")
    provider_name: Optional[str] = Field(None, description="Provider name")
    provider_country: Optional[str] = Field(None, description="Provider country code")
    provider_bank_code: Optional[str] = Field(None, description="Provider bank code")
    provider_bic: Optional[str] = Field(None, description="Provider BIC")
    provider_is_supported: Optional[bool] = Field(None, description="Whether the provider is supported")
    icon_url: Optional[str] = Field(None, description="Provider icon URL")

    bank_icon: Optional[str] = Field(None, description="Icon of creditor or debtor bank")
    bank_additional_icons: Optional[Dict[str, str]] = Field(None, description="Bank icon in other resolutions")

    submitted_at: Optional[datetime] = Field(None, description="Submission to the bank server")
    submission_timestamp: Optional[datetime] = Field(None, description="Submission to the bank server")
    created_at: Optional[datetime] = Field(None, description="Internal creation timestamp")
    creation_timestamp: Optional[datetime] = Field(None, description="Internal creation timestamp")
    modified_at: Optional[datetime] = Field(None, description="Internal modification timestamp")
    modification_timestamp: Optional[datetime] = Field(None, description="Internal modification timestamp")
    transaction_id: Optional[str] = Field(None, description="Matched transaction ID")
