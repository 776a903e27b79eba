"""Payment and strong customer authentication operations via the finX API."""

from typing import Any, Dict, Optional, Union

from figo.config.logging import get_logger
from figo.client.http_client import HTTPClient
from figo.models.responses import Payment

logger = get_logger(__name__)


def _payment_id(payment: Union[Payment, str]) -> str:
    return payment.payment_id if isinstance(payment, Payment) else payment


class PaymentOperations:
    """Payment handling; mixed into :class:`figo.session.Session`."""

    http_client: HTTPClient

    async def create_payment(self, data: Union[Payment, Dict[str, Any]]) -> Optional[Payment]:
        """Create a new payment.

        Args:
            data: Payment fields as mapping, or a ``Payment`` built by the caller

        Returns:
            The payment as stored by the server, or None if the server returned nothing
        """
        try:
            payload = data.to_dict() if isinstance(data, Payment) else data

            response = await self.http_client.post("/rest/payments", json=payload)
            if response is None:
                logger.warning("Payment was not created")
                return None

            payment = Payment.from_dict(response)

            logger.info(f"Payment created: {payment.payment_id}")
            return payment

        except Exception as e:
            logger.error(f"Failed to create payment: {e}")
            raise

    async def initiate_payment(
        self,
        payment: Union[Payment, str],
        data: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Initiate a payment; keys of ``data`` with a None value are not sent.

        Returns:
            Initiation details, including the ``init_id`` used to poll the status
        """
        try:
            payment_id = _payment_id(payment)
            params = {key: value for key, value in data.items() if value is not None}

            response = await self.http_client.post(f"/rest/payments/{payment_id}/init", json=params)

            logger.info(f"Payment initiated: {payment_id}")
            return response

        except Exception as e:
            logger.error(f"Failed to initiate payment: {e}")
            raise

    async def get_payment(
        self,
        account_id: str,
        payment_id: str,
        cents: bool = False,
    ) -> Optional[Payment]:
        """Get an existing payment, None if it does not exist.

        Args:
            account_id: ID of the account the payment belongs to
            payment_id: ID of the payment
            cents: Whether amounts are returned in cents
        """
        try:
            response = await self.http_client.get(
                f"/rest/accounts/{account_id}/payments/{payment_id}",
                params={"cents": "true" if cents else "false"},
            )
            if response is None:
                logger.debug(f"Payment not found: {payment_id}")
                return None

            return Payment.from_dict(response)

        except Exception as e:
            logger.error(f"Failed to get payment {payment_id}: {e}")
            raise

    async def get_payment_initiation_status(
        self,
        payment: Union[Payment, str],
        init_id: str,
    ) -> Optional[Dict[str, Any]]:
        """Get the status of a payment initiation."""
        try:
            payment_id = _payment_id(payment)
            return await self.http_client.get(f"/rest/payments/{payment_id}/init/{init_id}")

        except Exception as e:
            logger.error(f"Failed to get payment initiation status: {e}")
            raise

    async def solve_payment_challenge(
        self,
        payment_id: str,
        init_id: str,
        challenge_id: str,
        data: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Answer a strong customer authentication challenge of a payment initiation.

        Args:
            payment_id: figo ID of the payment
            init_id: figo ID of the payment initiation
            challenge_id: figo ID of the challenge
            data: Challenge response, e.g. ``{"value": "111111"}``
        """
        try:
            response = await self.http_client.post(
                f"/rest/payments/{payment_id}/init/{init_id}/challenges/{challenge_id}/response",
                json=data,
            )

            logger.info(f"Challenge {challenge_id} answered for payment {payment_id}")
            return response

        except Exception as e:
            logger.error(f"Failed to solve payment challenge: {e}")
            raise
