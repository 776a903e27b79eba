"""Account, transaction and synchronization operations."""

from datetime import date
from typing import List, Optional, Union
from urllib.parse import urlencode

from figo.config.logging import get_logger
from figo.client.exceptions import HTTPClientError
from figo.client.http_client import HTTPClient
from figo.models.requests import SyncRequest, TransactionFilter
from figo.models.responses import Account, Transaction

logger = get_logger(__name__)


class AccountOperations:
    """Account data operations; mixed into :class:`figo.session.Session`."""

    http_client: HTTPClient
    api_endpoint: str

    async def accounts(self) -> List[Account]:
        """Request list of accounts.

        Returns:
            One ``Account`` for each account the user has granted the app access to
        """
        try:
            response = await self.http_client.get("/rest/accounts") or {}
            accounts = [Account.from_dict(account) for account in response.get("accounts", [])]

            logger.info(f"Retrieved {len(accounts)} accounts")
            return accounts

        except Exception as e:
            logger.error(f"Failed to get accounts: {e}")
            raise

    async def get_account(self, account_id: str) -> Optional[Account]:
        """Request specific account.

        Args:
            account_id: ID of the account to be retrieved

        Returns:
            Account, or None if the account does not exist
        """
        try:
            response = await self.http_client.get(f"/rest/accounts/{account_id}")
            if response is None:
                logger.debug(f"Account not found: {account_id}")
                return None

            return Account.from_dict(response)

        except Exception as e:
            logger.error(f"Failed to get account {account_id}: {e}")
            raise

    async def transactions(
        self,
        since: Optional[Union[date, str]] = None,
        start_id: Optional[str] = None,
        count: int = 1000,
        include_pending: bool = False,
        account_id: Optional[str] = None,
    ) -> List[Transaction]:
        """Request list of transactions.

        Args:
            since: Transaction ID or date
            start_id: Only return transactions booked after this transaction ID
            count: Limit the number of returned transactions
            include_pending: Whether pending transactions should be included;
                they are always returned as a complete set, regardless of ``since``
            account_id: Restrict the list to a single account

        Returns:
            One ``Transaction`` for each matching transaction
        """
        try:
            filters = TransactionFilter(
                since=since,
                start_id=start_id,
                count=count,
                include_pending=include_pending,
            )

            endpoint = "/rest/transactions"
            if account_id:
                endpoint = f"/rest/accounts/{account_id}/transactions"

            response = await self.http_client.get(endpoint, params=filters.to_query_params()) or {}
            transactions = [
                Transaction.from_dict(transaction)
                for transaction in response.get("transactions", [])
            ]

            logger.info(f"Retrieved {len(transactions)} transactions (count: {count})")
            return transactions

        except Exception as e:
            logger.error(f"Failed to get transactions: {e}")
            raise

    async def sync_url(
        self,
        redirect_uri: str,
        state: str,
        disable_notifications: bool = False,
        if_not_synced_since: int = 0,
    ) -> Optional[str]:
        """Request the URL a user should open to start the synchronization process.

        Args:
            redirect_uri: URI the user is redirected to after the process completes
            state: Passed on to the redirect target, used to validate the
                authenticity of the call to the redirect URL
            disable_notifications: Whether notifications should be suppressed
            if_not_synced_since: Only synchronize accounts which have not been
                synchronized within this number of minutes

        Returns:
            The URL to be opened by the user, or None if no task was created
        """
        try:
            request = SyncRequest(
                redirect_uri=redirect_uri,
                state=state,
                disable_notifications=disable_notifications,
                if_not_synced_since=if_not_synced_since,
            )

            response = await self.http_client.post("/rest/sync", json=request.model_dump())
            if response is None:
                logger.warning("Synchronization task was not created")
                return None

            task_token = response.get("task_token")
            if not task_token:
                raise HTTPClientError("Synchronization response is missing the task token")

            logger.info("Synchronization task created")
            return f"https://{self.api_endpoint}/task/start?" + urlencode({"id": task_token})

        except Exception as e:
            logger.error(f"Failed to start synchronization: {e}")
            raise
