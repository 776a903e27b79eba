"""Notification operations."""

from typing import List, Optional

from figo.config.logging import get_logger
from figo.client.http_client import HTTPClient
from figo.models.requests import NotificationRequest
from figo.models.responses import Notification

logger = get_logger(__name__)


class NotificationOperations:
    """Manage registered notifications; mixed into :class:`figo.session.Session`."""

    http_client: HTTPClient

    async def notifications(self) -> List[Notification]:
        """Request list of registered notifications."""
        try:
            response = await self.http_client.get("/rest/notifications") or {}
            return [
                Notification.from_dict(notification)
                for notification in response.get("notifications", [])
            ]

        except Exception as e:
            logger.error(f"Failed to get notifications: {e}")
            raise

    async def get_notification(self, notification_id: str) -> Optional[Notification]:
        """Request specific notification, None if it does not exist."""
        try:
            response = await self.http_client.get(f"/rest/notifications/{notification_id}")
            if response is None:
                logger.debug(f"Notification not found: {notification_id}")
                return None

            return Notification.from_dict(response)

        except Exception as e:
            logger.error(f"Failed to get notification {notification_id}: {e}")
            raise

    async def add_notification(
        self,
        observe_key: str,
        notify_uri: str,
        state: Optional[str] = None,
    ) -> Optional[Notification]:
        """Register notification.

        Args:
            observe_key: One of the notification keys of the figo Connect API
            notify_uri: Notification messages will be sent to this URL
            state: Any string that will be forwarded in the notification message

        Returns:
            Newly created notification, or None if the server returned nothing
        """
        try:
            request = NotificationRequest(
                observe_key=observe_key,
                notify_uri=notify_uri,
                state=state,
            )

            response = await self.http_client.post(
                "/rest/notifications",
                json=request.model_dump(exclude_none=True),
            )
            if response is None:
                logger.warning(f"Notification was not registered: {observe_key}")
                return None

            # The server only answers with the new ID
            notification = Notification.from_dict({**request.model_dump(exclude_none=True), **response})

            logger.info(f"Notification registered: {notification.notification_id} ({observe_key})")
            return notification

        except Exception as e:
            logger.error(f"Failed to add notification: {e}")
            raise

    async def modify_notification(self, notification: Notification) -> None:
        """Store the observe key, notify URI and state of a modified notification.

        All three keys are sent, so a state of None clears the stored state.
        """
        try:
            request = NotificationRequest(
                observe_key=notification.observe_key,
                notify_uri=notification.notify_uri,
                state=notification.state,
            )

            await self.http_client.put(
                f"/rest/notifications/{notification.notification_id}",
                json=request.model_dump(),
            )

            logger.info(f"Notification modified: {notification.notification_id}")

        except Exception as e:
            logger.error(f"Failed to modify notification: {e}")
            raise

    async def remove_notification(self, notification: Notification) -> None:
        """Unregister notification."""
        try:
            await self.http_client.delete(f"/rest/notifications/{notification.notification_id}")

            logger.info(f"Notification removed: {notification.notification_id}")

        except Exception as e:
            logger.error(f"Failed to remove notification: {e}")
            raise
