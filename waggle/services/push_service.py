"""Push notification dispatch for the Waggle match service."""

from typing import Any, Dict, Optional

import aiohttp
import sentry_sdk
from pydantic import BaseModel, Field

from waggle.config import settings
from waggle.utils.errors import ExternalServiceError
from waggle.utils.logging import get_logger

logger = get_logger(__name__)

PUSH_SERVICE_NAME = "expo_push"


class PushMessage(BaseModel):
    """One push notification addressed to a single device token."""

    to: str
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    sound: Optional[str] = "default"


class ExpoPushSender:
    """
    Sends push messages through the Expo push API.

    A failure of any kind is raised as `ExternalServiceError`; the sender never
    retries.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.url = url or settings.EXPO_PUSH_URL
        self.access_token = access_token if access_token is not None else settings.EXPO_ACCESS_TOKEN
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.PUSH_TIMEOUT_SECONDS)
        self._session = session

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def send(self, message: PushMessage) -> None:
        """
        Dispatch one message.

        Args:
            message (PushMessage): The message to send.

        Raises:
            ExternalServiceError: On network errors, non-2xx responses, bodies
                that are not JSON, or an error ticket returned by the gateway.
        """
        payload = message.model_dump(exclude_none=True)
        with sentry_sdk.start_span(op="push.send", name=PUSH_SERVICE_NAME) as span:
            try:
                if self._session is not None:
                    body = await self._post(self._session, payload)
                else:
                    async with aiohttp.ClientSession(timeout=self.timeout) as session:
                        body = await self._post(session, payload)
            except (aiohttp.ClientError, TimeoutError) as e:
                span.set_status("internal_error")
                raise ExternalServiceError(
                    "Push gateway request failed", service=PUSH_SERVICE_NAME, details={"error": str(e)}
                ) from e
            except ValueError as e:
                # 2xx with a body that is not JSON
                span.set_status("internal_error")
                raise ExternalServiceError(
                    "Push gateway returned an unreadable response",
                    service=PUSH_SERVICE_NAME,
                    details={"error": str(e)},
                ) from e

            ticket = body.get("data") if isinstance(body, dict) else None
            if isinstance(ticket, dict) and ticket.get("status") == "error":
                span.set_status("internal_error")
                raise ExternalServiceError(
                    ticket.get("message", "Push ticket rejected"),
                    service=PUSH_SERVICE_NAME,
                    details={"ticket": ticket},
                )
            logger.debug("Push message accepted", ticket=ticket)

    async def _post(self, session: aiohttp.ClientSession, payload: Dict[str, Any]) -> Any:
        async with session.post(self.url, json=payload, headers=self._headers(), timeout=self.timeout) as response:
            if response.status >= 400:
                text = await response.text()
                raise ExternalServiceError(
                    f"Push gateway returned {response.status}",
                    service=PUSH_SERVICE_NAME,
                    details={"status": response.status, "body": text[:500]},
                )
            return await response.json(content_type=None)
