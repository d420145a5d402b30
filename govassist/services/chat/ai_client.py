"""HTTP client for the AI service."""

from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from govassist.core.exceptions import AIServiceError, APIClientError, APITimeoutError
from govassist.schemas.ai import AIRequest, ProcessChatResponse
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)


class AIServiceClient:
    """Calls ``POST /chat/process`` once per message with a fixed timeout.

    No retries: a slow or failing AI service surfaces immediately.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the client.

        Args:
            base_url: AI service base URL
            timeout: Whole-request timeout in seconds
            transport: Optional httpx transport, used to stub the service
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def process(self, request: AIRequest) -> ProcessChatResponse:
        """Send a message to the AI service.

        Raises:
            APITimeoutError: If the service does not answer within the timeout
            AIServiceError: If the service answers with a non-2xx status or an unsuccessful body
            APIClientError: If the service cannot be reached or returns an unreadable body
        """
        url = f"{self.base_url}/chat/process"
        payload = request.model_dump(mode="json", exclude_none=True)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            LOGGER.error("AI service timed out", extra={"url": url, "timeout": self.timeout})
            raise APITimeoutError(f"AI service timed out after {self.timeout}s", original_error=e) from e
        except httpx.HTTPStatusError as e:
            LOGGER.error(
                "AI service returned an error",
                extra={"url": url, "status_code": e.response.status_code, "body": e.response.text[:500]},
            )
            raise AIServiceError(f"AI service error {e.response.status_code}", original_error=e) from e
        except httpx.HTTPError as e:
            LOGGER.error("AI service unreachable", extra={"url": url, "error": str(e)})
            raise APIClientError(f"AI service unreachable: {e}", original_error=e) from e

        try:
            body = ProcessChatResponse.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise APIClientError("AI service returned an invalid body", original_error=e) from e

        if not body.success:
            raise AIServiceError("AI service reported failure")
        return body
