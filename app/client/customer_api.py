"""Customer API client with bounded exponential-backoff retry.

Retryable failures are 408, 429, any 5xx, and transport errors where no
response was received. Every other 4xx fails on the first attempt.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429})

NETWORK_ERROR_MESSAGE = (
    "Network error: Unable to reach the API server. Please check your connection."
)

_FALLBACK_MESSAGES = {
    400: "The request was invalid. Please check your input.",
    404: "The requested customer was not found.",
    408: "The request timed out. Please try again.",
    409: "A customer with this email already exists.",
    429: "Too many requests. Please wait a moment and try again.",
}


def is_retryable_status(status_code: int) -> bool:
    """Whether a response status is worth retrying."""
    return status_code in RETRYABLE_STATUS_CODES or 500 <= status_code <= 599


def fallback_message(status_code: int) -> str:
    """Generic user-facing message for a status the server did not explain."""
    if status_code in _FALLBACK_MESSAGES:
        return _FALLBACK_MESSAGES[status_code]
    if status_code >= 500:
        return "The server encountered an error. Please try again later."
    return f"HTTP error! status: {status_code}"


class ApiError(Exception):
    """Error returned to callers of the customer API client."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        errors: dict[str, list[str]] | None = None,
        is_retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors
        self.is_retryable = is_retryable

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build an error from a failed response, preferring the server's message."""
        message = fallback_message(response.status_code)
        errors = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            if body.get("message"):
                message = body["message"]
            if isinstance(body.get("errors"), dict):
                errors = body["errors"]
        return cls(
            message,
            status=response.status_code,
            errors=errors,
            is_retryable=is_retryable_status(response.status_code),
        )


class CustomerApiClient:
    """Async client for the customer API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        bulk_timeout: float | None = None,
        max_retries: int | None = None,
        retry_base_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL (defaults to settings.api_base_url)
            timeout: Per-request timeout in seconds
            bulk_timeout: Timeout for bulk create calls
            max_retries: Retries after the first attempt
            retry_base_delay: First retry delay in seconds, doubled each retry
            transport: Optional httpx transport (used by tests)
            sleep: Coroutine used to wait between attempts
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout
        self.bulk_timeout = (
            bulk_timeout if bulk_timeout is not None else settings.client_bulk_timeout
        )
        self.max_retries = max_retries if max_retries is not None else settings.client_max_retries
        self.retry_base_delay = (
            retry_base_delay if retry_base_delay is not None else settings.client_retry_base_delay
        )
        self._sleep = sleep
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "CustomerApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def retry_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt + 1`` (1s, 2s, 4s by default)."""
        return self.retry_base_delay * (2**attempt)

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send a request, retrying retryable failures with exponential backoff.

        Returns:
            The successful response

        Raises:
            ApiError: on a non-retryable failure, or once retries are exhausted
        """
        attempt = 0
        while True:
            cause: Exception | None = None
            try:
                response = await self.client.request(
                    method,
                    path,
                    json=json,
                    params=params,
                    timeout=timeout if timeout is not None else self.timeout,
                )
            except httpx.TransportError as e:
                error = ApiError(NETWORK_ERROR_MESSAGE, is_retryable=True)
                cause = e
            else:
                if response.is_success:
                    return response
                error = ApiError.from_response(response)

            if not error.is_retryable or attempt >= self.max_retries:
                if cause is not None:
                    raise error from cause
                raise error

            delay = self.retry_delay(attempt)
            logger.warning(
                f"{method} {path} failed (status={error.status}), "
                f"retrying in {delay:.1f}s ({attempt + 1}/{self.max_retries})"
            )
            await self._sleep(delay)
            attempt += 1

    async def search_customers(
        self,
        search: str | None = None,
        email: str | None = None,
        page: int | None = None,
        page_size: int | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> dict[str, Any]:
        """Search customers; only the supplied filters are sent."""
        params = {
            "search": search,
            "email": email,
            "page": page,
            "pageSize": page_size,
            "sortBy": sort_by,
            "sortOrder": sort_order,
            "dateFrom": date_from,
            "dateTo": date_to,
        }
        params = {key: value for key, value in params.items() if value not in (None, "")}
        response = await self.request("GET", "/api/customers", params=params)
        return response.json()

    async def get_customer(self, customer_id: str) -> dict[str, Any]:
        """Get a single customer by ID."""
        response = await self.request("GET", f"/api/customers/{customer_id}")
        return response.json()

    async def create_customer(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a customer."""
        response = await self.request("POST", "/api/customers", json=data)
        return response.json()

    async def update_customer(self, customer_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Replace a customer's fields."""
        response = await self.request("PUT", f"/api/customers/{customer_id}", json=data)
        return response.json()

    async def delete_customer(self, customer_id: str) -> None:
        """Soft-delete a customer."""
        await self.request("DELETE", f"/api/customers/{customer_id}")

    async def bulk_create_customers(self, count: int) -> dict[str, Any]:
        """Generate ``count`` random customers (uses the longer bulk timeout)."""
        response = await self.request(
            "POST", "/api/customers/bulk", json={"count": count}, timeout=self.bulk_timeout
        )
        return response.json()

    async def health(self) -> dict[str, Any]:
        """Check API and database health."""
        response = await self.request("GET", "/health")
        return response.json()
