"""
GETTRX Processor Client

Thin async HTTP wrapper around the GETTRX payments API. Every call carries
the configured ``secretKey`` header and an ``onBehalfOf`` header naming the
merchant account the request acts for. No retries: failures surface as
ProcessorError and the calling service decides what to do with them.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
import structlog

logger = structlog.get_logger(__name__)


class ProcessorError(Exception):
    """A processor call failed (timeout, transport error or non-2xx reply)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def processor_message(self) -> Optional[str]:
        """The ``message`` field of the processor's error body, if it sent one."""
        if isinstance(self.payload, dict):
            message = self.payload.get("message")
            if message:
                return str(message)
        return None


class ProcessorClient:
    """Configured HTTP client bound to the processor base URL."""

    ACCOUNTS_PATH = "/payments/v1/accounts/{account_id}"
    PAYMENT_REQUESTS_PATH = "/payments/v1/payment-requests"

    def __init__(
        self,
        base_url: str,
        secret_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.secret_key = secret_key
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.secret_key)

    def _headers(self, on_behalf_of: Optional[str]) -> Dict[str, str]:
        headers = {}
        if self.secret_key:
            headers["secretKey"] = self.secret_key
        if on_behalf_of:
            headers["onBehalfOf"] = on_behalf_of
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        on_behalf_of: Optional[str],
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method, path, json=json, headers=self._headers(on_behalf_of)
            )
        except httpx.TimeoutException as e:
            raise ProcessorError(f"Processor request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ProcessorError(f"Processor request failed: {e}") from e
        except (UnicodeEncodeError, httpx.InvalidURL) as e:
            # header values must be ASCII
            raise ProcessorError(f"Processor request could not be built: {e}") from e

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text or None
            raise ProcessorError(
                f"Processor returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProcessorError(
                "Processor returned a non-JSON body",
                status_code=response.status_code,
                payload=response.text,
            ) from e

    async def get_account(self, account_id: str) -> Dict[str, Any]:
        """Fetch a merchant account, acting on behalf of that same account."""
        return await self._request(
            "GET",
            self.ACCOUNTS_PATH.format(account_id=quote(account_id, safe="")),
            on_behalf_of=account_id,
        )

    async def create_payment_request(
        self, payload: Dict[str, Any], on_behalf_of: Optional[str]
    ) -> Dict[str, Any]:
        """Submit a payment request for the given merchant account."""
        logger.info(
            "processor_payment_request",
            on_behalf_of=on_behalf_of,
            amount=payload.get("amount"),
            currency=payload.get("currency"),
        )
        return await self._request(
            "POST", self.PAYMENT_REQUESTS_PATH, on_behalf_of=on_behalf_of, json=payload
        )

    async def close(self) -> None:
        await self._client.aclose()
