"""Stripe REST client for listing connected-account records"""

from typing import Any, Dict, List, Optional

import httpx

from stripe_reports.config import settings
from stripe_reports.domain.exceptions import UpstreamAPIError
from stripe_reports.domain.models import Account, ListPage, RecordKind
from stripe_reports.infrastructure.observability.metrics import upstream_request_duration_histogram


class StripeClient:
    """
    Client for the Stripe list API, scoped to one secret key and one request.

    The key is held by the instance and sent as a bearer token; calls made on
    behalf of a connected account add the Stripe-Account header.

    Usage:
        async with StripeClient(secret_key) as client:
            page = await client.list_page(RecordKind.CHARGES, "acct_1", {...})
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.stripe_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {secret_key}"},
            transport=transport,
        )

    async def __aenter__(self) -> "StripeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str, params: Dict[str, Any] | None = None, account_id: str | None = None) -> Dict[str, Any]:
        """
        GET a JSON object from the API.

        Raises:
            UpstreamAPIError: On timeout, transport or HTTP errors, or a non-object body
        """
        headers = {"Stripe-Account": account_id} if account_id else None
        try:
            response = await self._http.get(path, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamAPIError(f"Stripe API timeout after {self.timeout}s on {path}") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamAPIError(f"Stripe API error: {e.response.status_code} on {path}") from e
        except httpx.RequestError as e:
            raise UpstreamAPIError(f"Stripe API request failed on {path}: {e}") from e
        except ValueError as e:
            raise UpstreamAPIError(f"Invalid JSON from Stripe API on {path}") from e

        if not isinstance(data, dict):
            raise UpstreamAPIError(f"Unexpected response shape from Stripe API on {path}")
        return data

    async def list_page(self, kind: RecordKind, account_id: str, params: Dict[str, Any]) -> ListPage:
        """Fetch one page of a list endpoint as the connected account"""
        with upstream_request_duration_histogram.labels(kind=kind.value).time():
            data = await self._get(f"/v1/{kind.value}", params=params, account_id=account_id)

        records = data.get("data")
        if not isinstance(records, list):
            raise UpstreamAPIError(f"Missing 'data' list in {kind.value} response")
        if any(not isinstance(r, dict) or "id" not in r for r in records):
            raise UpstreamAPIError(f"Malformed record in {kind.value} response")
        return ListPage(data=records, has_more=bool(data.get("has_more")))

    async def retrieve_account(self, account_id: str) -> Account:
        data = await self._get(f"/v1/accounts/{account_id}")
        try:
            return Account.from_api(data)
        except KeyError as e:
            raise UpstreamAPIError(f"Invalid account data for {account_id}: {e}") from e

    async def list_accounts(self) -> List[Account]:
        """All accounts connected to the platform behind this key (first 100)"""
        data = await self._get("/v1/accounts", params={"limit": 100})
        try:
            return [Account.from_api(item) for item in data.get("data", [])]
        except (KeyError, TypeError, AttributeError) as e:
            raise UpstreamAPIError(f"Invalid account list from Stripe API: {e}") from e
