"""GET /v1/accounts and /v1/timezones - Report pickers"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request

from stripe_reports.api.dependencies import get_request_id, get_stripe_client
from stripe_reports.api.v1.schemas import AccountSchema, AccountsResponse, TimezonesResponse
from stripe_reports.domain.exceptions import UpstreamAPIError
from stripe_reports.domain.periods import supported_timezones
from stripe_reports.infrastructure.clients.stripe import StripeClient
from stripe_reports.services.orchestrator import list_accessible_accounts

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/timezones", response_model=TimezonesResponse)
def get_timezones():
    timezones = supported_timezones()
    return TimezonesResponse(timezones=timezones, total=len(timezones), note="Showing USA timezones only")


@router.get("/accounts", response_model=AccountsResponse)
async def get_accounts(request: Request, client: StripeClient = Depends(get_stripe_client)):
    """Connected accounts reachable with the caller's key"""
    try:
        accounts = await list_accessible_accounts(client)
    except UpstreamAPIError as e:
        logger.error(f"Stripe API error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=502, detail="Upstream service unavailable")

    return AccountsResponse(
        accounts=[AccountSchema(**asdict(account)) for account in accounts],
        total=len(accounts),
    )
