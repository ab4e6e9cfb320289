"""Dependency injection for FastAPI endpoints"""

from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, Request

from stripe_reports.infrastructure.clients.stripe import StripeClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_secret_key(authorization: str | None = Header(default=None)) -> str:
    """Stripe secret key passed as a bearer token; verifying it is the caller's job"""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Missing bearer credential")
    return token.strip()


async def get_stripe_client(secret_key: str = Depends(get_secret_key)) -> AsyncIterator[StripeClient]:
    """Provide a Stripe client scoped to this request's credential"""
    async with StripeClient(secret_key) as client:
        yield client
