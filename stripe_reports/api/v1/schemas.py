"""Pydantic schemas for API responses"""

from pydantic import BaseModel
from typing import Any, Dict, List


class AccountSchema(BaseModel):
    """Connected account summary"""

    id: str
    business_type: str
    country: str
    charges_enabled: bool
    payouts_enabled: bool
    email: str
    type: str


class WarningSchema(BaseModel):
    """A collection or account that could not be fetched completely"""

    account_id: str
    source: str
    message: str


class PaginationSchema(BaseModel):
    currentPage: int
    itemsPerPage: int
    totalItems: int
    totalPages: int
    hasPrevPage: bool
    hasNextPage: bool


class DateRangeSchema(BaseModel):
    start: str
    end: str


class DailyBucketSchema(BaseModel):
    """One account's totals for one calendar day"""

    date: str
    account_id: str
    charges_count: int
    charges_amount: float
    refunds_count: int
    refunds_amount: float
    chargebacks_count: int
    chargebacks_amount: float
    declines_count: int
    aprvl_pct: float
    totals_count: int
    totals_amount: float


class TransactionRowSchema(BaseModel):
    """Normalized charge or payment intent"""

    account_id: str
    transaction_type: str
    id: str
    amount: float
    currency: str
    status: str
    created: str
    created_timestamp: int
    paid: bool
    captured: bool
    disputed: bool
    failure_code: str
    failure_message: str
    network_status: str
    outcome_type: str
    risk_level: str
    outcome_reason: str
    seller_message: str
    description: str
    customer_id: str
    payment_method_id: str
    payment_intent_id: str
    receipt_email: str
    statement_descriptor: str
    authorization_code: str
    balance_transaction_id: str
    fraud_details: Dict[str, Any]
    metadata: Dict[str, Any]
    customer_name: str
    customer_email: str
    customer_phone: str
    chargeback_status: str
    chargeback_reason: str
    chargeback_amount: float
    chargeback_currency: str
    chargeback_created: str
    chargeback_evidence_due_by: str
    chargeback_status_details: str
    customer_ip: str
    ip_source: str
    request_ip: str
    webhook_ip: str


class SummaryReportResponse(BaseModel):
    """Response for GET /v1/reports/multi/{account_ids}"""

    success: bool = True
    data: List[DailyBucketSchema]
    accounts: List[AccountSchema]
    pagination: PaginationSchema
    warnings: List[WarningSchema]
    dateRange: DateRangeSchema
    timezone: str


class DetailReportResponse(BaseModel):
    """Response for GET /v1/reports/detailed/{account_ids}"""

    success: bool = True
    data: List[TransactionRowSchema]
    pagination: PaginationSchema
    warnings: List[WarningSchema]
    dateRange: DateRangeSchema
    timezone: str


class AccountsResponse(BaseModel):
    success: bool = True
    accounts: List[AccountSchema]
    total: int


class TimezonesResponse(BaseModel):
    success: bool = True
    timezones: List[str]
    total: int
    note: str
