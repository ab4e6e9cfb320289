"""Domain models - pure Python dataclasses representing reporting entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

# Upstream objects are kept as decoded JSON; only the fields we read are relied on.
RawRecord = Dict[str, Any]


class RecordKind(str, Enum):
    """Upstream list endpoints consumed per connected account"""

    CHARGES = "charges"
    REFUNDS = "refunds"
    DISPUTES = "disputes"
    PAYMENT_INTENTS = "payment_intents"
    BALANCE_TRANSACTIONS = "balance_transactions"
    EVENTS = "events"


class ReportView(str, Enum):
    SUMMARY = "summary"
    DETAIL = "detail"


@dataclass
class Account:
    """Connected account snapshot fetched per request"""

    id: str
    country: str = "US"
    business_type: str = "individual"
    charges_enabled: bool = False
    payouts_enabled: bool = False
    email: str = ""
    type: str = "express"

    @classmethod
    def from_api(cls, data: RawRecord) -> "Account":
        return cls(
            id=data["id"],
            country=data.get("country") or "US",
            business_type=data.get("business_type") or "individual",
            charges_enabled=bool(data.get("charges_enabled")),
            payouts_enabled=bool(data.get("payouts_enabled")),
            email=data.get("email") or "",
            type=data.get("type") or "express",
        )


@dataclass
class ListPage:
    """One page of a cursor-paginated list response"""

    data: List[RawRecord]
    has_more: bool


@dataclass
class FetchWarning:
    """A collection or account that failed while the report still succeeded"""

    account_id: str
    source: str  # collection label, or "account" when the whole account was skipped
    message: str


@dataclass
class CollectionResult:
    kind: RecordKind
    records: List[RawRecord] = field(default_factory=list)
    error: Optional[str] = None
    pages: int = 0


@dataclass
class ReportWindow:
    """Validated calendar range and the timezone it is expressed in"""

    start_date: date
    end_date: date
    timezone: str


@dataclass
class AccountBundle:
    """All record kinds fetched for one account over one window"""

    account_id: str
    charges: List[RawRecord] = field(default_factory=list)
    refunds: List[RawRecord] = field(default_factory=list)
    disputes: List[RawRecord] = field(default_factory=list)
    declines: List[RawRecord] = field(default_factory=list)
    payment_intents: List[RawRecord] = field(default_factory=list)
    balance_transactions: List[RawRecord] = field(default_factory=list)
    events: List[RawRecord] = field(default_factory=list)
    warnings: List[FetchWarning] = field(default_factory=list)


@dataclass
class DailyBucket:
    """Per-account, per-calendar-day summary"""

    date: str  # YYYY-MM-DD in the report timezone
    account_id: str
    charges_count: int = 0
    charges_amount: float = 0.0
    refunds_count: int = 0
    refunds_amount: float = 0.0
    chargebacks_count: int = 0
    chargebacks_amount: float = 0.0
    declines_count: int = 0
    aprvl_pct: float = 100.0
    totals_count: int = 0
    totals_amount: float = 0.0


@dataclass
class NormalizedTransactionRow:
    """Common row shape for charges and payment intents in detail views"""

    account_id: str
    transaction_type: str  # "charge" or "payment_intent"
    id: str
    amount: float
    currency: str = ""
    status: str = ""
    created: str = ""
    created_timestamp: int = 0
    paid: bool = False
    captured: bool = False
    disputed: bool = False
    failure_code: str = ""
    failure_message: str = ""
    network_status: str = ""
    outcome_type: str = ""
    risk_level: str = ""
    outcome_reason: str = ""
    seller_message: str = ""
    description: str = ""
    customer_id: str = ""
    payment_method_id: str = ""
    payment_intent_id: str = ""
    receipt_email: str = ""
    statement_descriptor: str = ""
    authorization_code: str = ""
    balance_transaction_id: str = ""
    fraud_details: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    chargeback_status: str = "none"
    chargeback_reason: str = ""
    chargeback_amount: float = 0.0
    chargeback_currency: str = ""
    chargeback_created: str = ""
    chargeback_evidence_due_by: str = ""
    chargeback_status_details: str = ""
    customer_ip: str = ""
    ip_source: str = "none"
    request_ip: str = ""
    webhook_ip: str = ""


@dataclass
class MultiAccountResult:
    rows: List[Any] = field(default_factory=list)
    accounts: List[Account] = field(default_factory=list)
    warnings: List[FetchWarning] = field(default_factory=list)


@dataclass
class PaginationMeta:
    currentPage: int
    itemsPerPage: int
    totalItems: int
    totalPages: int
    hasPrevPage: bool
    hasNextPage: bool
