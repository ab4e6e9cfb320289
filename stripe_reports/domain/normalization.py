"""Flatten charges and payment intents into one row shape for detail views"""

import ipaddress
from typing import Any, Iterable, List, Tuple

from stripe_reports.domain.aggregation import to_major_units
from stripe_reports.domain.models import NormalizedTransactionRow, RawRecord
from stripe_reports.utils.date_utils import format_timestamp

# Metadata keys that may carry the shopper's IP, in priority order
IP_CANDIDATE_KEYS = (
    "customer_ip",
    "ip_address",
    "client_ip",
    "source_ip",
    "user_ip",
    "visitor_ip",
    "remote_ip",
    "client_ip_address",
    "ip",
    "user_agent_ip",
)

NO_IP_SOURCE = "none"


def is_valid_ip(value: Any) -> bool:
    """True for a syntactically valid IPv4 or IPv6 literal"""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        ipaddress.ip_address(value.strip())
    except ValueError:
        return False
    return True


def _metadata(obj: Any) -> dict:
    if not isinstance(obj, dict):
        return {}
    metadata = obj.get("metadata")
    return metadata if isinstance(metadata, dict) else {}


def extract_customer_ip(record: RawRecord) -> Tuple[str, str]:
    """
    Find the customer IP for a charge or payment intent.

    Looks at the record's own metadata, then an expanded payment intent,
    then an expanded source, trying IP_CANDIDATE_KEYS in order at each level.

    Returns:
        (ip, source) where source names the winning field, e.g.
        "payment_intent.metadata.client_ip"; ("", "none") when nothing matches
    """
    levels = (
        ("metadata", _metadata(record)),
        ("payment_intent.metadata", _metadata(record.get("payment_intent"))),
        ("source.metadata", _metadata(record.get("source"))),
    )
    for prefix, metadata in levels:
        for key in IP_CANDIDATE_KEYS:
            value = metadata.get(key)
            if is_valid_ip(value):
                return value.strip(), f"{prefix}.{key}"
    return "", NO_IP_SOURCE


def _ref_id(value: Any) -> str:
    """Id of an expandable reference, which is either an id string or an object"""
    if isinstance(value, dict):
        return value.get("id") or ""
    return value or ""


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_charge(charge: RawRecord, account_id: str, timezone: str = "UTC") -> NormalizedTransactionRow:
    outcome = charge.get("outcome") or {}
    dispute = charge.get("dispute") if isinstance(charge.get("dispute"), dict) else {}
    billing = charge.get("billing_details") or {}
    metadata = _metadata(charge)
    customer_ip, ip_source = extract_customer_ip(charge)

    return NormalizedTransactionRow(
        account_id=account_id,
        transaction_type="charge",
        id=charge["id"],
        amount=to_major_units(charge.get("amount")),
        currency=_text(charge.get("currency")),
        status=_text(charge.get("status")),
        created=format_timestamp(charge.get("created"), timezone),
        created_timestamp=charge.get("created") or 0,
        paid=bool(charge.get("paid")),
        captured=bool(charge.get("captured")),
        disputed=bool(charge.get("disputed")),
        failure_code=_text(charge.get("failure_code")),
        failure_message=_text(charge.get("failure_message")),
        network_status=_text(outcome.get("network_status")),
        outcome_type=_text(outcome.get("type")),
        risk_level=_text(outcome.get("risk_level")),
        outcome_reason=_text(outcome.get("reason")),
        seller_message=_text(outcome.get("seller_message")),
        description=_text(charge.get("description")),
        customer_id=_ref_id(charge.get("customer")),
        payment_method_id=_ref_id(charge.get("payment_method")),
        payment_intent_id=_ref_id(charge.get("payment_intent")),
        receipt_email=_text(charge.get("receipt_email")),
        statement_descriptor=_text(charge.get("statement_descriptor")),
        authorization_code=_text(charge.get("authorization_code")),
        balance_transaction_id=_ref_id(charge.get("balance_transaction")),
        fraud_details=charge.get("fraud_details") or {},
        metadata=metadata,
        customer_name=_text(billing.get("name")),
        customer_email=_text(billing.get("email")),
        customer_phone=_text(billing.get("phone")),
        chargeback_status="disputed" if charge.get("disputed") else "none",
        chargeback_reason=_text(dispute.get("reason")),
        chargeback_amount=to_major_units(dispute.get("amount")),
        chargeback_currency=_text(dispute.get("currency")),
        chargeback_created=format_timestamp(dispute.get("created"), timezone),
        chargeback_evidence_due_by=format_timestamp(
            (dispute.get("evidence_details") or {}).get("due_by"), timezone
        ),
        chargeback_status_details=_text(dispute.get("status")),
        customer_ip=customer_ip,
        ip_source=ip_source,
        request_ip=_text(metadata.get("request_ip")),
        webhook_ip=_text(metadata.get("webhook_ip")),
    )


def normalize_payment_intent(intent: RawRecord, account_id: str, timezone: str = "UTC") -> NormalizedTransactionRow:
    """Payment intents have no outcome or dispute; equivalents are derived"""
    error = intent.get("last_payment_error") or {}
    metadata = _metadata(intent)
    succeeded = intent.get("status") == "succeeded"
    customer_ip, ip_source = extract_customer_ip(intent)

    return NormalizedTransactionRow(
        account_id=account_id,
        transaction_type="payment_intent",
        id=intent["id"],
        amount=to_major_units(intent.get("amount")),
        currency=_text(intent.get("currency")),
        status=_text(intent.get("status")),
        created=format_timestamp(intent.get("created"), timezone),
        created_timestamp=intent.get("created") or 0,
        paid=succeeded,
        captured=succeeded,
        disputed=False,
        failure_code=_text(error.get("code")),
        failure_message=_text(error.get("message")),
        outcome_type=_text(error.get("type")),
        outcome_reason=_text(error.get("decline_code")),
        seller_message=_text(error.get("message")),
        description=_text(intent.get("description")),
        customer_id=_ref_id(intent.get("customer")),
        payment_method_id=_ref_id(intent.get("payment_method")),
        payment_intent_id=intent["id"],
        receipt_email=_text(intent.get("receipt_email")),
        statement_descriptor=_text(intent.get("statement_descriptor")),
        metadata=metadata,
        customer_email=_text(intent.get("receipt_email")),
        customer_ip=customer_ip,
        ip_source=ip_source,
        request_ip=_text(metadata.get("request_ip")),
        webhook_ip=_text(metadata.get("webhook_ip")),
    )


def normalize(
    charges: Iterable[RawRecord],
    payment_intents: Iterable[RawRecord],
    account_id: str,
    timezone: str = "UTC",
) -> List[NormalizedTransactionRow]:
    """Charges first, then payment intents, each in upstream order"""
    rows = [normalize_charge(c, account_id, timezone) for c in charges]
    rows.extend(normalize_payment_intent(pi, account_id, timezone) for pi in payment_intents)
    return rows
