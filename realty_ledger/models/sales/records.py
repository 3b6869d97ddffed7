"""Conversion of raw API records into sales entities.

The REST layer serves camelCase JSON objects whose numbers may arrive as
strings and whose dates are ISO strings, sometimes under alternate keys
(``issueDate``/``issuedDate``, ``phone``/``phoneNumber``). The helpers
here accept either camelCase or snake_case keys and never let a malformed
amount or date escape as an exception: amounts fall back to zero and dates
to ``None``. Only records that cannot be identified at all (no ``id``) or
that carry an unknown status raise ``InvalidRecordError``.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, TypeVar

from realty_ledger.exceptions import InvalidRecordError
from realty_ledger.models.base import Address
from realty_ledger.models.sales.buyer import Buyer
from realty_ledger.models.sales.enums import (
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    UnitStatus,
)
from realty_ledger.models.sales.invoice import Invoice, Payment
from realty_ledger.models.sales.project import Project, Unit

E = TypeVar("E", bound=Enum)

ZERO = Decimal("0")


def coerce_amount(value: Any) -> Decimal:
    """Convert a raw amount to a finite ``Decimal``, defaulting to zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else ZERO
    if isinstance(value, str):
        try:
            amount = Decimal(value.strip().replace(",", ""))
        except InvalidOperation:
            return ZERO
        return amount if amount.is_finite() else ZERO
    return ZERO


def coerce_datetime(value: Any) -> datetime | None:
    """Convert a date-like value to a naive datetime for comparisons.

    Dates become midnight of that day. Aware datetimes are converted to
    UTC and stripped of their tzinfo so they compare against naive
    timestamps without raising.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = parse_date(value)
        if value is None:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return None


def parse_date(value: Any) -> date | datetime | None:
    """Parse an ISO date or datetime string, returning ``None`` on failure."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (date, datetime)):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if len(text) == 10:
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def coerce_id(value: Any) -> int | None:
    """Convert a raw identifier to ``int``; anything else becomes ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def as_enum(enum_type: type[E], value: Any) -> E | None:
    """Lenient enum lookup: plain strings are matched case-insensitively."""
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        try:
            return enum_type(value.strip().lower())
        except ValueError:
            return None
    return None


def invoice_from_record(record: Mapping[str, Any]) -> Invoice:
    """Build an ``Invoice`` from a raw API record."""
    tax = _first(record, "taxAmount", "tax_amount")
    subtotal = _first(record, "subtotal")
    return Invoice(
        id=_require_id(record, "invoice"),
        invoice_number=str(_first(record, "invoiceNumber", "invoice_number") or ""),
        buyer_id=coerce_id(_first(record, "buyerId", "buyer_id")),
        unit_id=coerce_id(_first(record, "unitId", "unit_id")),
        project_id=coerce_id(_first(record, "projectId", "project_id")),
        total_amount=coerce_amount(_first(record, "totalAmount", "total_amount")),
        tax_amount=coerce_amount(tax) if tax is not None else None,
        subtotal=coerce_amount(subtotal) if subtotal is not None else None,
        status=_enum(InvoiceStatus, record.get("status"), "invoice status"),
        issue_date=parse_date(_first(record, "issueDate", "issuedDate", "issue_date")),
        due_date=parse_date(_first(record, "dueDate", "due_date")),
        paid_date=parse_date(_first(record, "paidDate", "paid_date")),
        payment_terms=str(_first(record, "paymentTerms", "payment_terms") or ""),
        description=str(record.get("description") or ""),
        notes=str(record.get("notes") or ""),
        created_at=_as_datetime_or_none(_first(record, "createdAt", "created_at")),
        updated_at=_as_datetime_or_none(_first(record, "updatedAt", "updated_at")),
    )


def payment_from_record(record: Mapping[str, Any]) -> Payment:
    """Build a ``Payment`` from a raw API record.

    An unrecognised payment method is kept as ``None`` rather than
    rejecting the record, since the method never affects balances.
    """
    return Payment(
        id=_require_id(record, "payment"),
        invoice_id=coerce_id(_first(record, "invoiceId", "invoice_id")),
        buyer_id=coerce_id(_first(record, "buyerId", "buyer_id")),
        unit_id=coerce_id(_first(record, "unitId", "unit_id")),
        amount=coerce_amount(record.get("amount")),
        payment_method=as_enum(PaymentMethod, _first(record, "paymentMethod", "payment_method")),
        payment_date=parse_date(_first(record, "paymentDate", "payment_date")),
        status=_enum(PaymentStatus, record.get("status"), "payment status"),
        transaction_id=str(_first(record, "transactionId", "transaction_id") or ""),
        notes=str(record.get("notes") or ""),
        created_at=_as_datetime_or_none(_first(record, "createdAt", "created_at")),
        updated_at=_as_datetime_or_none(_first(record, "updatedAt", "updated_at")),
    )


def buyer_from_record(record: Mapping[str, Any]) -> Buyer:
    """Build a ``Buyer`` from a raw API record."""
    score = coerce_id(_first(record, "creditScore", "credit_score"))
    return Buyer(
        id=_require_id(record, "buyer"),
        first_name=str(_first(record, "firstName", "first_name") or ""),
        last_name=str(_first(record, "lastName", "last_name") or ""),
        email=str(record.get("email") or ""),
        phone=str(_first(record, "phone", "phoneNumber", "phone_number") or ""),
        credit_score=score,
        address=_address_from_record(record),
        created_at=_as_datetime_or_none(_first(record, "createdAt", "created_at")),
    )


def unit_from_record(record: Mapping[str, Any]) -> Unit:
    """Build a ``Unit`` from a raw API record."""
    sqft = record.get("sqft")
    return Unit(
        id=_require_id(record, "unit"),
        project_id=coerce_id(_first(record, "projectId", "project_id")),
        unit_number=str(_first(record, "unitNumber", "unit_number") or ""),
        price=coerce_amount(record.get("price")),
        status=_enum(UnitStatus, record.get("status"), "unit status"),
        sold_to=coerce_id(_first(record, "soldTo", "sold_to")),
        reserved_by=coerce_id(_first(record, "reservedBy", "reserved_by")),
        unit_type=str(_first(record, "type", "unitType", "unit_type") or ""),
        floor=coerce_id(record.get("floor")),
        sqft=coerce_amount(sqft) if sqft is not None else None,
        bedrooms=coerce_id(record.get("bedrooms")),
        bathrooms=coerce_id(record.get("bathrooms")),
        created_at=_as_datetime_or_none(_first(record, "createdAt", "created_at")),
    )


def project_from_record(record: Mapping[str, Any]) -> Project:
    """Build a ``Project`` from a raw API record."""
    return Project(
        id=_require_id(record, "project"),
        name=str(record.get("name") or ""),
        address=_address_from_record(record),
        created_at=_as_datetime_or_none(_first(record, "createdAt", "created_at")),
    )


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present with a non-None value."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _require_id(record: Mapping[str, Any], entity: str) -> int:
    entity_id = coerce_id(record.get("id"))
    if entity_id is None:
        raise InvalidRecordError(f"{entity} record has no usable id: {record.get('id')!r}")
    return entity_id


def _enum(enum_type: type[E], value: Any, label: str) -> E:
    member = as_enum(enum_type, value)
    if member is None:
        raise InvalidRecordError(f"Unknown {label}: {value!r}")
    return member


def _as_datetime_or_none(value: Any) -> datetime | None:
    parsed = parse_date(value)
    if parsed is None or isinstance(parsed, datetime):
        return parsed
    return datetime.combine(parsed, time.min)


def _address_from_record(record: Mapping[str, Any]) -> Address:
    nested = record.get("address")
    source: Mapping[str, Any] = nested if isinstance(nested, Mapping) else record
    street = source.get("street")
    if street is None and isinstance(nested, str):
        street = nested
    return Address(
        street=str(street or ""),
        city=str(source.get("city") or ""),
        state=str(source.get("state") or ""),
        postal_code=str(_first(source, "postalCode", "zipCode", "postal_code") or ""),
        country=str(source.get("country") or "KE"),
    )
