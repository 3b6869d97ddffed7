"""Role-based visibility of invoices and payments."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Protocol, TypeVar

from realty_ledger.models.sales.records import as_enum, coerce_id


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    CASHIER = "cashier"
    USER = "user"


ROLE_PERMISSIONS: dict[UserRole, dict[str, bool]] = {
    UserRole.ADMIN: {
        "can_view_all_invoices": True,
        "can_view_all_payments": True,
        "can_edit_invoices": True,
        "can_delete_invoices": True,
        "can_process_payments": True,
        "can_view_all_buyers": True,
        "can_manage_users": True,
    },
    UserRole.MANAGER: {
        "can_view_all_invoices": True,
        "can_view_all_payments": True,
        "can_edit_invoices": True,
        "can_delete_invoices": False,
        "can_process_payments": True,
        "can_view_all_buyers": True,
        "can_manage_users": False,
    },
    UserRole.CASHIER: {
        "can_view_all_invoices": True,
        "can_view_all_payments": True,
        "can_edit_invoices": False,
        "can_delete_invoices": False,
        "can_process_payments": True,
        "can_view_all_buyers": True,
        "can_manage_users": False,
    },
    UserRole.USER: {
        "can_view_all_invoices": False,
        "can_view_all_payments": False,
        "can_edit_invoices": False,
        "can_delete_invoices": False,
        "can_process_payments": False,
        "can_view_all_buyers": False,
        "can_manage_users": False,
    },
}


class _OwnedRecord(Protocol):
    buyer_id: int | None


R = TypeVar("R", bound=_OwnedRecord)


def has_permission(role: UserRole | str | None, permission: str) -> bool:
    """Return True if ``role`` grants ``permission``; unknown roles get nothing."""
    resolved = as_enum(UserRole, role)
    if resolved is None:
        return False
    return ROLE_PERMISSIONS[resolved].get(permission, False)


def can_access_resource(
    role: UserRole | str | None,
    resource_owner_id: int | str | None,
    current_user_id: int | str | None,
) -> bool:
    """Staff roles access every resource; users only their own."""
    resolved = as_enum(UserRole, role)
    if resolved in (UserRole.ADMIN, UserRole.MANAGER, UserRole.CASHIER):
        return True
    if resolved == UserRole.USER:
        owner = coerce_id(resource_owner_id)
        return owner is not None and owner == coerce_id(current_user_id)
    return False


def visible_invoices(
    invoices: Iterable[R] | None,
    role: UserRole | str | None,
    user_id: int | str | None,
) -> list[R]:
    """Invoices the user may see: all for staff, their own for buyers."""
    return _visible(invoices, has_permission(role, "can_view_all_invoices"), user_id)


def visible_payments(
    payments: Iterable[R] | None,
    role: UserRole | str | None,
    user_id: int | str | None,
) -> list[R]:
    """Payments the user may see: all for staff, their own for buyers."""
    return _visible(payments, has_permission(role, "can_view_all_payments"), user_id)


def _visible(records: Iterable[R] | None, view_all: bool, user_id: int | str | None) -> list[R]:
    records = list(records or ())
    if view_all:
        return records
    owner = coerce_id(user_id)
    if owner is None:
        return []
    return [r for r in records if r.buyer_id == owner]
