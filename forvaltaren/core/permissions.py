"""Role → permission table for the landlord scope.

Single source of truth for which landlord roles may perform which
mutating action. Lookups are pure; loading the caller's role lives in
``forvaltaren.services.access``.
"""

from enum import StrEnum
from types import MappingProxyType

from forvaltaren.models.member import LandlordRole


class Permission(StrEnum):
    PROPERTY_CREATE = "property:create"
    UNIT_CREATE = "unit:create"
    TENANT_CREATE = "tenant:create"
    TENANT_DELETE = "tenant:delete"
    LEASE_CREATE = "lease:create"
    LEASE_UPDATE = "lease:update"
    INVOICE_CREATE = "invoice:create"
    INVOICE_MARK_PAID = "invoice:mark-paid"
    TICKET_CREATE = "ticket:create"
    TICKET_UPDATE = "ticket:update"
    TICKET_DELETE = "ticket:delete"
    SETTINGS = "settings"


_MANAGERS = frozenset({LandlordRole.OWNER, LandlordRole.ADMIN, LandlordRole.MANAGER})
_BOOKKEEPERS = frozenset({LandlordRole.OWNER, LandlordRole.ADMIN, LandlordRole.ACCOUNTANT})
_FIELD_STAFF = _MANAGERS | {LandlordRole.STAFF}
_ADMINS = frozenset({LandlordRole.OWNER, LandlordRole.ADMIN})

PERMISSIONS: MappingProxyType[Permission, frozenset[LandlordRole]] = MappingProxyType({
    Permission.PROPERTY_CREATE:   _MANAGERS,
    Permission.UNIT_CREATE:       _MANAGERS,
    Permission.TENANT_CREATE:     _MANAGERS,
    Permission.TENANT_DELETE:     _MANAGERS,
    Permission.LEASE_CREATE:      _MANAGERS,
    Permission.LEASE_UPDATE:      _MANAGERS,
    Permission.INVOICE_CREATE:    _BOOKKEEPERS,
    Permission.INVOICE_MARK_PAID: _BOOKKEEPERS,
    Permission.TICKET_CREATE:     _FIELD_STAFF,
    Permission.TICKET_UPDATE:     _FIELD_STAFF,
    Permission.TICKET_DELETE:     _ADMINS,
    Permission.SETTINGS:          _ADMINS,
})


def has_permission(role: LandlordRole | None, permission: Permission) -> bool:
    """Return True if ``role`` may exercise ``permission``."""
    if role is None:
        return False
    return role in PERMISSIONS[permission]
