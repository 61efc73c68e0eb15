"""Import all models so SQLModel.metadata picks them up."""

from forvaltaren.models.invoice import (
    InvoiceCreate,
    InvoiceDetail,
    InvoiceRead,
    InvoiceStatus,
    Payment,
    PaymentRead,
    RentInvoice,
)
from forvaltaren.models.landlord import Landlord, LandlordRead, LandlordUpdate
from forvaltaren.models.lease import Lease, LeaseCreate, LeaseRead, LeaseUpdate
from forvaltaren.models.member import (
    LandlordMember,
    LandlordMemberCreate,
    LandlordMemberRead,
    LandlordMemberUpdate,
    LandlordRole,
)
from forvaltaren.models.organization import (
    Membership,
    MembershipCreate,
    MembershipRead,
    MembershipUpdate,
    Organization,
    OrganizationCreate,
    OrganizationDetail,
    OrganizationRead,
    OrgRole,
)
from forvaltaren.models.property import (
    Property,
    PropertyCreate,
    PropertyDetail,
    PropertyRead,
    Unit,
    UnitBulkCreate,
    UnitCreate,
    UnitRead,
)
from forvaltaren.models.tenant import Tenant, TenantCreate, TenantRead
from forvaltaren.models.ticket import (
    Ticket,
    TicketCreate,
    TicketRead,
    TicketStatus,
    TicketStatusUpdate,
    TicketUpdate,
)
from forvaltaren.models.user import User, UserCreate, UserRead

__all__ = [
    "InvoiceCreate",
    "InvoiceDetail",
    "InvoiceRead",
    "InvoiceStatus",
    "Landlord",
    "LandlordMember",
    "LandlordMemberCreate",
    "LandlordMemberRead",
    "LandlordMemberUpdate",
    "LandlordRead",
    "LandlordRole",
    "LandlordUpdate",
    "Lease",
    "LeaseCreate",
    "LeaseRead",
    "LeaseUpdate",
    "Membership",
    "MembershipCreate",
    "MembershipRead",
    "MembershipUpdate",
    "OrgRole",
    "Organization",
    "OrganizationCreate",
    "OrganizationDetail",
    "OrganizationRead",
    "Payment",
    "PaymentRead",
    "Property",
    "PropertyCreate",
    "PropertyDetail",
    "PropertyRead",
    "RentInvoice",
    "Tenant",
    "TenantCreate",
    "TenantRead",
    "Ticket",
    "TicketCreate",
    "TicketRead",
    "TicketStatus",
    "TicketStatusUpdate",
    "TicketUpdate",
    "Unit",
    "UnitBulkCreate",
    "UnitCreate",
    "UnitRead",
    "User",
    "UserCreate",
    "UserRead",
]
