"""V1 API router aggregation."""

from fastapi import APIRouter

from forvaltaren.api.v1.auth import router as auth_router
from forvaltaren.api.v1.billing import router as billing_router
from forvaltaren.api.v1.dashboard import router as dashboard_router
from forvaltaren.api.v1.invoices import router as invoices_router
from forvaltaren.api.v1.landlord import router as landlord_router
from forvaltaren.api.v1.leases import router as leases_router
from forvaltaren.api.v1.members import router as members_router
from forvaltaren.api.v1.onboarding import router as onboarding_router
from forvaltaren.api.v1.organizations import router as organizations_router
from forvaltaren.api.v1.properties import router as properties_router
from forvaltaren.api.v1.tenants import router as tenants_router
from forvaltaren.api.v1.tickets import router as tickets_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(landlord_router)
v1_router.include_router(onboarding_router)
v1_router.include_router(members_router)
v1_router.include_router(organizations_router)
v1_router.include_router(properties_router)
v1_router.include_router(tenants_router)
v1_router.include_router(leases_router)
v1_router.include_router(invoices_router)
v1_router.include_router(tickets_router)
v1_router.include_router(dashboard_router)
v1_router.include_router(billing_router)
