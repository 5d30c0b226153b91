from fastapi import APIRouter

from pharma_ledger.api.v1.health import router as health_router
from pharma_ledger.api.v1.auth import router as auth_router
from pharma_ledger.api.v1.participants import router as participants_router

from pharma_ledger.api.v1.quality import router as quality_router
from pharma_ledger.api.v1.drugs import router as drugs_router
from pharma_ledger.api.v1.events import router as events_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / CORE
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])

# ------------------------------------------------------------------
# REGISTRY
# ------------------------------------------------------------------
v1_router.include_router(participants_router, tags=["participants"])

# ------------------------------------------------------------------
# LEDGER
# ------------------------------------------------------------------
v1_router.include_router(quality_router, tags=["quality"])
v1_router.include_router(drugs_router, tags=["drugs"])

# ------------------------------------------------------------------
# NOTIFICATIONS
# ------------------------------------------------------------------
v1_router.include_router(events_router, tags=["events"])
