from fastapi import APIRouter

from tender_system.api.v1.ping import router as ping_router
from tender_system.api.v1.tenders import router as tenders_router
from tender_system.api.v1.bids import router as bids_router

v1_router = APIRouter()

v1_router.include_router(ping_router)
v1_router.include_router(tenders_router)
v1_router.include_router(bids_router)
