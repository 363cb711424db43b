"""Dashboard & Profile Routes — caller-scoped counters and profile."""

from fastapi import APIRouter, Depends

from jobtracker.api.dependencies import get_record_store
from jobtracker.schemas.records import DashboardStats, ProfileRecord
from jobtracker.services.record_store import RecordStore

router = APIRouter(prefix="/api/v1", tags=["dashboard"])


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(store: RecordStore = Depends(get_record_store)):
    return await store.get_dashboard_stats()


@router.get("/profile", response_model=ProfileRecord)
async def profile(store: RecordStore = Depends(get_record_store)):
    return await store.get_profile()
