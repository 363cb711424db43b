"""Application Routes — thin HTTP mapping over the record store's application operations.

Invariants:
    - Every route goes through get_record_store (bearer token required)
    - Other users' applications answer 404, same as missing ones
    - DELETE cascades to the application's tasks
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from jobtracker.api.dependencies import get_record_store
from jobtracker.schemas.records import (
    ApplicationCreate, ApplicationRecord, ApplicationUpdate, TaskRecord,
)
from jobtracker.services.record_store import RecordStore

router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


@router.get("", response_model=list[ApplicationRecord])
async def list_applications(store: RecordStore = Depends(get_record_store)):
    return await store.list_applications()


@router.post(
    "", response_model=ApplicationRecord,
    status_code=status.HTTP_201_CREATED,
)
async def create_application(
    body: ApplicationCreate, store: RecordStore = Depends(get_record_store),
):
    return await store.create_application(
        company=body.company,
        position=body.position,
        status=body.status,
        notes=body.notes,
    )


@router.get("/{application_id}", response_model=ApplicationRecord)
async def get_application(
    application_id: UUID, store: RecordStore = Depends(get_record_store),
):
    return await store.get_application(application_id)


@router.patch("/{application_id}", response_model=ApplicationRecord)
async def update_application(
    application_id: UUID,
    body: ApplicationUpdate,
    store: RecordStore = Depends(get_record_store),
):
    return await store.update_application(
        application_id, body.model_dump(exclude_unset=True),
    )


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: UUID, store: RecordStore = Depends(get_record_store),
):
    await store.delete_application(application_id)


@router.get("/{application_id}/tasks", response_model=list[TaskRecord])
async def list_application_tasks(
    application_id: UUID, store: RecordStore = Depends(get_record_store),
):
    return await store.list_application_tasks(application_id)
