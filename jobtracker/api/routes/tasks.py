"""Task Routes — thin HTTP mapping over the record store's task operations.

Invariants:
    - Every route goes through get_record_store (bearer token required)
    - Creating or re-parenting a task under another user's application answers 404
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from jobtracker.api.dependencies import get_record_store
from jobtracker.schemas.records import (
    TaskCreate, TaskListItem, TaskRecord, TaskUpdate,
)
from jobtracker.services.record_store import RecordStore

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskListItem])
async def list_tasks(store: RecordStore = Depends(get_record_store)):
    return await store.list_tasks()


@router.post("", response_model=TaskRecord, status_code=status.HTTP_201_CREATED)
async def create_task(
    body: TaskCreate, store: RecordStore = Depends(get_record_store),
):
    return await store.create_task(
        application_id=body.application_id,
        title=body.title,
        due_date=body.due_date,
        notes=body.notes,
    )


@router.get("/{task_id}", response_model=TaskRecord)
async def get_task(task_id: UUID, store: RecordStore = Depends(get_record_store)):
    return await store.get_task(task_id)


@router.patch("/{task_id}", response_model=TaskRecord)
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    store: RecordStore = Depends(get_record_store),
):
    return await store.update_task(task_id, body.model_dump(exclude_unset=True))


@router.post("/{task_id}/toggle", response_model=TaskRecord)
async def toggle_task(task_id: UUID, store: RecordStore = Depends(get_record_store)):
    return await store.toggle_task_completed(task_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: UUID, store: RecordStore = Depends(get_record_store)):
    await store.delete_task(task_id)
