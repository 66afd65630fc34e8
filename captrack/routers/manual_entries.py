"""
CapTrack - Manual Entries Router

Logging, approval and rejection of hand-entered time.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, status

from captrack.dependencies import get_current_actor, get_workflow
from captrack.models.entry import EntryKind
from captrack.schemas.entry import (
    ManualEntryCreate,
    ManualEntryResponse,
    RejectEntryRequest,
    RevisionResponse,
)
from captrack.services.entry_workflow import Actor, EntryWorkflow

router = APIRouter(prefix="/manual-entries", tags=["Manual Entries"])


@router.post("", response_model=ManualEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_manual_entry(
    request: ManualEntryCreate,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """
    Log time by hand.

    Entries at or under the auto-approve threshold are confirmed at once;
    larger ones wait in pending_approval.
    """
    return await workflow.create_manual_entry(
        actor,
        entry_date=request.entry_date,
        project_id=request.project_id,
        hours=request.hours,
        phase=request.phase,
        description=request.description,
    )


@router.get("/{entry_id}/revisions", response_model=List[RevisionResponse])
async def get_manual_entry_revisions(
    entry_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    return await workflow.revisions(EntryKind.MANUAL, entry_id, actor)


@router.patch("/{entry_id}/approve", response_model=ManualEntryResponse)
async def approve_manual_entry(
    entry_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Approve a manual entry. Managers and admins only, never their own."""
    return await workflow.approve(EntryKind.MANUAL, entry_id, actor)


@router.patch("/{entry_id}/reject", response_model=ManualEntryResponse)
async def reject_manual_entry(
    entry_id: uuid.UUID,
    request: RejectEntryRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Reject a manual entry with a reason of at least 10 characters."""
    return await workflow.reject(EntryKind.MANUAL, entry_id, actor, request.reason)
