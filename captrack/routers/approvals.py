"""
CapTrack - Approvals Router

Review of daily entries waiting in pending_approval.
"""

import uuid

from fastapi import APIRouter, Depends

from captrack.dependencies import get_current_actor, get_workflow, require_reviewer
from captrack.models.entry import EntryKind
from captrack.schemas.entry import (
    ApprovalQueueResponse,
    BulkApproveRequest,
    BulkApproveResponse,
    DailyEntryResponse,
    RejectEntryRequest,
)
from captrack.services.entry_workflow import Actor, EntryWorkflow

router = APIRouter(tags=["Approvals"])


@router.get("/approvals/pending", response_model=ApprovalQueueResponse)
async def pending_approvals(
    actor: Actor = Depends(require_reviewer),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Daily and manual entries waiting for a manager."""
    queue = await workflow.approval_queue(actor)
    return {"daily_entries": queue["daily"], "manual_entries": queue["manual"]}


@router.patch("/entries/approve-bulk", response_model=BulkApproveResponse)
async def approve_bulk(
    request: BulkApproveRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Approve several daily entries; entries that cannot be approved are skipped."""
    result = await workflow.bulk_approve(request.entry_ids, actor)
    return {
        "approved": result.approved,
        "skipped": [item.to_dict() for item in result.skipped],
        "approved_count": len(result.approved),
        "skipped_count": len(result.skipped),
    }


@router.patch("/entries/{entry_id}/approve", response_model=DailyEntryResponse)
async def approve_entry(
    entry_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    return await workflow.approve(EntryKind.DAILY, entry_id, actor)


@router.patch("/entries/{entry_id}/reject", response_model=DailyEntryResponse)
async def reject_entry(
    entry_id: uuid.UUID,
    request: RejectEntryRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    return await workflow.reject(EntryKind.DAILY, entry_id, actor, request.reason)
