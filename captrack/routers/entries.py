"""
CapTrack - Daily Entries Router

Confirmation, reassignment, ingestion and reads for AI-suggested daily entries.
"""

import uuid
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status

from captrack.dependencies import get_current_actor, get_workflow
from captrack.models.entry import ConfirmationMethod, EntryKind, EntryStatus
from captrack.schemas.entry import (
    BulkConfirmResponse,
    BulkReassignRequest,
    BulkReassignResponse,
    ConfirmAllRequest,
    ConfirmEntryRequest,
    ConfirmRangeRequest,
    DailyEntryResponse,
    EntriesForDateResponse,
    ReassignEntryRequest,
    RevisionResponse,
    SuggestionCreate,
)
from captrack.services.entry_workflow import Actor, BulkConfirmResult, ConfirmFields, EntryWorkflow

router = APIRouter(prefix="/entries", tags=["Daily Entries"])


def _bulk_confirm_response(result: BulkConfirmResult) -> dict:
    return {
        "confirmed": result.confirmed,
        "by_date": result.by_date,
        "skipped": [item.to_dict() for item in result.skipped],
    }


@router.post("/confirm-all", response_model=BulkConfirmResponse)
async def confirm_all(
    request: ConfirmAllRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Accept every pending suggestion of the caller for one day."""
    result = await workflow.bulk_confirm([request.entry_date], actor, ConfirmationMethod.BULK)
    return _bulk_confirm_response(result)


@router.post("/confirm-all-range", response_model=BulkConfirmResponse)
async def confirm_all_range(
    request: ConfirmRangeRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """
    Accept every pending suggestion of the caller in a date range.

    Every date is checked against period locks first; one locked date
    fails the whole request with 423.
    """
    result = await workflow.bulk_confirm(request.dates(), actor, ConfirmationMethod.BULK_RANGE)
    return _bulk_confirm_response(result)


@router.patch("/reassign-bulk", response_model=BulkReassignResponse)
async def reassign_bulk(
    request: BulkReassignRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Reassign several entries to one enhancement project, reporting skips."""
    result = await workflow.bulk_reassign(request.entry_ids, request.new_project_id, actor)
    return {
        "reassigned": result.reassigned,
        "skipped": [item.to_dict() for item in result.skipped],
        "reassigned_count": len(result.reassigned),
        "skipped_count": len(result.skipped),
    }


@router.post("/suggestions", response_model=DailyEntryResponse, status_code=status.HTTP_201_CREATED)
async def ingest_suggestion(
    request: SuggestionCreate,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Store an estimation result as a pending daily entry (managers and admins)."""
    return await workflow.record_suggestion(
        actor,
        developer_id=request.developer_id,
        entry_date=request.entry_date,
        hours_estimated=request.hours_estimated,
        project_id=request.project_id,
        phase_suggested=request.phase_suggested,
        description_suggested=request.description_suggested,
        source_session_ids=request.source_session_ids,
        source_commit_ids=request.source_commit_ids,
        enhancement_suggested=request.enhancement_suggested,
    )


@router.get("/by-date/{entry_date}", response_model=EntriesForDateResponse)
async def entries_by_date(
    entry_date: date,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """The caller's daily and manual entries for a day."""
    found = await workflow.entries_for_date(actor, entry_date)
    total = sum(
        entry.effective_hours
        for entry in found["daily"] + found["manual"]
        if entry.status != EntryStatus.REJECTED
    )
    return {
        "entry_date": entry_date,
        "entries": found["daily"],
        "manual_entries": found["manual"],
        "total_hours": float(total),
    }


@router.get("/{entry_id}", response_model=DailyEntryResponse)
async def get_entry(
    entry_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    return await workflow.get_visible_entry(EntryKind.DAILY, entry_id, actor)


@router.get("/{entry_id}/revisions", response_model=List[RevisionResponse])
async def get_entry_revisions(
    entry_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Revision history of a daily entry, oldest first."""
    return await workflow.revisions(EntryKind.DAILY, entry_id, actor)


@router.patch("/{entry_id}/confirm", response_model=DailyEntryResponse)
async def confirm_entry(
    entry_id: uuid.UUID,
    request: ConfirmEntryRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """
    Confirm a daily entry.

    An adjustment reason is required when hours move more than 20% from
    the estimate.
    """
    fields = ConfirmFields(
        hours=request.hours,
        phase=request.phase,
        description=request.description,
        adjustment_reason=request.adjustment_reason,
        project_id=request.project_id,
    )
    return await workflow.confirm(entry_id, fields, actor)


@router.patch("/{entry_id}/reassign", response_model=DailyEntryResponse)
async def reassign_entry(
    entry_id: uuid.UUID,
    request: ReassignEntryRequest,
    actor: Actor = Depends(get_current_actor),
    workflow: EntryWorkflow = Depends(get_workflow),
):
    """Move a pending entry onto an enhancement child of its project."""
    return await workflow.reassign(entry_id, request.new_project_id, actor)
