"""Proposal API Routes - drafting, quota, publishing and export."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import HTMLResponse

from src.api.deps import get_session
from src.models import (
    ColorMode,
    Proposal,
    ProposalDraft,
    ProposalProjectSummary,
    ProposalQuota,
    ProposalUpdate,
    PublicProposal,
    ShareLink,
)
from src.rendering import export_pdf, render_proposal_document
from src.repositories.session import AccountSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proposals", tags=["proposals"])


async def _load(session: AccountSession, proposal_id: str) -> Proposal:
    await session.proposals.ensure_loaded()
    return session.proposals.require(proposal_id)


async def _public_view(session: AccountSession, proposal: Proposal) -> PublicProposal:
    """What the client will see, built from the owner's cached projects."""
    await session.projects.ensure_loaded()
    summaries = []
    for project_id in proposal.project_ids:
        project = session.projects.get_by_id(project_id)
        if project is None:
            continue
        summaries.append(ProposalProjectSummary(
            id=project.id,
            title=project.title,
            description=project.description,
            images=project.images,
        ))
    return PublicProposal.from_proposal(proposal, summaries)


@router.get("", response_model=List[Proposal], summary="List proposals")
async def list_proposals(session: AccountSession = Depends(get_session)):
    return await session.proposals.list()


@router.get("/quota", response_model=ProposalQuota, summary="Free-plan quota")
async def get_quota(session: AccountSession = Depends(get_session)):
    return await session.proposals.quota()


@router.post("", response_model=Proposal, status_code=201, summary="Create proposal")
async def create_proposal(
    draft: ProposalDraft,
    session: AccountSession = Depends(get_session)
):
    """Returns 402 without writing anything once the free quota is used up."""
    await session.proposals.ensure_loaded()
    return await session.proposals.create(draft)


@router.get("/{proposal_id}", response_model=Proposal, summary="Get proposal")
async def get_proposal(proposal_id: str, session: AccountSession = Depends(get_session)):
    return await _load(session, proposal_id)


@router.patch("/{proposal_id}", response_model=Proposal, summary="Update proposal")
async def update_proposal(
    proposal_id: str,
    patch: ProposalUpdate,
    session: AccountSession = Depends(get_session)
):
    await _load(session, proposal_id)
    return await session.proposals.update(proposal_id, patch)


@router.delete("/{proposal_id}", status_code=204, summary="Delete proposal")
async def delete_proposal(proposal_id: str, session: AccountSession = Depends(get_session)):
    await _load(session, proposal_id)
    await session.proposals.remove(proposal_id)
    return Response(status_code=204)


@router.post(
    "/{proposal_id}/duplicate",
    response_model=Proposal,
    status_code=201,
    summary="Duplicate proposal"
)
async def duplicate_proposal(proposal_id: str, session: AccountSession = Depends(get_session)):
    await _load(session, proposal_id)
    return await session.proposals.duplicate(proposal_id)


@router.post("/{proposal_id}/publish", response_model=ShareLink, summary="Publish proposal")
async def publish_proposal(proposal_id: str, session: AccountSession = Depends(get_session)):
    """Issue the share link. Calling it again returns the same token."""
    await _load(session, proposal_id)
    return await session.proposals.publish(proposal_id)


@router.get("/{proposal_id}/document", response_class=HTMLResponse, summary="Proposal page")
async def proposal_document(
    proposal_id: str,
    color_mode: ColorMode = Query(ColorMode.LIGHT),
    session: AccountSession = Depends(get_session)
):
    proposal = await _load(session, proposal_id)
    document = render_proposal_document(await _public_view(session, proposal), color_mode)
    return HTMLResponse(document.html)


@router.get("/{proposal_id}/pdf", summary="Export proposal as PDF")
async def proposal_pdf(proposal_id: str, session: AccountSession = Depends(get_session)):
    proposal = await _load(session, proposal_id)
    document = render_proposal_document(await _public_view(session, proposal))
    pdf = export_pdf(document.html)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="proposal-{proposal.id}.pdf"'}
    )
