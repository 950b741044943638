"""Pure functions computing derived fields from domain records."""

import math
from typing import Iterable, List, Sequence, Dict

from src.models import (
    BudgetItem,
    Project,
    ProjectDraft,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    PortfolioStats,
)


# ===========================================
# Project completion
# ===========================================

def _has_text(value: str) -> bool:
    return bool(value and value.strip())


def completion_checks(project: ProjectDraft) -> List[bool]:
    """The eight progress predicates shown on the dashboard card."""
    stages = project.stages
    return [
        _has_text(project.title),
        _has_text(project.description),
        len(project.images) > 0,
        _has_text(stages.briefing.description),
        _has_text(stages.challenge.description),
        _has_text(stages.execution.description),
        _has_text(stages.result.description),
        len(project.technologies) > 0,
    ]


def completion_percentage(project: ProjectDraft) -> int:
    """Share of satisfied progress predicates, rounded half up to an integer percent."""
    checks = completion_checks(project)
    return int(math.floor(sum(checks) / len(checks) * 100 + 0.5))


def status_checks(project: ProjectDraft) -> List[bool]:
    """
    The canonical predicates behind the persisted status.

    Title, description, at least one image, briefing and result. The wider
    eight-check set above is display-only and never decides ``status``.
    """
    stages = project.stages
    return [
        _has_text(project.title),
        _has_text(project.description),
        len(project.images) > 0,
        _has_text(stages.briefing.description),
        _has_text(stages.result.description),
    ]


def completion_status(project: ProjectDraft) -> ProjectStatus:
    """``complete`` iff every canonical predicate holds."""
    if all(status_checks(project)):
        return ProjectStatus.COMPLETE
    return ProjectStatus.DRAFT


# ===========================================
# Ordering
# ===========================================

def order_projects(projects: Sequence[Project], project_order: Sequence[str]) -> List[Project]:
    """
    Apply an explicit id order.

    Ranked projects come first by rank; the rest keep their original
    relative order. ``sorted`` is stable, so ties never reorder.
    """
    rank: Dict[str, int] = {}
    for position, project_id in enumerate(project_order):
        rank.setdefault(project_id, position)

    unranked = len(rank)
    return sorted(projects, key=lambda p: rank.get(p.id, unranked))


# ===========================================
# Budget
# ===========================================

def budget_item_total(quantity: float, unit_price: float) -> float:
    return quantity * unit_price


def recompute_budget_items(items: Iterable[BudgetItem]) -> List[BudgetItem]:
    """Fresh copies with ``total`` recomputed from quantity and unit price."""
    return [
        item.model_copy(update={"total": budget_item_total(item.quantity, item.unit_price)})
        for item in items
    ]


def proposal_total(items: Iterable[BudgetItem]) -> float:
    """Sum of item totals, each recomputed rather than trusted."""
    return sum(budget_item_total(item.quantity, item.unit_price) for item in items)


# ===========================================
# Dashboard
# ===========================================

def portfolio_stats(projects: Sequence[Project], proposals: Sequence[Proposal]) -> PortfolioStats:
    """Aggregate counters for the owner dashboard."""
    by_status = {status.value: 0 for status in ProposalStatus}
    for proposal in proposals:
        by_status[proposal.status.value] += 1

    complete = sum(1 for p in projects if p.status == ProjectStatus.COMPLETE)
    open_statuses = (ProposalStatus.SENT, ProposalStatus.VIEWED)

    return PortfolioStats(
        total_projects=len(projects),
        complete_projects=complete,
        draft_projects=len(projects) - complete,
        total_proposals=len(proposals),
        proposals_by_status=by_status,
        pipeline_value=sum(p.total_value for p in proposals if p.status in open_statuses),
        accepted_value=sum(p.total_value for p in proposals if p.status == ProposalStatus.ACCEPTED),
    )
