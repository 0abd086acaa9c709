"""
Tally Audit Router

Read-only consistency checks of the cached vote counters.

Endpoints:
- GET /reviews/{review_id}/tally/audit - Reconcile one review
- GET /audit/tallies - Reconcile every review

Mismatches are reported in the response body (200), never as errors.
Repairs are done offline with scripts/audit_tallies.py --repair.
"""

from fastapi import APIRouter, HTTPException, Query, Request, status

from app.config import get_settings
from app.dependencies import Store
from app.schemas.audit import AuditSummary, ReconciliationReport
from app.services.rate_limiter import limiter
from app.services.reconciliation import audit_all_tallies, audit_review

settings = get_settings()

router = APIRouter(tags=["Audit"])


@router.get(
    "/reviews/{review_id}/tally/audit",
    response_model=ReconciliationReport,
    summary="Audit a review's tally",
)
@limiter.limit(settings.rate_limit_default)
def audit_review_tally(
    request: Request,
    review_id: int,
    store: Store,
) -> ReconciliationReport:
    report = audit_review(store, review_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review with id {review_id} not found",
        )
    return report


@router.get(
    "/audit/tallies",
    response_model=AuditSummary,
    summary="Audit every review's tally",
)
@limiter.limit(settings.rate_limit_default)
def audit_tallies(
    request: Request,
    store: Store,
    only_mismatched: bool = Query(
        default=False,
        description="Only list reviews whose counters disagree with their votes",
    ),
) -> AuditSummary:
    return audit_all_tallies(store, only_mismatched=only_mismatched)
