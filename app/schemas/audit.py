"""
Tally Audit Schemas

Reports produced by the vote tally reconciliation. A mismatch is data,
not an error: the audit always completes and lists what it found.
"""

from pydantic import BaseModel, Field, computed_field

from app.schemas.vote import Tally


class TallyMismatch(BaseModel):
    """A stored counter that disagrees with the vote rows."""

    field: str = Field(..., examples=["upvotes_count", "downvotes_count"])
    stored: int
    computed: int


class ReconciliationReport(BaseModel):
    """Stored vs recomputed tally for one review."""

    review_id: int
    stored: Tally
    computed: Tally
    mismatches: list[TallyMismatch] = Field(default_factory=list)

    @computed_field
    @property
    def is_consistent(self) -> bool:
        return not self.mismatches


class AuditSummary(BaseModel):
    """Result of auditing every review's tally."""

    total_reviews: int = Field(..., ge=0)
    mismatched_reviews: int = Field(..., ge=0)
    reports: list[ReconciliationReport]
