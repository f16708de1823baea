"""Application aggregate tracked by the registry."""

import copy
from dataclasses import dataclass
from datetime import datetime, timezone

from loan_wizard.models.applicant import Customer, Draft, Financial, LoanPreferences, Vehicle
from loan_wizard.models.decision import LoanOffer, Submission
from loan_wizard.models.enums import ApplicationStatus


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Application:
    """Committed loan application."""

    id: str
    customer: Customer
    vehicle: Vehicle
    financial: Financial
    loan_preferences: LoanPreferences
    status: ApplicationStatus
    created_at: str  # ISO-8601
    updated_at: str  # ISO-8601
    loan_offer: LoanOffer | None = None
    submission: Submission | None = None

    @classmethod
    def from_draft(
        cls,
        app_id: str,
        draft: Draft,
        status: ApplicationStatus = ApplicationStatus.DRAFT,
        loan_offer: LoanOffer | None = None,
    ) -> "Application":
        """Build an application from a copy of the draft's inputs."""
        snapshot = draft.copy()
        now = utc_now_iso()
        return cls(
            id=app_id,
            customer=snapshot.customer,
            vehicle=snapshot.vehicle,
            financial=snapshot.financial,
            loan_preferences=snapshot.loan_preferences,
            status=status,
            created_at=now,
            updated_at=now,
            loan_offer=loan_offer,
        )

    def to_draft(self) -> Draft:
        """Return a fresh draft seeded from this application's inputs."""
        return Draft(
            customer=copy.deepcopy(self.customer),
            vehicle=copy.deepcopy(self.vehicle),
            financial=copy.deepcopy(self.financial),
            loan_preferences=copy.deepcopy(self.loan_preferences),
        )

    def can_transition_to(self, status: ApplicationStatus) -> bool:
        """Check whether moving to ``status`` keeps the lifecycle monotonic."""
        status = ApplicationStatus(status)
        if status == self.status:
            return True
        # Approved and Rejected are mutually exclusive outcomes
        return status.rank > self.status.rank
