"""Result records produced by the decisioning collaborators."""

from dataclasses import dataclass

from loan_wizard.models.enums import EligibilityStatus


@dataclass(frozen=True)
class LoanOffer:
    """Loan offer computed by the calculation collaborator."""

    customer_name: str
    vehicle_description: str
    vehicle_value: float
    down_payment: float
    down_payment_percentage: float
    eligible_loan_amount: float
    desired_loan_amount: float
    approved_loan_amount: float
    interest_rate: float  # Annual, percent
    tenure_months: int
    monthly_emi: float
    total_interest: float
    total_payable: float
    eligibility_status: EligibilityStatus | str
    eligibility_reason: str
    income_to_emi_ratio: float
    summary: str  # Markdown


@dataclass(frozen=True)
class Submission:
    """Submission receipt returned by the processing collaborator."""

    application_reference_id: str
    submission_timestamp: str  # ISO-8601
    status: str
    customer_name: str
    vehicle_description: str
    approved_loan_amount: float
    monthly_emi: float
    tenure_months: int
    confirmation_message: str
